import logging
import re
from typing import List, Optional, Sequence, Tuple, Union

from .models import Cell

logger = logging.getLogger(__name__)

# Plain decimal text, an exponent, radix-prefixed integers or Infinity.
# Python's float() is more lenient ("nan", "inf", "1_000"), so it is only
# called on text this pattern has already accepted.
NUMBER_RE = re.compile(
    r"""^(?:
        [+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?
      | [+-]?Infinity
      | 0[xX][0-9a-fA-F]+
      | 0[oO][0-7]+
      | 0[bB][01]+
    )$""",
    re.VERBOSE,
)
_RADIX = {"x": 16, "o": 8, "b": 2}


def parse_number(text: str) -> Optional[Union[int, float]]:
    """Return the number ``text`` spells, or None.

    Integers without fraction or exponent stay ``int`` so identifiers and
    years survive a JSON round trip unchanged.
    """
    if not NUMBER_RE.match(text):
        return None
    if text.endswith("Infinity"):
        return float("-inf") if text.startswith("-") else float("inf")
    if len(text) > 2 and text[0] == "0" and text[1].lower() in _RADIX:
        return int(text[2:], _RADIX[text[1].lower()])
    if "." in text or "e" in text or "E" in text:
        return float(text)
    try:
        return int(text)
    except ValueError:
        # past the interpreter's int digit limit; float saturates to inf
        return float(text)


def swap_decimal(text: str, decimal_separator: str) -> str:
    return text.replace(",", ".") if decimal_separator == "," else text


def drop_ragged_rows(rows: Sequence[List[str]], expected_columns: int) -> Tuple[List[List[str]], int]:
    """Keep only rows with exactly ``expected_columns`` cells."""
    kept = [row for row in rows if len(row) == expected_columns]
    dropped = len(rows) - len(kept)
    if dropped:
        logger.info("Dropped %d rows with an unexpected number of columns", dropped)
    return kept, dropped


def normalize_decimals(rows: Sequence[List[Cell]], decimal_separator: str) -> List[List[Cell]]:
    if decimal_separator != ",":
        return [list(row) for row in rows]
    return [[cell.replace(",", ".") if isinstance(cell, str) else cell for cell in row] for row in rows]


def convert_cell(cell: Cell) -> Cell:
    if cell is None:
        return None
    if not isinstance(cell, str):
        return cell
    text = cell.strip()
    if not text:
        return None
    number = parse_number(text)
    return text if number is None else number


def convert_rows(rows: Sequence[List[Cell]]) -> List[List[Cell]]:
    return [[convert_cell(cell) for cell in row] for row in rows]
