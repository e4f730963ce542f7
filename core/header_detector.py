import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .value_converter import parse_number, swap_decimal

logger = logging.getLogger(__name__)

HEADER_SAMPLE_LINES = 5


@dataclass(frozen=True)
class HeaderResolution:
    names: List[str]
    row_lines: List[str]
    has_header: bool
    from_comment: bool = False


def split_fields(line: str, delimiter: str) -> List[str]:
    return [field.strip() for field in line.split(delimiter)]


def is_numeric_field(raw: str, decimal_separator: str) -> bool:
    if not raw or not raw.strip():
        return False
    return parse_number(swap_decimal(raw.strip(), decimal_separator)) is not None


def _numeric_ratio(fields: Sequence[str], decimal_separator: str) -> float:
    if not fields:
        return 0.0
    return sum(1 for f in fields if is_numeric_field(f, decimal_separator)) / len(fields)


def header_from_comment(comment_line: Optional[str], first_data_line: str, delimiter: str) -> Optional[List[str]]:
    """Use the last pre-data comment as header when its field count matches the data."""
    if comment_line is None:
        return None
    stripped = comment_line.strip()
    if stripped.startswith("#"):
        stripped = stripped[1:]
    names = split_fields(stripped.strip(), delimiter)
    expected = len(first_data_line.split(delimiter))
    if len(names) != expected:
        logger.debug("Comment line has %d fields, data has %d; not a header", len(names), expected)
        return None
    return names


def detect_header(candidate_line: str, following_lines: Sequence[str], delimiter: str, decimal_separator: str) -> bool:
    """Decide whether ``candidate_line`` is a header row.

    Compares how numeric the candidate is against up to
    ``HEADER_SAMPLE_LINES`` following lines:

    * mostly text over mostly numeric data -> header
    * candidate at least half numeric -> data
    * both mostly text -> header (default)

    A file with a single line is always treated as header only.
    """
    if not following_lines:
        return True

    candidate_ratio = _numeric_ratio(split_fields(candidate_line, delimiter), decimal_separator)
    data_fields: List[str] = []
    for line in following_lines[:HEADER_SAMPLE_LINES]:
        data_fields.extend(split_fields(line, delimiter))
    data_ratio = _numeric_ratio(data_fields, decimal_separator)

    logger.debug("Header check: candidate ratio %.2f, data ratio %.2f", candidate_ratio, data_ratio)
    if data_ratio > 0.5 and candidate_ratio < 0.5:
        return True
    if candidate_ratio >= 0.5:
        return False
    return True


def synthetic_column_names(count: int) -> List[str]:
    return [f"Column {i + 1}" for i in range(count)]


def resolve_header(
    data_lines: Sequence[str],
    comment_line: Optional[str],
    delimiter: str,
    decimal_separator: str,
    has_header: Optional[bool] = None,
) -> HeaderResolution:
    """Work out column names and which lines hold data rows.

    ``has_header`` forces the first-line decision when not None. A comment
    line whose field count matches the data is taken as header regardless,
    and then every data line stays a data row.
    """
    first = data_lines[0]
    names = header_from_comment(comment_line, first, delimiter)
    if names is not None:
        return HeaderResolution(names=names, row_lines=list(data_lines), has_header=True, from_comment=True)

    if has_header is None:
        has_header = detect_header(first, data_lines[1:], delimiter, decimal_separator)

    if has_header:
        return HeaderResolution(names=split_fields(first, delimiter), row_lines=list(data_lines[1:]), has_header=True)

    count = len(first.split(delimiter))
    return HeaderResolution(names=synthetic_column_names(count), row_lines=list(data_lines), has_header=False)
