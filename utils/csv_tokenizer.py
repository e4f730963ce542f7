import csv
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

logger = logging.getLogger(__name__)


@dataclass
class TokenizeResult:
    rows: List[List[str]]
    errors: List[Dict[str, object]] = field(default_factory=list)


def _is_blank(row: List[str]) -> bool:
    return not row or row == [""]


def _lenient_row(line: str, delimiter: str, quotechar: str) -> List[str]:
    return next(csv.reader([line], delimiter=delimiter, quotechar=quotechar, strict=False), [])


def tokenize(lines: Sequence[str], delimiter: str, quotechar: str = '"') -> TokenizeResult:
    """Split delimited lines into raw string cells.

    Quoted fields may contain the delimiter (and line breaks). Blank rows
    are skipped. A record the csv module rejects in strict mode is reported
    by its 0-based row position, then its first line is re-read leniently
    and kept. Reading resumes on the line after it, so an unterminated
    quote costs one line rather than the rest of the file.
    """
    lines = list(lines)
    result = TokenizeResult(rows=[])
    start = 0
    while start < len(lines):
        reader = csv.reader(
            (line + "\n" for line in lines[start:]),
            delimiter=delimiter,
            quotechar=quotechar,
            strict=True,
        )
        consumed = 0
        try:
            for row in reader:
                consumed = reader.line_num
                if not _is_blank(row):
                    result.rows.append(row)
            break
        except csv.Error as e:
            bad = start + consumed
            position = len(result.rows)
            logger.warning("Malformed row %d: %s", position, e)
            result.errors.append({"row": position, "message": str(e)})
            row = _lenient_row(lines[bad], delimiter, quotechar)
            if not _is_blank(row):
                result.rows.append(row)
            start = bad + 1
    return result
