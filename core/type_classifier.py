import logging
import re
from typing import List, Sequence

import numpy as np
import pandas as pd

from .models import COLUMN_DATE, COLUMN_NUMERIC, COLUMN_STRING, Cell, ColumnDescriptor

logger = logging.getLogger(__name__)

NUMERIC_THRESHOLD = 0.90
DATE_THRESHOLD = 0.80

DATE_PATTERNS = (
    # ISO date: 2026-02-01
    re.compile(r"^\d{4}-\d{2}-\d{2}$"),
    # ISO datetime, optional seconds/fraction and zone: 2026-02-01T08:00:00.000+01:00
    re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$"),
    # Slash-separated: 02/01/2026, 2/1/26, 2026/02/01, optional time
    re.compile(r"^(\d{1,2}/\d{1,2}/(\d{4}|\d{2})|\d{4}/\d{1,2}/\d{1,2})( \d{1,2}:\d{2}(:\d{2})?)?$"),
    # Dot-separated: 01.02.2026, optional time
    re.compile(r"^\d{1,2}\.\d{1,2}\.\d{2,4}( \d{1,2}:\d{2}(:\d{2})?)?$"),
    # Space-separated datetime: 2026-02-01 08:00(:00)
    re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}(:\d{2}(\.\d+)?)?$"),
)

# Formats the calendar parse understands. Day-first dotted dates are not
# among them, so a dd.MM.yyyy column matches a pattern but never resolves
# and ends up as string.
CALENDAR_FORMATS = (
    "ISO8601",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
)


def matches_date_pattern(value: str) -> bool:
    return any(p.match(value) for p in DATE_PATTERNS)


def _is_finite_number(value: Cell) -> bool:
    # bool is an int subclass but never comes out of the converter as data
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and bool(np.isfinite(value))


def count_calendar_dates(values: pd.Series) -> int:
    """Count values that both look like a date and parse as one."""
    candidates = values[values.map(lambda v: isinstance(v, str) and matches_date_pattern(v))]
    if candidates.empty:
        return 0
    resolved = pd.Series(False, index=candidates.index)
    for fmt in CALENDAR_FORMATS:
        pending = candidates[~resolved]
        if pending.empty:
            break
        parsed = pd.to_datetime(pending, format=fmt, errors="coerce", utc=True)
        resolved.loc[parsed.index] = resolved.loc[parsed.index] | parsed.notna()
    return int(resolved.sum())


def classify_column(values: pd.Series) -> dict:
    non_null = values[values.notna()]
    non_null_count = int(len(non_null))
    numeric_count = int(non_null.map(_is_finite_number).sum()) if non_null_count else 0

    column_type = COLUMN_STRING
    if non_null_count > 0:
        if numeric_count / non_null_count >= NUMERIC_THRESHOLD:
            column_type = COLUMN_NUMERIC
        elif count_calendar_dates(non_null) / non_null_count >= DATE_THRESHOLD:
            column_type = COLUMN_DATE
    return {"type": column_type, "numeric_count": numeric_count, "non_null_count": non_null_count}


def rows_to_frame(names: Sequence[str], rows: Sequence[List[Cell]]) -> pd.DataFrame:
    """Object-dtype frame with positional column labels, cells untouched."""
    return pd.DataFrame(list(rows), columns=range(len(names)), dtype=object)


def classify_columns(names: Sequence[str], rows: Sequence[List[Cell]]) -> List[ColumnDescriptor]:
    """Assign numeric / date / string to every column.

    Nulls are ignored on both sides of each ratio. Numeric is checked
    first: a column of years matches both tests and should stay numeric.
    """
    frame = rows_to_frame(names, rows)
    columns = []
    for index, name in enumerate(names):
        stats = classify_column(frame[index])
        columns.append(ColumnDescriptor(name=name, index=index, **stats))
        logger.debug(
            "Column %r: %s (%d/%d numeric)", name, stats["type"], stats["numeric_count"], stats["non_null_count"]
        )
    return columns
