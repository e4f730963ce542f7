"""
Terminal errors and advisory warnings produced by the parsing pipeline.

Malformed data (bad cells, ragged rows) never raises; it ends up as nulls,
preserved strings and the warnings built here. Only the three conditions
that leave nothing to chart raise :class:`ParseError`.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .models import COLUMN_NUMERIC, Cell, ColumnDescriptor, FormatProfile, ParseWarning
from .type_classifier import rows_to_frame

logger = logging.getLogger(__name__)

NO_DATA = "NO_DATA"
NO_DATA_ROWS = "NO_DATA_ROWS"
TOO_FEW_COLUMNS = "TOO_FEW_COLUMNS"

ERROR_MESSAGES = {
    NO_DATA: "The file contains no data rows.",
    NO_DATA_ROWS: "The file contains headers but no data rows.",
    TOO_FEW_COLUMNS: "Only one column was detected. A chart needs at least two columns (one for X and one for Y).",
}

MIN_COLUMNS = 2


class ParseError(Exception):
    """A file the pipeline cannot turn into a table.

    ``profile`` holds whatever format was resolved before the failure so the
    caller can still show what was detected.
    """

    def __init__(self, code: str, message: Optional[str] = None, profile: Optional[FormatProfile] = None):
        super().__init__(message or ERROR_MESSAGES.get(code, code))
        self.code = code
        self.message = str(self)
        self.profile = profile

    def to_dict(self, original_file_name: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message, "code": self.code}
        if self.profile is not None:
            meta = self.profile.to_dict()
            meta["originalFileName"] = original_file_name
            body["metadata"] = meta
        return body


def require_columns(columns: Sequence[ColumnDescriptor], profile: FormatProfile) -> None:
    if len(columns) < MIN_COLUMNS:
        raise ParseError(TOO_FEW_COLUMNS, profile=profile)


def parse_error_warning(errors: Sequence[Dict[str, Any]]) -> Optional[ParseWarning]:
    if not errors:
        return None
    first = errors[0]
    return ParseWarning(
        key="warningParseError",
        params={"row": first["row"], "message": first["message"]},
        message=f"Row {first['row']} could not be parsed: {first['message']}",
    )


def ragged_rows_warning(count: int) -> Optional[ParseWarning]:
    if count <= 0:
        return None
    return ParseWarning(
        key="warningRaggedRows",
        params={"count": count},
        message=f"{count} row(s) with an unexpected number of columns were skipped.",
    )


def no_numeric_warning(columns: Sequence[ColumnDescriptor]) -> Optional[ParseWarning]:
    if any(c.type == COLUMN_NUMERIC for c in columns):
        return None
    return ParseWarning(
        key="warningNoNumericColumns",
        message="No numeric columns were found. Charts need at least one numeric column for the Y axis.",
    )


def missing_value_warnings(columns: Sequence[ColumnDescriptor], frame: pd.DataFrame) -> List[ParseWarning]:
    null_counts = frame.isna().sum()
    warnings = []
    for col in columns:
        count = int(null_counts[col.index])
        if count > 0:
            warnings.append(
                ParseWarning(
                    key="warningMissingValues",
                    params={"column": col.name, "count": count},
                    message=f"Column '{col.name}' has {count} missing value(s).",
                )
            )
    return warnings


def unparseable_warnings(columns: Sequence[ColumnDescriptor], frame: pd.DataFrame) -> List[ParseWarning]:
    warnings = []
    for col in columns:
        if col.type != COLUMN_NUMERIC:
            continue
        count = int(frame[col.index].map(lambda v: isinstance(v, str)).sum())
        if count > 0:
            warnings.append(
                ParseWarning(
                    key="warningUnparseable",
                    params={"column": col.name, "count": count},
                    message=f"Column '{col.name}': {count} value(s) couldn't be parsed as number.",
                )
            )
    return warnings


def collect_warnings(
    columns: Sequence[ColumnDescriptor],
    rows: Sequence[List[Cell]],
    ragged_count: int = 0,
    tokenizer_errors: Sequence[Dict[str, Any]] = (),
) -> List[ParseWarning]:
    frame = rows_to_frame([c.name for c in columns], rows)
    warnings: List[ParseWarning] = []
    for single in (parse_error_warning(tokenizer_errors), ragged_rows_warning(ragged_count), no_numeric_warning(columns)):
        if single is not None:
            warnings.append(single)
    warnings.extend(missing_value_warnings(columns, frame))
    warnings.extend(unparseable_warnings(columns, frame))
    if warnings:
        logger.info("Parse produced %d warning(s): %s", len(warnings), [w.key for w in warnings])
    return warnings
