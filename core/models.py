"""
Data structures passed between the parsing stages.

Every instance is built fresh for one upload and thrown away once the
response has been produced.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

Cell = Union[int, float, str, None]

COLUMN_NUMERIC = "numeric"
COLUMN_DATE = "date"
COLUMN_STRING = "string"


def json_cell(cell: Cell) -> Cell:
    """Non-finite floats are not valid JSON; they go out as null."""
    if isinstance(cell, float) and not math.isfinite(cell):
        return None
    return cell


@dataclass(frozen=True)
class PreprocessResult:
    comment_header_line: Optional[str]
    data_lines: List[str]
    comment_lines_skipped: int


@dataclass(frozen=True)
class FormatProfile:
    """What was detected (or forced by an override) for one file."""

    delimiter: str
    decimal_separator: str
    has_header: bool
    comment_lines_skipped: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "delimiter": self.delimiter,
            "decimalSeparator": self.decimal_separator,
            "hasHeader": self.has_header,
            "commentLinesSkipped": self.comment_lines_skipped,
        }


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    index: int
    type: str
    numeric_count: int
    non_null_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "index": self.index,
            "type": self.type,
            "numericCount": self.numeric_count,
            "nonNullCount": self.non_null_count,
        }


@dataclass(frozen=True)
class ParseWarning:
    """Advisory issue attached to a successful parse.

    ``key`` is stable and meant for translation lookups on the client,
    ``message`` is a ready-made English rendering of the same warning.
    """

    key: str
    params: Dict[str, Any] = field(default_factory=dict)
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"key": self.key, "message": self.message}
        if self.params:
            out["params"] = dict(self.params)
        return out


@dataclass
class ParsedTable:
    columns: List[ColumnDescriptor]
    rows: List[List[Cell]]
    warnings: List[ParseWarning]
    profile: FormatProfile
    original_file_name: Optional[str] = None
    preview_rows: int = 20

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def preview(self) -> List[List[Cell]]:
        return self.rows[: self.preview_rows]

    @property
    def metadata(self) -> Dict[str, Any]:
        meta = self.profile.to_dict()
        meta["originalFileName"] = self.original_file_name
        return meta

    def to_dict(self) -> Dict[str, Any]:
        data = [[json_cell(c) for c in row] for row in self.rows]
        preview = [[json_cell(c) for c in row] for row in self.preview]
        return {
            "columns": [c.to_dict() for c in self.columns],
            "data": data,
            "rowCount": self.row_count,
            "preview": preview,
            "warnings": [w.to_dict() for w in self.warnings],
            "metadata": self.metadata,
        }
