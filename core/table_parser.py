"""
CSV parsing pipeline.

raw bytes
  -> decode_text            (UTF-8, chardet fallback)
  -> preprocess_lines       (comments vs data, header candidate)
  -> detect_delimiter       (tab / semicolon / comma by consistency)
  -> resolve_decimal_separator
  -> resolve_header         (comment header, override or heuristic)
  -> tokenize               (csv module, quote aware)
  -> drop_ragged_rows, normalize_decimals, convert_rows
  -> classify_columns
  -> collect_warnings
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from utils.csv_tokenizer import tokenize
from utils.text_decoder import decode_text

from .delimiter_detector import COMMA, DOT, SEMICOLON, TAB, describe_delimiter, detect_delimiter, resolve_decimal_separator
from .diagnostics import NO_DATA, NO_DATA_ROWS, ParseError, collect_warnings, require_columns
from .header_detector import resolve_header
from .line_preprocessor import preprocess_lines
from .models import FormatProfile, ParsedTable
from .type_classifier import classify_columns
from .value_converter import convert_rows, drop_ragged_rows, normalize_decimals

logger = logging.getLogger(__name__)

AUTO = "auto"
PREVIEW_ROWS = 20

DELIMITER_ALIASES = {
    ",": COMMA,
    "comma": COMMA,
    ";": SEMICOLON,
    "semicolon": SEMICOLON,
    "\t": TAB,
    "\\t": TAB,
    "tab": TAB,
}
DECIMAL_ALIASES = {
    ".": DOT,
    "dot": DOT,
    ",": COMMA,
    "comma": COMMA,
}
HEADER_ALIASES = {"true": True, "false": False}


class InvalidOverrideError(ValueError):
    def __init__(self, field: str, value):
        super().__init__(f"Invalid value for {field}: {value!r}")
        self.field = field
        self.value = value


def _is_auto(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() in ("", AUTO))


@dataclass(frozen=True)
class ParseOverrides:
    """Caller-forced format choices. None or "auto" means detect."""

    delimiter: Optional[str] = None
    decimal: Optional[str] = None
    has_header: Optional[Union[bool, str]] = None

    def resolved_delimiter(self) -> Optional[str]:
        if _is_auto(self.delimiter):
            return None
        # keep a literal tab intact, it is whitespace
        key = self.delimiter if self.delimiter in DELIMITER_ALIASES else self.delimiter.strip().lower()
        if key not in DELIMITER_ALIASES:
            raise InvalidOverrideError("delimiter", self.delimiter)
        return DELIMITER_ALIASES[key]

    def resolved_decimal(self) -> Optional[str]:
        if _is_auto(self.decimal):
            return None
        key = self.decimal.strip().lower()
        if key not in DECIMAL_ALIASES:
            raise InvalidOverrideError("decimal", self.decimal)
        return DECIMAL_ALIASES[key]

    def resolved_has_header(self) -> Optional[bool]:
        if isinstance(self.has_header, bool):
            return self.has_header
        if _is_auto(self.has_header):
            return None
        key = self.has_header.strip().lower()
        if key not in HEADER_ALIASES:
            raise InvalidOverrideError("hasHeader", self.has_header)
        return HEADER_ALIASES[key]

    def validate(self) -> "ParseOverrides":
        self.resolved_delimiter()
        self.resolved_decimal()
        self.resolved_has_header()
        return self


@dataclass(frozen=True)
class ParseOutcome:
    """Either a table or the terminal error that prevented one."""

    table: Optional[ParsedTable] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TableParser:
    """Turn an uploaded delimited text file into a typed table."""

    def __init__(self, preview_rows: int = PREVIEW_ROWS):
        self.preview_rows = preview_rows

    def parse(
        self,
        data: Union[bytes, str],
        overrides: Optional[ParseOverrides] = None,
        file_name: Optional[str] = None,
    ) -> ParsedTable:
        overrides = overrides or ParseOverrides()
        text = decode_text(data)

        pre = preprocess_lines(text)
        if not pre.data_lines:
            raise ParseError(NO_DATA)

        delimiter = overrides.resolved_delimiter() or detect_delimiter(pre.data_lines)
        decimal_separator = overrides.resolved_decimal() or resolve_decimal_separator(delimiter)

        header = resolve_header(
            pre.data_lines,
            pre.comment_header_line,
            delimiter,
            decimal_separator,
            has_header=overrides.resolved_has_header(),
        )
        profile = FormatProfile(
            delimiter=delimiter,
            decimal_separator=decimal_separator,
            has_header=header.has_header,
            comment_lines_skipped=pre.comment_lines_skipped,
        )
        logger.info(
            "Detected format: delimiter=%s decimal=%r header=%s%s comments=%d",
            describe_delimiter(delimiter),
            decimal_separator,
            header.has_header,
            " (from comment)" if header.from_comment else "",
            pre.comment_lines_skipped,
        )

        if not header.row_lines:
            raise ParseError(NO_DATA_ROWS, profile=profile)

        tokens = tokenize(header.row_lines, delimiter)
        rows, ragged = drop_ragged_rows(tokens.rows, len(header.names))
        rows = convert_rows(normalize_decimals(rows, decimal_separator))

        columns = classify_columns(header.names, rows)
        require_columns(columns, profile)

        warnings = collect_warnings(columns, rows, ragged_count=ragged, tokenizer_errors=tokens.errors)
        logger.info("Parsed %d rows x %d columns", len(rows), len(columns))
        return ParsedTable(
            columns=columns,
            rows=rows,
            warnings=warnings,
            profile=profile,
            original_file_name=file_name,
            preview_rows=self.preview_rows,
        )


def parse_upload(
    data: Union[bytes, str],
    overrides: Optional[ParseOverrides] = None,
    file_name: Optional[str] = None,
    preview_rows: int = PREVIEW_ROWS,
) -> ParseOutcome:
    """Run the pipeline and return the result or the terminal error, never raising ParseError."""
    try:
        return ParseOutcome(table=TableParser(preview_rows).parse(data, overrides, file_name))
    except ParseError as e:
        logger.info("Parse failed for %s: %s", file_name or "<upload>", e.code)
        return ParseOutcome(error=e)
