"""
Pre-parse checks on an uploaded file.

Runs before the parsing pipeline to reject obvious problems early.
"""

from dataclasses import dataclass
from typing import Optional

VALID_MIMETYPES = {
    "text/csv",
    "text/plain",
    "application/csv",
    "application/vnd.ms-excel",
}
ALLOWED_EXTENSIONS = {"csv"}
BINARY_SNIFF_BYTES = 1024


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    code: Optional[str] = None


def allowed_file(filename):
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def validate_upload(filename: Optional[str], mimetype: Optional[str], data: Optional[bytes]) -> ValidationResult:
    if data is None or filename is None:
        return ValidationResult(False, "No file was uploaded.", "NO_FILE")

    if len(data) == 0:
        return ValidationResult(False, "The uploaded file is empty. Please select a CSV file with data.", "EMPTY_FILE")

    # Either a CSV-ish MIME type or a .csv extension is enough
    if mimetype not in VALID_MIMETYPES and not allowed_file(filename):
        return ValidationResult(False, "Please upload a file in CSV format (.csv).", "INVALID_TYPE")

    if b"\x00" in data[:BINARY_SNIFF_BYTES]:
        return ValidationResult(False, "This file appears to be binary, not a CSV text file.", "BINARY_FILE")

    return ValidationResult(True)
