"""
Utility modules for decoding, validating and tokenizing uploaded CSV files.
"""

from .csv_tokenizer import TokenizeResult, tokenize
from .file_validator import ValidationResult, validate_upload
from .text_decoder import decode_text

__all__ = [
    "TokenizeResult",
    "tokenize",
    "ValidationResult",
    "validate_upload",
    "decode_text",
]
