"""
Core parsing modules for the CSV chart backend.

This package contains the format-inference and type-classification
pipeline shared by the web routes and the command-line interface.
"""

from .diagnostics import ParseError
from .models import ColumnDescriptor, FormatProfile, ParsedTable, ParseWarning
from .table_parser import InvalidOverrideError, ParseOutcome, ParseOverrides, TableParser, parse_upload

__all__ = [
    'ParseError',
    'ColumnDescriptor',
    'FormatProfile',
    'ParsedTable',
    'ParseWarning',
    'InvalidOverrideError',
    'ParseOutcome',
    'ParseOverrides',
    'TableParser',
    'parse_upload',
]
