import argparse
import json
import logging
import os
import sys
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from core.delimiter_detector import describe_delimiter
from core.diagnostics import ParseError
from core.table_parser import InvalidOverrideError, ParseOverrides, TableParser


def _overrides_from_args(args) -> ParseOverrides:
    return ParseOverrides(delimiter=args.delimiter, decimal=args.decimal, has_header=args.has_header).validate()


def _load(path: str, args):
    """Read and parse ``path``; returns the table or None after printing the problem."""
    try:
        data = Path(path).expanduser().read_bytes()
    except FileNotFoundError:
        print(f"File not found: {path}")
        return None
    try:
        overrides = _overrides_from_args(args)
    except InvalidOverrideError as e:
        print(f"Error: {e}")
        return None
    try:
        return TableParser(preview_rows=args.preview).parse(data, overrides, file_name=Path(path).name)
    except ParseError as e:
        print(f"Error [{e.code}]: {e.message}")
        if e.profile is not None:
            print(f"- Delimiter: {describe_delimiter(e.profile.delimiter)}")
            print(f"- Decimal separator: {e.profile.decimal_separator!r}")
            print(f"- Header: {'yes' if e.profile.has_header else 'no'}")
        return None


def to_frame(table, rows=None) -> pd.DataFrame:
    return pd.DataFrame(table.rows if rows is None else rows, columns=[c.name for c in table.columns])


def cmd_inspect(path: str, args) -> int:
    table = _load(path, args)
    if table is None:
        return 1

    profile = table.profile
    print("CSV inspection")
    print(f"- File: {table.original_file_name}")
    print(f"- Delimiter: {describe_delimiter(profile.delimiter)}")
    print(f"- Decimal separator: {profile.decimal_separator!r}")
    print(f"- Header: {'yes' if profile.has_header else 'no (generated names)'}")
    print(f"- Comment lines skipped: {profile.comment_lines_skipped}")
    print(f"- Rows: {table.row_count}")
    print("- Columns:")
    for col in table.columns:
        print(f"  [{col.index}] {col.name}: {col.type} ({col.numeric_count}/{col.non_null_count} numeric)")
    if table.warnings:
        print("- Warnings:")
        for w in table.warnings:
            print(f"  {w.message}")
    return 0


def cmd_parse(path: str, args) -> int:
    table = _load(path, args)
    if table is None:
        return 1
    if args.json:
        print(json.dumps(table.to_dict(), ensure_ascii=False))
        return 0
    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(to_frame(table, table.preview))
    print(f"\n{table.row_count} rows, showing first {len(table.preview)}")
    return 0


def _add_override_args(p):
    p.add_argument("path", help="Path to the CSV file")
    p.add_argument("--delimiter", default="auto", help="Force delimiter: comma, semicolon, tab (default: auto)")
    p.add_argument("--decimal", default="auto", help="Force decimal separator: dot, comma (default: auto)")
    p.add_argument("--has-header", default="auto", choices=["auto", "true", "false"], help="Force header detection")
    p.add_argument("--preview", type=int, default=20, help="Number of preview rows (default 20)")


def main(argv=None):
    # Load environment variables (LOG_LEVEL)
    load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper(), format="%(levelname)s %(message)s")

    parser = argparse.ArgumentParser(description="CSV format inspection CLI")
    sub = parser.add_subparsers(dest="cmd")

    p_inspect = sub.add_parser("inspect", help="Show the detected format, column types and warnings")
    _add_override_args(p_inspect)

    p_parse = sub.add_parser("parse", help="Parse a CSV file and print the typed table")
    _add_override_args(p_parse)
    p_parse.add_argument("--json", action="store_true", help="Emit the full parse result as JSON")

    args = parser.parse_args(argv)
    if args.cmd == "inspect":
        sys.exit(cmd_inspect(args.path, args))
    if args.cmd == "parse":
        sys.exit(cmd_parse(args.path, args))

    # Fallback: show help
    parser.print_help()


if __name__ == "__main__":
    main()
