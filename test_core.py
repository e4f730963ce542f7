#!/usr/bin/env python3
"""
End-to-end tests for the parsing pipeline.
"""

import pytest

from core.diagnostics import NO_DATA, NO_DATA_ROWS, TOO_FEW_COLUMNS, ParseError
from core.table_parser import InvalidOverrideError, ParseOverrides, TableParser, parse_upload


def parse(text, **overrides):
    return TableParser().parse(text.encode("utf-8"), ParseOverrides(**overrides))


def parse_error(text, **overrides):
    with pytest.raises(ParseError) as excinfo:
        parse(text, **overrides)
    return excinfo.value


# --- terminal errors --------------------------------------------------------

@pytest.mark.parametrize("text", ["", "\n  \n", "# comment1\n# comment2\n# comment3"])
def test_no_data(text):
    err = parse_error(text)
    assert err.code == NO_DATA
    assert err.profile is None


def test_header_only_file_has_no_data_rows():
    err = parse_error("x,y")
    assert err.code == NO_DATA_ROWS
    assert err.profile.has_header is True
    assert err.profile.delimiter == ","


def test_single_column_is_too_few():
    err = parse_error("value\n1\n2\n3")
    assert err.code == TOO_FEW_COLUMNS
    assert err.profile.delimiter == ","
    assert err.to_dict("f.csv")["metadata"]["originalFileName"] == "f.csv"


def test_parse_upload_returns_error_instead_of_raising():
    outcome = parse_upload(b"x,y")
    assert not outcome.ok
    assert outcome.table is None
    assert outcome.error.code == NO_DATA_ROWS

    outcome = parse_upload(b"x,y\n1,2", file_name="ok.csv")
    assert outcome.ok
    assert outcome.table.metadata["originalFileName"] == "ok.csv"


# --- format detection end to end -------------------------------------------

def test_clean_comma_file():
    table = parse("x,y,z\n1,2.5,3\n2,3.5,4\n3,4.5,5")
    assert table.profile.delimiter == ","
    assert table.profile.decimal_separator == "."
    assert table.profile.has_header is True
    assert [c.name for c in table.columns] == ["x", "y", "z"]
    assert [c.type for c in table.columns] == ["numeric"] * 3
    assert table.rows[0] == [1, 2.5, 3]


def test_semicolon_file_converts_decimal_commas():
    table = parse("x;y\n1;-1930,532345\n2;3,5")
    assert table.profile.delimiter == ";"
    assert table.profile.decimal_separator == ","
    assert table.rows == [[1, -1930.532345], [2, 3.5]]


def test_decimal_comma_left_alone_for_dot_files():
    table = parse("x\ty\n1\t-1930,532345\n2\t5")
    assert table.profile.decimal_separator == "."
    assert table.rows[0][1] == "-1930,532345"
    assert table.columns[1].type == "string"


def test_tab_and_semicolon_tie_picks_tab():
    table = parse("a\tb;c\n1\t2;3\n4\t5;6")
    assert table.profile.delimiter == "\t"
    assert [c.name for c in table.columns] == ["a", "b;c"]


def test_comment_header_with_european_format():
    text = "# Device export\n# Point Nr.; Freq.\n1;2,5\n2;3,5\n# END"
    table = parse(text)
    assert table.profile.has_header is True
    assert table.profile.comment_lines_skipped == 3
    assert [c.name for c in table.columns] == ["Point Nr.", "Freq."]
    assert table.rows == [[1, 2.5], [2, 3.5]]


def test_banner_comment_is_never_a_header():
    table = parse("# Generated by logger, 2026\n1,2,3\n4,5,6")
    assert table.profile.has_header is False
    assert [c.name for c in table.columns] == ["Column 1", "Column 2", "Column 3"]
    assert table.row_count == 2


def test_all_string_rows_default_to_header():
    table = parse("foo,bar,baz\nalpha,beta,gamma\ndelta,epsilon,zeta")
    assert table.profile.has_header is True
    assert table.row_count == 2


def test_quoted_fields_keep_commas():
    table = parse('id,comment,value\n1,"contains,comma,inside",10\n2,plain,20')
    assert [c.name for c in table.columns] == ["id", "comment", "value"]
    assert table.rows[0][1] == "contains,comma,inside"
    assert table.row_count == 2


def test_malformed_quote_keeps_row_and_warns():
    table = parse('id,size,value\n1,"24"x,10\n2,27,20\n3,32,30')
    assert table.row_count == 3
    assert table.rows[0] == [1, "24x", 10]
    assert "warningParseError" in [w.key for w in table.warnings]


def test_unterminated_quote_does_not_swallow_rest_of_file():
    table = parse('a,b\n1,"oops\n2,3\n4,5\n6,7')
    assert table.row_count == 4
    assert table.rows[0] == [1, "oops"]
    assert table.rows[1:] == [[2, 3], [4, 5], [6, 7]]
    assert "warningParseError" in [w.key for w in table.warnings]


def test_integer_past_digit_limit_does_not_fail_parse():
    outcome = parse_upload(b"x,y\n1," + b"1" * 5000 + b"\n2,3")
    assert outcome.ok
    assert outcome.table.row_count == 2
    assert outcome.table.rows[0][1] == float("inf")
    assert outcome.table.to_dict()["data"][0][1] is None



def test_datetime_x_axis():
    table = parse("timestamp,value\n2026-02-01T08:00:00Z,1.5\n2026-02-01T09:00:00Z,2\n2026-02-01T10:00:00Z,2.5")
    assert [c.type for c in table.columns] == ["date", "numeric"]


def test_dotted_dates_classify_as_string():
    table = parse("date;value\n01.02.2026;1,5\n15.03.2026;2,5\n20.04.2026;3,5")
    assert [c.type for c in table.columns] == ["string", "numeric"]


# --- overrides --------------------------------------------------------------

def test_delimiter_override():
    table = parse("a,b\n1,2\n3,4", delimiter=",")
    assert table.profile.delimiter == ","
    assert len(table.columns) == 2


def test_named_delimiter_override_skips_detection():
    table = parse("a;b,c\n1;2,3\n4;5,6", delimiter="comma")
    assert table.profile.delimiter == ","
    assert table.profile.decimal_separator == "."
    assert [c.name for c in table.columns] == ["a;b", "c"]


def test_decimal_override():
    table = parse("x;y\n1;2,5\n3;4,5", decimal=",")
    assert table.profile.decimal_separator == ","
    assert table.rows[0][1] == 2.5


def test_forced_header():
    table = parse("1,2,3\n4,5,6\n7,8,9", has_header="true")
    assert table.profile.has_header is True
    assert table.row_count == 2
    assert [c.name for c in table.columns] == ["1", "2", "3"]


def test_forced_no_header():
    table = parse("name,value\n1,10\n2,20", has_header="false")
    assert table.profile.has_header is False
    assert table.row_count == 3
    assert table.columns[0].name == "Column 1"


def test_auto_overrides_run_detection():
    table = parse("a;b\n1;2\n3;4", delimiter="auto", decimal="auto", has_header="auto")
    assert table.profile.delimiter == ";"


def test_invalid_override_rejected():
    with pytest.raises(InvalidOverrideError):
        parse("a,b\n1,2", delimiter="|")
    with pytest.raises(InvalidOverrideError):
        ParseOverrides(has_header="maybe").validate()


# --- warnings ---------------------------------------------------------------

def keys(table):
    return [w.key for w in table.warnings]


def test_ragged_rows_are_dropped_with_warning():
    table = parse("a,b,c\n1,2,3\n4,5\n6,7,8,9\n10,11,12")
    assert table.row_count == 2
    assert all(len(row) == 3 for row in table.rows)
    ragged = [w for w in table.warnings if w.key == "warningRaggedRows"]
    assert ragged[0].params == {"count": 2}
    assert "unexpected number of columns" in ragged[0].message


def test_missing_values_warning():
    table = parse("x,y\n1,\n2,5\n3,6")
    assert table.rows[0] == [1, None]
    missing = [w for w in table.warnings if w.key == "warningMissingValues"]
    assert missing[0].params == {"column": "y", "count": 1}


def test_no_numeric_columns_warning():
    table = parse("a,b\nfoo,bar\nbaz,qux")
    assert "warningNoNumericColumns" in keys(table)


def test_unparseable_values_in_numeric_column():
    lines = ["x,y"] + [f"{i},{i * 2}" for i in range(9)] + ["9,n/a"]
    table = parse("\n".join(lines))
    assert table.columns[1].type == "numeric"
    unparseable = [w for w in table.warnings if w.key == "warningUnparseable"]
    assert unparseable[0].params == {"column": "y", "count": 1}


def test_clean_file_has_no_warnings():
    assert parse("x,y\n1,2\n3,4").warnings == []


# --- output structure ------------------------------------------------------

def test_preview_is_first_rows_of_full_data():
    lines = ["x,y"] + [f"{i},{i * 10}" for i in range(50)]
    table = parse("\n".join(lines))
    out = table.to_dict()
    assert out["rowCount"] == 50
    assert len(out["data"]) == 50
    assert len(out["preview"]) == 20
    assert out["preview"] == out["data"][:20]
    assert out["metadata"]["originalFileName"] is None


def test_rows_match_column_count():
    table = parse("a;b;c\n1;2;3\n4;5\n6;7;8")
    assert all(len(row) == len(table.columns) for row in table.rows)


def test_infinity_serialises_as_null():
    table = parse("x,y\n1,Infinity\n2,3")
    assert table.rows[0][1] == float("inf")
    assert table.to_dict()["data"][0][1] is None


def test_parsing_is_deterministic():
    text = "# meta\nx;y;label\n1;2,5;a\n2;;b\n3;4,5\n4;5,5;c"
    assert parse(text).to_dict() == parse(text).to_dict()


def test_latin1_bytes_are_decoded():
    data = "Stadt;Wert\nKöln;1,5\nMünchen;2,5\nDüsseldorf;3,5\n".encode("latin-1")
    table = TableParser().parse(data)
    assert table.profile.delimiter == ";"
    assert table.row_count == 3
    assert table.columns[1].type == "numeric"
