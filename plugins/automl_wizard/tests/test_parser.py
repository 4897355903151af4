from plugins.automl_wizard.core import format_cell, parse_table, rows_to_csv


def test_parse_table_casts_numbers_text_and_missing():
    rows = parse_table("a,b,c\n1,x,\n2.5,y,7\n")
    assert rows == [
        {"a": 1.0, "b": "x", "c": None},
        {"a": 2.5, "b": "y", "c": 7.0},
    ]
    assert list(rows[0].keys()) == ["a", "b", "c"]


def test_parse_table_strips_whitespace_and_quotes():
    rows = parse_table('  "name" , "age"\n "bob" , "30"\n"",4\n')
    assert rows == [{"name": "bob", "age": 30.0}, {"name": None, "age": 4.0}]


def test_parse_table_requires_header_and_data_line():
    assert parse_table("") == []
    assert parse_table("a,b") == []
    assert parse_table("a,b\n\n   \n") == []


def test_parse_table_drops_lines_with_wrong_field_count():
    rows = parse_table("x,y\nfoo,1\n1,2,3\nbar,")
    assert rows == [{"x": "foo", "y": 1.0}, {"x": "bar", "y": None}]


def test_parse_table_skips_blank_lines_and_handles_crlf():
    rows = parse_table("a,b\r\n1,2\r\n\r\n3,4\r\n")
    assert rows == [{"a": 1.0, "b": 2.0}, {"a": 3.0, "b": 4.0}]


def test_parse_table_keeps_non_finite_tokens_as_text():
    rows = parse_table("a,b\nnan,inf\n-1e3,abc")
    assert rows[0] == {"a": "nan", "b": "inf"}
    assert rows[1] == {"a": -1000.0, "b": "abc"}


def test_parse_table_only_accepts_ascii_decimal_numbers():
    rows = parse_table("a,b,c,d,e\n1_000,１２,12abc,Infinity,1e999\n+.5,-3.,4E-2,0x10,٣")
    assert rows[0] == {"a": "1_000", "b": "１２", "c": "12abc", "d": "Infinity", "e": "1e999"}
    assert rows[1] == {"a": 0.5, "b": -3.0, "c": 0.04, "d": "0x10", "e": "٣"}


def test_parse_table_never_raises_on_odd_input():
    assert parse_table(",,\n,,") == [{"": None}]
    assert parse_table('"\n"') == [{"": None}]


def test_rows_to_csv_round_trips():
    text = "id,score,label\n1,0.25,a\n2,,b\n3,10,\n"
    rows = parse_table(text)
    assert rows_to_csv(rows) == text
    assert parse_table(rows_to_csv(rows)) == rows


def test_format_cell():
    assert format_cell(None) == ""
    assert format_cell(3.0) == "3"
    assert format_cell(0.1) == "0.1"
    assert format_cell("x") == "x"
