import pytest

from card_sorter.errors import ParseError
from card_sorter.ingest import decode_upload, dedupe_header, read_csv
from card_sorter.records import coerce_value


def test_utf8_bom_is_stripped():
    parsed = read_csv(b"\xef\xbb\xbfname,qty\nalpha,1\n")
    assert parsed.encoding == "utf-8-sig"
    assert parsed.dataset.columns == ["name", "qty"]


def test_latin1_falls_back_to_detection():
    text, encoding, warnings = decode_upload("name,city\nPaul,Montréal\n".encode("latin-1"))
    assert "Montréal" in text
    assert encoding != "utf-8"
    assert warnings == []


def test_semicolon_delimiter_is_detected():
    parsed = read_csv(b"a;b\n1;2\n3;4\n")
    assert parsed.delimiter == ";"
    assert parsed.dataset.records == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]


def test_dynamic_typing():
    raw = b"name,price,active\nfoo,10,true\nbar,2.5,FALSE\nbaz,n/a,yes\n"
    records = read_csv(raw, dynamic_typing=True).dataset.records
    assert records[0] == {"name": "foo", "price": 10, "active": True}
    assert records[1] == {"name": "bar", "price": 2.5, "active": False}
    assert records[2] == {"name": "baz", "price": "n/a", "active": "yes"}
    assert isinstance(records[0]["price"], int)


def test_values_stay_strings_without_dynamic_typing():
    records = read_csv(b"name,price\nfoo,10\n").dataset.records
    assert records == [{"name": "foo", "price": "10"}]


def test_header_only_file_is_an_empty_dataset():
    parsed = read_csv(b"a,b\n")
    assert parsed.dataset.columns == ["a", "b"]
    assert parsed.dataset.is_empty


@pytest.mark.parametrize("raw", [b"", b"\n\n", b"   \r\n"])
def test_missing_header_is_a_parse_error(raw):
    with pytest.raises(ParseError, match="no header row"):
        read_csv(raw)


def test_csv_level_error_is_a_parse_error():
    raw = b"a\n" + b"x" * 200_000 + b"\n"
    with pytest.raises(ParseError, match="field larger than field limit"):
        read_csv(raw)


def test_row_width_is_enforced():
    parsed = read_csv(b"a,b,c\n1,2\n1,2,3,4\n")
    assert parsed.dataset.records == [
        {"a": "1", "b": "2", "c": None},
        {"a": "1", "b": "2", "c": "3"},
    ]
    assert [(w.row, w.issue, w.action) for w in parsed.warnings] == [
        (2, "row_too_short", "padded_to_3"),
        (3, "row_too_long", "truncated_to_3"),
    ]


def test_empty_lines_are_kept_by_default():
    records = read_csv(b"a,b\n1,2\n\n3,4\n").dataset.records
    assert records == [
        {"a": "1", "b": "2"},
        {"a": "", "b": None},
        {"a": "3", "b": "4"},
    ]


def test_trim_and_skip_empty_lines():
    raw = b"Number , Set\n  LOB-001 ,  LOB \n\n   ,  \n"
    parsed = read_csv(raw, trim_values=True, skip_empty_lines=True)
    assert parsed.dataset.columns == ["Number", "Set"]
    assert parsed.dataset.records == [{"Number": "LOB-001", "Set": "LOB"}]


def test_duplicate_headers_are_renamed():
    columns, warnings = dedupe_header(["a", "a", "b", "a"])
    assert columns == ["a", "a_1", "b", "a_2"]
    assert [w.action for w in warnings] == ["renamed_to_a_1", "renamed_to_a_2"]

    records = read_csv(b"a,a,b\n1,2,3\n").dataset.records
    assert records == [{"a": "1", "a_1": "2", "b": "3"}]


def test_numbers_outside_safe_range_stay_text():
    huge = "1" * 5000
    assert coerce_value(huge) == huge
    assert coerce_value("9007199254740992") == "9007199254740992"
    assert coerce_value("-9007199254740992") == "-9007199254740992"
    assert coerce_value("9007199254740991") == 9007199254740991
    assert coerce_value("1e400") == "1e400"
    assert coerce_value("0" * 5000 + "7") == 7

    records = read_csv(f"id,name\n{huge},alpha\n".encode("ascii"), dynamic_typing=True).dataset.records
    assert records == [{"id": huge, "name": "alpha"}]
