"""
Tests for the wide-format CSV reader and its typed row accessor.
"""
import pytest

from covidtrack.core.exceptions import MalformedSourceError, RowProcessingError
from covidtrack.data.parsers import parse_count, read_source

from conftest import make_csv, read_fixture


def test_header_and_rows():
    table = read_source(read_fixture("time_series_confirmed.csv"), name="confirmed")

    assert table.header[:4] == ["Province/State", "Country/Region", "Lat", "Long"]
    assert table.header[4:] == ["1/20/23", "1/21/23", "1/22/23"]
    assert table.row_count == 9
    assert not table.is_empty

    rows = list(table.rows())
    korea = [r for r in rows if r.get("Country/Region") == "Korea, South"]
    assert len(korea) == 1
    assert korea[0].get("Province/State") == ""
    assert korea[0].get_count("1/22/23") == 30


def test_rows_are_lazy_iterator():
    table = read_source(make_csv(["1/1/23"], [("", "Chile", 4)]))
    rows = table.rows()
    assert next(rows).get("Country/Region") == "Chile"
    with pytest.raises(StopIteration):
        next(rows)


@pytest.mark.parametrize("text", ["", "   \n\n  ", None])
def test_missing_header_is_malformed(text):
    with pytest.raises(MalformedSourceError):
        read_source(text, name="empty")


def test_header_only_source_is_empty_not_error():
    table = read_source("Province/State,Country/Region,Lat,Long,1/1/23\n")

    assert table.is_empty
    assert table.row_count == 0
    assert list(table.rows()) == []


def test_line_with_extra_fields_is_skipped():
    text = (
        "Province/State,Country/Region,Lat,Long,1/1/23\n"
        ",Chile,0,0,10\n"
        ",Peru,0,0,20,99,98\n"
        ",Italy,0,0,30\n"
    )
    table = read_source(text)

    countries = [row.get("Country/Region") for row in table.rows()]
    assert countries == ["Chile", "Italy"]
    assert len(table.skipped_lines) == 1


def test_extra_field_on_first_data_line_does_not_shift_columns():
    text = (
        "Province/State,Country/Region,Lat,Long,1/20/23,1/21/23\n"
        ",France,1,2,10,20,EXTRA\n"
        ",Germany,1,2,30,40\n"
    )
    table = read_source(text)

    assert table.header == ["Province/State", "Country/Region", "Lat", "Long", "1/20/23", "1/21/23"]
    assert table.row_count == 1
    assert len(table.skipped_lines) == 1

    germany = next(table.rows())
    assert germany.get("Province/State") == ""
    assert germany.get("Country/Region") == "Germany"
    assert germany.get_count("1/20/23") == 30
    assert germany.get_count("1/21/23") == 40


def test_duplicate_header_uses_first_column():
    table = read_source("Province/State,Country/Region,1/1/23,1/1/23\n,Chile,4,9\n")

    assert next(table.rows()).get_count("1/1/23") == 4


def test_byte_order_mark_is_ignored():
    table = read_source("\ufeffProvince/State,Country/Region,Lat,Long,1/1/23\n,Chile,0,0,1\n")
    assert table.header[0] == "Province/State"


def test_missing_column_raises_row_error():
    table = read_source(make_csv(["1/1/23"], [("", "Chile", 4)]))
    row = next(table.rows())

    assert "Country/Region" in row
    assert "Admin2" not in row
    with pytest.raises(RowProcessingError) as exc_info:
        row.get("Admin2")
    assert exc_info.value.line == 2


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("42", 42),
        (" 7 ", 7),
        ("0", 0),
        ("", None),
        ("-3", None),
        ("1.5", None),
        ("n/a", None),
    ],
)
def test_parse_count(raw, expected):
    assert parse_count(raw) == expected


def test_row_to_dict():
    table = read_source(make_csv(["1/1/23"], [("Tasmania", "Australia", 12)]))
    row = next(table.rows())

    assert row.to_dict() == {
        "Province/State": "Tasmania",
        "Country/Region": "Australia",
        "Lat": "0",
        "Long": "0",
        "1/1/23": "12",
    }
