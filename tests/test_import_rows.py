"""가져오기 행 변환/검증 헬퍼 테스트.

Tests for spreadsheet row coercion and input validation helpers.
"""

import pytest

from app.utils.exceptions import ValidationError
from app.utils.spreadsheet import (
    RowError,
    coerce_facility_row,
    coerce_staff_row,
    coerce_zone_row,
    normalize_header,
    read_delimited_rows,
    read_xlsx_rows,
)
from app.utils.validation import coordinates, parse_finite, parse_time_of_day, require_text
from tests.conftest import xlsx_bytes


class TestValidation:

    @pytest.mark.parametrize("value, expected", [
        ("12.5", 12.5), (3, 3.0), (" 7 ", 7.0), ("nan", None), ("inf", None), ("abc", None), (None, None), (True, None),
    ])
    def test_parse_finite(self, value, expected):
        assert parse_finite(value) == expected

    def test_coordinates_both_or_neither(self):
        assert coordinates(None, None) == (None, None)
        assert coordinates(1, 2) == (1.0, 2.0)
        with pytest.raises(ValidationError):
            coordinates(1, None)
        with pytest.raises(ValidationError):
            coordinates(None, None, required=True)

    def test_require_text(self):
        assert require_text("  x ", "name") == "x"
        with pytest.raises(ValidationError):
            require_text("   ", "name")

    def test_time_of_day(self):
        assert parse_time_of_day("07:30", "start").hour == 7
        with pytest.raises(ValidationError):
            parse_time_of_day("7am", "start")


class TestFacilityRows:

    def test_header_normalization(self):
        assert normalize_header("Zone ID") == "zoneid"
        assert normalize_header("zone_id") == "zoneid"

    def test_valid_row_with_default_status(self):
        values = coerce_facility_row({"code": "T-1", "type": "toilets", "zoneid": "North", "lat": "1.5", "lng": 2})
        assert values == {
            "code": "T-1", "type": "Toilet", "zone_ref": "North", "lat": 1.5, "lng": 2.0, "status": "clean",
        }

    def test_name_used_when_code_missing(self):
        values = coerce_facility_row({"name": "D-9", "type": "Dustbin", "zoneid": "z", "lat": 1, "lng": 1, "status": "FULL"})
        assert values["code"] == "D-9"
        assert values["status"] == "full"

    @pytest.mark.parametrize("row", [
        {"type": "Toilet", "zoneid": "z", "lat": 1, "lng": 1},
        {"code": "x", "type": "Bench", "zoneid": "z", "lat": 1, "lng": 1},
        {"code": "x", "type": "Toilet", "lat": 1, "lng": 1},
        {"code": "x", "type": "Toilet", "zoneid": "z", "lat": "nan", "lng": 1},
        {"code": "x", "type": "Dustbin", "zoneid": "z", "lat": 1, "lng": 1, "status": "clean"},
    ])
    def test_invalid_rows(self, row):
        with pytest.raises(RowError):
            coerce_facility_row(row)


class TestOtherRows:

    def test_zone_row(self):
        assert coerce_zone_row({"name": "A", "lat": "1", "lng": "2"})["lat"] == 1.0
        with pytest.raises(RowError):
            coerce_zone_row({"name": "A", "lat": "", "lng": "2"})

    def test_staff_row_defaults(self):
        values = coerce_staff_row({"name": "A", "email": "a@x.com", "phone": "1"})
        assert values["role"] == "staff"
        assert values["status"] == "active"
        assert values["department"] == "General"

    def test_staff_row_rejects_unknown_role(self):
        with pytest.raises(RowError):
            coerce_staff_row({"name": "A", "email": "a@x.com", "phone": "1", "role": "boss"})


class TestReaders:

    def test_xlsx_rows_skip_blank(self):
        content = xlsx_bytes([["Code", "Type"], ["T-1", "Toilet"], [None, None], ["T-2", "Toilet"]])
        rows = read_xlsx_rows(content)
        assert [n for n, _ in rows] == [2, 4]
        assert rows[0][1] == {"code": "T-1", "type": "Toilet"}

    def test_unreadable_workbook(self):
        with pytest.raises(ValueError):
            read_xlsx_rows(b"not a workbook")

    def test_headerless_csv_is_positional(self):
        rows = read_delimited_rows("zones.csv", b"Gate 1,Main gate,25.1,81.2\n")
        assert rows == [(1, {"name": "Gate 1", "description": "Main gate", "lat": "25.1", "lng": "81.2"})]

    def test_json_must_be_list(self):
        with pytest.raises(ValueError):
            read_delimited_rows("zones.json", b'{"name": "x"}')
