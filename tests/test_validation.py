import pytest

from roster.domain.errors import NotFoundError, ValidationError
from roster.domain.models import ShiftFilter
from roster.domain.validation import (
    coerce_employee_id,
    employee_fields,
    ensure_object,
    parse_record_id,
    parse_shift_filter,
    require_fields,
    shift_fields,
)


class TestRequireFields:

    def test_passes_when_present(self):
        require_fields({"name": "Ana", "role": "Cook"}, ("name", "role"))

    def test_lists_every_missing_field_in_order(self):
        with pytest.raises(ValidationError) as exc:
            require_fields({"date": "", "start_time": None}, ("date", "start_time", "end_time"))
        assert exc.value.message == "Missing required fields: date, start_time, end_time"

    def test_whitespace_is_not_blank(self):
        require_fields({"name": " "}, ("name",))


class TestDecoding:

    @pytest.mark.parametrize("value,expected", [
        (None, None), ("", None), (5, 5), ("12", 12), (" 3 ", 3), (4.0, 4),
    ])
    def test_coerce_employee_id(self, value, expected):
        assert coerce_employee_id(value) == expected

    @pytest.mark.parametrize("value", [
        "abc", "1.5", 2.5, True, [1], {"id": 1},
        "--5", "-", "\u00b2", "\u0665", 10 ** 20, -(10 ** 20), "9" * 25, 1e20,
    ])
    def test_coerce_employee_id_rejects(self, value):
        with pytest.raises(ValidationError):
            coerce_employee_id(value)

    def test_ensure_object(self):
        assert ensure_object(None) == {}
        assert ensure_object({"a": 1}) == {"a": 1}
        with pytest.raises(ValidationError):
            ensure_object("text")

    def test_employee_fields_ignores_unknown_keys(self):
        fields = employee_fields({"name": "Ana", "role": "Cook", "id": 99, "salary": 1})
        assert fields == {"name": "Ana", "role": "Cook", "email": None, "phone": None}

    def test_shift_fields_decodes_employee_id(self):
        fields = shift_fields({"date": "2024-01-01", "employee_id": "7"})
        assert fields["employee_id"] == 7
        assert fields["notes"] is None

    def test_parse_shift_filter_prefers_date(self):
        assert parse_shift_filter("2024-01-01", "2") == ShiftFilter(date="2024-01-01")

    def test_parse_shift_filter_ignores_bad_employee_id_when_date_given(self):
        assert parse_shift_filter("2024-01-01", "nope") == ShiftFilter(date="2024-01-01")

    def test_parse_shift_filter_employee_only(self):
        assert parse_shift_filter(None, "2") == ShiftFilter(employee_id=2)

    def test_parse_shift_filter_nothing(self):
        assert parse_shift_filter() == ShiftFilter()

    @pytest.mark.parametrize("value", ["one", "--5", "\u00b2", "9" * 25])
    def test_parse_shift_filter_unparseable_employee_id_matches_nothing(self, value):
        assert parse_shift_filter(None, value) == ShiftFilter(unmatched=True)


class TestRecordId:

    @pytest.mark.parametrize("value,expected", [("7", 7), (" 12 ", 12), ("-3", -3), (str(2 ** 63 - 1), 2 ** 63 - 1)])
    def test_parses(self, value, expected):
        assert parse_record_id(value, "Shift not found") == expected

    @pytest.mark.parametrize("value", ["abc", "1.5", "--5", "", "\u00b2", str(2 ** 63)])
    def test_unusable_id_is_not_found(self, value):
        with pytest.raises(NotFoundError) as exc:
            parse_record_id(value, "Shift not found")
        assert exc.value.message == "Shift not found"
