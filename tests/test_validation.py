"""Tests for payload validation rules."""

from __future__ import annotations

import pytest

from afterschool.exceptions import InvalidSpacesError, MissingFieldsError
from afterschool.validation import (
    ORDER_FIELDS,
    Requirement,
    coerce_spaces,
    missing_fields,
    validate_lesson_spaces,
    validate_order,
)

ORDER = {"name": "Ada", "phone": "0123", "lessonIds": ["a"], "spaces": 1}


class TestRequirements:
    def test_nonempty_rejects_falsy(self):
        for value in (None, "", 0, [], {}):
            assert missing_fields({"f": value}, {"f": Requirement.NONEMPTY}) == ["f"]

    def test_defined_accepts_zero_and_null(self):
        assert missing_fields({"f": 0}, {"f": Requirement.DEFINED}) == []
        assert missing_fields({"f": None}, {"f": Requirement.DEFINED}) == []

    def test_absent_is_missing_for_both(self):
        assert missing_fields({}, {"a": Requirement.NONEMPTY, "b": Requirement.DEFINED}) == ["a", "b"]


class TestValidateOrder:
    def test_complete_order_passes(self):
        validate_order(ORDER)

    def test_missing_phone(self):
        payload = {k: v for k, v in ORDER.items() if k != "phone"}
        with pytest.raises(MissingFieldsError) as exc_info:
            validate_order(payload)
        assert exc_info.value.missing == ["phone"]
        assert exc_info.value.required == list(ORDER_FIELDS)
        assert exc_info.value.status_code == 400

    def test_zero_spaces_rejected(self):
        with pytest.raises(MissingFieldsError):
            validate_order({**ORDER, "spaces": 0})

    def test_negative_spaces_accepted(self):
        validate_order({**ORDER, "spaces": -2})

    def test_empty_lesson_ids_rejected(self):
        with pytest.raises(MissingFieldsError):
            validate_order({**ORDER, "lessonIds": []})

    def test_message_lists_required_fields(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            validate_order({})
        assert exc_info.value.message == "Please provide name, phone, lessonIds, and spaces"


class TestCoerceSpaces:
    @pytest.mark.parametrize(
        "value,expected",
        [(3, 3), (0, 0), (2.7, 2), ("4", 4), (" 6 ", 6), (-1, -1)],
    )
    def test_valid(self, value, expected):
        assert coerce_spaces(value) == expected

    @pytest.mark.parametrize("value", [None, True, "abc", "2.5", [], float("nan")])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            coerce_spaces(value)

    def test_int64_bounds(self):
        assert coerce_spaces(2 ** 63 - 1) == 2 ** 63 - 1
        assert coerce_spaces(str(2 ** 63 - 1)) == 2 ** 63 - 1
        for value in (2 ** 63, str(2 ** 63), 1e20, -(2 ** 63) - 1):
            with pytest.raises(ValueError):
                coerce_spaces(value)


class TestValidateLessonSpaces:
    def test_zero_is_valid(self):
        assert validate_lesson_spaces({"spaces": 0}) == 0

    def test_missing(self):
        with pytest.raises(InvalidSpacesError):
            validate_lesson_spaces({})

    def test_negative(self):
        with pytest.raises(InvalidSpacesError):
            validate_lesson_spaces({"spaces": -1})

    def test_negative_fraction(self):
        with pytest.raises(InvalidSpacesError):
            validate_lesson_spaces({"spaces": -0.5})

    def test_null(self):
        with pytest.raises(InvalidSpacesError):
            validate_lesson_spaces({"spaces": None})

    def test_numeric_string(self):
        assert validate_lesson_spaces({"spaces": "7"}) == 7
