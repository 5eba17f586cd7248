"""Declared validation rules for request payloads.

Two requirement kinds exist and each field picks one deliberately:

- ``NONEMPTY``: absent, null, empty string, zero and empty collections all
  count as missing. Used for order creation.
- ``DEFINED``: only an absent field is missing, so ``0`` passes. Used for the
  lesson spaces update.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Dict, List, Mapping

from afterschool.exceptions import InvalidSpacesError, MissingFieldsError


class Requirement(Enum):
    NONEMPTY = "nonempty"
    DEFINED = "defined"


ORDER_FIELDS: Dict[str, Requirement] = {
    "name": Requirement.NONEMPTY,
    "phone": Requirement.NONEMPTY,
    "lessonIds": Requirement.NONEMPTY,
    # Zero spaces is rejected here, unlike the lesson update below.
    "spaces": Requirement.NONEMPTY,
}

# Stored integers are BSON int64.
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

LESSON_SPACES_FIELDS: Dict[str, Requirement] = {
    "spaces": Requirement.DEFINED,
}


def is_satisfied(payload: Mapping[str, Any], field: str, requirement: Requirement) -> bool:
    if field not in payload:
        return False
    if requirement is Requirement.DEFINED:
        return True
    return bool(payload[field])


def missing_fields(
    payload: Mapping[str, Any], rules: Mapping[str, Requirement]
) -> List[str]:
    """Return the fields in ``rules`` that ``payload`` fails, in rule order."""
    return [f for f, req in rules.items() if not is_satisfied(payload, f, req)]


def validate_order(payload: Mapping[str, Any]) -> None:
    missing = missing_fields(payload, ORDER_FIELDS)
    if missing:
        raise MissingFieldsError(required=list(ORDER_FIELDS), missing=missing)


def coerce_spaces(value: Any) -> int:
    """Coerce a spaces value to an int, raising ValueError if impossible."""
    if value is None or isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"not a finite number: {value!r}")
        number = math.floor(value)
    elif isinstance(value, str):
        number = int(value.strip())
    else:
        raise ValueError(f"not a number: {value!r}")
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError(f"out of range: {value!r}")
    return number


def validate_lesson_spaces(payload: Mapping[str, Any]) -> int:
    """Return the coerced spaces value, or raise InvalidSpacesError."""
    if missing_fields(payload, LESSON_SPACES_FIELDS):
        raise InvalidSpacesError()
    try:
        spaces = coerce_spaces(payload["spaces"])
    except ValueError:
        raise InvalidSpacesError() from None
    if spaces < 0:
        raise InvalidSpacesError()
    return spaces
