from __future__ import annotations

from datetime import date, datetime

import pytest

from src.college_attendance.college_attendance.common.datetime_utils import normalize_date, normalize_range
from src.college_attendance.college_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "raw",
    [
        "2025-11-09",
        "2025-11-09T00:00:00Z",
        "2025-11-09T10:15:30.000Z",
        "2025-11-09T23:59:59+05:30",
        "2025-11-09T00:30:00-08:00",
        " 2025-11-09 ",
    ],
)
def test_every_timestamp_of_a_day_maps_to_the_same_date(raw):
    assert normalize_date(raw) == date(2025, 11, 9)


def test_datetime_and_date_objects_pass_through():
    assert normalize_date(datetime(2025, 11, 9, 18, 45)) == date(2025, 11, 9)
    assert normalize_date(date(2025, 11, 9)) == date(2025, 11, 9)


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_missing_date_is_required(raw):
    with pytest.raises(ValidationError) as exc:
        normalize_date(raw)
    assert exc.value.errors == ["date is required"]


@pytest.mark.parametrize("raw", ["not-a-date", "2025-13-01", "2025-02-30", "09/11/2025"])
def test_unparseable_date_is_rejected(raw):
    with pytest.raises(ValidationError) as exc:
        normalize_date(raw)
    assert exc.value.errors == ["Invalid date format. Please provide a valid date."]


def test_range_is_optional_on_both_sides():
    assert normalize_range(None, None) == (None, None)
    assert normalize_range("2025-11-01", None) == (date(2025, 11, 1), None)


def test_range_collects_both_bad_bounds():
    with pytest.raises(ValidationError) as exc:
        normalize_range("bad", "worse")
    assert exc.value.errors == [
        "Invalid startDate format. Please provide a valid date.",
        "Invalid endDate format. Please provide a valid date.",
    ]


def test_inverted_range_is_rejected():
    with pytest.raises(ValidationError):
        normalize_range("2025-11-10", "2025-11-01")
