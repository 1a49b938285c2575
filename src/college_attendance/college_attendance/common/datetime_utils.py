from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from ..core.exceptions import ValidationError

DateLike = Union[date, datetime, str]


def normalize_date(value: DateLike, field_name: str = "date") -> date:
    """Strip the time of day and return the calendar date the client sent.

    Accepts a date, a datetime or an ISO-8601 string. A trailing `Z` or a UTC
    offset is parsed but not applied, so every timestamp written for the same
    day maps to the same key regardless of the client's time zone.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValidationError(f"Invalid {field_name} format. Please provide a valid date.")


def normalize_range(
    start: Optional[DateLike],
    end: Optional[DateLike],
) -> tuple[Optional[date], Optional[date]]:
    """Normalize an optional inclusive [start, end] range."""

    errors: list[str] = []
    start_d = end_d = None
    if start:
        try:
            start_d = normalize_date(start, "startDate")
        except ValidationError as e:
            errors.extend(e.errors)
    if end:
        try:
            end_d = normalize_date(end, "endDate")
        except ValidationError as e:
            errors.extend(e.errors)
    if errors:
        raise ValidationError(errors)
    if start_d and end_d and start_d > end_d:
        raise ValidationError("startDate must not be after endDate")
    return start_d, end_d


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().replace(microsecond=0)
