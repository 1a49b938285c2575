from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def id_error(value: Any, field_name: str) -> Optional[str]:
    """Return the message for a malformed id, or None when it is usable."""

    if value is None or value == "":
        return f"{field_name} is required"
    if isinstance(value, bool):
        return f"Invalid {field_name} format"
    if isinstance(value, int):
        return None if value > 0 else f"Invalid {field_name} format"
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit() and int(value) > 0:
        return None
    return f"Invalid {field_name} format"


def parse_id(value: Any, field_name: str) -> int:
    err = id_error(value, field_name)
    if err:
        raise ValidationError(err)
    return int(value)


def parse_optional_id(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return parse_id(value, field_name)


def require_ids(**fields: Any) -> dict[str, int]:
    """Validate several ids at once, reporting every malformed one.

    Keyword names are used verbatim in the messages (e.g. batchId=...).
    """

    errors: list[str] = []
    for name, value in fields.items():
        err = id_error(value, name)
        if err:
            errors.append(err)
    if errors:
        raise ValidationError(errors)
    return {name: int(value) for name, value in fields.items()}


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
