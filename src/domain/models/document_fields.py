"""Field readers used by the record ``from_document`` factories.

Every persisted record is decoded through these helpers so that the
presence and type of each field is checked exactly once, at the store
boundary. A failed check raises MalformedDocumentError naming the
record kind and field.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from src.domain.errors.store import MalformedDocumentError


def require_mapping(data: Any, kind: str, field: str | None = None) -> Mapping[str, Any]:
    """Return ``data`` (or ``data[field]``) if it is a mapping.

    Args:
        data: The raw document or parent map.
        kind: Record kind for error messages.
        field: Optional key to descend into.

    Raises:
        MalformedDocumentError: If the value is missing or not a mapping.
    """
    value = data if field is None else _get(data, kind, field)
    if not isinstance(value, Mapping):
        label = field or "document"
        raise MalformedDocumentError(kind, f"'{label}' must be a map")
    return value


def require_str(data: Mapping[str, Any], kind: str, field: str) -> str:
    """Return a required string field."""
    value = _get(data, kind, field)
    if not isinstance(value, str):
        raise MalformedDocumentError(kind, f"'{field}' must be a string")
    return value


def optional_str(data: Mapping[str, Any], kind: str, field: str) -> str:
    """Return a string field, defaulting to the empty string when absent."""
    value = data.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedDocumentError(kind, f"'{field}' must be a string")
    return value


def optional_bool(data: Mapping[str, Any], kind: str, field: str) -> bool:
    """Return a boolean field, defaulting to False when absent."""
    value = data.get(field, False)
    if not isinstance(value, bool):
        raise MalformedDocumentError(kind, f"'{field}' must be a boolean")
    return value


def optional_non_negative_int(data: Mapping[str, Any], kind: str, field: str) -> int:
    """Return a non-negative integer field, defaulting to 0 when absent.

    Whole floats are accepted because some document databases store every
    number as a double.
    """
    value = data.get(field, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedDocumentError(kind, f"'{field}' must be a number")
    if isinstance(value, float) and not value.is_integer():
        raise MalformedDocumentError(kind, f"'{field}' must be a whole number")
    if value < 0:
        raise MalformedDocumentError(kind, f"'{field}' must not be negative")
    return int(value)


def optional_str_list(data: Mapping[str, Any], kind: str, field: str) -> tuple[str, ...]:
    """Return a list-of-strings field as a tuple, empty when absent."""
    value = data.get(field)
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise MalformedDocumentError(kind, f"'{field}' must be a list")
    if not all(isinstance(item, str) for item in value):
        raise MalformedDocumentError(kind, f"'{field}' must only contain strings")
    return tuple(value)


def optional_timestamp(data: Mapping[str, Any], kind: str, field: str) -> datetime | None:
    """Return a timestamp field as an aware UTC datetime, or None.

    Accepts aware or naive datetimes (naive is taken as UTC) and epoch
    milliseconds, the two encodings document stores commonly hand back.
    """
    value = data.get(field)
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    raise MalformedDocumentError(kind, f"'{field}' must be a timestamp")


def _get(data: Any, kind: str, field: str) -> Any:
    if not isinstance(data, Mapping) or field not in data:
        raise MalformedDocumentError(kind, f"missing field '{field}'")
    return data[field]
