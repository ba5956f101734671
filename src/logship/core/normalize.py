"""Normalization of metadata trees into JSON-safe values."""

import base64
import math
import numbers
from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from logship.core.metadata import (
    Described,
    MetadataList,
    MetadataMap,
    MetadataValue,
    Text,
)

NormalizedValue = (
    None
    | bool
    | int
    | float
    | str
    | list["NormalizedValue"]
    | dict[str, "NormalizedValue"]
)

# Keys written by the payload envelope; metadata must not define them.
RESERVED_KEYS = frozenset(
    {
        "label",
        "level",
        "location",
        "message",
        "severity",
        "sourceLocation",
        "timestamp",
    }
)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ``yyyy-MM-ddTHH:mm:ss.sssZ`` in UTC.

    Naive datetimes are taken to already be in UTC, so the output never
    depends on the host time zone.

    Args:
        value: The datetime to format.

    Returns:
        ISO-8601 string with millisecond precision and a ``Z`` suffix.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def _describe(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        pass
    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__}>"


def _normalize_described(value: Any) -> NormalizedValue:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Rational) and value.denominator == 1:
        return int(value.numerator)
    if isinstance(value, numbers.Real):
        number = float(value)
        return number if math.isfinite(number) else _describe(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            return str(value)
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return format_timestamp(datetime(value.year, value.month, value.day))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return _describe(value)


def normalize(value: MetadataValue) -> NormalizedValue:
    """Convert a metadata tree into a JSON-safe value tree.

    Never raises: leaves without a JSON form fall back to their string
    description, then to their repr, then to a placeholder naming the type.

    Args:
        value: Root of the metadata tree.

    Returns:
        Nested ``None``/bool/int/float/str/list/dict values.
    """
    if isinstance(value, Text):
        return value.value
    if isinstance(value, MetadataList):
        return [normalize(item) for item in value.items]
    if isinstance(value, MetadataMap):
        return {key: normalize(item) for key, item in value.entries.items()}
    if isinstance(value, Described):
        try:
            return _normalize_described(value.value)
        except Exception:
            return _describe(value.value)
    return _describe(value)


def normalize_metadata(
    metadata: Mapping[str, MetadataValue],
) -> dict[str, NormalizedValue]:
    """Normalize every entry of a flat metadata mapping."""
    return {key: normalize(value) for key, value in metadata.items()}


def reserved_key_collisions(metadata: Mapping[str, Any]) -> frozenset[str]:
    """Return the metadata keys that clash with envelope fields."""
    return RESERVED_KEYS.intersection(metadata)
