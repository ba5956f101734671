"""JSON encoders for outbound log payloads."""

import json
from typing import Any

from logship.core.errors import SerializationError
from logship.core.models import LogEvent
from logship.core.normalize import RESERVED_KEYS, format_timestamp


def event_to_dict(event: LogEvent) -> dict[str, Any]:
    """Build the generic collector body for an event.

    Metadata keys are flattened into the top level. Envelope fields always
    win; reserved keys found in metadata are dropped.
    """
    body: dict[str, Any] = {
        key: value
        for key, value in (event.metadata or {}).items()
        if key not in RESERVED_KEYS
    }
    body["label"] = event.label
    body["level"] = event.level
    body["message"] = event.message
    if event.location is not None:
        body["sourceLocation"] = {
            "file": event.location.file,
            "function": event.location.function,
            "line": event.location.line,
        }
    body["timestamp"] = format_timestamp(event.timestamp)
    return body


def slack_event_to_dict(event: LogEvent) -> dict[str, Any]:
    """Build the Slack webhook body for an event."""
    return {
        "level": event.level,
        "message": event.message,
        "metadata": dict(event.metadata or {}),
    }


def _dumps(obj: dict[str, Any]) -> bytes:
    try:
        text = json.dumps(
            obj, allow_nan=False, ensure_ascii=False, separators=(",", ":")
        )
        return text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot encode log event as JSON: {exc}") from exc


def encode_event(event: LogEvent) -> bytes:
    """Encode an event for a generic JSON collector.

    Raises:
        SerializationError: If the body is not representable as JSON.
    """
    return _dumps(event_to_dict(event))


def encode_slack_event(event: LogEvent) -> bytes:
    """Encode an event for a Slack incoming webhook.

    Raises:
        SerializationError: If the body is not representable as JSON.
    """
    return _dumps(slack_event_to_dict(event))
