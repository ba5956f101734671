"""Payload encoders."""

from logship.core.encoding.payload import (
    encode_event,
    encode_slack_event,
    event_to_dict,
    slack_event_to_dict,
)

__all__ = [
    "encode_event",
    "encode_slack_event",
    "event_to_dict",
    "slack_event_to_dict",
]
