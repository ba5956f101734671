"""Logging handler that posts events to a Slack incoming webhook."""

import json
from collections.abc import Mapping
from typing import Any, ClassVar

from logship.adapters.logging import ShippingHandler
from logship.core.config import ShippingConfig
from logship.core.encoding.payload import encode_slack_event
from logship.core.levels import Level
from logship.core.metadata import MetadataValue, Text
from logship.core.models import LogEvent, SourceLocation
from logship.core.normalize import normalize


def _render(value: MetadataValue) -> str:
    normalized = normalize(value)
    if isinstance(normalized, str):
        return normalized
    return json.dumps(normalized, separators=(",", ":"), ensure_ascii=False)


class SlackLogHandler(ShippingHandler):
    """Logging handler for Slack webhooks.

    Slack renders metadata as chat text, so only string values are sent:
    other values are dropped unless ``coerce_metadata`` is set, in which
    case they are rendered as compact JSON text. Custom headers are not
    supported.
    """

    default_config: ClassVar[ShippingConfig] = ShippingConfig()
    # Metadata is nested under its own key, so nothing collides.
    reserved_keys: ClassVar[frozenset[str]] = frozenset()

    def __init__(
        self,
        label: str,
        url: str,
        *,
        coerce_metadata: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(label, url, **kwargs)
        self.coerce_metadata = coerce_metadata

    def build_event(
        self,
        level: Level,
        message: str,
        metadata: Mapping[str, MetadataValue],
        location: SourceLocation | None,
    ) -> LogEvent:
        flattened: dict[str, str] = {}
        for key, value in metadata.items():
            if isinstance(value, Text):
                flattened[key] = value.value
            elif self.coerce_metadata:
                flattened[key] = _render(value)
        return LogEvent(
            label=self.label,
            level=level.wire_name,
            message=message,
            location=location,
            metadata=flattened,
        )

    def encode(self, event: LogEvent) -> bytes:
        return encode_slack_event(event)
