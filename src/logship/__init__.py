"""logship: ship Python log records as JSON to HTTP collectors and Slack."""

from logship.adapters.logging import ContextProvider, HttpLogHandler, ShippingHandler
from logship.adapters.logging_context import (
    clear_log_context,
    get_log_context,
    set_log_context,
    update_log_context,
)
from logship.adapters.slack import SlackLogHandler
from logship.adapters.transport import HttpxTransport, get_default_transport
from logship.core.config import ShippingConfig
from logship.core.errors import (
    DeliveryError,
    ErrorStatusCode,
    InvalidResponseType,
    ReservedMetadataKeyWarning,
    SerializationError,
    TransportError,
)
from logship.core.levels import Level
from logship.core.metadata import (
    Described,
    MetadataList,
    MetadataMap,
    MetadataValue,
    Text,
    to_metadata_value,
)
from logship.core.models import LogEvent, SendResult, SourceLocation
from logship.core.normalize import normalize
from logship.core.ports import TransportPort

__all__ = [
    "ContextProvider",
    "DeliveryError",
    "Described",
    "ErrorStatusCode",
    "HttpLogHandler",
    "HttpxTransport",
    "InvalidResponseType",
    "Level",
    "LogEvent",
    "MetadataList",
    "MetadataMap",
    "MetadataValue",
    "ReservedMetadataKeyWarning",
    "SendResult",
    "SerializationError",
    "ShippingConfig",
    "ShippingHandler",
    "SlackLogHandler",
    "SourceLocation",
    "Text",
    "TransportError",
    "TransportPort",
    "clear_log_context",
    "get_default_transport",
    "get_log_context",
    "normalize",
    "set_log_context",
    "to_metadata_value",
    "update_log_context",
]
