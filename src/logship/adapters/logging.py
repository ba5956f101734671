"""Python logging handler adapters that ship log records over HTTP.

These handlers bridge the standard library logging module to a
TransportPort. Every accepted record becomes one JSON POST; delivery runs
in the background and failures never reach the logging call site.
"""

import logging
import traceback
import warnings
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from logship.adapters.transport import get_default_transport
from logship.core.config import ShippingConfig
from logship.core.encoding.payload import encode_event
from logship.core.errors import (
    ReservedMetadataKeyWarning,
    SerializationError,
    TransportError,
)
from logship.core.levels import Level
from logship.core.metadata import MetadataValue, to_metadata, to_metadata_value
from logship.core.models import LogEvent, SendResult, SourceLocation, concise_source_path
from logship.core.normalize import (
    RESERVED_KEYS,
    normalize_metadata,
    reserved_key_collisions,
)
from logship.core.ports import TransportPort

logger = logging.getLogger(__name__)

ContextProvider = Callable[[], Mapping[str, Any]]

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Never shipped: the handler's own diagnostics and HTTP client request logs
_INTERNAL_LOGGERS = frozenset({"logship", "httpx", "httpcore"})


class ShippingHandler(logging.Handler):
    """Base handler that turns log calls into remote JSON deliveries.

    Subclasses define the payload shape through ``build_event`` and
    ``encode``. Send decisions use the process-wide ``default_config`` of
    the handler type unless a config is injected; ``log_level`` is kept for
    callers that inspect it but does not gate sending.
    """

    default_config: ClassVar[ShippingConfig] = ShippingConfig()
    reserved_keys: ClassVar[frozenset[str]] = RESERVED_KEYS

    def __init__(
        self,
        label: str,
        url: str,
        *,
        transport: TransportPort | None = None,
        config: ShippingConfig | None = None,
        context_provider: ContextProvider | None = None,
        log_level: Level | int | str = Level.INFO,
    ) -> None:
        """Initialize the handler.

        Args:
            label: Label identifying the logger or service.
            url: HTTP(S) endpoint receiving the payloads.
            transport: Transport adapter. Defaults to the shared httpx transport.
            config: Settings handle. Defaults to the handler type's
                ``default_config``.
            context_provider: Callable returning context metadata merged
                under per-call metadata, e.g. ``get_log_context``.
            log_level: Per-instance level.
        """
        super().__init__()
        self.label = label
        self.url = url
        self.log_level = Level.coerce(log_level)
        self.metadata: dict[str, MetadataValue] = {}
        self._transport = transport
        self._config = config
        self._context_provider = context_provider

    @property
    def config(self) -> ShippingConfig:
        return self._config or type(self).default_config

    @property
    def transport(self) -> TransportPort:
        if self._transport is None:
            self._transport = get_default_transport()
        return self._transport

    def __getitem__(self, key: str) -> MetadataValue:
        return self.metadata[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.metadata[key] = to_metadata_value(value)

    def __delitem__(self, key: str) -> None:
        del self.metadata[key]

    def __contains__(self, key: object) -> bool:
        return key in self.metadata

    def request_headers(self) -> Mapping[str, str]:
        """Extra headers sent with every request."""
        return {}

    def build_event(
        self,
        level: Level,
        message: str,
        metadata: Mapping[str, MetadataValue],
        location: SourceLocation | None,
    ) -> LogEvent:
        raise NotImplementedError

    def encode(self, event: LogEvent) -> bytes:
        raise NotImplementedError

    def _merge_metadata(
        self, metadata: Mapping[str, Any] | None
    ) -> dict[str, MetadataValue]:
        merged = dict(self.metadata)
        if self._context_provider is not None:
            merged.update(to_metadata(self._context_provider()))
        merged.update(to_metadata(metadata))
        return merged

    def _check_reserved(self, metadata: Mapping[str, MetadataValue]) -> None:
        collisions = self.reserved_keys.intersection(
            reserved_key_collisions(metadata)
        )
        if collisions:
            warnings.warn(
                f"Metadata keys {sorted(collisions)} are reserved by the log "
                "payload and will be overridden",
                ReservedMetadataKeyWarning,
                stacklevel=3,
            )

    def log(
        self,
        level: Level | int | str,
        message: Any,
        metadata: Mapping[str, Any] | None = None,
        file: str = "",
        function: str = "",
        line: int = 0,
    ) -> None:
        """Ship one log event unless it is below the global threshold.

        Returns as soon as the request is handed to the transport. Failures
        are reported to the diagnostic logger and the send observer, never
        raised.

        Args:
            level: Severity of the event.
            message: Log message; converted with ``str()``.
            metadata: Per-call metadata; wins over handler metadata.
            file: Source file of the call site.
            function: Function name of the call site.
            line: Line number of the call site.
        """
        level = Level.coerce(level)
        if level < self.config.threshold:
            return

        merged = self._merge_metadata(metadata)
        if __debug__:
            self._check_reserved(merged)

        location = None
        if file or function:
            location = SourceLocation(concise_source_path(file), function, line)

        try:
            event = self.build_event(level, str(message), merged, location)
            payload = self.encode(event)
        except SerializationError as exc:
            self._complete(SendResult(error=exc))
            return
        except Exception as exc:
            error = SerializationError(f"Cannot build log event: {exc}")
            error.__cause__ = exc
            self._complete(SendResult(error=error))
            return

        try:
            self.transport.send(
                payload, self.url, self.request_headers(), completion=self._complete
            )
        except Exception as exc:
            error = TransportError(f"Cannot schedule log delivery: {exc}")
            error.__cause__ = exc
            self._complete(SendResult(error=error))

    def _complete(self, result: SendResult) -> None:
        if not result.ok:
            logger.warning("Failed to send log payload to %s: %s", self.url, result.error)
        observer = self.config.send_observer
        if observer is None:
            return
        try:
            observer(result)
        except Exception:
            logger.exception("Send observer raised while handling a log delivery result")

    def _record_metadata(self, record: logging.LogRecord) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_LOGRECORD_ATTRS
        }

        # Extract exception info if present
        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                metadata["exc_type"] = exc_type.__name__
            if exc_value is not None:
                metadata["exc_message"] = str(exc_value)
            if exc_tb is not None:
                metadata["exc_traceback"] = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )
        return metadata

    def emit(self, record: logging.LogRecord) -> None:
        """Ship a log record.

        Args:
            record: The log record to emit.
        """
        if record.name.partition(".")[0] in _INTERNAL_LOGGERS:
            return
        try:
            level = Level.from_logging(record.levelno)
            if level < self.config.threshold:
                return
            self.log(
                level,
                record.getMessage(),
                self._record_metadata(record),
                record.pathname,
                record.funcName or "",
                record.lineno,
            )
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        """Wait for in-flight deliveries to finish."""
        if self._transport is not None:
            self._transport.flush()


class HttpLogHandler(ShippingHandler):
    """Logging handler that POSTs JSON events to a generic log collector.

    Metadata is normalized and flattened into the top level of the payload
    next to ``label``, ``level``, ``message``, ``sourceLocation`` and
    ``timestamp``.

    Example:
        ```python
        from logship import HttpLogHandler

        handler = HttpLogHandler(
            "billing", "https://logs.example.com/ingest",
            headers={"Authorization": "Bearer ..."},
        )
        logging.getLogger().addHandler(handler)
        ```
    """

    default_config: ClassVar[ShippingConfig] = ShippingConfig()

    def __init__(
        self,
        label: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(label, url, **kwargs)
        self.headers: dict[str, str] = dict(headers or {})

    def request_headers(self) -> Mapping[str, str]:
        return self.headers

    def build_event(
        self,
        level: Level,
        message: str,
        metadata: Mapping[str, MetadataValue],
        location: SourceLocation | None,
    ) -> LogEvent:
        return LogEvent(
            label=self.label,
            level=level.wire_name,
            message=message,
            location=location,
            metadata=normalize_metadata(metadata) if metadata else None,
        )

    def encode(self, event: LogEvent) -> bytes:
        return encode_event(event)


__all__ = [
    "ContextProvider",
    "HttpLogHandler",
    "ShippingHandler",
]
