"""Core domain models for outbound log events."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import PurePath

from logship.core.errors import DeliveryError
from logship.core.normalize import NormalizedValue

# Directory names after which a source path is considered project-relative
_SOURCE_ROOTS = ("src", "site-packages")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def concise_source_path(path: str) -> str:
    """Trim a source path to the part after its last source root.

    ``/home/app/src/pkg/mod.py`` becomes ``pkg/mod.py``. Paths without a
    ``src`` or ``site-packages`` component are returned unchanged.
    """
    parts = PurePath(path).parts
    for index in range(len(parts) - 1, -1, -1):
        if parts[index] in _SOURCE_ROOTS and index < len(parts) - 1:
            return "/".join(parts[index + 1 :])
    return path


@dataclass(frozen=True)
class SourceLocation:
    """Call site of a log statement.

    Attributes:
        file: Source file path.
        function: Name of the calling function.
        line: Line number, non-negative.
    """

    file: str
    function: str
    line: int


@dataclass(frozen=True)
class LogEvent:
    """A single log event ready to be encoded.

    Attributes:
        label: Label of the handler that produced the event.
        level: Lowercase severity name.
        message: Rendered log message.
        location: Optional call site.
        metadata: Normalized metadata, or None when there is none.
        timestamp: Creation time (aware, UTC).
    """

    label: str
    level: str
    message: str
    location: SourceLocation | None = None
    metadata: Mapping[str, NormalizedValue] | None = None
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class SendResult:
    """Outcome of one delivery attempt.

    Attributes:
        error: The failure, or None on success.
    """

    error: DeliveryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
