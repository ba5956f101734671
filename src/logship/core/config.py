"""Process-scoped configuration shared by handlers of one type."""

from dataclasses import dataclass

from logship.core.levels import Level
from logship.core.ports import SendObserver


@dataclass
class ShippingConfig:
    """Settings read on every log call.

    One instance is shared by all handlers of a type. Write it before
    logging starts (typically in application or test setup); it is not
    safe to change while other threads are logging.

    Attributes:
        threshold: Minimum level that is sent remotely.
        send_observer: Called with every SendResult, for tests and diagnostics.
    """

    threshold: Level = Level.INFO
    send_observer: SendObserver | None = None

    def reset(self) -> None:
        """Restore the defaults."""
        self.threshold = Level.INFO
        self.send_observer = None
