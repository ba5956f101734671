"""Port interfaces for transport adapters.

Handlers depend only on this protocol, never on a concrete HTTP client.
"""

from collections.abc import Callable, Mapping
from concurrent.futures import Future
from typing import Protocol, runtime_checkable

from logship.core.models import SendResult

SendObserver = Callable[[SendResult], None]


@runtime_checkable
class TransportPort(Protocol):
    """Port for delivering encoded log payloads.

    Adapters implementing this protocol POST a payload once, without retry,
    and report the outcome asynchronously.
    Examples: HttpxTransport, and recording fakes in tests.
    """

    def send(
        self,
        payload: bytes,
        url: str,
        headers: Mapping[str, str],
        completion: SendObserver | None = None,
    ) -> "Future[SendResult]":
        """Start sending a payload and return without waiting.

        Args:
            payload: JSON-encoded request body.
            url: Destination URL.
            headers: Extra request headers.
            completion: Called once with the outcome when the attempt ends.

        Returns:
            Future resolved with the same SendResult passed to completion.
        """
        ...

    def flush(self, timeout: float | None = None) -> None:
        """Wait for in-flight sends to finish."""
        ...
