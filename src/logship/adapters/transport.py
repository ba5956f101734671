"""httpx transport adapter.

Payloads are POSTed from a private asyncio event loop running on a daemon
thread, so ``send()`` returns as soon as the request is scheduled.
"""

import asyncio
import atexit
import concurrent.futures
import logging
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Future

import httpx

from logship.core.errors import (
    ErrorStatusCode,
    InvalidResponseType,
    TransportError,
)
from logship.core.models import SendResult
from logship.core.ports import SendObserver

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

_CONTENT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def build_headers(headers: Mapping[str, str] | None = None) -> httpx.Headers:
    """Merge caller headers with the fixed JSON content headers.

    Caller headers never override ``Content-Type`` or ``Accept``; header
    names compare case-insensitively.
    """
    merged = httpx.Headers(dict(headers or {}))
    for name, value in _CONTENT_HEADERS.items():
        merged[name] = value
    return merged


# httpcore's message when the peer closes before any response bytes arrive
_NO_RESPONSE = "Server disconnected without sending a response"


def _transport_error(exc: Exception) -> SendResult:
    error = TransportError(str(exc) or type(exc).__name__)
    error.__cause__ = exc
    return SendResult(error=error)


async def deliver(
    client: httpx.AsyncClient,
    payload: bytes,
    url: str,
    headers: Mapping[str, str] | None = None,
) -> SendResult:
    """POST a payload once and classify the outcome.

    Connection-level failures take priority over status code inspection. A
    connection closed before any response arrived counts as no response;
    a response that arrived but could not be parsed or decoded is an
    invalid response.

    Args:
        client: Client used for the request.
        payload: JSON request body.
        url: Destination URL.
        headers: Extra request headers.

    Returns:
        SendResult carrying InvalidResponseType, TransportError or
        ErrorStatusCode on failure.
    """
    try:
        response = await client.post(url, content=payload, headers=build_headers(headers))
    except httpx.RemoteProtocolError as exc:
        if str(exc).startswith(_NO_RESPONSE):
            return _transport_error(exc)
        return SendResult(error=InvalidResponseType(str(exc)))
    except httpx.DecodingError as exc:
        return SendResult(error=InvalidResponseType(str(exc)))
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        return _transport_error(exc)

    if not 200 <= response.status_code < 300:
        return SendResult(
            error=ErrorStatusCode(response.status_code, response.text or None)
        )
    return SendResult()


class HttpxTransport:
    """TransportPort implementation backed by ``httpx.AsyncClient``.

    The event loop thread and client are created on the first send. Sends
    are independent: they may complete, and fire their completion
    callbacks, in any order.

    Args:
        timeout: Per-request timeout in seconds.
        client_factory: Builds the AsyncClient; called on the loop thread.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._client_factory = client_factory or (
            lambda: httpx.AsyncClient(timeout=timeout)
        )
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._client: httpx.AsyncClient | None = None
        self._pending: dict[Future[SendResult], Future[SendResult]] = {}

    def _ensure_started(self) -> asyncio.AbstractEventLoop:
        """Start the loop thread once."""
        with self._lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever,
                    name="logship-transport",
                    daemon=True,
                )
                thread.start()
                self._loop = loop
                self._thread = thread
            return self._loop

    def _get_client(self) -> httpx.AsyncClient:
        # Only called on the loop thread.
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    async def _deliver(
        self, payload: bytes, url: str, headers: Mapping[str, str]
    ) -> SendResult:
        try:
            return await deliver(self._get_client(), payload, url, headers)
        except Exception as exc:
            logger.debug("Unexpected error while sending log payload", exc_info=True)
            return _transport_error(exc)

    def send(
        self,
        payload: bytes,
        url: str,
        headers: Mapping[str, str],
        completion: SendObserver | None = None,
    ) -> "Future[SendResult]":
        """Schedule a POST and return immediately."""
        loop = self._ensure_started()
        result_future: Future[SendResult] = Future()

        def _done(task_future: "Future[SendResult]") -> None:
            if task_future.cancelled():
                result = SendResult(error=TransportError("request abandoned"))
            else:
                result = task_future.result()
            with self._lock:
                self._pending.pop(result_future, None)
            try:
                if completion is not None:
                    completion(result)
            finally:
                result_future.set_result(result)

        coro = self._deliver(payload, url, dict(headers))
        with self._lock:
            try:
                task = asyncio.run_coroutine_threadsafe(coro, loop)
            except RuntimeError:
                coro.close()
                raise
            self._pending[result_future] = task
        task.add_done_callback(_done)
        return result_future

    def flush(self, timeout: float | None = None) -> None:
        """Wait up to ``timeout`` seconds for in-flight sends to complete."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            concurrent.futures.wait(pending, timeout=timeout)

    def close(self, timeout: float | None = DEFAULT_TIMEOUT) -> None:
        """Flush, close the client and stop the loop thread.

        Sends still in flight after ``timeout`` are cancelled and complete
        with ``TransportError``. A later ``send()`` starts a fresh loop.
        """
        self.flush(timeout)
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None
            abandoned = list(self._pending.values())
        for task in abandoned:
            task.cancel()
        if loop is None:
            return
        if self._client is not None:
            closing = asyncio.run_coroutine_threadsafe(self._client.aclose(), loop)
            try:
                closing.result(timeout)
            except concurrent.futures.TimeoutError:
                logger.warning("Timed out closing the log transport client")
            self._client = None
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout)
        if not loop.is_running():
            loop.close()


_default_transport: HttpxTransport | None = None
_default_lock = threading.Lock()


def get_default_transport() -> HttpxTransport:
    """Return the process-wide transport shared by handlers."""
    global _default_transport
    with _default_lock:
        if _default_transport is None:
            _default_transport = HttpxTransport()
            atexit.register(_default_transport.close, 1.0)
        return _default_transport
