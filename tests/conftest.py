"""Shared test fixtures for all test modules."""

from collections.abc import Iterator

import pytest

from logship.adapters.logging import HttpLogHandler
from logship.adapters.logging_context import clear_log_context
from logship.adapters.slack import SlackLogHandler
from logship.core.models import SendResult
from tests.fakes import RecordingTransport


@pytest.fixture(autouse=True)
def reset_shipping_config() -> Iterator[None]:
    """Restore process-wide handler settings around every test."""
    HttpLogHandler.default_config.reset()
    SlackLogHandler.default_config.reset()
    clear_log_context()
    yield
    HttpLogHandler.default_config.reset()
    SlackLogHandler.default_config.reset()
    clear_log_context()


@pytest.fixture
def transport() -> RecordingTransport:
    """Transport fake that always succeeds."""
    return RecordingTransport()


@pytest.fixture
def send_results() -> list[SendResult]:
    """Results seen by the HTTP handler's send observer."""
    results: list[SendResult] = []
    HttpLogHandler.default_config.send_observer = results.append
    return results


@pytest.fixture
def http_handler(transport: RecordingTransport) -> HttpLogHandler:
    """HTTP handler wired to the recording transport."""
    return HttpLogHandler(
        "svc", "https://collector.example/logs", transport=transport
    )
