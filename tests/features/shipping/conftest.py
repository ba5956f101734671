"""BDD step definitions for log delivery features."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from logship.adapters.logging import HttpLogHandler, ShippingHandler
from logship.adapters.slack import SlackLogHandler
from logship.core.errors import ErrorStatusCode
from logship.core.levels import Level
from logship.core.models import SendResult
from tests.fakes import RecordingTransport


@dataclass
class DeliveryScenarioContext:
    """Shared state between steps in a delivery scenario."""

    transport: RecordingTransport = field(default_factory=RecordingTransport)
    handler: ShippingHandler | None = None
    results: list[SendResult] = field(default_factory=list)

    @property
    def body(self) -> dict[str, Any]:
        return self.transport.requests[0].body


@pytest.fixture
def ctx() -> DeliveryScenarioContext:
    """Fresh scenario context observing both handler types."""
    context = DeliveryScenarioContext()
    HttpLogHandler.default_config.send_observer = context.results.append
    SlackLogHandler.default_config.send_observer = context.results.append
    return context


# === Given ===


@given("a recording transport")
def given_recording_transport(ctx: DeliveryScenarioContext) -> None:
    ctx.transport = RecordingTransport()


@given(parsers.parse('an HTTP log handler labelled "{label}" posting to "{url}"'))
def given_http_handler(ctx: DeliveryScenarioContext, label: str, url: str) -> None:
    ctx.handler = HttpLogHandler(label, url, transport=ctx.transport)


@given(parsers.parse('a Slack log handler labelled "{label}" posting to "{url}"'))
def given_slack_handler(ctx: DeliveryScenarioContext, label: str, url: str) -> None:
    ctx.handler = SlackLogHandler(label, url, transport=ctx.transport)


@given(parsers.parse('the HTTP threshold is "{level}"'))
def given_http_threshold(level: str) -> None:
    HttpLogHandler.default_config.threshold = Level.coerce(level)


@given(parsers.parse('the collector answers {status:d} with "{body}"'))
def given_collector_error(ctx: DeliveryScenarioContext, status: int, body: str) -> None:
    ctx.transport.result = SendResult(error=ErrorStatusCode(status, body))


# === When ===


@when(
    parsers.parse(
        'the handler logs "{message}" at "{level}" for user "{user}" with {retries:d} retries'
    )
)
def when_log_with_user(
    ctx: DeliveryScenarioContext, message: str, level: str, user: str, retries: int
) -> None:
    assert ctx.handler is not None
    ctx.handler.log(level, message, {"user": user, "retries": retries})


@when(
    parsers.parse(
        'the handler logs "{message}" at "{level}" with count {count:d} and name "{name}"'
    )
)
def when_log_with_count(
    ctx: DeliveryScenarioContext, message: str, level: str, count: int, name: str
) -> None:
    assert ctx.handler is not None
    ctx.handler.log(level, message, {"count": count, "name": name})


# === Then ===


@then(parsers.parse('exactly {count:d} request is posted to "{url}"'))
def then_requests_posted(ctx: DeliveryScenarioContext, count: int, url: str) -> None:
    assert len(ctx.transport.requests) == count
    assert all(request.url == url for request in ctx.transport.requests)


@then("no request is posted")
def then_no_request(ctx: DeliveryScenarioContext) -> None:
    assert ctx.transport.requests == []


@then(parsers.parse('the payload field "{key}" is "{value}"'))
def then_payload_string(ctx: DeliveryScenarioContext, key: str, value: str) -> None:
    assert ctx.body[key] == value


@then(parsers.parse('the payload field "{key}" is the number {value:d}'))
def then_payload_number(ctx: DeliveryScenarioContext, key: str, value: int) -> None:
    assert ctx.body[key] == value


@then(parsers.parse('the payload has a "{key}" field'))
def then_payload_has_field(ctx: DeliveryScenarioContext, key: str) -> None:
    assert key in ctx.body


@then(parsers.parse("the send observer saw {count:d} success"))
def then_observer_success(ctx: DeliveryScenarioContext, count: int) -> None:
    assert len(ctx.results) == count
    assert all(result.ok for result in ctx.results)


@then("the send observer was never called")
def then_observer_not_called(ctx: DeliveryScenarioContext) -> None:
    assert ctx.results == []


@then(parsers.parse('the send observer saw status {status:d} with body "{body}"'))
def then_observer_status(ctx: DeliveryScenarioContext, status: int, body: str) -> None:
    error = ctx.results[0].error
    assert isinstance(error, ErrorStatusCode)
    assert error.status_code == status
    assert error.body == body


@then(parsers.parse('the Slack metadata only contains name "{name}"'))
def then_slack_metadata(ctx: DeliveryScenarioContext, name: str) -> None:
    assert ctx.body["metadata"] == {"name": name}
