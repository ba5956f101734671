"""Context-local log metadata.

Values set here follow the current thread or asyncio task, which makes them
suitable for request-scoped fields such as request IDs. Pass
``get_log_context`` as a handler's ``context_provider`` to include them in
every shipped event.
"""

from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any] | None] = ContextVar(
    "logship_log_context", default=None
)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current context values."""
    return dict(_log_context.get() or {})


def set_log_context(**values: Any) -> None:
    """Replace the current context values."""
    _log_context.set(dict(values))


def update_log_context(**values: Any) -> None:
    """Add or overwrite context values, keeping the others."""
    _log_context.set({**(_log_context.get() or {}), **values})


def clear_log_context() -> None:
    """Remove all context values."""
    _log_context.set(None)
