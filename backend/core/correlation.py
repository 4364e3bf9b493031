"""
Correlation ID generation and request-scoped context.

A correlation ID ties together the log lines, the Sentry event and the error
body returned to a client for a single request.
"""

import uuid
from contextvars import ContextVar

# Context variable for request-scoped correlation ID
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """
    Generate a short, unique correlation ID.

    Returns:
        8-character hexadecimal string (e.g. "abc123de").
    """
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Return the current request's correlation ID, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Bind a correlation ID to the current context.

    Args:
        correlation_id: The correlation ID to set for this request.
    """
    correlation_id_var.set(correlation_id)


def ensure_correlation_id() -> str:
    """
    Return the bound correlation ID, binding a fresh one when none is set.

    Used by handlers that run outside the middleware (e.g. WebSocket routes).
    """
    correlation_id = get_correlation_id()
    if not correlation_id:
        correlation_id = generate_correlation_id()
        set_correlation_id(correlation_id)
    return correlation_id
