"""Request context using contextvars.

Async-safe storage for request-scoped values read outside the request
handler: the request id and the caller's user id, both stamped onto log
records by RequestContextFilter. Cache keys are built from
DashboardQuery.user_id, not from this context.
"""

from contextvars import ContextVar

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)


def set_request_id(request_id: str | None) -> None:
    """Set the request id for the current task."""
    _request_id.set(request_id)


def get_request_id() -> str | None:
    """Return the current request id, or None outside a request."""
    return _request_id.get()


def set_current_user_id(user_id: str | None) -> None:
    """Set the caller's user id for the current task."""
    _current_user_id.set(user_id)


def get_current_user_id() -> str | None:
    """Return the caller's user id, or None when anonymous."""
    return _current_user_id.get()
