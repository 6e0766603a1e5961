"""Raw ASGI middleware: request id and request timeout."""

from finboard.middleware.request_id import RequestIDMiddleware
from finboard.middleware.timeout import TimeoutMiddleware

__all__ = ["RequestIDMiddleware", "TimeoutMiddleware"]
