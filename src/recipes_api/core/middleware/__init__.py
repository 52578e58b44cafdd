"""HTTP middleware components."""

from recipes_api.core.middleware.logging import LoggingMiddleware
from recipes_api.core.middleware.request_id import RequestIDMiddleware
from recipes_api.core.middleware.security_headers import SecurityHeadersMiddleware


__all__ = [
    "LoggingMiddleware",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
]
