# oauth_server/shared/middleware/__init__.py

from oauth_server.shared.middleware.exception_middleware import AsyncExceptionMiddleware
from oauth_server.shared.middleware.logging_middleware import AsyncRequestLoggingMiddleware

__all__ = [
    "AsyncExceptionMiddleware",
    "AsyncRequestLoggingMiddleware",
]
