# oauth_server/shared/middleware/logging_middleware.py

"""
Middleware for HTTP request logging.

Credentials can travel in the query string (the access_token parameter),
so their values are masked before anything is logged.
"""

import logging
import time
from typing import Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from oauth_server.adapters.configuration.config import settings

# Configure logger
logger = logging.getLogger(__name__)

SENSITIVE_PARAMS = frozenset({"access_token", "refresh_token", "token", "client_secret", "password", "code"})


def mask_params(params: Dict[str, str]) -> Dict[str, str]:
    return {key: "***" if key in SENSITIVE_PARAMS else value for key, value in params.items()}


class AsyncRequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request logging.
    Logs the method, path and status of every request with its duration.
    """

    async def dispatch(self, request: Request, call_next):
        if settings.ENVIRONMENT == "production":
            logger.info(f"Request: {request.method} {request.url.path}")
        else:
            query_params = mask_params(dict(request.query_params))
            logger.info(
                f"Request: {request.method} {request.url.path} | "
                f"Query: {query_params if query_params else 'N/A'} | "
                f"Client: {request.client.host if request.client else 'N/A'}"
            )

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        if settings.ENVIRONMENT == "production":
            logger.info(f"Response: {response.status_code} for {request.method} {request.url.path}")
        else:
            logger.info(
                f"Response: {response.status_code} for {request.method} {request.url.path} | "
                f"Time: {process_time:.4f}s"
            )

        return response
