# oauth_server/shared/middleware/exception_middleware.py

"""
Middleware for centralized exception handling.

Protocol errors are answered by the authorization server itself. This
middleware only catches what escapes it: storage failures and unexpected
errors, answered with a JSON 500 body.
"""

import logging
import time
import traceback
from typing import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from oauth_server.adapters.configuration.config import settings
from oauth_server.domain.exceptions import DomainException, InvalidAccessTokenException, OAuth2Exception

# Configure logger
logger = logging.getLogger(__name__)


def client_host(request: Request) -> str:
    return request.client.host if request.client else "N/A"


class AsyncExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized exception handling.
    Captures specific exceptions and formats the response accordingly.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            return response

        except OAuth2Exception as exc:
            logger.warning(f"OAuth2 error outside the dispatcher: {exc.error} | Path: {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": exc.error, "error_description": exc.description},
            )

        except InvalidAccessTokenException as exc:
            logger.warning(f"Invalid access token | Path: {request.url.path} | Client: {client_host(request)}")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": exc.error, "error_description": exc.description},
                headers={"WWW-Authenticate": "Bearer"},
            )

        except DomainException as exc:
            # Domain exceptions: mapping from pure exception to HTTP code based on 'internal_code'
            if exc.internal_code == "DATABASE_OPERATION_ERROR":
                status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
                logger.error(f"Domain exception: {str(exc)} | Code: {exc.internal_code} | Path: {request.url.path}")
            elif exc.internal_code == "TOKEN_ALREADY_EXISTS":
                status_code = status.HTTP_409_CONFLICT
                logger.warning(f"Domain exception: {str(exc)} | Code: {exc.internal_code} | Path: {request.url.path}")
            else:
                status_code = status.HTTP_400_BAD_REQUEST
                logger.warning(f"Domain exception: {str(exc)} | Code: {exc.internal_code} | Path: {request.url.path}")

            detail = str(exc)
            if settings.ENVIRONMENT == "production" and status_code >= 500:
                detail = "Internal database error"

            return JSONResponse(
                status_code=status_code,
                content={"detail": detail, "code": exc.internal_code},
            )

        except SQLAlchemyError as exc:
            if settings.ENVIRONMENT == "production":
                error_message = "Internal database error"
                logger.error(
                    f"Database error: Type={type(exc).__name__} | "
                    f"Path: {request.url.path} | "
                    f"Client: {client_host(request)}"
                )
            else:
                error_message = str(exc)
                logger.error(
                    f"Database error: {str(exc)} | "
                    f"Path: {request.url.path} | "
                    f"Client: {client_host(request)}"
                )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": error_message, "code": "DATABASE_ERROR"},
            )

        except Exception as exc:
            # Unhandled exceptions
            if settings.ENVIRONMENT == "production":
                error_message = "Internal server error"
                logger.exception(
                    f"Unhandled exception: Type={type(exc).__name__} | "
                    f"Path: {request.url.path} | "
                    f"Client: {client_host(request)}"
                )
            else:
                error_message = str(exc)
                logger.exception(
                    f"Unhandled exception: {str(exc)} | "
                    f"Path: {request.url.path} | "
                    f"Client: {client_host(request)}\n"
                    f"Traceback: {traceback.format_exc()}"
                )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": error_message, "code": "INTERNAL_SERVER_ERROR"},
            )
