# oauth_server/main.py

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from oauth_server.adapters.configuration.config import settings
from oauth_server.adapters.inbound.api.deps import validate_server_options
from oauth_server.adapters.outbound.persistence.database import engine, get_db_context
from oauth_server.adapters.outbound.persistence.models import Base
from oauth_server.adapters.outbound.persistence.repositories import (
    AccessTokenRepository,
    AsyncScopeRepository,
    RefreshTokenRepository,
)
from oauth_server.application.use_cases import AccessTokenService, RefreshTokenService, ScopeService
from oauth_server.domain.models.server_options import ServerOptions

# ─── UNIQUE LOGGING CONFIGURATION ─────────────────────────────────────────────────
level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create the tables if needed and run the expired token purge in the background.
    """
    logger.info("Authorization server starting up...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.purge_task = asyncio.create_task(periodic_purge(app.state.server_options))

    yield

    logger.info("Authorization server shutting down...")
    app.state.purge_task.cancel()
    try:
        await app.state.purge_task
    except asyncio.CancelledError:
        pass


def create_app(server_options: Optional[ServerOptions] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        server_options: Options of the authorization server; built from the
            settings when omitted. Pass options explicitly to register the
            password grant with an owner callable.

    Raises:
        ValueError: If the options name a grant that cannot be built
    """
    options = server_options if server_options is not None else settings.server_options()
    validate_server_options(options)

    app = FastAPI(
        title="OAuth2 Server",
        description="OAuth2 authorization server (RFC 6749, RFC 7009)",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.server_options = options

    # Middlewares
    from oauth_server.shared.middleware import AsyncExceptionMiddleware, AsyncRequestLoggingMiddleware

    app.add_middleware(AsyncRequestLoggingMiddleware)
    app.add_middleware(AsyncExceptionMiddleware)

    # Routers
    from oauth_server.adapters.inbound.api.v1.router import api_router

    app.include_router(api_router)

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )

        # OAuth2 endpoints never answer 422, errors use the RFC 6749 body
        for path in schema.get("paths", {}).values():
            for op in path.values():
                op.get("responses", {}).pop("422", None)

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi

    logger.info(f"Registered grants: {', '.join(options.grants) or 'none'}")
    return app


# ── EXPIRED TOKEN PURGE TASK ──────────────────────────────────────────────────
async def purge_expired_tokens(options: ServerOptions) -> int:
    """Remove expired access and refresh tokens from the database."""
    async with get_db_context() as db:
        scope_service = ScopeService(AsyncScopeRepository(db))
        access_token_service = AccessTokenService(AccessTokenRepository(db), scope_service, options)
        refresh_token_service = RefreshTokenService(RefreshTokenRepository(db), scope_service, options)

        deleted = await access_token_service.purge_expired_tokens()
        deleted += await refresh_token_service.purge_expired_tokens()
        return deleted


async def periodic_purge(options: ServerOptions):
    """Background task to periodically purge expired tokens."""
    while True:
        try:
            await asyncio.sleep(settings.PURGE_INTERVAL_SECONDS)
            await purge_expired_tokens(options)
        except asyncio.CancelledError:
            logger.info("Token purge task cancelled")
            break
        except Exception as e:
            logger.exception(f"Error in purge_expired_tokens: {e}")


app = create_app()
