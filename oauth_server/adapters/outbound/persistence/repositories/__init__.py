# oauth_server/adapters/outbound/persistence/repositories/__init__.py

from oauth_server.adapters.outbound.persistence.repositories.client_repository import AsyncClientRepository
from oauth_server.adapters.outbound.persistence.repositories.scope_repository import AsyncScopeRepository
from oauth_server.adapters.outbound.persistence.repositories.token_repository import (
    AccessTokenRepository,
    AsyncTokenRepository,
    RefreshTokenRepository,
)

__all__ = [
    "AsyncClientRepository",
    "AsyncScopeRepository",
    "AsyncTokenRepository",
    "AccessTokenRepository",
    "RefreshTokenRepository",
]
