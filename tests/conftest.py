"""Test configuration and fixtures.

Unit tests run the services, grants and servers against in-memory
repositories. Integration tests use an aiosqlite in-memory database.
"""

import os

# Must be set before oauth_server is imported: the engine is created at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")

import base64
from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from oauth_server.adapters.outbound.persistence.models import Base
from oauth_server.adapters.outbound.security import ClientSecretManager
from oauth_server.application.dtos.oauth_dto import OAuthRequest
from oauth_server.application.ports.outbound import (
    IAccessTokenRepository,
    IClientRepository,
    IRefreshTokenRepository,
    IScopeRepository,
)
from oauth_server.application.use_cases import (
    AccessTokenService,
    ClientService,
    RefreshTokenService,
    ScopeService,
)
from oauth_server.domain.exceptions import TokenAlreadyExistsException
from oauth_server.domain.models import AbstractToken, Client, Scope, ServerOptions

T = TypeVar("T", bound=AbstractToken)


########################################################################
# In-memory repositories
########################################################################

class InMemoryTokenRepository(Generic[T]):
    """Token store backed by a dict; the key plays the unique constraint."""

    def __init__(self) -> None:
        self.tokens: Dict[str, T] = {}
        self.fail_on_delete = False
        self.deleted: List[T] = []

    async def find_by_token(self, token: str) -> Optional[T]:
        return self.tokens.get(token)

    async def token_exists(self, token: str) -> bool:
        return token in self.tokens

    async def save(self, token: T) -> T:
        if token.token in self.tokens:
            raise TokenAlreadyExistsException()
        self.tokens[token.token] = token
        return token

    async def delete_token(self, token: T) -> None:
        if self.fail_on_delete:
            raise ConnectionError("storage unavailable")
        self.deleted.append(token)
        self.tokens.pop(token.token, None)

    async def purge_expired_tokens(self) -> int:
        expired = [key for key, token in self.tokens.items() if token.is_expired()]
        for key in expired:
            del self.tokens[key]
        return len(expired)


class InMemoryAccessTokenRepository(InMemoryTokenRepository, IAccessTokenRepository):
    pass


class InMemoryRefreshTokenRepository(InMemoryTokenRepository, IRefreshTokenRepository):
    pass


class InMemoryScopeRepository(IScopeRepository):
    def __init__(self, scopes: Optional[List[Scope]] = None) -> None:
        self.scopes: List[Scope] = list(scopes or [])

    async def get_all(self) -> List[Scope]:
        return list(self.scopes)

    async def get_default_scopes(self) -> List[Scope]:
        return [scope for scope in self.scopes if scope.is_default]

    async def save(self, scope: Scope) -> Scope:
        if scope.id is None:
            scope = Scope(len(self.scopes) + 1, scope.name, scope.description, scope.is_default)
        self.scopes.append(scope)
        return scope


class InMemoryClientRepository(IClientRepository):
    def __init__(self) -> None:
        self.clients: Dict[str, Client] = {}

    async def get_client(self, id: str) -> Optional[Client]:
        return self.clients.get(id)

    async def save(self, client: Client) -> Client:
        self.clients[client.id] = client
        return client


class User:
    """Resource owner used by the tests."""

    def __init__(self, id: Any) -> None:
        self.id = id

    @property
    def token_owner_id(self) -> Any:
        return self.id


class ReversingSecretHasher:
    """Secret hasher without any cryptography, for the domain tests."""

    def __init__(self) -> None:
        self.generated = 0

    def generate_secret(self) -> str:
        self.generated += 1
        return f"secret-{self.generated}"

    def hash_secret(self, secret: str) -> str:
        return secret[::-1]

    def verify_secret(self, plain_secret: str, hashed_secret: str) -> bool:
        return bool(plain_secret) and plain_secret[::-1] == hashed_secret


########################################################################
# Helpers
########################################################################

def make_request(
        body: Optional[Dict[str, Any]] = None,
        query_params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        method: str = "POST",
) -> OAuthRequest:
    return OAuthRequest(
        method=method,
        headers=headers or {},
        query_params=query_params or {},
        body=body or {},
    )


def basic_auth(client_id: str, secret: str) -> Dict[str, str]:
    credentials = base64.b64encode(f"{client_id}:{secret}".encode()).decode()
    return {"Authorization": f"Basic {credentials}"}


def utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


########################################################################
# Service fixtures
########################################################################

@pytest.fixture
def server_options() -> ServerOptions:
    return ServerOptions(grants=("client_credentials", "refresh_token"))


@pytest.fixture
def scope_repository() -> InMemoryScopeRepository:
    return InMemoryScopeRepository([
        Scope(1, "read", "Read access", is_default=True),
        Scope(2, "write", "Write access"),
        Scope(3, "admin", "Administration"),
    ])


@pytest.fixture
def scope_service(scope_repository: InMemoryScopeRepository) -> ScopeService:
    return ScopeService(scope_repository)


@pytest.fixture
def access_token_repository() -> InMemoryAccessTokenRepository:
    return InMemoryAccessTokenRepository()


@pytest.fixture
def refresh_token_repository() -> InMemoryRefreshTokenRepository:
    return InMemoryRefreshTokenRepository()


@pytest.fixture
def access_token_service(
        access_token_repository: InMemoryAccessTokenRepository,
        scope_service: ScopeService,
        server_options: ServerOptions,
) -> AccessTokenService:
    return AccessTokenService(access_token_repository, scope_service, server_options)


@pytest.fixture
def refresh_token_service(
        refresh_token_repository: InMemoryRefreshTokenRepository,
        scope_service: ScopeService,
        server_options: ServerOptions,
) -> RefreshTokenService:
    return RefreshTokenService(refresh_token_repository, scope_service, server_options)


@pytest.fixture
def client_repository() -> InMemoryClientRepository:
    return InMemoryClientRepository()


@pytest.fixture
def client_service(client_repository: InMemoryClientRepository) -> ClientService:
    return ClientService(client_repository, ClientSecretManager())


@pytest_asyncio.fixture
async def confidential_client(client_service: ClientService) -> Tuple[Client, str]:
    """A registered confidential client and its plain text secret."""
    client, secret = await client_service.register_client("Backend service", "https://example.com/cb")
    return client, secret


@pytest_asyncio.fixture
async def public_client(client_service: ClientService) -> Client:
    client, _ = await client_service.register_client("Mobile app", public=True)
    return client


########################################################################
# Database fixtures
########################################################################

@pytest.fixture
def test_database_url() -> str:
    """Test database URL for SQLite in-memory database."""
    return "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def async_engine(test_database_url: str) -> AsyncGenerator[Any, None]:
    """Create async SQLAlchemy engine with the tables of the application."""
    engine = create_async_engine(
        test_database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: Any) -> async_sessionmaker:
    return async_sessionmaker(async_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for testing."""
    async with session_factory() as session:
        yield session
