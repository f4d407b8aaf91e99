# oauth_server/application/ports/outbound.py

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from oauth_server.domain.models.client_domain_model import Client
from oauth_server.domain.models.scope_domain_model import Scope
from oauth_server.domain.models.token_domain_model import AbstractToken, AccessToken, RefreshToken

T = TypeVar('T', bound=AbstractToken)


class ITokenRepository(Generic[T], ABC):
    """Token storage interface, one implementation per token kind."""

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[T]:
        """Find a token by its string. Matching may be case-insensitive."""
        pass

    @abstractmethod
    async def token_exists(self, token: str) -> bool:
        """Check if a token string is already stored."""
        pass

    @abstractmethod
    async def save(self, token: T) -> T:
        """
        Persist a new token.

        Raises:
            TokenAlreadyExistsException: If the token string is already stored
        """
        pass

    @abstractmethod
    async def delete_token(self, token: T) -> None:
        """Remove a token. Storage failures propagate."""
        pass

    @abstractmethod
    async def purge_expired_tokens(self) -> int:
        """Remove every expired token and return how many were removed."""
        pass


class IAccessTokenRepository(ITokenRepository[AccessToken], ABC):
    """Access token repository interface."""


class IRefreshTokenRepository(ITokenRepository[RefreshToken], ABC):
    """Refresh token repository interface."""


class IScopeRepository(ABC):
    """Scope registry storage interface."""

    @abstractmethod
    async def get_all(self) -> List[Scope]:
        """Get every registered scope."""
        pass

    @abstractmethod
    async def get_default_scopes(self) -> List[Scope]:
        """Get the scopes granted when a request asks for none."""
        pass

    @abstractmethod
    async def save(self, scope: Scope) -> Scope:
        """Persist a scope and return it with its identifier."""
        pass


class IClientRepository(ABC):
    """Client repository interface."""

    @abstractmethod
    async def get_client(self, id: str) -> Optional[Client]:
        """Get client by id."""
        pass

    @abstractmethod
    async def save(self, client: Client) -> Client:
        """Create or update a client."""
        pass
