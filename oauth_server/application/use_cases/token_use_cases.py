# oauth_server/application/use_cases/token_use_cases.py

"""
Token services.

One service per token kind. A token service owns creation, lookup and
deletion of its tokens against the backing store, and enforces that
issued tokens only carry registered scopes.
"""

import hmac
import logging
from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Optional, TypeVar, Union

from oauth_server.application.ports.outbound import (
    IAccessTokenRepository,
    IRefreshTokenRepository,
    ITokenRepository,
)
from oauth_server.application.use_cases.scope_use_cases import ScopeService
from oauth_server.domain.exceptions import OAuth2Exception, TokenAlreadyExistsException
from oauth_server.domain.models.client_domain_model import Client
from oauth_server.domain.models.scope_domain_model import Scope
from oauth_server.domain.models.server_options import ServerOptions
from oauth_server.domain.models.token_domain_model import (
    AbstractToken,
    AccessToken,
    RefreshToken,
    TokenOwner,
    normalize_scopes,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=AbstractToken)


class AbstractTokenService(Generic[T], ABC):
    """
    Base token service.

    Subclasses define how a new token of their kind is built.
    """

    def __init__(
            self,
            token_repository: ITokenRepository[T],
            scope_service: ScopeService,
            server_options: ServerOptions,
    ):
        self.token_repository = token_repository
        self.scope_service = scope_service
        self.server_options = server_options

    async def get_token(self, token: str) -> Optional[T]:
        """
        Get a token using its identifier (the token string itself).

        Storage collation is often case-insensitive, so the stored string is
        compared again against the input, in constant time.
        """
        token_from_db = await self.token_repository.find_by_token(token)

        if token_from_db is None or not hmac.compare_digest(token_from_db.token.encode(), token.encode()):
            return None

        return token_from_db

    async def create_token(
            self,
            owner: Optional[TokenOwner],
            client: Optional[Client],
            scopes: Optional[Iterable[Union[str, Scope]]] = None,
    ) -> T:
        """
        Create and persist a new token.

        Args:
            owner: Who the token represents
            client: Client the token is issued to
            scopes: Requested scopes; the registry defaults are used when empty

        Returns:
            The stored token

        Raises:
            OAuth2Exception: invalid_scope if a requested scope is not registered
        """
        scopes = normalize_scopes(scopes)

        if not scopes:
            scopes = normalize_scopes(await self.scope_service.get_default_scopes())
        else:
            await self.validate_token_scopes(scopes)

        while True:
            token = self._build_token(owner, client, scopes)

            if await self.token_repository.token_exists(token.token):
                logger.debug("Generated token string already exists, generating a new one")
                continue

            try:
                return await self.token_repository.save(token)
            except TokenAlreadyExistsException:
                logger.debug("Token string stored concurrently, generating a new one")

    async def delete_token(self, token: T) -> None:
        """Remove the token from the underlying storage."""
        await self.token_repository.delete_token(token)

    async def purge_expired_tokens(self) -> int:
        deleted = await self.token_repository.purge_expired_tokens()
        logger.info(f"Purged {deleted} expired {self.token_kind}(s)")
        return deleted

    async def validate_token_scopes(self, scopes: List[str]) -> None:
        """
        Validate the token scopes against the registered scopes.

        Raises:
            OAuth2Exception: invalid_scope when one or more scopes are not registered
        """
        registered = {str(scope) for scope in await self.scope_service.get_all()}
        unknown = [scope for scope in scopes if scope not in registered]

        if unknown:
            logger.warning(f"Token requested with unknown scope(s): {unknown}")
            raise OAuth2Exception.invalid_scope(f"Some scope(s) do not exist: {', '.join(unknown)}")

    @property
    @abstractmethod
    def token_kind(self) -> str:
        pass

    @abstractmethod
    def _build_token(self, owner: Optional[TokenOwner], client: Optional[Client], scopes: List[str]) -> T:
        """Build a new unsaved token of this service's kind."""
        pass


class AccessTokenService(AbstractTokenService[AccessToken]):
    """Access token service."""

    token_repository: IAccessTokenRepository

    @property
    def token_kind(self) -> str:
        return "access token"

    def _build_token(self, owner, client, scopes) -> AccessToken:
        return AccessToken.create_new_access_token(self.server_options.access_token_ttl, owner, client, scopes)


class RefreshTokenService(AbstractTokenService[RefreshToken]):
    """Refresh token service."""

    token_repository: IRefreshTokenRepository

    @property
    def token_kind(self) -> str:
        return "refresh token"

    def _build_token(self, owner, client, scopes) -> RefreshToken:
        return RefreshToken.create_new_refresh_token(self.server_options.refresh_token_ttl, owner, client, scopes)
