# oauth_server/application/use_cases/grants/password_grant.py

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from oauth_server.application.dtos.oauth_dto import OAuthRequest, OAuthResponse
from oauth_server.application.ports.inbound import GrantLookup, GrantType
from oauth_server.application.use_cases.grants.base_grant import AbstractGrant
from oauth_server.application.use_cases.token_use_cases import AccessTokenService, RefreshTokenService
from oauth_server.domain.exceptions import OAuth2Exception
from oauth_server.domain.models.client_domain_model import Client
from oauth_server.domain.models.token_domain_model import TokenOwner

logger = logging.getLogger(__name__)

OwnerCallable = Callable[[str, str], Union[Optional[TokenOwner], Awaitable[Optional[TokenOwner]]]]


class PasswordGrant(AbstractGrant):
    """
    Resource owner password credentials grant (RFC 6749 section 4.3).

    Credentials are checked by the owner callable, which returns the
    authenticated owner or None. It may be a plain function or a coroutine
    function.

    A refresh token is issued as well when the server the grant is
    registered on also supports the refresh token grant.
    """

    grant_type = GrantType.PASSWORD.value
    response_type = ""

    def __init__(
            self,
            owner_callable: OwnerCallable,
            access_token_service: AccessTokenService,
            refresh_token_service: RefreshTokenService,
            grant_lookup: Optional[GrantLookup] = None,
    ):
        if not callable(owner_callable):
            raise TypeError("owner_callable must be callable")

        self.owner_callable = owner_callable
        self.access_token_service = access_token_service
        self.refresh_token_service = refresh_token_service
        self.grant_lookup = grant_lookup

    @classmethod
    def factory(
            cls,
            owner_callable: OwnerCallable,
            access_token_service: AccessTokenService,
            refresh_token_service: RefreshTokenService,
    ) -> Callable[[GrantLookup], "PasswordGrant"]:
        """
        Build a grant factory receiving the lookup of the server it is registered on.
        """

        def build(grant_lookup: GrantLookup) -> "PasswordGrant":
            return cls(owner_callable, access_token_service, refresh_token_service, grant_lookup)

        return build

    def allows_public_clients(self) -> bool:
        return True

    async def create_token_response(
            self,
            request: OAuthRequest,
            client: Optional[Client],
            owner: Optional[TokenOwner] = None,
    ) -> OAuthResponse:
        """
        Raises:
            OAuth2Exception: invalid_request if username or password is missing,
                access_denied if the credentials are rejected
        """
        username = request.body.get("username")
        password = request.body.get("password")

        if not username or not password:
            raise OAuth2Exception.invalid_request("Username and/or password is missing")

        owner = await self._validate_owner(str(username), str(password))
        if owner is None:
            logger.warning(f"Password grant rejected for username: {username}")
            raise OAuth2Exception.access_denied("Either username or password are incorrect")

        scopes = self.requested_scopes(request) or []

        access_token = await self.access_token_service.create_token(owner, client, scopes)

        refresh_token = None
        if self.grant_lookup is not None and self.grant_lookup.has_grant(GrantType.REFRESH_TOKEN.value):
            refresh_token = await self.refresh_token_service.create_token(owner, client, scopes)

        logger.info(f"Access token issued with password grant to owner {owner.token_owner_id}")

        return self.prepare_token_response(access_token, refresh_token)

    async def _validate_owner(self, username: str, password: str) -> Optional[Any]:
        owner = self.owner_callable(username, password)
        if inspect.isawaitable(owner):
            owner = await owner
        return owner
