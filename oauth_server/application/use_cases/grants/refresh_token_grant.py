# oauth_server/application/use_cases/grants/refresh_token_grant.py

import logging
from typing import Optional

from oauth_server.application.dtos.oauth_dto import OAuthRequest, OAuthResponse
from oauth_server.application.ports.inbound import GrantType
from oauth_server.application.use_cases.grants.base_grant import AbstractGrant
from oauth_server.application.use_cases.token_use_cases import AccessTokenService, RefreshTokenService
from oauth_server.domain.exceptions import OAuth2Exception
from oauth_server.domain.models.client_domain_model import Client
from oauth_server.domain.models.server_options import ServerOptions
from oauth_server.domain.models.token_domain_model import TokenOwner

logger = logging.getLogger(__name__)


class RefreshTokenGrant(AbstractGrant):
    """
    Refresh token grant (RFC 6749 section 6).

    Exchanges a refresh token for a new access token, optionally narrowing
    the scopes. When rotation is enabled a new refresh token is issued on
    every exchange; the rotated one is deleted unless
    revoke_rotated_refresh_tokens is disabled, in which case several
    refresh tokens of the same chain stay valid.
    """

    grant_type = GrantType.REFRESH_TOKEN.value
    response_type = ""

    def __init__(
            self,
            access_token_service: AccessTokenService,
            refresh_token_service: RefreshTokenService,
            server_options: ServerOptions,
    ):
        self.access_token_service = access_token_service
        self.refresh_token_service = refresh_token_service
        self.server_options = server_options

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
            OAuth2Exception: invalid_request if no refresh token is sent,
                invalid_grant if it is unknown, expired or issued to another client,
                invalid_scope if the requested scopes exceed the refresh token ones
        """
        token_string = request.body.get("refresh_token")
        if token_string is None:
            raise OAuth2Exception.invalid_request("Refresh token is missing")

        refresh_token = await self.refresh_token_service.get_token(str(token_string))

        if refresh_token is None or refresh_token.is_expired():
            logger.warning("Refresh token exchange with an unknown or expired token")
            raise OAuth2Exception.invalid_grant("Refresh token is expired")

        token_client = refresh_token.client
        if token_client is not None and client is not None and token_client.id != client.id:
            logger.warning(f"Client {client.id} tried to use a refresh token issued to {token_client.id}")
            raise OAuth2Exception.invalid_grant("Refresh token was issued to another client")

        scopes = self.requested_scopes(request) or refresh_token.scopes

        if not refresh_token.match_scopes(scopes):
            raise OAuth2Exception.invalid_scope(
                "The scope of the new access token exceeds the scope(s) of the refresh token"
            )

        owner = refresh_token.owner
        client = token_client or client

        access_token = await self.access_token_service.create_token(owner, client, scopes)

        if self.server_options.rotate_refresh_tokens:
            # Create before delete: a failure in between leaves both tokens valid
            rotated_token = refresh_token
            refresh_token = await self.refresh_token_service.create_token(owner, client, scopes)

            if self.server_options.revoke_rotated_refresh_tokens:
                await self.refresh_token_service.delete_token(rotated_token)

            logger.info("Refresh token rotated")

        return self.prepare_token_response(access_token, refresh_token)
