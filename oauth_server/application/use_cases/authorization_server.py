# oauth_server/application/use_cases/authorization_server.py

"""
Authorization server.

Single entry point of the authorization, token and revocation endpoints.
It resolves the grant handling a request, authenticates the client,
delegates to the grant and converts protocol errors into RFC 6749 error
responses.
"""

import base64
import binascii
import logging
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from oauth_server.application.dtos.oauth_dto import ErrorResponse, OAuthRequest, OAuthResponse
from oauth_server.application.ports.inbound import GrantLookup, IAuthorizationServer, IGrant
from oauth_server.application.use_cases.client_use_cases import ClientService
from oauth_server.application.use_cases.token_use_cases import (
    AbstractTokenService,
    AccessTokenService,
    RefreshTokenService,
)
from oauth_server.domain.exceptions import OAuth2Exception
from oauth_server.domain.models.client_domain_model import Client
from oauth_server.domain.models.token_domain_model import TokenOwner

logger = logging.getLogger(__name__)

GrantFactory = Callable[[GrantLookup], IGrant]

SUPPORTED_TOKEN_TYPE_HINTS = ("access_token", "refresh_token")


class GrantRegistry(GrantLookup):
    """
    Grants indexed by grant type and by response type.

    Built once; both indexes are read-only afterwards. Entries may be grant
    instances or factories; a factory is called with the registry itself so
    the grant it builds can look up its siblings.
    """

    def __init__(self, grants: Iterable[Union[IGrant, GrantFactory]]):
        by_grant_type: Dict[str, IGrant] = {}
        by_response_type: Dict[str, IGrant] = {}

        self._grants: Mapping[str, IGrant] = MappingProxyType(by_grant_type)
        self._response_types: Mapping[str, IGrant] = MappingProxyType(by_response_type)

        for entry in grants:
            grant = entry if isinstance(entry, IGrant) else entry(self)

            by_grant_type[grant.grant_type] = grant
            if grant.response_type:
                by_response_type[grant.response_type] = grant

    @property
    def grants(self) -> Mapping[str, IGrant]:
        return self._grants

    @property
    def response_types(self) -> Mapping[str, IGrant]:
        return self._response_types

    def has_grant(self, grant_type: str) -> bool:
        return grant_type in self._grants

    def get_grant(self, grant_type: str) -> IGrant:
        """
        Raises:
            OAuth2Exception: unsupported_grant_type when no grant is registered for the type
        """
        if self.has_grant(grant_type):
            return self._grants[grant_type]

        raise OAuth2Exception.unsupported_grant_type(f'Grant type "{grant_type}" is not supported by this server')

    def has_response_type(self, response_type: str) -> bool:
        return response_type in self._response_types

    def get_response_type(self, response_type: str) -> IGrant:
        """
        Raises:
            OAuth2Exception: unsupported_response_type when no grant answers the response type
        """
        if self.has_response_type(response_type):
            return self._response_types[response_type]

        raise OAuth2Exception.unsupported_response_type(
            f'Response type "{response_type}" is not supported by this server'
        )


class AuthorizationServer(IAuthorizationServer):
    """
    The authorization server main role is to create access tokens or refresh tokens.
    """

    def __init__(
            self,
            client_service: ClientService,
            grants: Iterable[Union[IGrant, GrantFactory]],
            access_token_service: AccessTokenService,
            refresh_token_service: RefreshTokenService,
    ):
        self.client_service = client_service
        self.access_token_service = access_token_service
        self.refresh_token_service = refresh_token_service
        self.registry = GrantRegistry(grants)

    def has_grant(self, grant_type: str) -> bool:
        return self.registry.has_grant(grant_type)

    def get_grant(self, grant_type: str) -> IGrant:
        return self.registry.get_grant(grant_type)

    def has_response_type(self, response_type: str) -> bool:
        return self.registry.has_response_type(response_type)

    def get_response_type(self, response_type: str) -> IGrant:
        return self.registry.get_response_type(response_type)

    async def handle_authorization_request(
            self, request: OAuthRequest, owner: Optional[TokenOwner] = None
    ) -> OAuthResponse:
        try:
            response_type = request.query_params.get("response_type")

            if response_type is None:
                raise OAuth2Exception.invalid_request("No grant response type was found in the request")

            grant = self.get_response_type(str(response_type))
            client = await self.get_client(request, grant.allows_public_clients())

            response = await grant.create_authorization_response(request, client, owner)
        except OAuth2Exception as exception:
            response = self.create_response_from_oauth_exception(exception)

        return response.with_header("Content-Type", "application/json")

    async def handle_token_request(
            self, request: OAuthRequest, owner: Optional[TokenOwner] = None
    ) -> OAuthResponse:
        try:
            grant_type = request.body.get("grant_type")

            if grant_type is None:
                raise OAuth2Exception.invalid_request("No grant type was found in the request")

            grant = self.get_grant(str(grant_type))
            client = await self.get_client(request, grant.allows_public_clients())

            response = await grant.create_token_response(request, client, owner)
        except OAuth2Exception as exception:
            response = self.create_response_from_oauth_exception(exception)

        # RFC 6749 section 5.1
        return (
            response.with_header("Content-Type", "application/json")
            .with_header("Cache-Control", "no-store")
            .with_header("Pragma", "no-cache")
        )

    async def handle_revocation_request(self, request: OAuthRequest) -> OAuthResponse:
        """
        Revoke an access or refresh token (RFC 7009).

        Unknown tokens are answered with 200 so token existence is not leaked.
        A failure while deleting the token is answered with 503.
        """
        try:
            return await self._revoke(request)
        except OAuth2Exception as exception:
            return self.create_response_from_oauth_exception(exception).with_header(
                "Content-Type", "application/json"
            )

    async def _revoke(self, request: OAuthRequest) -> OAuthResponse:
        token_string = request.body.get("token")
        token_hint = request.body.get("token_type_hint")

        if token_string is None or token_hint is None:
            raise OAuth2Exception.invalid_request(
                'Cannot revoke a token as the "token" and/or "token_type_hint" parameters are missing'
            )

        if token_hint not in SUPPORTED_TOKEN_TYPE_HINTS:
            raise OAuth2Exception.unsupported_token_type(
                f'Authorization server does not support revocation of token of type "{token_hint}"'
            )

        token_service: AbstractTokenService = (
            self.access_token_service if token_hint == "access_token" else self.refresh_token_service
        )
        token = await token_service.get_token(str(token_string))

        response = OAuthResponse(status_code=200)

        if token is None:
            return response

        # Tokens issued to a confidential client may only be revoked by that client
        token_client = token.client
        if token_client is not None and not token_client.is_public():
            request_client = await self.get_client(request, False)

            if request_client is None or request_client.id != token_client.id:
                logger.warning(f"Client tried to revoke a {token_hint} issued to client {token_client.id}")
                raise OAuth2Exception.invalid_client("Token was issued for another client and cannot be revoked")

        try:
            await token_service.delete_token(token)
        except Exception:
            logger.exception(f"Error deleting {token_hint} during revocation")
            return response.with_status(503)

        logger.info(f"Revoked {token_hint}")
        return response

    async def get_client(self, request: OAuthRequest, allow_public_clients: bool) -> Optional[Client]:
        """
        Get the client of the request, after authenticating it.

        Public clients are not authenticated (RFC 6749 section 2.3).

        Args:
            request: Incoming request
            allow_public_clients: Whether the grant accepts public clients

        Returns:
            The authenticated client, or None when public clients are allowed and no client id was sent

        Raises:
            OAuth2Exception: invalid_client when the secret is missing or authentication fails
        """
        client_id, secret = self.extract_client_credentials(request)

        if not allow_public_clients and not secret:
            raise OAuth2Exception.invalid_client("Client secret is missing")

        if allow_public_clients and not client_id:
            return None

        client = await self.client_service.get_client(client_id) if client_id else None

        if client is None or (
                not allow_public_clients and not self.client_service.authenticate(client, secret)
        ):
            logger.warning(f"Client authentication failed for client_id: {client_id}")
            raise OAuth2Exception.invalid_client("Client authentication failed")

        return client

    @staticmethod
    def extract_client_credentials(request: OAuthRequest) -> Tuple[Optional[str], Optional[str]]:
        """
        Extract the client credentials from the Authorization header or the body.

        The HTTP Basic header is preferred; a malformed header yields no credentials.
        """
        authorization = request.get_header("Authorization")

        if authorization:
            scheme, _, value = authorization.strip().partition(" ")
            if scheme.lower() == "basic":
                try:
                    decoded = base64.b64decode(value.strip(), validate=True).decode("utf-8")
                except (binascii.Error, UnicodeDecodeError):
                    return None, None

                client_id, separator, secret = decoded.partition(":")
                if not separator:
                    return None, None
                return client_id or None, secret or None

        client_id = request.body.get("client_id")
        secret = request.body.get("client_secret")

        return (
            str(client_id) if client_id is not None else None,
            str(secret) if secret is not None else None,
        )

    @staticmethod
    def create_response_from_oauth_exception(exception: OAuth2Exception) -> OAuthResponse:
        """
        Create a response from the exception, using the format of RFC 6749 section 5.2.
        """
        body = ErrorResponse(error=exception.error, error_description=exception.description)
        return OAuthResponse(status_code=400, body=body.model_dump())
