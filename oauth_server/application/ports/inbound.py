# oauth_server/application/ports/inbound.py

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from oauth_server.application.dtos.oauth_dto import OAuthRequest, OAuthResponse
from oauth_server.domain.models.client_domain_model import Client
from oauth_server.domain.models.token_domain_model import AccessToken, ScopesInput, TokenOwner


class GrantType(str, Enum):
    """Grant type identifiers of the built-in grants."""
    CLIENT_CREDENTIALS = "client_credentials"
    REFRESH_TOKEN = "refresh_token"
    PASSWORD = "password"


class IGrant(ABC):
    """
    Interface for an OAuth2 grant.

    Attributes:
        grant_type: Value of the "grant_type" body parameter handled by the grant
        response_type: Value of the "response_type" query parameter handled by
            the grant, empty if it does not answer authorization requests
    """

    grant_type: str = ""
    response_type: str = ""

    @abstractmethod
    def allows_public_clients(self) -> bool:
        """Whether clients may use this grant without authenticating."""
        pass

    @abstractmethod
    async def create_authorization_response(
            self,
            request: OAuthRequest,
            client: Optional[Client],
            owner: Optional[TokenOwner] = None,
    ) -> OAuthResponse:
        """Answer an authorization endpoint request."""
        pass

    @abstractmethod
    async def create_token_response(
            self,
            request: OAuthRequest,
            client: Optional[Client],
            owner: Optional[TokenOwner] = None,
    ) -> OAuthResponse:
        """Answer a token endpoint request."""
        pass


class GrantLookup(ABC):
    """Read-only view of the grants registered on an authorization server."""

    @abstractmethod
    def has_grant(self, grant_type: str) -> bool:
        pass

    @abstractmethod
    def get_grant(self, grant_type: str) -> IGrant:
        pass

    @abstractmethod
    def has_response_type(self, response_type: str) -> bool:
        pass

    @abstractmethod
    def get_response_type(self, response_type: str) -> IGrant:
        pass


class IAuthorizationServer(GrantLookup, ABC):
    """Interface for the authorization server endpoints."""

    @abstractmethod
    async def handle_authorization_request(
            self, request: OAuthRequest, owner: Optional[TokenOwner] = None
    ) -> OAuthResponse:
        """Handle a request to the authorization endpoint."""
        pass

    @abstractmethod
    async def handle_token_request(
            self, request: OAuthRequest, owner: Optional[TokenOwner] = None
    ) -> OAuthResponse:
        """Handle a request to the token endpoint."""
        pass

    @abstractmethod
    async def handle_revocation_request(self, request: OAuthRequest) -> OAuthResponse:
        """Handle a request to the revocation endpoint (RFC 7009)."""
        pass


class IResourceServer(ABC):
    """Interface for access token validation on protected resources."""

    @abstractmethod
    async def get_access_token(self, request: OAuthRequest, scopes: ScopesInput = None) -> Optional[AccessToken]:
        """Get the valid access token presented with the request, if any."""
        pass
