# oauth_server/application/use_cases/resource_server.py

import logging
from typing import Optional

from oauth_server.application.dtos.oauth_dto import OAuthRequest
from oauth_server.application.ports.inbound import IResourceServer
from oauth_server.application.use_cases.token_use_cases import AccessTokenService
from oauth_server.domain.exceptions import InvalidAccessTokenException
from oauth_server.domain.models.token_domain_model import AccessToken, ScopesInput

logger = logging.getLogger(__name__)


class ResourceServer(IResourceServer):
    """
    Validates the access token presented to a protected resource.
    """

    def __init__(self, access_token_service: AccessTokenService):
        self.access_token_service = access_token_service

    async def get_access_token(self, request: OAuthRequest, scopes: ScopesInput = None) -> Optional[AccessToken]:
        """
        Get the access token of the request.

        Args:
            request: Incoming request
            scopes: Scopes the token must grant

        Returns:
            The valid access token, or None if the request carries no token

        Raises:
            InvalidAccessTokenException: If the token is unknown, expired or lacks a scope
        """
        token_string = self.extract_access_token(request)
        if token_string is None:
            return None

        token = await self.access_token_service.get_token(token_string)

        if token is None or not token.is_valid(scopes):
            logger.warning("Request with an unknown, expired or insufficient access token")
            raise InvalidAccessTokenException.invalid_token("Access token has expired or has been deleted")

        return token

    @staticmethod
    def extract_access_token(request: OAuthRequest) -> Optional[str]:
        """
        Read the token from the "Authorization: Bearer" header, or else the access_token query parameter.
        """
        authorization = request.get_header("Authorization")

        if authorization:
            parts = authorization.split()
            if len(parts) < 2 or parts[0].lower() != "bearer":
                return None
            return parts[-1]

        token = request.query_params.get("access_token")
        return str(token) if token else None
