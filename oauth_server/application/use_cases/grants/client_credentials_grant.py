# oauth_server/application/use_cases/grants/client_credentials_grant.py

import logging
from typing import Optional

from oauth_server.application.dtos.oauth_dto import OAuthRequest, OAuthResponse
from oauth_server.application.ports.inbound import GrantType
from oauth_server.application.use_cases.grants.base_grant import AbstractGrant
from oauth_server.application.use_cases.token_use_cases import AccessTokenService
from oauth_server.domain.models.client_domain_model import Client
from oauth_server.domain.models.token_domain_model import TokenOwner

logger = logging.getLogger(__name__)


class ClientCredentialsGrant(AbstractGrant):
    """
    Client credentials grant (RFC 6749 section 4.4).

    The client authenticates with its own credentials and receives an
    access token. No refresh token is issued.
    """

    grant_type = GrantType.CLIENT_CREDENTIALS.value
    response_type = ""

    def __init__(self, access_token_service: AccessTokenService):
        self.access_token_service = access_token_service

    def allows_public_clients(self) -> bool:
        return False

    async def create_token_response(
            self,
            request: OAuthRequest,
            client: Optional[Client],
            owner: Optional[TokenOwner] = None,
    ) -> OAuthResponse:
        scopes = self.requested_scopes(request) or []

        access_token = await self.access_token_service.create_token(owner, client, scopes)
        logger.info(f"Access token issued with client credentials to client {client.id if client else None}")

        return self.prepare_token_response(access_token)
