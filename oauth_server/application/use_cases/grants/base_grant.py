# oauth_server/application/use_cases/grants/base_grant.py

from typing import List, Optional

from oauth_server.application.dtos.oauth_dto import OAuthRequest, OAuthResponse, TokenResponse
from oauth_server.application.ports.inbound import IGrant
from oauth_server.domain.exceptions import OAuth2Exception
from oauth_server.domain.models.client_domain_model import Client
from oauth_server.domain.models.token_domain_model import AccessToken, RefreshToken, TokenOwner, normalize_scopes


class AbstractGrant(IGrant):
    """
    Behaviour shared by the grants.

    Grants only answering the token endpoint inherit the authorization
    response, which rejects the request.
    """

    async def create_authorization_response(
            self,
            request: OAuthRequest,
            client: Optional[Client],
            owner: Optional[TokenOwner] = None,
    ) -> OAuthResponse:
        raise OAuth2Exception.invalid_request(f'Grant "{self.grant_type}" does not support authorization')

    @staticmethod
    def requested_scopes(request: OAuthRequest) -> Optional[List[str]]:
        """
        Read the space-delimited "scope" body parameter.

        Returns:
            The requested scope names, or None if the parameter is absent
        """
        scope = request.body.get("scope")
        if scope is None:
            return None
        return normalize_scopes(str(scope))

    @staticmethod
    def prepare_token_response(
            access_token: AccessToken,
            refresh_token: Optional[RefreshToken] = None,
    ) -> OAuthResponse:
        """
        Build the successful token response (RFC 6749 section 5.1).

        Args:
            access_token: Issued access token
            refresh_token: Refresh token of the exchange, if any

        Returns:
            HTTP 200 response with the token body
        """
        owner = access_token.owner
        scopes = access_token.scopes

        body = TokenResponse(
            access_token=access_token.token,
            token_type="Bearer",
            expires_in=access_token.get_expires_in(),
            scope=" ".join(scopes),
            owner_id=owner.token_owner_id if owner is not None else None,
            refresh_token=refresh_token.token if refresh_token is not None else None,
        )

        return OAuthResponse(status_code=200, body=body.to_dict())
