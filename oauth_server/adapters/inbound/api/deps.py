# oauth_server/adapters/inbound/api/deps.py

"""
Dependencies for injection into API endpoints.

This module wires the repositories, services and grants of one request
together, and converts between Starlette requests/responses and the
transport independent OAuthRequest/OAuthResponse.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from fastapi import Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from oauth_server.adapters.configuration.config import settings
from oauth_server.adapters.outbound.persistence.database import get_db
from oauth_server.adapters.outbound.persistence.repositories import (
    AccessTokenRepository,
    AsyncClientRepository,
    AsyncScopeRepository,
    RefreshTokenRepository,
)
from oauth_server.adapters.outbound.security import ClientSecretManager
from oauth_server.application.dtos.oauth_dto import OAuthRequest, OAuthResponse
from oauth_server.application.ports.inbound import GrantType, IGrant
from oauth_server.application.use_cases import (
    AccessTokenService,
    AuthorizationServer,
    ClientService,
    RefreshTokenService,
    ResourceServer,
    ScopeService,
)
from oauth_server.application.use_cases.authorization_server import GrantFactory
from oauth_server.application.use_cases.grants import ClientCredentialsGrant, PasswordGrant, RefreshTokenGrant
from oauth_server.domain.exceptions import InvalidAccessTokenException
from oauth_server.domain.models.server_options import ServerOptions
from oauth_server.domain.models.token_domain_model import AccessToken

# Configure logger
logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

########################################################################
# Database Session Management
########################################################################

get_session = get_db


########################################################################
# Server Assembly
########################################################################

GrantBuilder = Callable[[ServerOptions, AccessTokenService, RefreshTokenService], Union[IGrant, GrantFactory]]

GRANT_BUILDERS: Dict[str, GrantBuilder] = {
    GrantType.CLIENT_CREDENTIALS.value: lambda options, access, refresh: ClientCredentialsGrant(access),
    GrantType.REFRESH_TOKEN.value: lambda options, access, refresh: RefreshTokenGrant(access, refresh, options),
    GrantType.PASSWORD.value: lambda options, access, refresh: PasswordGrant.factory(
        options.owner_callable, access, refresh
    ),
}


def validate_server_options(options: ServerOptions) -> None:
    """
    Check at startup that every configured grant can be built.

    Raises:
        ValueError: For an unknown grant type, or the password grant without owner callable
    """
    unknown = [grant_type for grant_type in options.grants if grant_type not in GRANT_BUILDERS]
    if unknown:
        raise ValueError(f"Unknown grant type(s) in configuration: {', '.join(unknown)}")

    if GrantType.PASSWORD.value in options.grants and options.owner_callable is None:
        raise ValueError("The password grant requires an owner_callable")


def get_server_options(request: Request) -> ServerOptions:
    """Options the application was created with, or the ones built from the settings."""
    options = getattr(request.app.state, "server_options", None)
    return options if options is not None else settings.server_options()


def build_authorization_server(db: AsyncSession, options: ServerOptions) -> AuthorizationServer:
    """
    Build the authorization server of one request, bound to its session.
    """
    scope_service = ScopeService(AsyncScopeRepository(db))
    access_token_service = AccessTokenService(AccessTokenRepository(db), scope_service, options)
    refresh_token_service = RefreshTokenService(RefreshTokenRepository(db), scope_service, options)

    grants: List[Union[IGrant, GrantFactory]] = [
        GRANT_BUILDERS[grant_type](options, access_token_service, refresh_token_service)
        for grant_type in options.grants
    ]

    return AuthorizationServer(
        client_service=ClientService(AsyncClientRepository(db), ClientSecretManager()),
        grants=grants,
        access_token_service=access_token_service,
        refresh_token_service=refresh_token_service,
    )


async def get_authorization_server(
        db: AsyncSession = Depends(get_session),
        options: ServerOptions = Depends(get_server_options),
) -> AuthorizationServer:
    return build_authorization_server(db, options)


async def get_resource_server(
        db: AsyncSession = Depends(get_session),
        options: ServerOptions = Depends(get_server_options),
) -> ResourceServer:
    scope_service = ScopeService(AsyncScopeRepository(db))
    return ResourceServer(AccessTokenService(AccessTokenRepository(db), scope_service, options))


########################################################################
# Request / Response Conversion
########################################################################

def get_owner(request: Request, options: ServerOptions) -> Optional[Any]:
    """Owner authenticated upstream (by another middleware), if any."""
    return getattr(request.state, options.owner_request_attribute, None)


async def to_oauth_request(request: Request, options: ServerOptions, read_body: bool = True) -> OAuthRequest:
    """
    Convert a Starlette request into an OAuthRequest.

    Only form encoded bodies are read, as required by RFC 6749.
    """
    body: Dict[str, Any] = {}
    content_type = request.headers.get("content-type", "")

    if read_body and content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        body = {key: value for key, value in form.items() if isinstance(value, str)}

    return OAuthRequest(
        method=request.method,
        headers=dict(request.headers),
        query_params=dict(request.query_params),
        body=body,
        attributes={options.owner_request_attribute: get_owner(request, options)},
    )


def to_http_response(response: OAuthResponse) -> Response:
    """Convert an OAuthResponse into a Starlette response; a None body gives an empty response."""
    if response.body is None:
        return Response(status_code=response.status_code, headers=response.headers)

    return JSONResponse(content=response.body, status_code=response.status_code, headers=response.headers)


########################################################################
# Access Token Authentication
########################################################################

def require_access_token(*scopes: str) -> Callable:
    """
    Build a dependency protecting an endpoint with a bearer access token.

    The validated token is stored on ``request.state`` under the configured
    token attribute, and returned.

    Args:
        scopes: Scopes the token must grant

    Example:
        ```python
        @router.get("/me")
        async def me(token: AccessToken = Depends(require_access_token("read"))):
            ...
        ```
    """

    async def dependency(
            request: Request,
            resource_server: ResourceServer = Depends(get_resource_server),
            options: ServerOptions = Depends(get_server_options),
    ) -> AccessToken:
        oauth_request = await to_oauth_request(request, options, read_body=False)
        token = await resource_server.get_access_token(oauth_request, list(scopes) or None)

        if token is None:
            raise InvalidAccessTokenException("Access token is missing", error="invalid_request")

        setattr(request.state, options.token_request_attribute, token)
        return token

    return dependency
