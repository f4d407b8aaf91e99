# oauth_server/adapters/inbound/api/v1/endpoints/oauth_endpoint.py

"""
OAuth2 endpoints.

Thin HTTP layer: every request is converted into an OAuthRequest and
handed to the authorization server; its OAuthResponse is sent back as is.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from oauth_server.adapters.inbound.api.deps import (
    get_authorization_server,
    get_owner,
    get_server_options,
    to_http_response,
    to_oauth_request,
)
from oauth_server.application.use_cases import AuthorizationServer
from oauth_server.domain.models.server_options import ServerOptions

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["OAuth2"])


@router.get("/authorize")
async def authorize(
        request: Request,
        server: AuthorizationServer = Depends(get_authorization_server),
        options: ServerOptions = Depends(get_server_options),
) -> Response:
    """
    Authorization endpoint (RFC 6749 section 3.1).

    The resource owner must have been authenticated upstream and stored on
    the request state.
    """
    oauth_request = await to_oauth_request(request, options, read_body=False)
    response = await server.handle_authorization_request(oauth_request, get_owner(request, options))
    return to_http_response(response)


@router.post("/token")
async def token(
        request: Request,
        server: AuthorizationServer = Depends(get_authorization_server),
        options: ServerOptions = Depends(get_server_options),
) -> Response:
    """
    Token endpoint (RFC 6749 section 3.2).

    Returns:
        The token response, or an RFC 6749 error body with status 400
    """
    oauth_request = await to_oauth_request(request, options)
    response = await server.handle_token_request(oauth_request, get_owner(request, options))

    if response.status_code != 200:
        logger.info(f"Token request rejected: {response.body.get('error') if response.body else 'N/A'}")

    return to_http_response(response)


@router.post("/revoke")
async def revoke(
        request: Request,
        server: AuthorizationServer = Depends(get_authorization_server),
        options: ServerOptions = Depends(get_server_options),
) -> Response:
    """Revocation endpoint (RFC 7009)."""
    oauth_request = await to_oauth_request(request, options)
    response = await server.handle_revocation_request(oauth_request)
    return to_http_response(response)
