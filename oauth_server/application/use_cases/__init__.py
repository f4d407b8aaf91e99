# oauth_server/application/use_cases/__init__.py

"""
Application service module.

This package contains the services implementing the authorization server:
token, client and scope services, the grants, and the authorization and
resource servers built on top of them.
"""

from oauth_server.application.use_cases.authorization_server import AuthorizationServer, GrantRegistry
from oauth_server.application.use_cases.client_use_cases import ClientService
from oauth_server.application.use_cases.resource_server import ResourceServer
from oauth_server.application.use_cases.scope_use_cases import ScopeService
from oauth_server.application.use_cases.token_use_cases import (
    AbstractTokenService,
    AccessTokenService,
    RefreshTokenService,
)

__all__ = [
    "AbstractTokenService",
    "AccessTokenService",
    "AuthorizationServer",
    "ClientService",
    "GrantRegistry",
    "RefreshTokenService",
    "ResourceServer",
    "ScopeService",
]
