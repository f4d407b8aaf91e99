# oauth_server/application/ports/__init__.py

from oauth_server.application.ports.inbound import (
    GrantLookup,
    GrantType,
    IAuthorizationServer,
    IGrant,
    IResourceServer,
)
from oauth_server.application.ports.outbound import (
    IAccessTokenRepository,
    IClientRepository,
    IRefreshTokenRepository,
    IScopeRepository,
    ITokenRepository,
)

__all__ = [
    "GrantLookup",
    "GrantType",
    "IAuthorizationServer",
    "IGrant",
    "IResourceServer",
    "IAccessTokenRepository",
    "IClientRepository",
    "IRefreshTokenRepository",
    "IScopeRepository",
    "ITokenRepository",
]
