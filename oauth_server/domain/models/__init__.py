# oauth_server/domain/models/__init__.py

from oauth_server.domain.models.client_domain_model import Client, SecretHasher
from oauth_server.domain.models.scope_domain_model import Scope
from oauth_server.domain.models.server_options import ServerOptions
from oauth_server.domain.models.token_domain_model import (
    AbstractToken,
    AccessToken,
    OwnerReference,
    RefreshToken,
    TokenOwner,
    normalize_scopes,
)

__all__ = [
    "AbstractToken",
    "AccessToken",
    "Client",
    "OwnerReference",
    "RefreshToken",
    "Scope",
    "SecretHasher",
    "ServerOptions",
    "TokenOwner",
    "normalize_scopes",
]
