# oauth_server/application/use_cases/grants/__init__.py

from oauth_server.application.use_cases.grants.base_grant import AbstractGrant
from oauth_server.application.use_cases.grants.client_credentials_grant import ClientCredentialsGrant
from oauth_server.application.use_cases.grants.password_grant import PasswordGrant
from oauth_server.application.use_cases.grants.refresh_token_grant import RefreshTokenGrant

__all__ = [
    "AbstractGrant",
    "ClientCredentialsGrant",
    "PasswordGrant",
    "RefreshTokenGrant",
]
