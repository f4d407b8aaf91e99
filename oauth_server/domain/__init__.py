# oauth_server/domain/__init__.py

"""
Domain layer of the authorization server.

Exports the domain exceptions; models live in oauth_server.domain.models.
"""

from oauth_server.domain.exceptions import (
    DatabaseOperationException,
    DomainException,
    InvalidAccessTokenException,
    OAuth2Exception,
    TokenAlreadyExistsException,
)

__all__ = [
    "DatabaseOperationException",
    "DomainException",
    "InvalidAccessTokenException",
    "OAuth2Exception",
    "TokenAlreadyExistsException",
]
