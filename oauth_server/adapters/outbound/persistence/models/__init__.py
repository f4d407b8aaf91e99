# oauth_server/adapters/outbound/persistence/models/__init__.py

"""
Data models module.

This module exports all the SQLAlchemy models of the system,
so that importing it registers every table on the metadata.
"""

from oauth_server.adapters.outbound.persistence.models.base_model import Base
from oauth_server.adapters.outbound.persistence.models.client_model import ClientModel
from oauth_server.adapters.outbound.persistence.models.scope_model import ScopeModel
from oauth_server.adapters.outbound.persistence.models.token_model import AccessTokenModel, RefreshTokenModel

__all__ = [
    "Base",
    "ClientModel",
    "ScopeModel",
    "AccessTokenModel",
    "RefreshTokenModel",
]
