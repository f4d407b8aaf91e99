# oauth_server/adapters/outbound/persistence/models/token_model.py

"""
Bearer token models.

Access and refresh tokens are stored in two tables with the same columns.
The token string is the primary key, so the database rejects duplicates.
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import declared_attr, relationship

from oauth_server.adapters.outbound.persistence.models.base_model import Base


class TokenColumnsMixin:
    """
    Columns shared by the token tables.

    Attributes:
        token: Opaque token string
        owner_id: Identifier of the owner the token represents
        client_id: Client the token was issued to
        scopes: Scope names granted by the token
        expires_at: Expiry in UTC, NULL for tokens that never expire
    """

    token = Column(String(40), primary_key=True)
    owner_id = Column(String(255), nullable=True, index=True)
    scopes = Column(JSON, nullable=False, default=list)
    expires_at = Column(DateTime, nullable=True, index=True)

    @declared_attr
    def client_id(cls):
        return Column(String(36), ForeignKey("oauth_clients.id", ondelete="CASCADE"), nullable=True, index=True)

    @declared_attr
    def client(cls):
        return relationship("ClientModel", lazy="joined")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(client_id={self.client_id}, expires_at={self.expires_at})>"


class AccessTokenModel(TokenColumnsMixin, Base):
    __tablename__ = "oauth_access_tokens"


class RefreshTokenModel(TokenColumnsMixin, Base):
    __tablename__ = "oauth_refresh_tokens"
