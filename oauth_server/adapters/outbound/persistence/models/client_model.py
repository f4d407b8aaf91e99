# oauth_server/adapters/outbound/persistence/models/client_model.py

"""
OAuth2 client model.

This module defines the ClientModel that stores the applications allowed
to request tokens.
"""

from sqlalchemy import JSON, Column, DateTime, String, func

from oauth_server.adapters.outbound.persistence.models.base_model import Base


class ClientModel(Base):
    """
    Table of OAuth2 clients.

    Attributes:
        id: Public client identifier (UUID4 string)
        name: Display name
        secret: Hash of the client secret, empty for public clients
        redirect_uris: Allowed callback URIs
        created_at: Creation date and time
        updated_at: Last update date and time
    """
    __tablename__ = "oauth_clients"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    secret = Column(String(255), nullable=False, default="")
    redirect_uris = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    def __repr__(self) -> str:
        return f"<ClientModel(id={self.id}, name={self.name})>"
