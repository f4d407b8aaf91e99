# oauth_server/adapters/outbound/persistence/models/scope_model.py

from sqlalchemy import Boolean, Column, Integer, String

from oauth_server.adapters.outbound.persistence.models.base_model import Base


class ScopeModel(Base):
    """
    Table of the registered scopes.

    Attributes:
        id: Scope identifier
        name: Unique scope name, as sent in the "scope" parameter
        description: What the scope gives access to
        is_default: Granted when a token request asks for no scope
    """
    __tablename__ = "oauth_scopes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(80), unique=True, nullable=False, index=True)
    description = Column(String(255), nullable=False, default="")
    is_default = Column(Boolean, nullable=False, default=False, index=True)

    def __repr__(self) -> str:
        return f"<ScopeModel(name={self.name}, default={self.is_default})>"
