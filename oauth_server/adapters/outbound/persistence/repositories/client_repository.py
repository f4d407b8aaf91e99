# oauth_server/adapters/outbound/persistence/repositories/client_repository.py

"""
Repository for client operations.

This module implements the repository that performs database operations
related to clients, implementing the IClientRepository interface.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from oauth_server.adapters.outbound.persistence.models import ClientModel
from oauth_server.application.ports.outbound import IClientRepository
from oauth_server.domain.exceptions import DatabaseOperationException
from oauth_server.domain.models.client_domain_model import Client


class AsyncClientRepository(IClientRepository):
    """
    Async implementation of the client repository.

    Attributes:
        db: Async database session
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def get_client(self, id: str) -> Optional[Client]:
        """
        Find a client by its identifier.

        Args:
            id: Client identifier

        Returns:
            Client found or None if it doesn't exist

        Raises:
            DatabaseOperationException: In case of database error
        """
        try:
            query = select(ClientModel).where(ClientModel.id == id)
            result = await self.db.execute(query)
            row = result.scalar_one_or_none()
            return self.to_domain(row) if row is not None else None
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching client '{id}': {str(e)}")
            raise DatabaseOperationException(detail="Error fetching client", original_error=e)

    async def save(self, client: Client) -> Client:
        """
        Create or update a client.

        Raises:
            DatabaseOperationException: In case of database error
        """
        try:
            await self.db.merge(ClientModel(
                id=client.id,
                name=client.name,
                secret=client.secret,
                redirect_uris=list(client.redirect_uris),
            ))
            await self.db.commit()
            self.logger.info(f"Client saved: {client.id}")
            return client
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Error saving client: {str(e)}")
            raise DatabaseOperationException(detail="Error saving client", original_error=e)

    @staticmethod
    def to_domain(row: ClientModel) -> Client:
        """
        Convert database model to domain model.
        """
        return Client.reconstitute({
            "id": row.id,
            "name": row.name,
            "secret": row.secret,
            "redirect_uris": row.redirect_uris,
        })
