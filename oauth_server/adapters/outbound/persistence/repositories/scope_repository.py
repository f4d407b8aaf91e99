# oauth_server/adapters/outbound/persistence/repositories/scope_repository.py

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from oauth_server.adapters.outbound.persistence.models import ScopeModel
from oauth_server.application.ports.outbound import IScopeRepository
from oauth_server.domain.exceptions import DatabaseOperationException
from oauth_server.domain.models.scope_domain_model import Scope


class AsyncScopeRepository(IScopeRepository):
    """Async implementation of the scope registry."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def get_all(self) -> List[Scope]:
        try:
            result = await self.db.execute(select(ScopeModel).order_by(ScopeModel.name))
            return [self.to_domain(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing scopes: {str(e)}")
            raise DatabaseOperationException(detail="Error listing scopes", original_error=e)

    async def get_default_scopes(self) -> List[Scope]:
        try:
            query = select(ScopeModel).where(ScopeModel.is_default.is_(True)).order_by(ScopeModel.name)
            result = await self.db.execute(query)
            return [self.to_domain(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing default scopes: {str(e)}")
            raise DatabaseOperationException(detail="Error listing default scopes", original_error=e)

    async def save(self, scope: Scope) -> Scope:
        """
        Persist a scope.

        Returns:
            The scope with the identifier assigned by the database
        """
        try:
            row = ScopeModel(
                id=scope.id,
                name=scope.name,
                description=scope.description,
                is_default=scope.is_default,
            )
            row = await self.db.merge(row)
            await self.db.commit()
            await self.db.refresh(row)
            self.logger.info(f"Scope saved: {row.name}")
            return self.to_domain(row)
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Error saving scope '{scope.name}': {str(e)}")
            raise DatabaseOperationException(detail="Error saving scope", original_error=e)

    @staticmethod
    def to_domain(row: ScopeModel) -> Scope:
        return Scope.reconstitute({
            "id": row.id,
            "name": row.name,
            "description": row.description,
            "is_default": row.is_default,
        })
