# oauth_server/adapters/outbound/persistence/repositories/token_repository.py

"""
Repositories for access and refresh tokens.

Both token kinds share one implementation, parametrized by the ORM model
and the domain class.
"""

import logging
from datetime import datetime, timezone
from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from oauth_server.adapters.outbound.persistence.models import AccessTokenModel, RefreshTokenModel
from oauth_server.adapters.outbound.persistence.models.token_model import TokenColumnsMixin
from oauth_server.adapters.outbound.persistence.repositories.client_repository import AsyncClientRepository
from oauth_server.application.ports.outbound import IAccessTokenRepository, IRefreshTokenRepository
from oauth_server.domain.exceptions import DatabaseOperationException, TokenAlreadyExistsException
from oauth_server.domain.models.token_domain_model import (
    AbstractToken,
    AccessToken,
    OwnerReference,
    RefreshToken,
)

T = TypeVar("T", bound=AbstractToken)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Columns store naive UTC datetimes."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class AsyncTokenRepository(Generic[T]):
    """
    Async token repository.

    Attributes:
        db: Async database session of the current request
        model: SQLAlchemy model class of the token table
        token_class: Domain class rebuilt from rows
    """

    model: Type[TokenColumnsMixin]
    token_class: Type[T]

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logging.getLogger(f"{__name__}.{self.model.__name__}")

    async def find_by_token(self, token: str) -> Optional[T]:
        """
        Find a token by its string.

        Args:
            token: Token string

        Returns:
            Token found or None if it doesn't exist

        Raises:
            DatabaseOperationException: In case of database error
        """
        try:
            query = (
                select(self.model)
                .where(self.model.token == token)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            row = result.unique().scalar_one_or_none()
            return self.to_domain(row) if row is not None else None
        except SQLAlchemyError as e:
            self.logger.error(f"Error fetching {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(detail=f"Error fetching {self.model.__name__}", original_error=e)

    async def token_exists(self, token: str) -> bool:
        try:
            query = select(select(self.model.token).where(self.model.token == token).exists())
            result = await self.db.execute(query)
            return bool(result.scalar())
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking existence of {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(
                detail=f"Error checking existence of {self.model.__name__}", original_error=e
            )

    async def save(self, token: T) -> T:
        """
        Insert a new token.

        Raises:
            TokenAlreadyExistsException: If the token string is already stored
            DatabaseOperationException: In case of any other database error
        """
        row = self.model(
            token=token.token,
            owner_id=str(token.owner.token_owner_id) if token.owner is not None else None,
            client_id=token.client.id if token.client is not None else None,
            scopes=token.scopes,
            expires_at=to_naive_utc(token.expires_at),
        )

        try:
            self.db.add(row)
            await self.db.commit()
            return token
        except IntegrityError as e:
            await self.db.rollback()
            if await self.token_exists(token.token):
                raise TokenAlreadyExistsException()
            self.logger.error(f"Integrity error saving {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(detail=f"Error saving {self.model.__name__}", original_error=e)
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Error saving {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(detail=f"Error saving {self.model.__name__}", original_error=e)

    async def delete_token(self, token: T) -> None:
        try:
            await self.db.execute(delete(self.model).where(self.model.token == token.token))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Error deleting {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(detail=f"Error deleting {self.model.__name__}", original_error=e)

    async def purge_expired_tokens(self) -> int:
        """
        Remove expired tokens to keep the table size manageable.

        Returns:
            Number of records deleted
        """
        try:
            now = to_naive_utc(datetime.now(timezone.utc))
            query = delete(self.model).where(self.model.expires_at.is_not(None), self.model.expires_at < now)
            result = await self.db.execute(query)
            await self.db.commit()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(f"Error purging expired {self.model.__name__}: {str(e)}")
            raise DatabaseOperationException(
                detail=f"Error purging expired {self.model.__name__}", original_error=e
            )

    def to_domain(self, row: TokenColumnsMixin) -> T:
        """
        Convert database model to domain model.
        """
        return self.token_class.reconstitute({
            "token": row.token,
            "owner": OwnerReference(row.owner_id) if row.owner_id is not None else None,
            "client": AsyncClientRepository.to_domain(row.client) if row.client is not None else None,
            "scopes": list(row.scopes or []),
            "expires_at": row.expires_at,
        })


class AccessTokenRepository(AsyncTokenRepository[AccessToken], IAccessTokenRepository):
    model = AccessTokenModel
    token_class = AccessToken


class RefreshTokenRepository(AsyncTokenRepository[RefreshToken], IRefreshTokenRepository):
    model = RefreshTokenModel
    token_class = RefreshToken
