# oauth_server/application/use_cases/scope_use_cases.py

import logging
from typing import List

from oauth_server.application.ports.outbound import IScopeRepository
from oauth_server.domain.models.scope_domain_model import Scope

logger = logging.getLogger(__name__)


class ScopeService:
    """
    Registry of the permissible scopes.
    """

    def __init__(self, scope_repository: IScopeRepository):
        self.scope_repository = scope_repository

    async def create_scope(self, scope: Scope) -> Scope:
        saved = await self.scope_repository.save(scope)
        logger.info(f"Scope registered: {saved.name} (default: {saved.is_default})")
        return saved

    async def get_all(self) -> List[Scope]:
        return await self.scope_repository.get_all()

    async def get_default_scopes(self) -> List[Scope]:
        return await self.scope_repository.get_default_scopes()
