# oauth_server/application/use_cases/client_use_cases.py

"""
Service for client management.

This module implements the lookup of OAuth2 clients and the registration
of new ones, including credential generation.
"""

import logging
from typing import List, Optional, Tuple, Union

from oauth_server.application.ports.outbound import IClientRepository
from oauth_server.domain.models.client_domain_model import Client, SecretHasher

logger = logging.getLogger(__name__)


class ClientService:
    """
    Service for client management.
    """

    def __init__(self, client_repository: IClientRepository, secret_hasher: SecretHasher):
        self.client_repository = client_repository
        self.secret_hasher = secret_hasher

    async def register_client(
            self,
            name: str,
            redirect_uris: Optional[Union[str, List[str]]] = None,
            public: bool = False,
    ) -> Tuple[Client, Optional[str]]:
        """
        Register a new client.

        Args:
            name: Display name of the client
            redirect_uris: Allowed callback URIs
            public: Register a public client, without secret

        Returns:
            The stored client and the plain text secret (None for public clients).
            This is the only time the secret is exposed.
        """
        client = Client.create_new_client(name, redirect_uris)
        secret = None if public else client.generate_secret(self.secret_hasher)

        client = await self.client_repository.save(client)
        logger.info(f"Client registered: {client.id} (public: {client.is_public()})")

        return client, secret

    async def get_client(self, id: str) -> Optional[Client]:
        return await self.client_repository.get_client(id)

    def authenticate(self, client: Client, secret: Optional[str]) -> bool:
        """Verify the plain text secret of a confidential client."""
        return client.authenticate(secret, self.secret_hasher)
