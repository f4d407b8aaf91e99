# oauth_server/domain/models/client_domain_model.py

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Union


class SecretHasher(Protocol):
    """Generates client secrets and hashes them for storage."""

    def generate_secret(self) -> str:
        ...

    def hash_secret(self, secret: str) -> str:
        ...

    def verify_secret(self, plain_secret: str, hashed_secret: str) -> bool:
        ...


@dataclass
class Client:
    """
    Domain model for an OAuth2 client application.

    A client with an empty secret is a public client (browser or mobile
    application that cannot keep a secret); it is never asked for one.
    """
    id: str
    name: str
    secret: str = ""  # Hashed secret, empty for public clients
    redirect_uris: List[str] = field(default_factory=list)

    @classmethod
    def create_new_client(cls, name: str, redirect_uris: Optional[Union[str, List[str]]] = None) -> "Client":
        """
        Create a new client with a fresh unique identifier.

        Args:
            name: Display name of the client
            redirect_uris: Allowed callback URIs, as a list or a space-delimited string

        Returns:
            New public client (call generate_secret to make it confidential)
        """
        if isinstance(redirect_uris, str):
            redirect_uris = redirect_uris.split(" ")

        uris = [str(uri).strip() for uri in redirect_uris] if redirect_uris else []

        return cls(id=str(uuid.uuid4()), name=name, redirect_uris=uris)

    @classmethod
    def reconstitute(cls, data: Dict[str, Any]) -> "Client":
        """Rebuild a client from stored data."""
        return cls(
            id=data["id"],
            name=data["name"],
            secret=data.get("secret") or "",
            redirect_uris=list(data.get("redirect_uris") or []),
        )

    def has_redirect_uri(self, redirect_uri: str) -> bool:
        return redirect_uri in self.redirect_uris

    def is_public(self) -> bool:
        return not self.secret

    def authenticate(self, secret: Optional[str], hasher: SecretHasher) -> bool:
        """
        Verify a plain text secret against the stored hash.

        Args:
            secret: Plain text secret sent by the client
            hasher: Hasher the stored secret was produced with

        Returns:
            True if properly authenticated, False otherwise
        """
        return hasher.verify_secret(secret or "", self.secret)

    def generate_secret(self, hasher: SecretHasher) -> str:
        """
        Create a strong secret and store only its hash on the model.

        Returns:
            The plain text secret. This is the only time it is exposed.

        Raises:
            ValueError: If the client already has a secret
        """
        if self.secret:
            raise ValueError(f"Client {self.id} already has a secret")

        secret = hasher.generate_secret()
        self.secret = hasher.hash_secret(secret)

        return secret

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name={self.name}, public={self.is_public()})>"
