# oauth_server/domain/models/token_domain_model.py

"""
Domain models for bearer tokens.

Access tokens and refresh tokens share the same shape: an opaque random
string bound to an optional owner, an optional client, a list of scope
names and an optional expiry. A token without expiry never expires.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Protocol, Type, TypeVar, Union, runtime_checkable

from oauth_server.domain.models.client_domain_model import Client
from oauth_server.domain.models.scope_domain_model import Scope

T = TypeVar("T", bound="AbstractToken")

TOKEN_BYTES = 20

ScopesInput = Union[str, Scope, Iterable[Union[str, Scope]], None]


@runtime_checkable
class TokenOwner(Protocol):
    """Anything a token can be issued for (a user, a device, ...)."""

    @property
    def token_owner_id(self) -> Any:
        ...


@dataclass(frozen=True)
class OwnerReference:
    """Owner rebuilt from storage, where only its identifier is kept."""
    token_owner_id: Any


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_token() -> str:
    """Opaque bearer token string: 20 random bytes, hex encoded (40 characters)."""
    return secrets.token_hex(TOKEN_BYTES)


def normalize_scopes(scopes: ScopesInput) -> List[str]:
    """
    Normalize scopes to a list of names.

    Accepts a space-delimited string, a single Scope, or an iterable of
    strings and Scope objects.
    """
    if scopes is None:
        return []
    if isinstance(scopes, (str, Scope)):
        scopes = str(scopes).split(" ")
    return [str(scope) for scope in scopes if str(scope)]


class AbstractToken:
    """
    Common behaviour of access and refresh tokens.

    The token string and the expiry are fixed when the token is built and
    cannot be changed afterwards.
    """

    __slots__ = ("_token", "_owner", "_client", "_scopes", "_expires_at")

    def __init__(
            self,
            token: str,
            owner: Optional[TokenOwner] = None,
            client: Optional[Client] = None,
            scopes: ScopesInput = None,
            expires_at: Optional[datetime] = None,
    ):
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        self._token = token
        self._owner = owner
        self._client = client
        self._scopes = normalize_scopes(scopes)
        self._expires_at = expires_at

    @classmethod
    def _create_new(
            cls: Type[T],
            ttl: Optional[int],
            owner: Optional[TokenOwner] = None,
            client: Optional[Client] = None,
            scopes: ScopesInput = None,
    ) -> T:
        expires_at = utcnow() + timedelta(seconds=ttl) if ttl is not None else None
        return cls(
            token=generate_token(),
            owner=owner,
            client=client,
            scopes=scopes,
            expires_at=expires_at,
        )

    @classmethod
    def reconstitute(cls: Type[T], data: Dict[str, Any]) -> T:
        """Rebuild a token from stored data, all fields fixed."""
        return cls(
            token=data["token"],
            owner=data.get("owner"),
            client=data.get("client"),
            scopes=data.get("scopes") or [],
            expires_at=data.get("expires_at"),
        )

    @property
    def token(self) -> str:
        return self._token

    @property
    def owner(self) -> Optional[TokenOwner]:
        return self._owner

    @property
    def client(self) -> Optional[Client]:
        return self._client

    @property
    def scopes(self) -> List[str]:
        return list(self._scopes)

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._expires_at

    def get_expires_in(self, now: Optional[datetime] = None) -> Optional[int]:
        """
        Seconds left before the token expires.

        Returns:
            Remaining seconds (never negative), or None for tokens that never expire
        """
        if self._expires_at is None:
            return None
        remaining = (self._expires_at - (now or utcnow())).total_seconds()
        return max(0, round(remaining))

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self._expires_at is None:
            return False
        return self._expires_at < (now or utcnow())

    def match_scopes(self, scopes: ScopesInput) -> bool:
        """Check that every requested scope is granted by this token."""
        return set(normalize_scopes(scopes)).issubset(self._scopes)

    def is_valid(self, scopes: ScopesInput = None) -> bool:
        """A token is valid if it is not expired and grants the requested scopes."""
        return not self.is_expired() and self.match_scopes(scopes)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(token={self._token[:6]}..., scopes={self._scopes}, expires_at={self._expires_at})>"


class AccessToken(AbstractToken):
    """Bearer token presented to protected resources."""

    __slots__ = ()

    @classmethod
    def create_new_access_token(
            cls,
            ttl: Optional[int],
            owner: Optional[TokenOwner] = None,
            client: Optional[Client] = None,
            scopes: ScopesInput = None,
    ) -> "AccessToken":
        return cls._create_new(ttl, owner, client, scopes)


class RefreshToken(AbstractToken):
    """Long-lived token exchanged for new access tokens."""

    __slots__ = ()

    @classmethod
    def create_new_refresh_token(
            cls,
            ttl: Optional[int],
            owner: Optional[TokenOwner] = None,
            client: Optional[Client] = None,
            scopes: ScopesInput = None,
    ) -> "RefreshToken":
        return cls._create_new(ttl, owner, client, scopes)
