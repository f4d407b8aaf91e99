# oauth_server/domain/models/scope_domain_model.py

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Scope:
    """Domain model for a named permission unit attached to tokens."""
    id: Optional[int]  # None for scopes not yet persisted
    name: str
    description: str = ""
    is_default: bool = False

    @classmethod
    def create_new_scope(
            cls,
            id: Optional[int],
            name: str,
            description: Optional[str] = None,
            is_default: bool = False,
    ) -> "Scope":
        return cls(id=id, name=name, description=description or "", is_default=is_default)

    @classmethod
    def reconstitute(cls, data: Dict[str, Any]) -> "Scope":
        return cls(
            id=data.get("id"),
            name=data["name"],
            description=data.get("description") or "",
            is_default=bool(data.get("is_default", False)),
        )

    def __str__(self) -> str:
        return self.name
