# oauth_server/domain/models/server_options.py

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple


@dataclass(frozen=True)
class ServerOptions:
    """
    Immutable configuration shared by the authorization server components.

    Built once at startup and passed by reference to every service and grant
    that needs it.

    Attributes:
        access_token_ttl: Lifetime of access tokens, in seconds (None: never expire)
        refresh_token_ttl: Lifetime of refresh tokens, in seconds (None: never expire)
        rotate_refresh_tokens: Issue a new refresh token on every refresh exchange
        revoke_rotated_refresh_tokens: Delete the old refresh token once rotated
        owner_callable: Validates resource owner credentials for the password grant
        grants: Grant type identifiers the server must support
        owner_request_attribute: Request attribute holding the authenticated owner
        token_request_attribute: Request attribute receiving the validated access token
    """
    access_token_ttl: Optional[int] = 3600
    refresh_token_ttl: Optional[int] = 86400
    rotate_refresh_tokens: bool = False
    revoke_rotated_refresh_tokens: bool = True
    owner_callable: Optional[Callable[..., Any]] = None
    grants: Tuple[str, ...] = ()
    owner_request_attribute: str = "owner"
    token_request_attribute: str = "oauth_token"

    @classmethod
    def from_dict(cls, options: Optional[Dict[str, Any]] = None) -> "ServerOptions":
        """
        Build options from a dictionary of snake_case keys; missing keys use the defaults.
        """
        options = dict(options or {})
        unknown = set(options) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown server option(s): {', '.join(sorted(unknown))}")

        if "grants" in options:
            options["grants"] = tuple(options["grants"] or ())

        return cls(**options)
