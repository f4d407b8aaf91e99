# oauth_server/application/dtos/oauth_dto.py

"""
Transport independent request and response objects.

The inbound HTTP adapter parses a wire request into an OAuthRequest and
serializes the OAuthResponse returned by the authorization server. The
core never touches the web framework directly.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oauth_server.application.dtos.base_dto import CustomBaseModel


class OAuthRequest(BaseModel):
    """
    Normalized HTTP request.

    Header names are stored lower-cased so lookups are case-insensitive.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    method: str = "GET"
    headers: Dict[str, str] = Field(default_factory=dict)
    query_params: Dict[str, Any] = Field(default_factory=dict)
    body: Dict[str, Any] = Field(default_factory=dict)
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("headers", mode="before")
    def lower_header_names(cls, v: Optional[Dict[str, str]]) -> Dict[str, str]:
        return {str(k).lower(): str(value) for k, value in (v or {}).items()}

    def has_header(self, name: str) -> bool:
        return name.lower() in self.headers

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)


class OAuthResponse(BaseModel):
    """
    Normalized HTTP response.

    A body of None means an empty response body.
    """
    status_code: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[Dict[str, Any]] = None

    def with_header(self, name: str, value: str) -> "OAuthResponse":
        headers = dict(self.headers)
        headers[name] = value
        return self.model_copy(update={"headers": headers})

    def with_status(self, status_code: int) -> "OAuthResponse":
        return self.model_copy(update={"status_code": status_code})


class TokenResponse(CustomBaseModel):
    """Successful token endpoint response body (RFC 6749 section 5.1)."""
    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    scope: Optional[str] = None
    owner_id: Optional[Any] = None
    refresh_token: Optional[str] = None


class ErrorResponse(CustomBaseModel):
    """Error response body (RFC 6749 section 5.2)."""
    error: str
    error_description: str = ""
