# oauth_server/domain/exceptions.py

"""
Custom exceptions for the authorization server.

Domain exceptions are pure Python exceptions. The inbound adapters decide
how each one is presented over HTTP: protocol errors become RFC 6749
error bodies, storage errors become 500 responses.
"""

from typing import Optional


class DomainException(Exception):
    """
    Base exception for every error raised by the domain and application layers.

    Attributes:
        detail: Human readable description
        internal_code: Stable machine readable code
    """

    def __init__(self, detail: str = "", internal_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.internal_code = internal_code


class OAuth2Exception(DomainException):
    """
    Protocol error carrying an RFC 6749 error code.

    This is the only exception family the authorization server converts into
    the standard ``{"error", "error_description"}`` response body.
    """

    def __init__(self, description: str, error: str):
        super().__init__(detail=description, internal_code=error)
        self.error = error
        self.description = description

    def __repr__(self) -> str:
        return f"<OAuth2Exception(error={self.error!r}, description={self.description!r})>"

    @classmethod
    def access_denied(cls, description: str) -> "OAuth2Exception":
        return cls(description, "access_denied")

    @classmethod
    def invalid_request(cls, description: str) -> "OAuth2Exception":
        return cls(description, "invalid_request")

    @classmethod
    def invalid_client(cls, description: str) -> "OAuth2Exception":
        return cls(description, "invalid_client")

    @classmethod
    def invalid_grant(cls, description: str) -> "OAuth2Exception":
        return cls(description, "invalid_grant")

    @classmethod
    def invalid_scope(cls, description: str) -> "OAuth2Exception":
        return cls(description, "invalid_scope")

    @classmethod
    def server_error(cls, description: str) -> "OAuth2Exception":
        return cls(description, "server_error")

    @classmethod
    def unauthorized_client(cls, description: str) -> "OAuth2Exception":
        return cls(description, "unauthorized_client")

    @classmethod
    def unsupported_grant_type(cls, description: str) -> "OAuth2Exception":
        return cls(description, "unsupported_grant_type")

    @classmethod
    def unsupported_response_type(cls, description: str) -> "OAuth2Exception":
        return cls(description, "unsupported_response_type")

    @classmethod
    def unsupported_token_type(cls, description: str) -> "OAuth2Exception":
        return cls(description, "unsupported_token_type")


class InvalidAccessTokenException(DomainException):
    """Access token presented to a protected resource is unknown, expired or lacks scope."""

    def __init__(self, description: str, error: str = "invalid_token"):
        super().__init__(detail=description, internal_code=error)
        self.error = error
        self.description = description

    @classmethod
    def invalid_token(cls, description: str) -> "InvalidAccessTokenException":
        return cls(description, "invalid_token")


class TokenAlreadyExistsException(DomainException):
    """Raised by a token repository when the token string violates the unique constraint."""

    def __init__(self, detail: str = "Token already exists"):
        super().__init__(detail=detail, internal_code="TOKEN_ALREADY_EXISTS")


class DatabaseOperationException(DomainException):
    """Error in a database operation."""

    def __init__(self, detail: str = "Error executing database operation",
                 original_error: Optional[Exception] = None):
        error_info = f": {str(original_error)}" if original_error else ""
        super().__init__(detail=f"{detail}{error_info}", internal_code="DATABASE_OPERATION_ERROR")
        self.original_error = original_error
