# oauth_server/application/dtos/__init__.py

from oauth_server.application.dtos.base_dto import CustomBaseModel
from oauth_server.application.dtos.oauth_dto import ErrorResponse, OAuthRequest, OAuthResponse, TokenResponse

__all__ = [
    "CustomBaseModel",
    "ErrorResponse",
    "OAuthRequest",
    "OAuthResponse",
    "TokenResponse",
]
