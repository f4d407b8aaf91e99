# oauth_server/application/dtos/base_dto.py

"""
Base class for custom DTOs.

This module defines the CustomBaseModel class that extends Pydantic's
BaseModel with the serialization behaviour shared by every response body.
"""

from typing import Any, Dict

from pydantic import BaseModel


class CustomBaseModel(BaseModel):
    """
    Base model for all DTOs of the application.

    Response bodies defined in RFC 6749 omit optional members instead of
    sending them as null, so serialization drops None and empty string values.
    """

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the model, omitting fields without a value.

        Returns:
            Dict[str, Any]: Dictionary with the model attributes, excluding None and ""
        """
        data = self.model_dump(exclude_none=True)
        return {k: v for k, v in data.items() if v != ""}
