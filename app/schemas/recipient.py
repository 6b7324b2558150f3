from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

MIN_TOKEN_LENGTH = 20


def is_valid_token(token: Any) -> bool:
    """Sanity filter for directory tokens: text longer than ``MIN_TOKEN_LENGTH``."""
    return isinstance(token, str) and len(token) > MIN_TOKEN_LENGTH


class Recipient(BaseModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="id")
    token: Any = None

    @field_validator("id", mode="before")
    @classmethod
    def convert_id_to_str(cls, value):
        # Directory ids may be ObjectId, int, UUID or any other BSON type
        if isinstance(value, str):
            return value
        return str(value)

    @property
    def has_valid_token(self) -> bool:
        return is_valid_token(self.token)
