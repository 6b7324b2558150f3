from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from pydantic.alias_generators import to_camel

Scalar = str | int | float | bool | None


class AudienceType(str, Enum):
    ALL = "all"
    TOPIC = "topic"
    TOKENS = "tokens"
    TOKEN = "token"


class SendNotificationRequest(BaseModel):
    title: Annotated[str, Field(min_length=1)]
    body: Annotated[str, Field(min_length=1)]
    data: dict[str, Scalar] | None = None
    token: str | None = None
    tokens: list[str] | None = None
    topic: str | None = None
    broadcast: StrictBool = Field(default=False, alias="all")

    @property
    def audience(self) -> AudienceType | None:
        """Resolve the audience selector.

        When several selectors are present the first match wins, in this order:
        ``all`` (only when exactly true), ``topic``, a non-empty ``tokens`` list,
        then ``token``. Returns None when no selector is usable.
        """
        if self.broadcast is True:
            return AudienceType.ALL
        if self.topic:
            return AudienceType.TOPIC
        if self.tokens:
            return AudienceType.TOKENS
        if self.token:
            return AudienceType.TOKEN
        return None


class NotificationContent(BaseModel):
    """Message content shared by every recipient of one request."""

    title: str
    body: str
    data: dict[str, str]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BatchResult(CamelModel):
    index: int
    size: int
    success_count: int
    failure_count: int


class DispatchSummary(CamelModel):
    success: bool
    message: str
    audience: Literal[AudienceType.ALL] = AudienceType.ALL
    total_tokens: int = 0
    success_count: int = 0
    failure_count: int = 0
    batches: list[BatchResult] = Field(default_factory=list)
    error: str | None = None


class MulticastResult(CamelModel):
    success_count: int
    failure_count: int


class SendNotificationResponse(CamelModel):
    success: bool = True
    message: str = "Notification sent"
    audience: Literal[AudienceType.TOPIC, AudienceType.TOKENS, AudienceType.TOKEN]
    response: str | MulticastResult


NotificationResult = Annotated[
    SendNotificationResponse | DispatchSummary, Field(discriminator="audience")
]
