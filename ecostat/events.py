"""Pydantic models for the host event bus.

The host publishes many event kinds; only message updates and session
deletions matter here. Everything else parses to ``None``.
"""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    ValidationError,
)

from ecostat.logger import logger
from ecostat.models import UsageSnapshot

logger = logger.getChild("events")

ASSISTANT_ROLE = "assistant"


class CacheTokens(BaseModel):
    """Prompt-cache token counts."""

    model_config = ConfigDict(extra="ignore")

    read: NonNegativeInt = 0
    write: NonNegativeInt = 0


class TokenUsage(BaseModel):
    """Token usage block attached to assistant messages."""

    model_config = ConfigDict(extra="ignore")

    input: NonNegativeInt = 0
    output: NonNegativeInt = 0
    reasoning: NonNegativeInt = 0
    cache: CacheTokens = Field(default_factory=CacheTokens)


class MessageTime(BaseModel):
    """Epoch-millisecond timestamps of a message."""

    model_config = ConfigDict(extra="ignore")

    created: NonNegativeInt | None = None
    completed: NonNegativeInt | None = None


class MessageInfo(BaseModel):
    """Message payload carried by ``message.updated`` events."""

    model_config = ConfigDict(extra="ignore")

    id: str
    sessionID: str
    role: str
    tokens: TokenUsage = Field(default_factory=TokenUsage)
    cost: NonNegativeFloat = 0.0
    modelID: str | None = None
    providerID: str | None = None
    time: MessageTime = Field(default_factory=MessageTime)

    @property
    def is_assistant(self) -> bool:
        return self.role == ASSISTANT_ROLE

    @property
    def updated_at(self) -> datetime | None:
        """Return when this update was produced: completion time, else creation."""
        millis = self.time.completed or self.time.created
        if millis is None:
            return None
        return datetime.fromtimestamp(millis / 1000, tz=UTC)

    def snapshot(self) -> UsageSnapshot:
        """Return the cumulative usage carried by this message update."""
        return UsageSnapshot(
            input=self.tokens.input,
            output=self.tokens.output,
            reasoning=self.tokens.reasoning,
            cache_read=self.tokens.cache.read,
            cache_write=self.tokens.cache.write,
            cost=self.cost,
        )


class MessageUpdatedProperties(BaseModel):
    model_config = ConfigDict(extra="ignore")

    info: MessageInfo


class MessageUpdatedEvent(BaseModel):
    """A message was created or its cumulative usage changed."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["message.updated"]
    properties: MessageUpdatedProperties

    @property
    def info(self) -> MessageInfo:
        return self.properties.info


class SessionInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str


class SessionDeletedProperties(BaseModel):
    model_config = ConfigDict(extra="ignore")

    info: SessionInfo


class SessionDeletedEvent(BaseModel):
    """A session was removed by the host."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["session.deleted"]
    properties: SessionDeletedProperties

    @property
    def session_id(self) -> str:
        return self.properties.info.id


HostEvent = MessageUpdatedEvent | SessionDeletedEvent


def parse_event(raw: dict[str, Any]) -> HostEvent | None:
    """Parse a raw event dictionary into a typed host event."""
    event_type = raw.get("type")
    try:
        match event_type:
            case "message.updated":
                return MessageUpdatedEvent.model_validate(raw)
            case "session.deleted":
                return SessionDeletedEvent.model_validate(raw)
            case _:
                return None
    except ValidationError as exc:
        logger.debug(f"validate error: {event_type} {exc.error_count()} errors")
        return None
