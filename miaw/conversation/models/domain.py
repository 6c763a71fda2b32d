"""Caller-facing conversation models produced by normalization."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from miaw.conversation.models.enums import EntryType


class Sender(BaseModel):
    """Who produced a conversation entry."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Sender subject")
    type: str = Field(..., description="Sender role, e.g. 'endUser' or 'Chatbot'")


class ConversationEntry(BaseModel):
    """A single conversation entry.

    Immutable once built. Only Message entries carry text.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Entry identifier")
    type: str = Field(..., min_length=1, description="Entry type")
    text: str | None = Field(default=None, description="Message text")
    timestamp: str = Field(..., description="ISO-8601 UTC timestamp")
    sender: Sender
    routing_attributes: dict[str, Any] | None = Field(default=None)

    @model_validator(mode="after")
    def _text_only_on_messages(self) -> "ConversationEntry":
        if self.text is not None and self.type != EntryType.MESSAGE.value:
            raise ValueError(f"{self.type} entries cannot carry text")
        return self


class ConversationEntryList(BaseModel):
    """Normalized result of listing conversation entries.

    ``id`` comes from the first listed entry, so an empty listing has an
    empty id.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    entries: list[ConversationEntry] = Field(default_factory=list)


class ConversationStatus(BaseModel):
    """Routing status of a conversation.

    The service only reports the routing status. ``last_activity_timestamp``
    is the time of the status call and ``is_active`` is always True; neither
    reflects server state.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    status: str
    last_activity_timestamp: str
    is_active: bool = True


class ConversationRef(BaseModel):
    """Identifier of a created conversation."""

    model_config = ConfigDict(frozen=True)

    id: str


class OperationResult(BaseModel):
    """Acknowledgment of an operation with no response body."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
