"""Raw response shapes returned by the messaging service.

These mirror the service JSON exactly and are never returned to callers;
see miaw.conversation.normalize for the mapping to domain models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WireSender(_WireModel):
    """Sender block of a wire entry."""

    role: str
    subject: str
    app_type: str | None = Field(default=None, alias="appType")
    client_identifier: str | None = Field(default=None, alias="clientIdentifier")


class WireConversationEntry(_WireModel):
    """One entry from the conversation entries endpoint."""

    identifier: str
    entry_type: str = Field(..., alias="entryType")
    entry_payload: str | dict[str, Any] = Field(default="", alias="entryPayload")
    client_timestamp: int = Field(..., alias="clientTimestamp")
    transcripted_timestamp: int | None = Field(default=None, alias="transcriptedTimestamp")
    sender: WireSender
    sender_display_name: str | None = Field(default=None, alias="senderDisplayName")


class WireEntryListResponse(_WireModel):
    """Body of GET /conversation/{id}/entries."""

    conversation_entries: list[WireConversationEntry] = Field(
        default_factory=list, alias="conversationEntries"
    )


class WireMessageEntry(_WireModel):
    """Entry echoed back by the send-message endpoint."""

    id: str
    client_timestamp: int = Field(..., alias="clientTimestamp")


class WireMessageResponse(_WireModel):
    """Body of POST /conversation/{id}/message."""

    conversation_entries: list[WireMessageEntry] = Field(
        default_factory=list, alias="conversationEntries"
    )


class WireRoutingStatusResponse(_WireModel):
    """Body of GET /conversation/{id}."""

    conversation_id: str | None = Field(default=None, alias="conversationId")
    routing_status: str = Field(..., alias="routingStatus")
