"""Caller-supplied parameters for conversation operations."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from miaw.conversation.models.enums import ListDirection, ReceiptType


class _ParamsModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ConversationCreateParams(_ParamsModel):
    """Options for creating a conversation."""

    id: str | None = Field(default=None, description="Caller-chosen conversation id")
    routing_attributes: dict[str, Any] | None = Field(
        default=None, alias="routingAttributes", description="Routing metadata"
    )


class MessageParams(_ParamsModel):
    """A text message to send.

    Empty text is accepted here and rejected by the gateway, so that the
    failure is reported as a client validation error.
    """

    text: str = Field(default="", description="Message text")
    id: str | None = Field(default=None, description="Caller-chosen entry id")
    is_new_session: bool | None = Field(default=None, alias="isNewSession")
    routing_attributes: dict[str, Any] | None = Field(default=None, alias="routingAttributes")
    language: str | None = Field(default=None, description="Language code, e.g. 'en_US'")


class ReceiptEntry(_ParamsModel):
    """Acknowledgment for one conversation entry."""

    id: str | None = Field(default=None, description="Receipt id, generated if absent")
    type: ReceiptType | None = Field(default=None, description="Defaults to Delivery")
    conversation_entry_id: str = Field(..., min_length=1, alias="conversationEntryId")


class ReceiptParams(_ParamsModel):
    """Batch of receipts for one conversation."""

    entries: list[ReceiptEntry] = Field(default_factory=list)


class ConversationEntryListParams(_ParamsModel):
    """Filters for listing conversation entries."""

    limit: int | None = Field(default=None, ge=1)
    start_timestamp: str | int | None = Field(default=None, alias="startTimestamp")
    end_timestamp: str | int | None = Field(default=None, alias="endTimestamp")
    direction: ListDirection | None = None
    entry_type_filter: list[str] | None = Field(default=None, alias="entryTypeFilter")

    def to_query(self) -> dict[str, str]:
        """Serialize set filters as query parameters, skipping unset ones."""
        query = {
            "limit": self.limit,
            "startTimestamp": self.start_timestamp,
            "endTimestamp": self.end_timestamp,
            "direction": self.direction.value if self.direction else None,
            "entryTypeFilter": (
                ",".join(self.entry_type_filter)
                if self.entry_type_filter is not None
                else None
            ),
        }
        return {key: str(value) for key, value in query.items() if value is not None}
