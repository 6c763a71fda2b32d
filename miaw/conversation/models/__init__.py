"""Conversation models.

Contains all Pydantic models for the conversation gateway:
- Domain models returned to callers
- Parameter models accepted from callers
- Wire models mirroring raw service responses
"""

from miaw.conversation.models.domain import (
    ConversationEntry,
    ConversationEntryList,
    ConversationRef,
    ConversationStatus,
    OperationResult,
    Sender,
)
from miaw.conversation.models.enums import EntryType, ListDirection, ReceiptType
from miaw.conversation.models.params import (
    ConversationCreateParams,
    ConversationEntryListParams,
    MessageParams,
    ReceiptEntry,
    ReceiptParams,
)
from miaw.conversation.models.wire import (
    WireConversationEntry,
    WireEntryListResponse,
    WireMessageEntry,
    WireMessageResponse,
    WireRoutingStatusResponse,
    WireSender,
)

__all__ = [
    # Enums
    "EntryType",
    "ListDirection",
    "ReceiptType",
    # Domain
    "ConversationEntry",
    "ConversationEntryList",
    "ConversationRef",
    "ConversationStatus",
    "OperationResult",
    "Sender",
    # Params
    "ConversationCreateParams",
    "ConversationEntryListParams",
    "MessageParams",
    "ReceiptEntry",
    "ReceiptParams",
    # Wire
    "WireConversationEntry",
    "WireEntryListResponse",
    "WireMessageEntry",
    "WireMessageResponse",
    "WireRoutingStatusResponse",
    "WireSender",
]
