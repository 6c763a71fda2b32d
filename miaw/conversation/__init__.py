"""Conversation gateway and domain models."""

from miaw.conversation.gateway import ConversationGateway
from miaw.conversation.models import (
    ConversationCreateParams,
    ConversationEntry,
    ConversationEntryList,
    ConversationEntryListParams,
    ConversationRef,
    ConversationStatus,
    EntryType,
    ListDirection,
    MessageParams,
    OperationResult,
    ReceiptEntry,
    ReceiptParams,
    ReceiptType,
    Sender,
)
from miaw.conversation.normalize import normalize_entry_list, normalize_wire_entry

__all__ = [
    "ConversationGateway",
    "ConversationCreateParams",
    "ConversationEntry",
    "ConversationEntryList",
    "ConversationEntryListParams",
    "ConversationRef",
    "ConversationStatus",
    "EntryType",
    "ListDirection",
    "MessageParams",
    "OperationResult",
    "ReceiptEntry",
    "ReceiptParams",
    "ReceiptType",
    "Sender",
    "normalize_entry_list",
    "normalize_wire_entry",
]
