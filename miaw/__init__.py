"""Async client for the Messaging for In-App and Web API."""

from miaw.client import MessagingClient
from miaw.conversation import (
    ConversationEntry,
    ConversationEntryList,
    ConversationStatus,
    MessageParams,
    ReceiptParams,
)
from miaw.events import StreamEvent, StreamOptions, StreamState
from miaw.tokens import AuthenticatedTokenParams, TokenResponse, UnauthenticatedTokenParams
from miaw.transport import (
    ApiError,
    ConfigurationError,
    ErrorCategory,
    ErrorKind,
    MessagingError,
    RequestTimeoutError,
    StreamError,
    TransportError,
    ValidationFailedError,
)

__all__ = [
    "MessagingClient",
    # Models
    "AuthenticatedTokenParams",
    "ConversationEntry",
    "ConversationEntryList",
    "ConversationStatus",
    "MessageParams",
    "ReceiptParams",
    "StreamEvent",
    "StreamOptions",
    "StreamState",
    "TokenResponse",
    "UnauthenticatedTokenParams",
    # Errors
    "ApiError",
    "ConfigurationError",
    "ErrorCategory",
    "ErrorKind",
    "MessagingError",
    "RequestTimeoutError",
    "StreamError",
    "TransportError",
    "ValidationFailedError",
]
