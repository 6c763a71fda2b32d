"""Event stream models."""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from miaw.transport.exceptions import StreamError


class StreamState(str, Enum):
    """Lifecycle of a single stream connection."""

    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class ConversationEventType(str, Enum):
    """Event names the service sends on the stream."""

    ROUTING_RESULT = "CONVERSATION_ROUTING_RESULT"
    PARTICIPANT_CHANGED = "CONVERSATION_PARTICIPANT_CHANGED"
    MESSAGE = "CONVERSATION_MESSAGE"
    DELIVERY_ACKNOWLEDGEMENT = "CONVERSATION_DELIVERY_ACKNOWLEDGEMENT"
    READ_ACKNOWLEDGEMENT = "CONVERSATION_READ_ACKNOWLEDGEMENT"
    TYPING_STARTED_INDICATOR = "CONVERSATION_TYPING_STARTED_INDICATOR"
    TYPING_STOPPED_INDICATOR = "CONVERSATION_TYPING_STOPPED_INDICATOR"
    CLOSE_CONVERSATION = "CONVERSATION_CLOSE_CONVERSATION"


class StreamEvent(BaseModel):
    """One server-sent frame, exactly as received."""

    model_config = ConfigDict(frozen=True)

    id: str | None = Field(default=None, description="Last event id seen on the stream")
    event: str = Field(default="message", description="Event name")
    data: str = Field(default="", description="Raw data, multi-line data joined by newlines")
    retry: int | None = Field(default=None, description="Reconnection delay hint in ms")

    def data_json(self) -> Any:
        """Decode ``data`` as JSON. The controller never calls this."""
        return json.loads(self.data)


EventHandler = Callable[[StreamEvent], Awaitable[None] | None]
OpenHandler = Callable[[], Awaitable[None] | None]
ErrorHandler = Callable[[StreamError], Awaitable[None] | None]


@dataclass(frozen=True)
class StreamOptions:
    """Callbacks and resumption cursor for one stream.

    on_event, on_open and on_error may be plain or coroutine functions.
    on_close is called synchronously from close() and must be a plain
    function.
    """

    on_event: EventHandler
    last_event_id: str | None = None
    on_open: OpenHandler | None = None
    on_error: ErrorHandler | None = None
    on_close: Callable[[], None] | None = None
