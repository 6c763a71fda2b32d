"""Server-push event stream.

Usage:
    def on_event(event: StreamEvent) -> None:
        print(event.event, event.data)

    connection = controller.create_stream(
        token, StreamOptions(on_event=on_event, last_event_id=cursor)
    )
    ...
    connection.close()
"""

from miaw.events.models import (
    ConversationEventType,
    StreamEvent,
    StreamOptions,
    StreamState,
)
from miaw.events.sse import SSEDecoder
from miaw.events.stream import EventStreamController, StreamConnection

__all__ = [
    "ConversationEventType",
    "EventStreamController",
    "SSEDecoder",
    "StreamConnection",
    "StreamEvent",
    "StreamOptions",
    "StreamState",
]
