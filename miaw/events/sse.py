"""Incremental decoder for the text/event-stream line protocol."""

from miaw.events.models import StreamEvent


class SSEDecoder:
    """Turn stream lines into StreamEvent frames.

    Feed lines without their terminators; a frame is returned when a blank
    line completes one that carried data. The last event id persists across
    frames, as the protocol requires.
    """

    def __init__(self, last_event_id: str | None = None) -> None:
        self.last_event_id = last_event_id
        self._event = ""
        self._data: list[str] = []
        self._retry: int | None = None

    def feed(self, line: str) -> StreamEvent | None:
        """Consume one line, returning a frame when one is complete."""
        if not line:
            return self._dispatch()

        if line.startswith(":"):
            return None

        field, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if field == "data":
            self._data.append(value)
        elif field == "event":
            self._event = value
        elif field == "id":
            if "\0" not in value:
                self.last_event_id = value
        elif field == "retry":
            if value.isdigit():
                self._retry = int(value)

        return None

    def _dispatch(self) -> StreamEvent | None:
        if not self._data:
            self._event = ""
            return None

        event = StreamEvent(
            id=self.last_event_id,
            event=self._event or "message",
            data="\n".join(self._data),
            retry=self._retry,
        )
        self._event = ""
        self._data = []
        self._retry = None
        return event
