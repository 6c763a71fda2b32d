"""Unit tests for EventStreamController and StreamConnection."""

import asyncio
from collections.abc import AsyncIterator
from unittest.mock import MagicMock, Mock

import httpx
import pytest

from miaw.events.models import StreamEvent, StreamOptions, StreamState
from miaw.events.stream import STREAM_PATH, EventStreamController
from miaw.transport.errors import ErrorCategory, ErrorKind
from miaw.transport.exceptions import StreamError, ValidationFailedError

FRAMES = (
    b"id: 1\nevent: CONVERSATION_MESSAGE\ndata: {\"n\": 1}\n\n"
    b": heartbeat\n\n"
    b"id: 2\nevent: CONVERSATION_TYPING_STARTED_INDICATOR\ndata: {\"n\": 2}\n\n"
)


@pytest.fixture
def controller(http_client, mock_logger: MagicMock) -> EventStreamController:
    return EventStreamController(
        http_client,
        "org-1",
        mock_logger,
        base_url="https://test.example.com",
        connect_timeout=5.0,
    )


def sse_response(content: bytes, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code, headers={"content-type": "text/event-stream"}, content=content
    )


class TestCreateStream:
    """Tests for EventStreamController.create_stream."""

    async def test_empty_token_opens_nothing(self, controller, fake_service) -> None:
        """An empty token fails before any connection."""
        with pytest.raises(ValidationFailedError, match="Authentication token is required"):
            controller.create_stream("", StreamOptions(on_event=Mock()))

        await asyncio.sleep(0)
        assert fake_service.requests == []

    async def test_request_headers(self, controller, fake_service) -> None:
        """The stream request carries SSE, auth and org headers."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(b""))

        connection = controller.create_stream("tok-1", StreamOptions(on_event=Mock()))
        await connection.wait_closed()

        request = fake_service.last_request
        assert str(request.url) == f"https://test.example.com{STREAM_PATH}"
        assert request.headers["Accept"] == "text/event-stream"
        assert request.headers["Authorization"] == "Bearer tok-1"
        assert request.headers["X-Org-Id"] == "org-1"
        assert "Last-Event-Id" not in request.headers

    async def test_resume_header(self, controller, fake_service) -> None:
        """A resume cursor is sent as Last-Event-Id."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(b""))

        connection = controller.create_stream(
            "tok-1", StreamOptions(on_event=Mock(), last_event_id="41")
        )
        await connection.wait_closed()

        assert fake_service.last_request.headers["Last-Event-Id"] == "41"
        assert connection.last_event_id == "41"

    async def test_starts_connecting(self, controller, fake_service) -> None:
        """A new connection is connecting until the reader runs."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(b""))

        connection = controller.create_stream("tok-1", StreamOptions(on_event=Mock()))

        assert connection.state is StreamState.CONNECTING
        await connection.wait_closed()


class TestStreamConnection:
    """Tests for StreamConnection lifecycle and dispatch."""

    async def test_events_dispatched_in_order(self, controller, fake_service) -> None:
        """Frames are delivered in order with their names and ids."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(FRAMES))
        received: list[StreamEvent] = []
        on_open = Mock()

        connection = controller.create_stream(
            "tok-1", StreamOptions(on_event=received.append, on_open=on_open)
        )
        await connection.wait_closed()

        on_open.assert_called_once_with()
        assert [(e.id, e.event) for e in received] == [
            ("1", "CONVERSATION_MESSAGE"),
            ("2", "CONVERSATION_TYPING_STARTED_INDICATOR"),
        ]
        assert received[1].data_json() == {"n": 2}
        assert connection.last_event_id == "2"

    async def test_closes_exactly_once_on_disconnect(self, controller, fake_service) -> None:
        """When the server ends the stream the connection closes once."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(FRAMES))
        on_close = Mock()

        connection = controller.create_stream(
            "tok-1", StreamOptions(on_event=Mock(), on_close=on_close)
        )
        connection.close = Mock(wraps=connection.close)  # type: ignore[method-assign]
        await connection.wait_closed()

        connection.close.assert_called_once_with()
        on_close.assert_called_once_with()
        assert connection.state is StreamState.CLOSED

    async def test_close_is_idempotent(self, controller, fake_service) -> None:
        """Closing twice notifies once."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(b""))
        on_close = Mock()

        connection = controller.create_stream(
            "tok-1", StreamOptions(on_event=Mock(), on_close=on_close)
        )
        connection.close()
        connection.close()
        await connection.wait_closed()

        on_close.assert_called_once_with()
        assert connection.closed

    async def test_no_events_after_close(self, controller, fake_service) -> None:
        """Closing from a handler stops further dispatch."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(FRAMES))
        received: list[StreamEvent] = []
        holder: dict = {}

        def on_event(event: StreamEvent) -> None:
            received.append(event)
            holder["connection"].close()

        holder["connection"] = controller.create_stream(
            "tok-1", StreamOptions(on_event=on_event)
        )
        await holder["connection"].wait_closed()

        assert [e.id for e in received] == ["1"]

    async def test_caller_close_stops_open_stream(self, controller, fake_service) -> None:
        """Closing an open stream cancels the reader."""
        first_event = asyncio.Event()

        async def endless() -> AsyncIterator[bytes]:
            yield b"id: 1\ndata: first\n\n"
            await asyncio.Event().wait()

        fake_service.add_handler(
            "GET",
            STREAM_PATH,
            lambda request: httpx.Response(
                200, headers={"content-type": "text/event-stream"}, content=endless()
            ),
        )
        on_close = Mock()

        connection = controller.create_stream(
            "tok-1",
            StreamOptions(on_event=lambda event: first_event.set(), on_close=on_close),
        )
        await asyncio.wait_for(first_event.wait(), timeout=1)
        assert connection.state is StreamState.OPEN

        connection.close()
        await asyncio.wait_for(connection.wait_closed(), timeout=1)

        on_close.assert_called_once_with()
        assert connection.state is StreamState.CLOSED

    async def test_async_callbacks(self, controller, fake_service) -> None:
        """Coroutine callbacks are awaited."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(FRAMES))
        received: list[str | None] = []
        opened = []

        async def on_event(event: StreamEvent) -> None:
            await asyncio.sleep(0)
            received.append(event.id)

        async def on_open() -> None:
            opened.append(True)

        connection = controller.create_stream(
            "tok-1", StreamOptions(on_event=on_event, on_open=on_open)
        )
        await connection.wait_closed()

        assert opened == [True]
        assert received == ["1", "2"]

    async def test_rejected_connection_reports_error(self, controller, fake_service) -> None:
        """A non-success status is reported and the stream closes."""
        fake_service.add_handler(
            "GET", STREAM_PATH, lambda request: sse_response(b"", status_code=401)
        )
        errors: list[StreamError] = []
        on_event = Mock()
        on_open = Mock()
        on_close = Mock()

        connection = controller.create_stream(
            "tok-1",
            StreamOptions(
                on_event=on_event, on_open=on_open, on_error=errors.append, on_close=on_close
            ),
        )
        await connection.wait_closed()

        assert len(errors) == 1
        assert errors[0].status_code == 401
        assert errors[0].category is ErrorCategory.AUTHENTICATION_ERROR
        assert errors[0].kind is ErrorKind.STREAM
        on_event.assert_not_called()
        on_open.assert_not_called()
        on_close.assert_called_once_with()

    async def test_network_failure_reports_error(self, controller, fake_service) -> None:
        """A transport failure is reported as a connection error."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fake_service.add_handler("GET", STREAM_PATH, refuse)
        errors: list[StreamError] = []

        connection = controller.create_stream(
            "tok-1", StreamOptions(on_event=Mock(), on_error=errors.append)
        )
        await connection.wait_closed()

        assert len(errors) == 1
        assert errors[0].status_code is None
        assert errors[0].category is ErrorCategory.CONNECTION_ERROR
        assert connection.closed

    async def test_handler_exception_reported(self, controller, fake_service) -> None:
        """An exception from on_event is reported and the stream closes."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(FRAMES))
        errors: list[StreamError] = []
        on_event = Mock(side_effect=RuntimeError("handler broke"))

        connection = controller.create_stream(
            "tok-1", StreamOptions(on_event=on_event, on_error=errors.append)
        )
        await connection.wait_closed()

        on_event.assert_called_once()
        assert len(errors) == 1
        assert "handler broke" in str(errors[0])
        assert connection.closed

    async def test_failing_error_handler_still_closes(
        self, controller, fake_service, mock_logger
    ) -> None:
        """An exception from on_error is logged once and the stream still closes."""
        fake_service.add_handler(
            "GET", STREAM_PATH, lambda request: sse_response(b"", status_code=401)
        )
        reported: list[str] = []
        on_close = Mock()

        def on_error(error: StreamError) -> None:
            reported.append(str(error))
            raise RuntimeError("boom")

        connection = controller.create_stream(
            "tok-1", StreamOptions(on_event=Mock(), on_error=on_error, on_close=on_close)
        )
        await connection.wait_closed()

        assert reported == ["Stream connection failed: 401"]
        assert connection.state is StreamState.CLOSED
        on_close.assert_called_once_with()
        assert connection._task is not None
        assert connection._task.exception() is None
        error_events = [c.args[0] for c in mock_logger.error.call_args_list]
        assert error_events.count("stream_error_handler_failed") == 1

    async def test_failing_error_handler_after_transport_failure(
        self, controller, fake_service
    ) -> None:
        """A raising on_error after a network failure does not leave the stream open."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fake_service.add_handler("GET", STREAM_PATH, refuse)
        on_error = Mock(side_effect=RuntimeError("boom"))
        on_close = Mock()

        connection = controller.create_stream(
            "tok-1", StreamOptions(on_event=Mock(), on_error=on_error, on_close=on_close)
        )
        await connection.wait_closed()

        on_error.assert_called_once()
        on_close.assert_called_once_with()
        assert connection.closed

    async def test_context_manager_closes(self, controller, fake_service) -> None:
        """Leaving the async context closes the connection."""
        fake_service.add_handler("GET", STREAM_PATH, lambda request: sse_response(b""))
        on_close = Mock()

        async with controller.create_stream(
            "tok-1", StreamOptions(on_event=Mock(), on_close=on_close)
        ) as connection:
            pass

        assert connection.closed
        on_close.assert_called_once_with()
