"""Server-push event stream connections.

Each EventStreamController.create_stream call opens exactly one SSE
connection. A connection never reconnects: when the server ends the stream
or the network drops, it closes itself and the caller decides whether to
open a new one from the last event id it saw.
"""

import asyncio
import inspect
from typing import Any

import httpx

from miaw.events.models import StreamEvent, StreamOptions, StreamState
from miaw.events.sse import SSEDecoder
from miaw.observability.logging import Logger
from miaw.transport.exceptions import StreamError, ValidationFailedError

STREAM_PATH = "/eventrouter/v1/sse"


async def _invoke(callback: Any, *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class StreamConnection:
    """Handle for one event stream.

    States move Idle -> Connecting -> Open -> Closed; Closed is final.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url: str,
        headers: dict[str, str],
        options: StreamOptions,
        logger: Logger,
        timeout: httpx.Timeout,
    ) -> None:
        self._http = http_client
        self._url = url
        self._headers = headers
        self._options = options
        self._logger = logger
        self._timeout = timeout
        self._decoder = SSEDecoder(options.last_event_id)
        self._task: asyncio.Task[None] | None = None
        self.state = StreamState.IDLE

    @property
    def last_event_id(self) -> str | None:
        """Cursor to pass to a new stream to resume after this one."""
        return self._decoder.last_event_id

    @property
    def closed(self) -> bool:
        return self.state is StreamState.CLOSED

    def start(self) -> None:
        """Start reading in a task on the running event loop."""
        if self.state is not StreamState.IDLE:
            return
        self.state = StreamState.CONNECTING
        self._task = asyncio.get_running_loop().create_task(self._run())

    def close(self) -> None:
        """Close the connection. Calling it again does nothing."""
        if self.state is StreamState.CLOSED:
            return
        self.state = StreamState.CLOSED
        self._logger.info("stream_closed", last_event_id=self.last_event_id)

        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

        if self._options.on_close is not None:
            self._options.on_close()

    async def wait_closed(self) -> None:
        """Wait until the reader task has finished."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def __aenter__(self) -> "StreamConnection":
        return self

    async def __aexit__(self, *args: Any) -> None:
        self.close()
        await self.wait_closed()

    async def _run(self) -> None:
        try:
            await self._consume()
        except httpx.HTTPError as e:
            self._logger.warning(
                "stream_transport_failed", error=str(e), error_type=type(e).__name__
            )
            if not self.closed:
                await self._report(StreamError(f"Stream connection lost: {e}"))
        except Exception as e:
            self._logger.error(
                "stream_handler_failed", error=str(e), error_type=type(e).__name__
            )
            if not self.closed:
                await self._report(StreamError(f"Stream handler failed: {e}"))
        finally:
            if not self.closed:
                self._logger.info("stream_disconnected", last_event_id=self.last_event_id)
                self.close()

    async def _consume(self) -> None:
        async with self._http.stream(
            "GET", self._url, headers=self._headers, timeout=self._timeout
        ) as response:
            if not response.is_success:
                error = StreamError(
                    f"Stream connection failed: {response.status_code}",
                    status_code=response.status_code,
                )
                self._logger.error(
                    "stream_connect_failed",
                    status_code=response.status_code,
                    category=error.category.value,
                )
                await self._report(error)
                return

            if self.closed:
                return
            self.state = StreamState.OPEN
            self._logger.info("stream_opened")
            await _invoke(self._options.on_open)

            async for line in response.aiter_lines():
                event = self._decoder.feed(line)
                if event is None:
                    continue
                if self.closed:
                    break
                await self._dispatch(event)
                if self.closed:
                    break

    async def _dispatch(self, event: StreamEvent) -> None:
        self._logger.debug("stream_event_received", event_name=event.event, event_id=event.id)
        await _invoke(self._options.on_event, event)

    async def _report(self, error: StreamError) -> None:
        try:
            await _invoke(self._options.on_error, error)
        except Exception as e:
            # on_error failures are logged only, never reported back to on_error.
            self._logger.error(
                "stream_error_handler_failed", error=str(e), error_type=type(e).__name__
            )


class EventStreamController:
    """Open event stream connections for a single organization."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        org_id: str,
        logger: Logger,
        base_url: str = "",
        connect_timeout: float | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            http_client: Client used for stream requests
            org_id: Organization id sent with every stream
            logger: Logger for connection lifecycle
            base_url: Service base URL
            connect_timeout: Connect deadline in seconds; reads never time out
        """
        self._http = http_client
        self._org_id = org_id
        self._logger = logger
        self.base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(connect_timeout, read=None)

    def create_stream(self, token: str, options: StreamOptions) -> StreamConnection:
        """Open a stream and start dispatching frames to ``options.on_event``.

        Must be called from a running event loop.

        Args:
            token: Access token
            options: Callbacks and optional resumption cursor

        Returns:
            The connection handle

        Raises:
            ValidationFailedError: If the token is empty; nothing is opened
        """
        if not token:
            raise ValidationFailedError("Authentication token is required")

        headers = {
            "Accept": "text/event-stream",
            "Authorization": f"Bearer {token}",
            "X-Org-Id": self._org_id,
        }
        if options.last_event_id:
            headers["Last-Event-Id"] = options.last_event_id

        self._logger.debug("stream_create_started", resuming=bool(options.last_event_id))

        connection = StreamConnection(
            self._http,
            f"{self.base_url}{STREAM_PATH}",
            headers,
            options,
            self._logger,
            self._timeout,
        )
        connection.start()
        return connection
