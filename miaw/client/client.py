"""Messaging for In-App and Web API client.

Usage:
    from miaw.client import MessagingClient

    async with MessagingClient(
        base_url="https://example.my.salesforce-scrt.com",
        org_id="00D000000000000",
        developer_name="Web_Chat",
    ) as client:
        token = await client.tokens.create()
        conversation = await client.conversations.create(token.access_token)
        await client.conversations.messages.send(
            token.access_token, conversation.id, {"text": "Hello!"}
        )
"""

from collections.abc import Mapping
from typing import Any

import httpx

from miaw.config import MessagingSettings, get_settings
from miaw.conversation import (
    ConversationCreateParams,
    ConversationEntry,
    ConversationEntryList,
    ConversationEntryListParams,
    ConversationGateway,
    ConversationRef,
    ConversationStatus,
    MessageParams,
    OperationResult,
    ReceiptParams,
)
from miaw.events import EventStreamController, StreamConnection, StreamOptions
from miaw.observability.logging import Logger, get_logger, setup_logging
from miaw.tokens import TokenLifecycleManager
from miaw.transport.exceptions import ConfigurationError
from miaw.transport.executor import RequestExecutor
from miaw.utils.ids import IdFactory, generate_id

REQUIRED_CONFIG = ("base_url", "org_id", "developer_name")


class MessagesResource:
    """client.conversations.messages"""

    def __init__(self, gateway: ConversationGateway) -> None:
        self._gateway = gateway

    async def send(
        self,
        token: str,
        conversation_id: str,
        params: MessageParams | Mapping[str, Any],
    ) -> ConversationEntry:
        """Send a text message."""
        return await self._gateway.send_message(token, conversation_id, params)


class TypingResource:
    """client.conversations.typing"""

    def __init__(self, gateway: ConversationGateway) -> None:
        self._gateway = gateway

    async def create(self, token: str, conversation_id: str) -> OperationResult:
        """Signal that the end user started typing."""
        return await self._gateway.send_typing_indicator(token, conversation_id, True)

    async def delete(self, token: str, conversation_id: str) -> OperationResult:
        """Signal that the end user stopped typing."""
        return await self._gateway.send_typing_indicator(token, conversation_id, False)


class ReceiptsResource:
    """client.conversations.receipts"""

    def __init__(self, gateway: ConversationGateway) -> None:
        self._gateway = gateway

    async def create(
        self,
        token: str,
        conversation_id: str,
        params: ReceiptParams | Mapping[str, Any],
    ) -> OperationResult:
        """Send delivery or read receipts."""
        return await self._gateway.send_receipts(token, conversation_id, params)


class ConversationsResource:
    """client.conversations"""

    def __init__(self, gateway: ConversationGateway) -> None:
        self._gateway = gateway
        self.messages = MessagesResource(gateway)
        self.typing = TypingResource(gateway)
        self.receipts = ReceiptsResource(gateway)

    async def create(
        self,
        token: str,
        params: ConversationCreateParams | Mapping[str, Any] | None = None,
    ) -> ConversationRef:
        return await self._gateway.create(token, params)

    async def close(self, token: str, conversation_id: str) -> OperationResult:
        return await self._gateway.close(token, conversation_id)

    async def end_session(self, token: str, conversation_id: str) -> OperationResult:
        return await self._gateway.end_session(token, conversation_id)

    async def status(self, token: str, conversation_id: str) -> ConversationStatus:
        return await self._gateway.status(token, conversation_id)

    async def list(
        self,
        token: str,
        conversation_id: str,
        params: ConversationEntryListParams | Mapping[str, Any] | None = None,
    ) -> ConversationEntryList:
        return await self._gateway.list(token, conversation_id, params)


class EventsResource:
    """client.events"""

    def __init__(self, controller: EventStreamController) -> None:
        self._controller = controller

    def stream(self, token: str, options: StreamOptions) -> StreamConnection:
        """Open the server-push event stream."""
        return self._controller.create_stream(token, options)


class MessagingClient:
    """Async client for the Messaging for In-App and Web API.

    Each instance owns its own HTTP client, services and logger; nothing is
    shared between instances.

    Attributes:
        tokens: Access token issuance and refresh
        conversations: Conversation operations
        events: Server-push event stream
    """

    def __init__(
        self,
        base_url: str,
        org_id: str,
        developer_name: str,
        *,
        logger: Logger | None = None,
        timeout: float | None = 30.0,
        stream_connect_timeout: float | None = 10.0,
        id_factory: IdFactory = generate_id,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Messaging API base URL
            org_id: Salesforce organization id
            developer_name: Embedded service deployment developer name
            logger: Logger for all components; a structlog logger if omitted
            timeout: Per-request deadline in seconds, None to disable
            stream_connect_timeout: Event stream connect deadline in seconds
            id_factory: Generator for conversation, message and receipt ids
            http_client: HTTP client to use instead of creating one

        Raises:
            ConfigurationError: If a required parameter is missing or empty
        """
        values = {"base_url": base_url, "org_id": org_id, "developer_name": developer_name}
        for param in REQUIRED_CONFIG:
            if not values[param]:
                raise ConfigurationError(
                    f"Missing configuration parameter: {param}", parameter=param
                )

        self.base_url = base_url.rstrip("/")
        self.org_id = org_id
        self.developer_name = developer_name
        self._logger = logger if logger is not None else get_logger("miaw")

        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=None)

        executor = RequestExecutor(
            self._http, self._logger, base_url=self.base_url, timeout=timeout
        )
        self.tokens = TokenLifecycleManager(executor, org_id, developer_name, self._logger)
        self.conversations = ConversationsResource(
            ConversationGateway(executor, developer_name, self._logger, id_factory)
        )
        self.events = EventsResource(
            EventStreamController(
                self._http,
                org_id,
                self._logger,
                base_url=self.base_url,
                connect_timeout=stream_connect_timeout,
            )
        )

        self._logger.info("messaging_client_initialized", base_url=self.base_url)

    @classmethod
    def from_settings(
        cls,
        settings: MessagingSettings | None = None,
        *,
        configure_logging: bool = True,
        **kwargs: Any,
    ) -> "MessagingClient":
        """Create a client from MessagingSettings.

        Args:
            settings: Settings to use, loaded with get_settings() if omitted
            configure_logging: Apply the settings' logging section to structlog
            **kwargs: Extra keyword arguments for the constructor

        Returns:
            Configured MessagingClient
        """
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(
                level=settings.logging.level,
                format=settings.logging.format,
                redact_pii=settings.logging.redact_pii,
            )

        return cls(
            base_url=settings.base_url,
            org_id=settings.org_id,
            developer_name=settings.developer_name,
            timeout=settings.request_timeout,
            stream_connect_timeout=settings.stream_connect_timeout,
            **kwargs,
        )

    async def __aenter__(self) -> "MessagingClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()
