"""Conversation-scoped requests against the messaging service.

ConversationGateway builds every conversation request body, sends it
through the shared RequestExecutor and normalizes the response into the
domain models in miaw.conversation.models.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from miaw.conversation.models import (
    ConversationCreateParams,
    ConversationEntry,
    ConversationEntryList,
    ConversationEntryListParams,
    ConversationRef,
    ConversationStatus,
    EntryType,
    MessageParams,
    OperationResult,
    ReceiptParams,
    ReceiptType,
    WireEntryListResponse,
    WireMessageResponse,
    WireRoutingStatusResponse,
)
from miaw.conversation.normalize import (
    normalize_entry_list,
    normalize_sent_message,
    synthesize_status,
)
from miaw.observability.logging import Logger
from miaw.transport.exceptions import MalformedResponseError, ValidationFailedError
from miaw.transport.executor import RequestExecutor, RequestSpec
from miaw.utils.ids import IdFactory, generate_id

CONVERSATION_PATH = "/iamessage/api/v2/conversation"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(model: type[ModelT], params: ModelT | Mapping[str, Any] | None) -> ModelT:
    """Accept a typed params model, a plain mapping or None."""
    if isinstance(params, model):
        return params
    try:
        return model.model_validate(dict(params or {}))
    except ValidationError as e:
        raise ValidationFailedError(f"Invalid {model.__name__}: {e}") from e


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class ConversationGateway:
    """Create, drive and inspect conversations.

    Holds no per-conversation state; identifiers are returned to the caller
    and passed back in on every call.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        developer_name: str,
        logger: Logger,
        id_factory: IdFactory = generate_id,
    ) -> None:
        """Initialize gateway.

        Args:
            executor: Executor shared with the other services
            developer_name: Embedded service deployment developer name
            logger: Logger for operation tracing
            id_factory: Generator for conversation, message and receipt ids
        """
        self._executor = executor
        self._developer_name = developer_name
        self._logger = logger
        self._new_id = id_factory

    def _parse(self, model: type[ModelT], data: Any, operation: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            self._logger.error("response_invalid", operation=operation, model=model.__name__)
            raise MalformedResponseError(
                f"Unexpected response for {operation}", operation
            ) from e

    async def create(
        self,
        token: str,
        params: ConversationCreateParams | Mapping[str, Any] | None = None,
    ) -> ConversationRef:
        """Create a conversation.

        Uses the caller's id when given, otherwise a generated one.

        Returns:
            ConversationRef with the conversation id
        """
        create_params = _coerce(ConversationCreateParams, params)
        conversation_id = create_params.id or self._new_id()

        self._logger.debug("conversation_create_started", conversation_id=conversation_id)

        body: dict[str, Any] = {
            "conversationId": conversation_id,
            "esDeveloperName": self._developer_name,
        }
        if create_params.routing_attributes:
            body["routingAttributes"] = create_params.routing_attributes

        await self._executor.execute(
            CONVERSATION_PATH,
            RequestSpec(method="POST", headers=_bearer(token), json_body=body),
            "conversations.create_conversation",
        )

        self._logger.info("conversation_created", conversation_id=conversation_id)
        return ConversationRef(id=conversation_id)

    async def close(self, token: str, conversation_id: str) -> OperationResult:
        """Close a conversation."""
        self._logger.debug("conversation_close_started", conversation_id=conversation_id)

        await self._executor.execute(
            f"{CONVERSATION_PATH}/{conversation_id}",
            RequestSpec(
                method="DELETE",
                headers=_bearer(token),
                params={"esDeveloperName": self._developer_name},
            ),
            "conversations.close_conversation",
        )
        return OperationResult()

    async def end_session(self, token: str, conversation_id: str) -> OperationResult:
        """End the active messaging session, leaving the conversation open."""
        self._logger.debug("conversation_session_end_started", conversation_id=conversation_id)

        await self._executor.execute(
            f"{CONVERSATION_PATH}/{conversation_id}/session",
            RequestSpec(
                method="DELETE",
                headers=_bearer(token),
                params={"esDeveloperName": self._developer_name},
            ),
            "conversations.end_conversation_session",
        )
        return OperationResult()

    async def status(self, token: str, conversation_id: str) -> ConversationStatus:
        """Get the routing status of a conversation.

        Only ``status`` comes from the service. ``last_activity_timestamp``
        is the time of this call and ``is_active`` is always True.
        """
        operation = "conversations.retrieve_routing_status"
        self._logger.debug("conversation_status_started", conversation_id=conversation_id)

        data = await self._executor.execute_json(
            f"{CONVERSATION_PATH}/{conversation_id}",
            RequestSpec(method="GET", headers=_bearer(token)),
            operation,
        )
        return synthesize_status(
            conversation_id, self._parse(WireRoutingStatusResponse, data, operation)
        )

    async def send_message(
        self,
        token: str,
        conversation_id: str,
        params: MessageParams | Mapping[str, Any],
    ) -> ConversationEntry:
        """Send a text message.

        Args:
            token: Access token
            conversation_id: Target conversation
            params: Message text and options

        Returns:
            The created entry, attributed to the end user

        Raises:
            ValidationFailedError: If the text is empty; nothing is sent
        """
        message = _coerce(MessageParams, params)
        if not message.text:
            raise ValidationFailedError("Message text is required")

        operation = "conversations.send_message"
        body: dict[str, Any] = {
            "message": {
                "id": message.id or self._new_id(),
                "messageType": "StaticContentMessage",
                "staticContent": {
                    "formatType": "Text",
                    "text": message.text,
                },
            },
            "esDeveloperName": self._developer_name,
        }
        if message.is_new_session is not None:
            body["isNewMessagingSession"] = message.is_new_session
        if message.routing_attributes:
            body["routingAttributes"] = message.routing_attributes
        if message.language:
            body["language"] = message.language

        data = await self._executor.execute_json(
            f"{CONVERSATION_PATH}/{conversation_id}/message",
            RequestSpec(method="POST", headers=_bearer(token), json_body=body),
            operation,
        )

        response = self._parse(WireMessageResponse, data, operation)
        if not response.conversation_entries:
            self._logger.error("message_response_empty", operation=operation)
            raise MalformedResponseError("Send message response has no entries", operation)

        entry = normalize_sent_message(response, message.text)
        self._logger.debug(
            "message_sent", conversation_id=conversation_id, entry_id=entry.id
        )
        return entry

    async def send_typing_indicator(
        self, token: str, conversation_id: str, is_typing: bool
    ) -> OperationResult:
        """Signal that the end user started or stopped typing."""
        entry_type = (
            EntryType.TYPING_STARTED_INDICATOR
            if is_typing
            else EntryType.TYPING_STOPPED_INDICATOR
        )

        await self._executor.execute(
            f"{CONVERSATION_PATH}/{conversation_id}/entry",
            RequestSpec(
                method="POST",
                headers=_bearer(token),
                json_body={"entryType": entry_type.value, "id": self._new_id()},
            ),
            "conversations.typing_indicator",
        )
        return OperationResult()

    async def send_receipts(
        self,
        token: str,
        conversation_id: str,
        params: ReceiptParams | Mapping[str, Any],
    ) -> OperationResult:
        """Acknowledge delivery or reading of conversation entries.

        Each receipt without an id gets a generated one; receipts without a
        type are Delivery receipts.
        """
        receipts = _coerce(ReceiptParams, params)
        acks = [
            {
                "id": entry.id or self._new_id(),
                "entryType": (entry.type or ReceiptType.DELIVERY).value,
                "conversationEntryId": entry.conversation_entry_id,
            }
            for entry in receipts.entries
        ]

        await self._executor.execute(
            f"{CONVERSATION_PATH}/{conversation_id}/acknowledge-entries",
            RequestSpec(method="POST", headers=_bearer(token), json_body={"acks": acks}),
            "conversations.sending_receipts",
        )
        return OperationResult()

    async def list(
        self,
        token: str,
        conversation_id: str,
        params: ConversationEntryListParams | Mapping[str, Any] | None = None,
    ) -> ConversationEntryList:
        """List conversation entries.

        The returned id is that of the first listed entry (empty string
        when there are none), not ``conversation_id``.
        """
        operation = "conversations.list_entries"
        filters = _coerce(ConversationEntryListParams, params)
        self._logger.debug("conversation_list_started", conversation_id=conversation_id)

        data = await self._executor.execute_json(
            f"{CONVERSATION_PATH}/{conversation_id}/entries",
            RequestSpec(method="GET", headers=_bearer(token), params=filters.to_query()),
            operation,
        )

        try:
            return normalize_entry_list(self._parse(WireEntryListResponse, data, operation))
        except ValidationError as e:
            self._logger.error("entry_normalization_failed", operation=operation)
            raise MalformedResponseError(
                f"Unexpected entries for {operation}", operation
            ) from e
