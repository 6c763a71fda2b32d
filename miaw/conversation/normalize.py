"""Mapping from service wire shapes to caller-facing conversation models."""

import json
from datetime import UTC, datetime, timedelta
from typing import Any

from miaw.conversation.models import (
    ConversationEntry,
    ConversationEntryList,
    ConversationStatus,
    EntryType,
    Sender,
    WireConversationEntry,
    WireEntryListResponse,
    WireMessageResponse,
    WireRoutingStatusResponse,
)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# Sender of entries created by send_message; the response does not echo it.
END_USER_SENDER = Sender(id="user", type="endUser")


def to_iso(moment: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision and a Z suffix."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_ms_to_iso(epoch_ms: int) -> str:
    """Convert epoch milliseconds to an ISO-8601 UTC string."""
    return to_iso(EPOCH + timedelta(milliseconds=epoch_ms))


def _decode_payload(payload: str | dict[str, Any]) -> dict[str, Any]:
    if isinstance(payload, dict):
        return payload
    if not payload:
        return {}
    try:
        decoded = json.loads(payload)
    except ValueError:
        return {}
    return decoded if isinstance(decoded, dict) else {}


def _message_text(payload: dict[str, Any]) -> str | None:
    message = payload.get("abstractMessage")
    if not isinstance(message, dict):
        return None
    static = message.get("staticContent")
    if not isinstance(static, dict):
        return None
    text = static.get("text")
    return text if isinstance(text, str) else None


def normalize_wire_entry(wire: WireConversationEntry) -> ConversationEntry:
    """Convert one wire entry into a ConversationEntry.

    Text is extracted from the JSON payload of Message entries only. A
    payload that cannot be decoded leaves the entry without text.
    """
    payload = _decode_payload(wire.entry_payload)
    is_message = wire.entry_type == EntryType.MESSAGE.value
    routing_attributes = payload.get("routingAttributes")

    return ConversationEntry(
        id=wire.identifier,
        type=wire.entry_type,
        text=_message_text(payload) if is_message else None,
        timestamp=epoch_ms_to_iso(wire.client_timestamp),
        sender=Sender(id=wire.sender.subject, type=wire.sender.role),
        routing_attributes=routing_attributes if isinstance(routing_attributes, dict) else None,
    )


def normalize_entry_list(response: WireEntryListResponse) -> ConversationEntryList:
    """Convert a wire entry listing.

    The id is taken from the first wire entry, and is empty when the
    listing has no entries.
    """
    wire_entries = response.conversation_entries
    return ConversationEntryList(
        id=wire_entries[0].identifier if wire_entries else "",
        entries=[normalize_wire_entry(entry) for entry in wire_entries],
    )


def normalize_sent_message(response: WireMessageResponse, text: str) -> ConversationEntry:
    """Build the entry for a message we just sent from the first echoed entry."""
    entry = response.conversation_entries[0]
    return ConversationEntry(
        id=entry.id,
        type=EntryType.MESSAGE.value,
        text=text,
        timestamp=epoch_ms_to_iso(entry.client_timestamp),
        sender=END_USER_SENDER,
    )


def synthesize_status(
    conversation_id: str,
    response: WireRoutingStatusResponse,
    now: datetime | None = None,
) -> ConversationStatus:
    """Build a ConversationStatus from the routing status response.

    The service does not report activity, so the timestamp is ``now`` and
    the conversation is reported active.
    """
    return ConversationStatus(
        id=conversation_id,
        status=response.routing_status,
        last_activity_timestamp=to_iso(now or datetime.now(UTC)),
        is_active=True,
    )
