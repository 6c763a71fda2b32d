"""Enums for conversation domain."""

from enum import Enum


class EntryType(str, Enum):
    """Kinds of conversation entries the service records."""

    MESSAGE = "Message"
    TYPING_STARTED_INDICATOR = "TypingStartedIndicator"
    TYPING_STOPPED_INDICATOR = "TypingStoppedIndicator"
    DELIVERY_ACKNOWLEDGEMENT = "DeliveryAcknowledgement"
    READ_ACKNOWLEDGEMENT = "ReadAcknowledgement"
    ROUTING_RESULT = "RoutingResult"
    PARTICIPANT_CHANGED = "ParticipantChanged"
    CLOSE_CONVERSATION = "CloseConversation"


class ReceiptType(str, Enum):
    """Acknowledgment kinds for a conversation entry."""

    DELIVERY = "Delivery"
    READ = "Read"


class ListDirection(str, Enum):
    """Which end of the conversation history listing starts from."""

    FROM_END = "FromEnd"
    FROM_START = "FromStart"
