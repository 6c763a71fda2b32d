"""Identifier generation for conversations, messages and receipts."""

from collections.abc import Callable
from uuid import uuid4

IdFactory = Callable[[], str]


def generate_id() -> str:
    """Return a random version-4 UUID as a lower-case string."""
    return str(uuid4()).lower()
