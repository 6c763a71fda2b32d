"""Messaging for In-App and Web API client.

Usage:
    from miaw.client import MessagingClient

    async with MessagingClient.from_settings() as client:
        token = await client.tokens.create()
        conversation = await client.conversations.create(token.access_token)
"""

from miaw.client.client import MessagingClient

__all__ = ["MessagingClient"]
