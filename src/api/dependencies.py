"""Shared dependencies for API endpoints."""

from src.database.connection import get_message_store
from src.database.messages.store import MessageStore


def get_store() -> MessageStore:
    """Provide the message store to endpoints.

    Overridden in tests to point at a temporary data file.

    :returns: The shared message store.
    """
    return get_message_store()
