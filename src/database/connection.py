"""Process-wide message store management."""

import logging
from dataclasses import dataclass, field

from src.database.config import get_storage_settings
from src.database.messages.store import MessageStore

logger = logging.getLogger(__name__)


@dataclass
class _StoreState:
    """Container for the shared store instance."""

    store: MessageStore | None = field(default=None)


_state = _StoreState()


def create_message_store() -> MessageStore:
    """Create a message store from the storage settings.

    :returns: A store bound to the configured data file.
    """
    settings = get_storage_settings()
    logger.info(
        f"Message store configured: path={settings.data_file}, strict_reads={settings.strict_reads}"
    )
    return MessageStore(settings.data_file, strict_reads=settings.strict_reads)


def get_message_store() -> MessageStore:
    """Get or create the message store singleton.

    :returns: The shared message store.
    """
    if _state.store is None:
        _state.store = create_message_store()
    return _state.store


def reset_message_store() -> None:
    """Drop the shared store so the next call rebuilds it from settings."""
    _state.store = None
    get_storage_settings.cache_clear()
