"""Message persistence: model and file-backed store."""

from src.database.messages.models import POSTED_FORMAT, Message, format_posted, now_posted
from src.database.messages.store import MessageStore

__all__ = [
    "POSTED_FORMAT",
    "Message",
    "MessageStore",
    "format_posted",
    "now_posted",
]
