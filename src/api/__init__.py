"""Message board HTTP API."""

from src.api.app import app
from src.api.client import MessageBoardClient, MessageBoardClientError

__all__ = ["MessageBoardClient", "MessageBoardClientError", "app"]
