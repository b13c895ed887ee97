"""Message board posts API."""

from src.api.posts.endpoints import router

__all__ = ["router"]
