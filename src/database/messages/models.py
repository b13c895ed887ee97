"""Pydantic model for persisted board messages."""

from datetime import datetime

from pydantic import BaseModel, Field

# Fixed-width pattern; lexicographic order of formatted values is chronological
POSTED_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_posted(value: datetime) -> str:
    """Render a datetime as a message timestamp.

    :param value: The datetime to format.
    :returns: Timestamp string in ``YYYY-MM-DD HH:MM:SS`` form.
    """
    return value.strftime(POSTED_FORMAT)


def now_posted() -> str:
    """Timestamp for a message posted now, using the server's local clock."""
    return format_posted(datetime.now())


class Message(BaseModel):
    """A single message on the board."""

    id: int = Field(default=0, description="Store-assigned message ID")
    posted: str = Field(default="", description="Post timestamp (YYYY-MM-DD HH:MM:SS)")
    sender: str = Field(default="", description="Display name of the sender")
    content: str = Field(default="", description="Message body, may contain newlines")
