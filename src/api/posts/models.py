"""Pydantic request models for the posts API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.database.messages.models import POSTED_FORMAT


class CreateMessageRequest(BaseModel):
    """Request model for creating a message.

    Any ``id`` or ``posted`` value in the body is ignored; both are assigned
    by the server.
    """

    sender: str = Field(..., description="Display name of the sender")
    content: str = Field(..., description="Message body")


class UpdateMessageRequest(BaseModel):
    """Request model for replacing an existing message."""

    id: int = Field(..., ge=0, description="ID of the message to replace")
    posted: str = Field(..., description="Post timestamp (YYYY-MM-DD HH:MM:SS)")
    sender: str = Field(..., description="Display name of the sender")
    content: str = Field(..., description="Message body")

    @field_validator("posted")
    @classmethod
    def validate_posted(cls, v: str) -> str:
        """Validate the timestamp pattern so listings stay chronological.

        :param v: Raw timestamp string.
        :returns: The validated string.
        :raises ValueError: If the value does not match YYYY-MM-DD HH:MM:SS.
        """
        try:
            parsed = datetime.strptime(v, POSTED_FORMAT)
        except ValueError as e:
            raise ValueError(f"posted must match YYYY-MM-DD HH:MM:SS, got {v!r}") from e
        # strptime accepts unpadded fields, which would break string ordering
        if parsed.strftime(POSTED_FORMAT) != v:
            raise ValueError(f"posted must be zero-padded YYYY-MM-DD HH:MM:SS, got {v!r}")
        return v
