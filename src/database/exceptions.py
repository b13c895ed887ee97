"""Custom exceptions for the message storage layer."""

from pathlib import Path


class StorageError(Exception):
    """Base exception for message storage errors."""


class StorageUnavailableError(StorageError):
    """Raised when the backing file exists but cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialise StorageUnavailableError.

        :param path: Path to the backing file.
        :param reason: Underlying OS error description.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Message store unavailable at {path}: {reason}")


class MalformedDataError(StorageError):
    """Raised when the backing file does not contain a list of messages."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialise MalformedDataError.

        :param path: Path to the backing file.
        :param reason: Parser error description.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed message data in {path}: {reason}")


class StorageWriteError(StorageError):
    """Raised when the message collection cannot be persisted."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialise StorageWriteError.

        :param path: Path to the backing file.
        :param reason: Underlying OS error description.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write messages to {path}: {reason}")
