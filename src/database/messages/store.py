"""File-backed message store.

The whole collection lives in a single JSON array on disk. Every operation
loads the complete file, and every mutation writes the complete file back.
This is only suitable for small boards with a low write rate.

Mutations on the same file are serialised by a process-wide lock and written
via a temporary file plus ``os.replace``, so readers never observe a partially
written file and concurrent writers never lose each other's changes.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
import threading
from pathlib import Path

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from src.database.exceptions import (
    MalformedDataError,
    StorageUnavailableError,
    StorageWriteError,
)
from src.database.messages.models import Message

logger = logging.getLogger(__name__)

_MESSAGES_ADAPTER = TypeAdapter(list[Message])

# One mutation lock per resolved data file, shared by every store instance
_path_locks: dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _path_locks_guard:
        return _path_locks.setdefault(key, threading.Lock())


class MessageStore:
    """CRUD operations over a JSON file of messages."""

    def __init__(self, path: Path, *, strict_reads: bool = False) -> None:
        """Initialise the store.

        :param path: Location of the JSON data file. It need not exist yet.
        :param strict_reads: If True, read failures raise instead of yielding
            an empty collection.
        """
        self.path = Path(path)
        self.strict_reads = strict_reads
        self._lock = _lock_for(self.path)

    def read_all(self) -> list[Message]:
        """Load every message in file order.

        A missing file is an empty store. Unless ``strict_reads`` is set, an
        unreadable or malformed file is also treated as empty.

        :returns: All stored messages.
        :raises StorageUnavailableError: In strict mode, if the file cannot be read.
        :raises MalformedDataError: In strict mode, if the file cannot be parsed.
        """
        if self.strict_reads:
            return self._load()

        try:
            return self._load()
        except (StorageUnavailableError, MalformedDataError) as e:
            logger.warning(f"Degraded read, returning no messages: {e}")
            return []

    def list_sorted_by_posted_descending(self) -> list[Message]:
        """Load every message, newest first.

        Ordering compares the ``posted`` strings, which matches chronological
        order for the fixed ``YYYY-MM-DD HH:MM:SS`` format. Equal timestamps
        keep their file order.

        :returns: Messages sorted by ``posted`` descending.
        """
        return sorted(self.read_all(), key=lambda message: message.posted, reverse=True)

    def get_by_id(self, message_id: int) -> Message | None:
        """Find a message by ID.

        :param message_id: The message ID.
        :returns: The message, or None if no message has that ID.
        """
        return next((m for m in self.read_all() if m.id == message_id), None)

    def create(self, candidate: Message) -> Message:
        """Store a new message under the next free ID.

        The candidate's ``id`` is ignored. The caller is responsible for
        setting ``posted``.

        :param candidate: The message to store.
        :returns: The stored message with its assigned ID.
        :raises StorageError: If the existing file is unusable or the write fails.
        """
        with self._lock:
            messages = self._load()
            next_id = max((m.id for m in messages), default=0) + 1
            stored = candidate.model_copy(update={"id": next_id})
            messages.append(stored)
            self._write(messages)

        logger.info(f"Created message: id={stored.id}, sender={stored.sender!r}")
        return stored

    def update(self, record: Message) -> bool:
        """Replace the message that has the same ID as ``record``.

        :param record: The new version of the message.
        :returns: True if a message was replaced, False if the ID was absent.
        :raises StorageError: If the existing file is unusable or the write fails.
        """
        with self._lock:
            messages = self._load()
            index = next((i for i, m in enumerate(messages) if m.id == record.id), None)
            if index is None:
                logger.info(f"Update skipped, message not found: id={record.id}")
                return False

            messages[index] = record.model_copy()
            self._write(messages)

        logger.info(f"Updated message: id={record.id}")
        return True

    def remove(self, message_id: int) -> bool:
        """Delete the message with the given ID.

        Removing an ID that does not exist is a no-op.

        :param message_id: The message ID.
        :returns: True if a message was removed.
        :raises StorageError: If the existing file is unusable or the write fails.
        """
        with self._lock:
            messages = self._load()
            remaining = [m for m in messages if m.id != message_id]
            removed = len(remaining) != len(messages)
            self._write(remaining)

        logger.info(f"Remove message: id={message_id}, removed={removed}")
        return removed

    def is_readable(self) -> bool:
        """Check whether the data file can be loaded without errors.

        :returns: True if the file is missing or parses as a list of messages.
        """
        try:
            self._load()
        except (StorageUnavailableError, MalformedDataError):
            return False
        return True

    def _load(self) -> list[Message]:
        """Read and parse the data file.

        :returns: Parsed messages, or an empty list if the file does not exist.
        :raises StorageUnavailableError: If the file exists but cannot be read.
        :raises MalformedDataError: If the file is not a JSON list of messages.
        """
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            logger.debug(f"Message file not found, starting empty: {self.path}")
            return []
        except OSError as e:
            raise StorageUnavailableError(self.path, str(e)) from e

        try:
            messages = _MESSAGES_ADAPTER.validate_json(data)
        except ValidationError as e:
            raise MalformedDataError(self.path, f"{e.error_count()} validation error(s)") from e

        logger.debug(f"Loaded {len(messages)} messages from {self.path}")
        return messages

    def _write(self, messages: list[Message]) -> None:
        """Atomically replace the data file with ``messages``.

        :param messages: The full collection to persist.
        :raises StorageWriteError: If any step of the write fails.
        """
        try:
            payload = _MESSAGES_ADAPTER.dump_json(messages)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except Exception:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_name)
                raise

        except (OSError, PydanticSerializationError) as e:
            logger.exception(f"Failed to write messages: path={self.path}")
            raise StorageWriteError(self.path, str(e)) from e
