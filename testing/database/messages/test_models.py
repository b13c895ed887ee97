"""Tests for the message model and timestamp helpers."""

import unittest
from datetime import datetime
from unittest.mock import patch

from src.database.messages.models import POSTED_FORMAT, Message, format_posted, now_posted


class TestMessage(unittest.TestCase):
    """Tests for Message model."""

    def test_defaults_are_zero_values(self) -> None:
        """Test that an empty message has zero-valued fields."""
        message = Message()

        self.assertEqual(message.id, 0)
        self.assertEqual(message.posted, "")
        self.assertEqual(message.sender, "")
        self.assertEqual(message.content, "")

    def test_structural_equality(self) -> None:
        """Test that messages with equal fields compare equal."""
        a = Message(id=1, posted="2024-01-01 00:00:00", sender="a", content="hi")
        b = Message(id=1, posted="2024-01-01 00:00:00", sender="a", content="hi")

        self.assertEqual(a, b)
        self.assertNotEqual(a, b.model_copy(update={"content": "bye"}))

    def test_json_round_trip(self) -> None:
        """Test that a message survives JSON serialisation."""
        message = Message(id=3, posted="2024-01-01 12:00:00", sender="bob", content="a\nb")

        self.assertEqual(Message.model_validate_json(message.model_dump_json()), message)


class TestTimestamps(unittest.TestCase):
    """Tests for posted timestamp helpers."""

    def test_format_posted(self) -> None:
        """Test the fixed-width timestamp pattern."""
        self.assertEqual(format_posted(datetime(2024, 3, 5, 7, 8, 9)), "2024-03-05 07:08:09")

    def test_now_posted_uses_local_clock(self) -> None:
        """Test that now_posted formats the current local time."""
        fixed = datetime(2024, 1, 2, 3, 4, 5)
        with patch("src.database.messages.models.datetime") as mock_datetime:
            mock_datetime.now.return_value = fixed

            self.assertEqual(now_posted(), "2024-01-02 03:04:05")

    def test_now_posted_matches_pattern(self) -> None:
        """Test that the real clock output parses with the posted format."""
        value = now_posted()

        self.assertEqual(datetime.strptime(value, POSTED_FORMAT).strftime(POSTED_FORMAT), value)


if __name__ == "__main__":
    unittest.main()
