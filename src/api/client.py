"""HTTP client for the message board API."""

import logging
import os
from typing import Any

import requests
from pydantic import ValidationError
from requests.exceptions import RequestException

from src.api.posts.formatter import (
    ApiResponse,
    ItemContent,
    ItemsContent,
    ReasonContent,
    ResponseStatus,
)
from src.database.messages.models import Message

logger = logging.getLogger(__name__)

# Default timeout for API requests in seconds
DEFAULT_TIMEOUT = 30

# HTTP status code threshold for errors
HTTP_ERROR_THRESHOLD = 400


class MessageBoardClientError(Exception):
    """Raised when a message board API request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialise the error.

        :param message: Error message, usually the envelope's Reason.
        :param status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class MessageBoardClient:
    """Client for the ``/api/posts`` endpoints.

    Responses are always requested as JSON and unwrapped from their envelope.
    """

    def __init__(self, base_url: str | None = None, timeout: int = DEFAULT_TIMEOUT) -> None:
        """Initialise the client.

        :param base_url: Base URL for the API. Defaults to BOARD_API_BASE_URL env var.
        :param timeout: Request timeout in seconds.
        """
        self.base_url = (
            base_url or os.environ.get("BOARD_API_BASE_URL", "http://localhost:8000")
        ).rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

        logger.debug(f"MessageBoardClient initialised: base_url={self.base_url}")

    def list_messages(self) -> list[Message]:
        """Fetch every message, newest first.

        :returns: List of messages.
        :raises MessageBoardClientError: If the request fails.
        """
        result = self._request("GET", "/api/posts").result
        if not isinstance(result, ItemsContent):
            raise MessageBoardClientError("Expected Items in list response")
        return result.items

    def get_message(self, message_id: int) -> Message:
        """Fetch one message.

        :param message_id: The message ID.
        :returns: The message.
        :raises MessageBoardClientError: If the request fails or the message is absent.
        """
        return self._expect_item(self._request("GET", f"/api/posts/{message_id}"))

    def create_message(self, sender: str, content: str) -> Message:
        """Post a new message.

        :param sender: Display name of the sender.
        :param content: Message body.
        :returns: The stored message with its assigned ID and timestamp.
        :raises MessageBoardClientError: If the request fails.
        """
        return self._expect_item(
            self._request("POST", "/api/posts/create", json={"sender": sender, "content": content})
        )

    def update_message(self, message: Message) -> Message:
        """Replace an existing message.

        :param message: The full replacement record.
        :returns: The stored message.
        :raises MessageBoardClientError: If the request fails or the message is absent.
        """
        return self._expect_item(
            self._request("PUT", "/api/posts/update", json=message.model_dump())
        )

    def delete_message(self, message_id: int) -> None:
        """Delete a message. Deleting an absent ID succeeds.

        :param message_id: The message ID.
        :raises MessageBoardClientError: If the request fails.
        """
        self._request("DELETE", f"/api/posts/{message_id}/delete")

    def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> ApiResponse:
        """Make an HTTP request and decode the response envelope.

        :param method: HTTP method.
        :param path: API endpoint path.
        :param json: JSON request body.
        :returns: The decoded envelope.
        :raises MessageBoardClientError: If the request fails or returns an error envelope.
        """
        url = f"{self.base_url}{path}"

        try:
            logger.debug(f"API request: {method} {path} json={json}")
            response = self._session.request(method, url, json=json, timeout=self.timeout)
        except RequestException as e:
            logger.exception(f"API request error: {method} {path}")
            raise MessageBoardClientError(f"Request failed: {e}") from e

        if response.status_code >= HTTP_ERROR_THRESHOLD:
            reason = self._extract_reason(response)
            logger.warning(f"API request failed: {method} {path} -> {response.status_code}: {reason}")
            raise MessageBoardClientError(reason, status_code=response.status_code)

        try:
            envelope = ApiResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise MessageBoardClientError(
                f"Invalid response envelope: {e}", status_code=response.status_code
            ) from e

        if envelope.status is ResponseStatus.ERROR:
            reason = envelope.result.reason if isinstance(envelope.result, ReasonContent) else ""
            raise MessageBoardClientError(reason or "Unknown error", status_code=response.status_code)

        return envelope

    @staticmethod
    def _expect_item(envelope: ApiResponse) -> Message:
        if not isinstance(envelope.result, ItemContent):
            raise MessageBoardClientError("Expected Item in response")
        return envelope.result.item

    @staticmethod
    def _extract_reason(response: requests.Response) -> str:
        """Extract the error reason from a failed response.

        :param response: HTTP response.
        :returns: Error message string.
        """
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"

        if isinstance(data, dict):
            result = data.get("result")
            if isinstance(result, dict) and "Reason" in result:
                return str(result["Reason"])
            return str(data.get("detail", data))
        return str(data)

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> "MessageBoardClient":
        """Enter context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager."""
        self.close()
