"""API endpoints for board messages."""

import logging
import time

from fastapi import APIRouter, Depends, Path, Query, Response, status

from src.api.dependencies import get_store
from src.api.posts.formatter import ApiResponse, ResponseFormat, render
from src.api.posts.models import CreateMessageRequest, UpdateMessageRequest
from src.database.messages import Message, MessageStore, now_posted

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

_ENVELOPE_RESPONSES: dict[int | str, dict[str, object]] = {
    200: {"model": ApiResponse, "description": "Envelope in JSON or XML"},
}


def _not_found(message_id: int, fmt: ResponseFormat) -> Response:
    return render(
        ApiResponse.error(f"Message not found: {message_id}"),
        fmt,
        status_code=status.HTTP_404_NOT_FOUND,
    )


@router.get(
    "",
    response_model=None,
    responses=_ENVELOPE_RESPONSES,
    summary="List messages",
)
def list_posts(
    response_format: str | None = Query(None, alias="format", description="json or xml"),
    store: MessageStore = Depends(get_store),
) -> Response:
    """List all messages, newest first.

    :param response_format: Optional format token; ``xml`` selects XML.
    :param store: The message store.
    :returns: Envelope with ``Items``.
    """
    start = time.perf_counter()

    logger.info(f"List posts: format={response_format}")

    messages = store.list_sorted_by_posted_descending()
    response = render(ApiResponse.items(messages), ResponseFormat.from_token(response_format))

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"List posts complete: count={len(messages)}, elapsed={elapsed_ms:.0f}ms")

    return response


@router.get(
    "/{message_id}",
    response_model=None,
    responses=_ENVELOPE_RESPONSES,
    summary="Get message",
)
def show_post(
    message_id: int = Path(..., ge=0, description="Message ID"),
    response_format: str | None = Query(None, alias="format", description="json or xml"),
    store: MessageStore = Depends(get_store),
) -> Response:
    """Get a single message.

    :param message_id: The message ID.
    :param response_format: Optional format token; ``xml`` selects XML.
    :param store: The message store.
    :returns: Envelope with ``Item``, or a 404 envelope if absent.
    """
    logger.info(f"Get post: id={message_id}")

    fmt = ResponseFormat.from_token(response_format)
    message = store.get_by_id(message_id)
    if message is None:
        logger.info(f"Post not found: id={message_id}")
        return _not_found(message_id, fmt)

    return render(ApiResponse.item(message), fmt)


@router.post(
    "/create",
    response_model=None,
    responses=_ENVELOPE_RESPONSES,
    summary="Create message",
)
def create_post(
    request: CreateMessageRequest,
    store: MessageStore = Depends(get_store),
) -> Response:
    """Create a message stamped with the current server time.

    :param request: Sender and content of the new message.
    :param store: The message store.
    :returns: JSON envelope with the stored ``Item``.
    """
    start = time.perf_counter()

    logger.info(f"Create post: sender={request.sender!r}, content={request.content[:50]!r}...")

    message = store.create(
        Message(posted=now_posted(), sender=request.sender, content=request.content)
    )

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Create post complete: id={message.id}, elapsed={elapsed_ms:.0f}ms")

    return render(ApiResponse.item(message), ResponseFormat.JSON)


@router.put(
    "/update",
    response_model=None,
    responses=_ENVELOPE_RESPONSES,
    summary="Update message",
)
def update_post(
    request: UpdateMessageRequest,
    store: MessageStore = Depends(get_store),
) -> Response:
    """Replace an existing message.

    Any field may change, including ``posted`` and ``sender``.

    :param request: The full replacement record.
    :param store: The message store.
    :returns: JSON envelope echoing the stored ``Item``, or a 404 envelope.
    """
    start = time.perf_counter()

    logger.info(f"Update post: id={request.id}")

    message = Message(**request.model_dump())
    if not store.update(message):
        return _not_found(request.id, ResponseFormat.JSON)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Update post complete: id={message.id}, elapsed={elapsed_ms:.0f}ms")

    return render(ApiResponse.item(message), ResponseFormat.JSON)


@router.delete(
    "/{message_id}/delete",
    response_model=None,
    responses=_ENVELOPE_RESPONSES,
    summary="Delete message",
)
def delete_post(
    message_id: int = Path(..., ge=0, description="Message ID"),
    response_format: str | None = Query(None, alias="format", description="json or xml"),
    store: MessageStore = Depends(get_store),
) -> Response:
    """Delete a message. Deleting an absent ID still succeeds.

    :param message_id: The message ID.
    :param response_format: Optional format token; ``xml`` selects XML.
    :param store: The message store.
    :returns: Envelope with the ``None`` marker.
    """
    logger.info(f"Delete post: id={message_id}")

    removed = store.remove(message_id)

    logger.info(f"Delete post complete: id={message_id}, removed={removed}")

    return render(ApiResponse.empty(), ResponseFormat.from_token(response_format))
