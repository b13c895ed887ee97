"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends

from src.api.dependencies import get_store
from src.api.health.models import HealthResponse
from src.database.messages import MessageStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

APP_VERSION = "1.0.0"


@router.get(
    "",
    response_model=HealthResponse,
    summary="Check service health",
    description="Returns the health status of the API service and its message file.",
)
def health_check(store: MessageStore = Depends(get_store)) -> HealthResponse:
    """Check if the API service is healthy.

    A missing message file is healthy (an empty board); an unreadable or
    malformed one is reported as degraded.

    :param store: The message store.
    :returns: Health status response.
    """
    logger.debug("Health check requested")
    if store.is_readable():
        return HealthResponse(status="healthy", version=APP_VERSION, storage="ok")
    return HealthResponse(status="degraded", version=APP_VERSION, storage="unreadable")
