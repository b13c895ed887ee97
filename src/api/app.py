"""FastAPI application configuration."""

import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.exception_handlers import (
    http_exception_handler,
    request_validation_exception_handler,
)
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.config import get_api_settings
from src.api.health import router as health_router
from src.api.health.endpoints import APP_VERSION
from src.api.posts import router as posts_router
from src.api.posts.formatter import ApiResponse, ResponseFormatError, render
from src.database.exceptions import StorageError
from src.observability.sentry import init_sentry
from src.utils.logging import configure_logging

configure_logging(access_log=get_api_settings().access_log)
init_sentry()

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
API_NOT_FOUND_REASON = "API not found"


def _is_api_request(request: Request) -> bool:
    path = request.url.path
    return path == API_PREFIX or path.startswith(f"{API_PREFIX}/")


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    """Answer unmatched API routes and methods with an error envelope.

    :param request: The incoming request.
    :param exc: The routing exception.
    :returns: 404 envelope for API paths, the default response otherwise.
    """
    if _is_api_request(request) and exc.status_code in (
        status.HTTP_404_NOT_FOUND,
        status.HTTP_405_METHOD_NOT_ALLOWED,
    ):
        logger.warning(f"API not found: {request.method} {request.url.path}")
        return render(
            ApiResponse.error(API_NOT_FOUND_REASON),
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return await http_exception_handler(request, exc)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    """Report invalid API input inside an error envelope.

    :param request: The incoming request.
    :param exc: The validation failure.
    :returns: 404 envelope for unparseable path IDs, 422 envelope for other
        API input, the default response outside the API.
    """
    if not _is_api_request(request):
        return await request_validation_exception_handler(request, exc)

    # A path segment that is not a valid ID means no API route matches
    if any(error.get("loc", ())[:1] == ("path",) for error in exc.errors()):
        logger.warning(f"API not found, invalid path: {request.method} {request.url.path}")
        return render(
            ApiResponse.error(API_NOT_FOUND_REASON),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    reasons = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        reasons.append(f"{location}: {error.get('msg', 'invalid')}")

    logger.warning(f"Invalid API request: {request.method} {request.url.path}: {reasons}")
    return render(
        ApiResponse.error("; ".join(reasons) or "Invalid request"),
        status_code=422,
    )


async def _handle_storage_error(request: Request, exc: StorageError) -> Response:
    """Report storage failures as a 500 envelope.

    :param request: The incoming request.
    :param exc: The storage failure.
    :returns: 500 envelope.
    """
    logger.error(f"Storage error: {request.method} {request.url.path}: {exc}")
    return render(
        ApiResponse.error("Message storage failure"),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def _handle_format_error(request: Request, exc: ResponseFormatError) -> Response:
    """Report serialisation failures as a 500 JSON envelope.

    :param request: The incoming request.
    :param exc: The serialisation failure.
    :returns: 500 envelope.
    """
    logger.error(f"Response formatting error: {request.method} {request.url.path}: {exc}")
    return render(
        ApiResponse.error("Response could not be encoded"),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    :returns: Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Message Board API",
        version=APP_VERSION,
    )

    # Register routers
    application.include_router(health_router)
    application.include_router(posts_router, prefix=API_PREFIX)

    application.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    application.add_exception_handler(RequestValidationError, _handle_validation_error)
    application.add_exception_handler(StorageError, _handle_storage_error)
    application.add_exception_handler(ResponseFormatError, _handle_format_error)

    logger.info("FastAPI application created")

    return application


# Application instance for uvicorn
app = create_app()
