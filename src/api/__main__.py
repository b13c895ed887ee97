"""Entry point for serving the API.

Allows running with: python -m src.api
"""

import uvicorn

from src.api.config import get_api_settings


def main() -> None:
    """Serve the message board API with uvicorn."""
    settings = get_api_settings()
    uvicorn.run("src.api.app:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
