"""Centralised path constants for the application."""

from pathlib import Path

# Project root is 2 levels up from this file (src/paths.py -> project root)
PROJECT_ROOT = Path(__file__).resolve().parent.parent

ENV_FILE = PROJECT_ROOT / ".env"

# Default location of the message board's JSON file
DEFAULT_DATA_FILE = PROJECT_ROOT / "data.json"
