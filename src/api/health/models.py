"""Pydantic models for health check endpoints."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(..., description="Service health status: healthy or degraded")
    version: str = Field(..., description="Application version")
    storage: str = Field(..., description="Message file state: ok or unreadable")
