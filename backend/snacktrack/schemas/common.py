"""
SnackTrack Backend - Shared Response Schemas
=============================================

What:  Response shapes used by more than one route: plain messages, errors,
       and the health check.
"""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Success body for updates and deletes."""
    message: str


class ErrorResponse(BaseModel):
    """
    Every error body has this shape:

        {"error": "Snack request not found"}

    Internal detail (SQL, driver messages, stack traces) never appears here.
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
