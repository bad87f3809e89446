"""
CrudHub Backend — Pydantic Response Schemas
=============================================

What:  Pydantic models for the responses CrudHub defines itself.
Why:   OpenAPI docs and consistent serialization for errors and health.

Items are deliberately NOT modelled: they are schemaless JSON objects and the
CRUD routes pass them through unchanged.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "teas with ID '4f1c...' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class ResourceHealth(BaseModel):
    """Availability of one mounted resource."""
    backend: str = Field(description="Collection backend: memory or database")
    status: str = Field(description="available or unavailable")
    error: Optional[str] = Field(default=None, description="Last connection error, if any")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and per-resource status.
    Who:   Returned by GET /health.

    Status levels:
        healthy:   every resource available (HTTP 200)
        degraded:  some resources unavailable (HTTP 200)
        unhealthy: no resource available (HTTP 503)
    """
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    resources: Dict[str, ResourceHealth] = Field(description="Status per mounted resource")
    uptime_seconds: float = Field(description="Seconds since service started")


class WelcomeResponse(BaseModel):
    """Greeting rendered by the front-end, with the mounted resource names."""
    message: str
    resources: List[str]
