"""
ItemDrop Backend - Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the ingest API contract.
How:   FastAPI validates the JSON body against IngestRequest, serializes
       responses, and generates the OpenAPI documentation from these models.

Presence of user_id is checked by ItemService, not here, so a missing
user_id produces the `{"error": "missing user_id"}` body rather than a
schema error.
"""

import uuid
from typing import Any, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class IngestRequest(BaseModel):
    """
    What:  Body of POST /api/ingest.
    Who:   Sent by clients submitting a note, a link, an image, or any mix.

    Example:
        {
            "user_id": "u_123",
            "source_url": "https://example.com/article",
            "note": "read later",
            "image_base64": "/9j/4AAQSkZJRg..."
        }
    """
    user_id: Optional[str] = Field(default=None, description="Submitting user (required)")
    source_url: Optional[str] = Field(default=None, description="Origin of the submission")
    image_base64: Optional[str] = Field(
        default=None,
        description="Base64-encoded JPEG image, uploaded to the content bucket",
    )
    note: Optional[str] = Field(default=None, description="Free-text note, stored as raw_text")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class IngestResponse(BaseModel):
    """Returned with HTTP 200 once the item row exists."""
    ok: bool = Field(default=True)
    item_id: uuid.UUID = Field(description="Identifier assigned to the new item")


class ErrorResponse(BaseModel):
    """
    What:  Error envelope used by every error response.

    `message` is only present on internal_error responses; `details` only on
    request-body validation failures.
    """
    error: str = Field(description="Error description or marker")
    message: Optional[str] = Field(default=None, description="Exception message for internal_error")
    details: Optional[Any] = Field(default=None, description="Field-level validation errors")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    object_store: str = Field(description="Content bucket: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
