"""
Happy Thoughts API — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract of the service.
How:   FastAPI validates request bodies against these models, serializes
       responses through them and generates the OpenAPI document from them.

Every /thoughts response is wrapped in an envelope:
    {"success": true,  "response": <payload>}
    {"success": false, "response": <ErrorDetail>}
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ThoughtCreate(BaseModel):
    """
    Body of POST /thoughts.

    Only the type is checked here; trimming and the 5..140 length rule are
    business rules applied by ThoughtService.create_thought.
    """
    message: str = Field(description="Thought text, 5 to 140 characters after trimming")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ThoughtResponse(BaseModel):
    """A single thought as returned to clients."""
    id: uuid.UUID = Field(description="Unique thought identifier (UUID)")
    message: str = Field(description="Trimmed thought text")
    hearts: int = Field(description="Number of likes received")
    created_at: datetime = Field(alias="createdAt", description="Creation time (UTC ISO 8601)")

    model_config = {"from_attributes": True, "populate_by_name": True}


class ThoughtListEnvelope(BaseModel):
    success: bool = True
    response: List[ThoughtResponse] = Field(description="Thoughts, newest first")


class ThoughtEnvelope(BaseModel):
    success: bool = True
    response: ThoughtResponse


class LikeEnvelope(BaseModel):
    success: bool = True
    response: str = Field(description="Confirmation carrying the updated heart count")


class RouteDescriptor(BaseModel):
    """One entry of the GET / endpoint index."""
    path: str
    methods: List[str]


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and store status.
    Who:   Returned by GET /health for monitoring and container probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorDetail(BaseModel):
    """
    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "validation_error",
            "message": "Message must be between 5 and 140 characters, got 3",
            "details": {"field": "message", "length": 3},
            "request_id": "3f2a9c1e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class ErrorEnvelope(BaseModel):
    success: bool = False
    response: ErrorDetail
