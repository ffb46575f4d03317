"""
UserHub Backend — Pydantic Transfer Shapes (DTOs)
===================================================

What:  Pydantic models defining the API contract between clients and backend.
How:   FastAPI validates request bodies against these models, serializes
       responses from them, and builds the OpenAPI docs from both.
Who:   Built by the business layer, returned by the api layer.

Design Decision:
    DTOs are separate from the ORM entity. A DTO lists exactly the fields
    that may leave the service; storage-internal columns (`version`,
    `updated_at`) have no counterpart here and therefore cannot leak.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class UserDto(BaseModel):
    """
    What:  External representation of a user.
    Who:   Returned by GET/POST/PATCH /api/users endpoints.
    """
    id: uuid.UUID = Field(description="Unique user identifier (UUID)")
    name: str = Field(description="Display name")
    email: str = Field(description="Contact email address (lower-case)")
    created_at: datetime = Field(description="When the user was created (UTC ISO 8601)")

    model_config = ConfigDict(frozen=True)


class UserListResponse(BaseModel):
    """
    What:  Offset-paginated page of users.
    Who:   Returned by GET /api/users.
    """
    items: List[UserDto] = Field(description="Users on this page, newest first")
    total: int = Field(description="Total number of users")
    limit: int = Field(description="Page size that was applied")
    offset: int = Field(description="Number of users skipped before this page")


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    """Body of POST /api/users. Business rules (blank names, email shape) run in the service."""
    name: str = Field(min_length=1, max_length=120, description="Display name")
    email: str = Field(min_length=3, max_length=255, description="Contact email address")


class UserUpdate(BaseModel):
    """Body of PATCH /api/users/{id}. Omitted fields are left unchanged."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error envelope for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "invalid_identifier")
        message: Human-readable description
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Storage connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since the health service was created")
