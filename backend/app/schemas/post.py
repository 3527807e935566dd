"""
Postboard Backend: Pydantic Request/Response Schemas
=====================================================

What:  The API contract for posts, kept separate from the SQLAlchemy model.
How:   `PostCreate` is the validation rule for creation requests;
       `PostResponse` and `PostEnvelope` shape what the API returns.

Response keys are camelCase (`createdAt`, `updatedAt`) via an alias generator,
so `PostResponse.model_validate(post)` serializes straight from the ORM row.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    """
    Body of POST /api/posts.

    Both fields are required, must already be strings (no coercion from
    numbers or booleans) and must not be empty. Unknown keys are ignored.
    """
    title: str = Field(min_length=1, strict=True, description="Post title")
    body: str = Field(min_length=1, strict=True, description="Post body")

    model_config = ConfigDict(extra="ignore")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    """A stored post as returned to clients."""
    id: uuid.UUID = Field(description="Unique post identifier (UUID)")
    title: str
    body: str
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PostEnvelope(BaseModel):
    """Returned by POST /api/posts with HTTP 201: ``{"post": {...}}``."""
    post: PostResponse


# ══════════════════════════════════════════════════════════════════════════
# Error Response Model
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Body of every error response written by the centralized handlers.

    Example:
        {
            "error": "validation_error",
            "message": "Request validation failed",
            "errors": ["title: String should have at least 1 character",
                       "body: Field required"],
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    errors: Optional[List[str]] = Field(default=None, description="Field-level validation messages")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
