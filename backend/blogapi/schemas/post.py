"""
Blog API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract for posts.
Why:   Input validation, automatic serialization, and OpenAPI doc generation.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate Swagger/OpenAPI documentation.
Who:   Used by route handlers and by PostService as its return types.

Schemas are separate from the SQLAlchemy models so the API contract can
change independently of the table layout (e.g. tags are a list of strings
here but rows in `post_tags` in the database).
"""

import uuid
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field

# Matches post_tags.name (VARCHAR(100))
TagLabel = Annotated[str, Field(min_length=1, max_length=100)]


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What clients send
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    """
    What:  Body of POST /api/v1/posts.
    Only `title` is required; tags default to an empty list.
    """
    title: str = Field(max_length=255, description="Post title (required, non-blank)")
    author: Optional[str] = Field(default=None, max_length=255, description="Author name")
    contents: Optional[str] = Field(default=None, description="Post body")
    tags: List[TagLabel] = Field(default_factory=list, description="Ordered tag labels")


class PostUpdate(BaseModel):
    """
    What:  Body of PATCH /api/v1/posts/{id}.
    How:   Field-level merge. Only fields present in the request body are
           applied (model_dump(exclude_unset=True)); sending `tags`
           replaces the whole list.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    author: Optional[str] = Field(default=None, max_length=255)
    contents: Optional[str] = None
    tags: Optional[List[TagLabel]] = None


class SortOptions(BaseModel):
    """
    What:  Sort specification for the post listing operations.

    sort_by:    field name (snake_case, or the camelCase aliases
                createdAt / updatedAt). Default: created_at.
    sort_order: ascending | asc | descending | desc. Default: descending.

    Values are checked by PostService, which raises a 400 ValidationError
    for unknown fields or directions.
    """
    sort_by: str = Field(default="created_at", description="Field to sort by")
    sort_order: str = Field(default="descending", description="ascending or descending")


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    """
    What:  Full representation of a post.
    Who:   Returned by every post endpoint (list items included).
    """
    id: uuid.UUID = Field(description="Unique post identifier (UUID)")
    title: str = Field(description="Post title")
    author: Optional[str] = Field(default=None, description="Author name")
    contents: Optional[str] = Field(default=None, description="Post body")
    tags: List[str] = Field(default_factory=list, description="Ordered tag labels")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last modification timestamp (UTC)")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Query by either author or tag, not both",
            "details": {"field": "tag"},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and load balancer checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
