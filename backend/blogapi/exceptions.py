"""
Blog API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the error scenarios the API reports.
Why:   Targeted error handling with appropriate HTTP status codes and
       user-friendly messages.
How:   Each exception carries a message and optional context dict. Global
       handlers (registered in main.py) turn them into JSON error responses.
Who:   Raised by services and routes; caught by global handlers.

Exception Hierarchy:
    BlogError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    └── NotFoundError     → 404 Not Found

Store failures (sqlalchemy.exc.SQLAlchemyError) are NOT wrapped by the
service layer. They propagate unchanged and are translated into a 500
response by the handler in main.py.
"""

from typing import Any, Dict, Optional


class BlogError(Exception):
    """
    Base exception for all Blog API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional info for logs and the response "details" field
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogError):
    """
    Raised when client input breaks a business rule.

    When:  Blank title, unknown sort field or order, unknown filter key,
           both `author` and `tag` supplied to the list endpoint.
    HTTP:  400 Bad Request

    Schema-level problems (wrong JSON types, malformed UUIDs) are still
    rejected by FastAPI itself with 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BlogError):
    """
    Raised when a requested resource does not exist.

    When:  GET/PATCH/DELETE /api/v1/posts/{id} with an unknown id.
    HTTP:  404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)

