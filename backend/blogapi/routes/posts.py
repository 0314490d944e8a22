"""
Blog API — Posts Route Handlers
=================================

What:  CRUD endpoints for blog posts under /api/v1/posts.
Why:   The HTTP face of PostService.
How:   Extracts path/query/body parameters, delegates to PostService,
       returns JSON via Pydantic response models.
Who:   Called by the blog frontend.

Listing rules:
    ?author=X and ?tag=Y are mutually exclusive. Each maps to one of the
    service's listing specializations; sending both is rejected with 400
    instead of being silently combined.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.database import get_db_session
from blogapi.exceptions import ValidationError
from blogapi.schemas.post import (
    ErrorResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
    SortOptions,
)
from blogapi.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Posts"])


@router.get(
    "/posts",
    response_model=List[PostResponse],
    responses={
        200: {"description": "Matching posts in the requested order"},
        400: {"description": "Invalid filter or sort options", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List posts",
    description=(
        "Returns every post, optionally filtered by author or by tag (not both), "
        "sorted by any post timestamp or text field. No pagination."
    ),
)
async def list_posts(
    response: Response,
    author: Optional[str] = Query(default=None, description="Exact author name"),
    tag: Optional[str] = Query(default=None, description="Posts carrying this tag"),
    sort_by: str = Query(
        default="created_at",
        alias="sortBy",
        description="created_at, updated_at, title or author (createdAt / updatedAt accepted)",
    ),
    sort_order: str = Query(
        default="descending",
        alias="sortOrder",
        description="ascending or descending",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[PostResponse]:
    """
    Example:
        GET /api/v1/posts?tag=react&sortBy=updatedAt&sortOrder=ascending
    """
    if author and tag:
        raise ValidationError(
            message="Query by either author or tag, not both",
            field="tag",
        )

    sort = SortOptions(sort_by=sort_by, sort_order=sort_order)
    if author:
        posts = await post_service.list_posts_by_author(db, author, sort)
    elif tag:
        posts = await post_service.list_posts_by_tag(db, tag, sort)
    else:
        posts = await post_service.list_all_posts(db, sort)

    response.headers["X-Total-Count"] = str(len(posts))
    return posts


@router.get(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Get a single post by ID",
)
async def get_post(
    post_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.get_post_by_id(db, post_id)


@router.post(
    "/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Blank title", "model": ErrorResponse},
    },
    summary="Create a post",
)
async def create_post(
    payload: PostCreate,
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.create_post(db, payload)


@router.patch(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={
        400: {"description": "Blank title", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Update a post",
    description="Only the fields present in the body are changed.",
)
async def update_post(
    post_id: UUID,
    payload: PostUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.update_post(db, post_id, payload)


@router.delete(
    "/posts/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Delete a post",
)
async def delete_post(
    post_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await post_service.delete_post(db, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
