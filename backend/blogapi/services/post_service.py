"""
Blog API — Post Service (Query Composition & CRUD)
====================================================

What:  All post reads and writes: the filtered/sorted listing composer,
       its three public specializations, and create/get/update/delete.
Why:   Keeps query building and business rules out of the route handlers.
How:   Builds SQLAlchemy Core statements against the Post model and runs
       them on the AsyncSession passed in by the caller.
Who:   Called by the posts router; usable from scripts and tests directly.

Listing Flow:
    list_all_posts(sort)           ─┐
    list_posts_by_author(a, sort)  ─┼─▶ _list_posts(filters, sort) ─▶ SELECT ... ORDER BY
    list_posts_by_tag(t, sort)     ─┘

    Filter vocabulary (FILTERS) and sort vocabulary (SORT_FIELDS) live in
    one place each, so a new filterable or sortable dimension is a single
    mapping entry.

Error Handling:
    Caller errors (unknown sort field, unknown filter key, blank title)
    raise ValidationError. Missing posts raise NotFoundError. Store
    failures (SQLAlchemyError) are not caught here; they propagate
    unchanged and the global handler turns them into a 500. No retries.

PostService is stateless: every call receives its session, so concurrent
requests never share mutable state.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional
from uuid import UUID

from sqlalchemy import Select, asc, desc, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from blogapi.exceptions import NotFoundError, ValidationError
from blogapi.models.post import Post, PostTag
from blogapi.schemas.post import PostCreate, PostResponse, PostUpdate, SortOptions

logger = logging.getLogger(__name__)


# ── Filter vocabulary ─────────────────────────────────────────────────────
# Each entry turns a single filter value into a WHERE clause.
# `tags` is a containment match: the value appears anywhere in the post's
# tag list, not equality with the whole list.
FILTERS: Dict[str, Callable[[Any], ColumnElement[bool]]] = {
    "author": lambda value: Post.author == value,
    "title": lambda value: Post.title == value,
    "tags": lambda value: Post.tag_links.any(PostTag.name == value),
}

# ── Sort vocabulary ───────────────────────────────────────────────────────
# camelCase aliases match the field names the frontend already sends
SORT_FIELDS = {
    "created_at": Post.created_at,
    "createdAt": Post.created_at,
    "updated_at": Post.updated_at,
    "updatedAt": Post.updated_at,
    "title": Post.title,
    "author": Post.author,
}

SORT_DIRECTIONS = {
    "ascending": asc,
    "asc": asc,
    "descending": desc,
    "desc": desc,
}


def _to_response(post: Post) -> PostResponse:
    return PostResponse(
        id=post.id,
        title=post.title,
        author=post.author,
        contents=post.contents,
        tags=list(post.tags),
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def _require_title(title: Optional[str]) -> str:
    if title is None or not title.strip():
        raise ValidationError(message="Post title must not be empty", field="title")
    return title


async def _ensure_tags_loaded(db: AsyncSession, post: Post) -> None:
    # Reading an unloaded collection outside an awaited call raises MissingGreenlet
    if "tag_links" in inspect(post).unloaded:
        await db.refresh(post, attribute_names=["tag_links"])


class PostService:
    """
    Business logic layer for post operations.

    Responsibilities:
        - list_all_posts / list_posts_by_author / list_posts_by_tag
        - create_post, get_post_by_id, update_post, delete_post
    """

    # ══════════════════════════════════════════════════════════════════════
    # Query composition
    # ══════════════════════════════════════════════════════════════════════

    @staticmethod
    def _order_clause(sort: SortOptions):
        column = SORT_FIELDS.get(sort.sort_by)
        if column is None:
            raise ValidationError(
                message=(
                    f"Cannot sort by '{sort.sort_by}'. "
                    f"Sortable fields: {', '.join(sorted(SORT_FIELDS))}"
                ),
                field="sort_by",
            )
        direction = SORT_DIRECTIONS.get(sort.sort_order.lower())
        if direction is None:
            raise ValidationError(
                message=f"Invalid sort order '{sort.sort_order}'. Use 'ascending' or 'descending'",
                field="sort_order",
            )
        return direction(column)

    def _build_query(
        self,
        filters: Mapping[str, Any],
        sort: SortOptions,
    ) -> Select:
        """
        Translate a filter mapping and sort options into one SELECT.

        Keys are ANDed together; an empty mapping matches every post.
        Ties on the sort key keep the database's natural order.
        """
        query = select(Post)
        for key, value in filters.items():
            clause = FILTERS.get(key)
            if clause is None:
                raise ValidationError(
                    message=f"Cannot filter posts by '{key}'",
                    field=key,
                    context={"allowed": sorted(FILTERS)},
                )
            query = query.where(clause(value))
        return query.order_by(self._order_clause(sort))

    async def _list_posts(
        self,
        db: AsyncSession,
        filters: Mapping[str, Any],
        sort: Optional[SortOptions] = None,
    ) -> List[PostResponse]:
        query = self._build_query(filters, sort or SortOptions())
        result = await db.execute(query)
        posts = result.scalars().all()
        logger.debug("Listed %d posts (filters=%s)", len(posts), dict(filters))
        return [_to_response(post) for post in posts]

    async def list_all_posts(
        self,
        db: AsyncSession,
        sort: Optional[SortOptions] = None,
    ) -> List[PostResponse]:
        """All posts, newest first unless `sort` says otherwise."""
        return await self._list_posts(db, {}, sort)

    async def list_posts_by_author(
        self,
        db: AsyncSession,
        author: str,
        sort: Optional[SortOptions] = None,
    ) -> List[PostResponse]:
        """Posts whose author matches exactly."""
        return await self._list_posts(db, {"author": author}, sort)

    async def list_posts_by_tag(
        self,
        db: AsyncSession,
        tag: str,
        sort: Optional[SortOptions] = None,
    ) -> List[PostResponse]:
        """Posts carrying `tag` anywhere in their tag list."""
        return await self._list_posts(db, {"tags": tag}, sort)

    # ══════════════════════════════════════════════════════════════════════
    # CRUD
    # ══════════════════════════════════════════════════════════════════════

    async def _get_post(self, db: AsyncSession, post_id: UUID) -> Post:
        post = await db.get(Post, post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))
        # db.get answers from the identity map without running the selectin load
        await _ensure_tags_loaded(db, post)
        return post

    async def create_post(self, db: AsyncSession, data: PostCreate) -> PostResponse:
        """
        Insert a new post.

        Raises:
            ValidationError: title is empty or whitespace only
        """
        post = Post(
            title=_require_title(data.title),
            author=data.author,
            contents=data.contents,
            tag_links=[PostTag(name) for name in data.tags],
        )
        db.add(post)
        await db.flush()  # assigns id and timestamps without committing
        await _ensure_tags_loaded(db, post)
        logger.info("Post created: %s", post.id)
        return _to_response(post)

    async def get_post_by_id(self, db: AsyncSession, post_id: UUID) -> PostResponse:
        """
        Fetch a single post.

        Raises:
            NotFoundError: no post with this id (→ 404)
        """
        return _to_response(await self._get_post(db, post_id))

    async def update_post(
        self,
        db: AsyncSession,
        post_id: UUID,
        data: PostUpdate,
    ) -> PostResponse:
        """
        Merge the supplied fields into an existing post.

        Only fields present in the request are touched. `updated_at` is
        refreshed even when only the tags change.

        Raises:
            NotFoundError: no post with this id
            ValidationError: title supplied but empty
        """
        post = await self._get_post(db, post_id)
        changes = data.model_dump(exclude_unset=True)

        if "title" in changes:
            post.title = _require_title(changes["title"])
        if "author" in changes:
            post.author = changes["author"]
        if "contents" in changes:
            post.contents = changes["contents"]
        if "tags" in changes:
            post.tags = list(changes["tags"] or [])

        post.updated_at = datetime.now(timezone.utc)
        await db.flush()
        await _ensure_tags_loaded(db, post)
        logger.info("Post updated: %s (fields=%s)", post_id, sorted(changes))
        return _to_response(post)

    async def delete_post(self, db: AsyncSession, post_id: UUID) -> None:
        """
        Remove a post and its tags.

        Raises:
            NotFoundError: no post with this id
        """
        post = await self._get_post(db, post_id)
        await db.delete(post)
        await db.flush()
        logger.info("Post deleted: %s", post_id)


# Stateless, so a single shared instance is enough
post_service = PostService()
