"""
API endpoints for posts.

Posts are returned with their experts on request (``include=experts``). The
legacy ``include=expert`` returns the primary expert as ``expert``. Writes are
checked against the authorship permission rules before anything is saved.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query, Response, status

from expertpress.core.authorship.options import FetchOptions
from expertpress.core.authorship.permissions import ADD, BROWSE, DESTROY, EDIT, has_role_permission
from expertpress.core.database.entities.posts import Post, PostStatus
from expertpress.core.database.repositories.posts import PostRepository
from expertpress.core.errors import NoPermissionError, NotFoundError
from expertpress.core.logging_config import get_logger
from expertpress.core.models.io.posts import PostCreate, PostUpdate
from expertpress.server.core.config import settings
from expertpress.server.serializers import post_gating
from expertpress.server.services.deps import ContextDep, ReposDep, RequestContext

logger = get_logger(__name__)

router = APIRouter(tags=["posts"])

# Attributes whose changes are subject to the authorship rules
UNSAFE_ATTRS = ("expert_id", "experts")

DEFAULT_LIMIT = 15


def _split(value: Optional[str]) -> List[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def _unsafe_attrs(attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {key: attrs[key] for key in UNSAFE_ATTRS if attrs.get(key) is not None}


def _output(post: Post, options: FetchOptions, columns: List[str], ctx: RequestContext) -> Dict[str, Any]:
    attrs = PostRepository.serialize(post, options, columns or None)
    return post_gating.for_post(attrs, ctx.member, settings.members_enabled)


@router.get(
    "",
    summary="Browse Posts",
    description="List posts, newest first. Anonymous readers only see published posts.",
    response_description="Posts and pagination metadata.",
)
async def browse_posts(
    repos: ReposDep,
    ctx: ContextDep,
    include: Optional[str] = Query(default=None, description="Relations to include: experts, expert"),
    columns: Optional[str] = Query(default=None, description="Comma separated fields to return"),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=100),
    page: int = Query(default=1, ge=1),
    post_status: str = Query(default=PostStatus.PUBLISHED.value, alias="status"),
) -> Dict[str, Any]:
    """
    Browse posts.

    - **include**: ``experts`` adds the ordered experts, ``expert`` the primary expert.
    - **columns**: restricts the returned fields.
    - **status**: ``published`` by default; staff may ask for ``draft``, ``scheduled`` or ``all``.
    """
    if post_status != PostStatus.PUBLISHED.value and not has_role_permission(ctx.roles, BROWSE):
        raise NoPermissionError()

    filters = {"status": post_status}
    posts, options = await repos.posts.browse(
        filters=filters,
        with_related=_split(include),
        limit=limit,
        offset=(page - 1) * limit,
    )
    total = await repos.posts.count(filters)

    return {
        "posts": [_output(post, options, _split(columns), ctx) for post in posts],
        "meta": {"pagination": {"page": page, "limit": limit, "total": total}},
    }


@router.get(
    "/{post_id}",
    summary="Read Post",
    description="Retrieve a single post by id.",
    response_description="The post wrapped in a list.",
    responses={404: {"description": "Post not found"}},
)
async def read_post(
    post_id: str,
    repos: ReposDep,
    ctx: ContextDep,
    include: Optional[str] = Query(default=None),
    columns: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    post_status = "all" if ctx.is_staff else PostStatus.PUBLISHED.value
    post, options = await repos.posts.find_one(post_id, with_related=_split(include), status=post_status)
    if post is None:
        raise NotFoundError("Post not found.")

    return {"posts": [_output(post, options, _split(columns), ctx)]}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Add Post",
    description="Create a post. Contributors and experts can only create posts they author.",
    response_description="The created post wrapped in a list.",
    responses={403: {"description": "Not allowed"}, 422: {"description": "Invalid experts"}},
)
async def add_post(
    payload: PostCreate,
    repos: ReposDep,
    ctx: ContextDep,
    include: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    """
    Add a post.

    - **experts**: ordered list of ``{id|slug|email}`` references; the first one is the primary expert.
    - **expert_id**: deprecated, sets the primary expert.
    - Without either, the acting user becomes the only expert.
    """
    attrs = payload.to_attrs()
    result = await repos.posts.permissible(
        None,
        ADD,
        ctx.permission_context(),
        _unsafe_attrs(attrs),
        ctx.permissions,
        has_role_permission(ctx.roles, ADD),
    )
    for key in result.excluded_attrs:
        attrs.pop(key, None)

    post, options = await repos.posts.add(attrs, context_user=ctx.user_id, with_related=_split(include))
    logger.info(f"User {ctx.user_id} added post {post.id}")
    return {"posts": [_output(post, options, [], ctx)]}


@router.put(
    "/{post_id}",
    summary="Edit Post",
    description="Update a post. Only sent fields are changed; a sent experts list replaces the stored one.",
    response_description="The updated post wrapped in a list.",
    responses={403: {"description": "Not allowed"}, 404: {"description": "Post not found"}},
)
async def edit_post(
    post_id: str,
    payload: PostUpdate,
    repos: ReposDep,
    ctx: ContextDep,
    include: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    attrs = payload.to_attrs()
    result = await repos.posts.permissible(
        post_id,
        EDIT,
        ctx.permission_context(),
        _unsafe_attrs(attrs),
        ctx.permissions,
        has_role_permission(ctx.roles, EDIT),
    )
    for key in result.excluded_attrs:
        attrs.pop(key, None)

    post, options = await repos.posts.edit(post_id, attrs, with_related=_split(include))
    return {"posts": [_output(post, options, [], ctx)]}


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Destroy Post",
    responses={403: {"description": "Not allowed"}, 404: {"description": "Post not found"}},
)
async def destroy_post(post_id: str, repos: ReposDep, ctx: ContextDep) -> Response:
    await repos.posts.permissible(
        post_id,
        DESTROY,
        ctx.permission_context(),
        {},
        ctx.permissions,
        has_role_permission(ctx.roles, DESTROY),
    )
    await repos.posts.destroy(post_id)
    logger.info(f"User {ctx.user_id} destroyed post {post_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
