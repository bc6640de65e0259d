"""
API endpoints for experts.

Experts are staff users that author at least one post. Listing and reading
are public; removing an expert deletes the posts they are the primary
expert of and takes them off every other post.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, Response, status

from expertpress.core.database.entities.users import RoleName, User
from expertpress.core.errors import NoPermissionError, NotFoundError
from expertpress.core.logging_config import get_logger
from expertpress.server.serializers import experts as experts_serializer
from expertpress.server.serializers.experts import OutputContext
from expertpress.server.services.deps import ContextDep, ReposDep, RequestContext

logger = get_logger(__name__)

router = APIRouter(tags=["experts"])

POST_COUNT = "count.posts"
DEFAULT_LIMIT = 15

# Roles allowed to remove another user
DESTROY_ROLES = (RoleName.OWNER.value, RoleName.ADMINISTRATOR.value)


def _includes_count(include: Optional[str]) -> bool:
    return POST_COUNT in [item.strip() for item in (include or "").split(",")]


async def _output_context(repos, ctx: RequestContext, users, include: Optional[str]) -> OutputContext:
    post_counts = None
    if _includes_count(include):
        post_counts = await repos.users.count_posts([user.id for user in users])
    return OutputContext(staff=ctx.is_staff, post_counts=post_counts)


async def _read(repos, ctx: RequestContext, user: Optional[User], include: Optional[str]) -> Dict[str, Any]:
    if user is None:
        raise NotFoundError("Expert not found.")
    return experts_serializer.read(user, await _output_context(repos, ctx, [user], include))


@router.get(
    "",
    summary="Browse Experts",
    description="List active users that are experts of at least one post.",
    response_description="Experts and pagination metadata.",
)
async def browse_experts(
    repos: ReposDep,
    ctx: ContextDep,
    include: Optional[str] = Query(default=None, description="count.posts adds the number of posts"),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=100),
    page: int = Query(default=1, ge=1),
) -> Dict[str, Any]:
    users = await repos.users.browse_experts(limit=limit, offset=(page - 1) * limit)
    meta = {"pagination": {"page": page, "limit": limit}}
    return experts_serializer.browse(users, meta, await _output_context(repos, ctx, users, include))


@router.get(
    "/slug/{slug}",
    summary="Read Expert by Slug",
    responses={404: {"description": "Expert not found"}},
)
async def read_expert_by_slug(
    slug: str,
    repos: ReposDep,
    ctx: ContextDep,
    include: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    return await _read(repos, ctx, await repos.users.find_one(slug=slug), include)


@router.get(
    "/{expert_id}",
    summary="Read Expert",
    responses={404: {"description": "Expert not found"}},
)
async def read_expert(
    expert_id: str,
    repos: ReposDep,
    ctx: ContextDep,
    include: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    return await _read(repos, ctx, await repos.users.get_by_id(expert_id), include)


@router.delete(
    "/{expert_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Destroy Expert",
    description="Delete a user together with the posts they are the primary expert of.",
    responses={403: {"description": "Not allowed"}, 404: {"description": "Expert not found"}},
)
async def destroy_expert(expert_id: str, repos: ReposDep, ctx: ContextDep) -> Response:
    if not any(role in DESTROY_ROLES for role in ctx.roles):
        raise NoPermissionError()

    if not await repos.users.destroy(expert_id):
        raise NotFoundError("Expert not found.")

    logger.info(f"User {ctx.user_id} destroyed expert {expert_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
