"""
Theme routes.

Renders published posts at ``/<slug>/`` and expert pages at
``/expert/<slug>/`` with the active theme. Every post and expert on a page is
registered with the URL service first so the byline helpers can link to them.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Iterable, List

from fastapi import APIRouter
from fastapi.responses import HTMLResponse
from jinja2 import Environment

from expertpress.core.database.entities.posts import Post, PostStatus
from expertpress.core.database.repositories.posts import PostRepository
from expertpress.core.logging_config import get_logger
from expertpress.helpers.environment import create_environment
from expertpress.helpers.url import url_service
from expertpress.server.core.config import settings
from expertpress.server.serializers import experts as experts_serializer
from expertpress.server.serializers import post_gating
from expertpress.server.serializers.experts import OutputContext
from expertpress.server.services.deps import ContextDep, ReposDep, RequestContext

logger = get_logger(__name__)

router = APIRouter(tags=["frontend"])

# Relations every rendered post needs for its bylines
POST_RELATIONS = ["experts", "expert"]
EXPERT_PAGE_LIMIT = 15


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    return create_environment(settings.theme_dir)


def _register(posts: Iterable[Post]) -> None:
    for post in posts:
        url_service.register_post(post)
        for post_expert in post.experts:
            url_service.register_expert(post_expert)


def _render(template: str, status_code: int = 200, **context: Any) -> HTMLResponse:
    html = get_environment().get_template(template).render(site_url=settings.site_url, **context)
    return HTMLResponse(html, status_code=status_code)


def _not_found() -> HTMLResponse:
    return _render("error.html", status_code=404, message="Page not found")


def _post_context(posts: List[Post], options, ctx: RequestContext) -> List[Dict[str, Any]]:
    _register(posts)
    rendered = []
    for post in posts:
        attrs = PostRepository.serialize(post, options)
        attrs["url"] = url_service.get_url_by_resource_id(post.id, with_subdirectory=True)
        rendered.append(post_gating.for_post(attrs, ctx.member, settings.members_enabled))
    return rendered


@router.get("/expert/{slug}/", response_class=HTMLResponse, summary="Expert Page")
async def expert_page(slug: str, repos: ReposDep, ctx: ContextDep) -> HTMLResponse:
    user = await repos.users.find_one(slug=slug)
    if user is None:
        return _not_found()

    posts, options = await repos.posts.browse_by_expert(
        user.id, with_related=POST_RELATIONS, limit=EXPERT_PAGE_LIMIT
    )
    counts = await repos.users.count_posts([user.id])
    expert = experts_serializer.map_user(user, OutputContext(staff=False, post_counts=counts))

    return _render("expert.html", expert=expert, posts=_post_context(posts, options, ctx))


@router.get("/{slug}/", response_class=HTMLResponse, summary="Post Page")
async def post_page(slug: str, repos: ReposDep, ctx: ContextDep) -> HTMLResponse:
    post, options = await repos.posts.get_by_slug(slug, with_related=POST_RELATIONS)
    if post is None or post.status != PostStatus.PUBLISHED.value:
        return _not_found()

    logger.debug(f"Rendering post {post.id}")
    return _render("post.html", post=_post_context([post], options, ctx)[0])
