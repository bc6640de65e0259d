"""
Site status endpoints.

``/health`` reports whether the site can reach its database and how many
posts it currently serves; ``/version`` reports the server and API schema
versions. Both are public and used by deployment checks.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from expertpress.core.database.entities.posts import PostStatus
from expertpress.core.logging_config import get_logger
from expertpress.server.core import constant
from expertpress.server.core.config import settings
from expertpress.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Site Health",
    description="Check that the site is up and its database answers.",
    response_description="Status of the site and its database.",
    responses={503: {"description": "The database cannot be reached."}},
)
async def health_check(repos: ReposDep):
    try:
        published = await repos.posts.count({"status": PostStatus.PUBLISHED.value})
    except SQLAlchemyError as err:
        logger.error(f"Health check cannot reach the database: {err}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "database": "unreachable", "site_url": settings.site_url},
        )
    return {"status": "ok", "database": "ok", "site_url": settings.site_url, "published_posts": published}


@router.get(
    "/version",
    summary="Get Version",
    description="Server version and the Content API it serves.",
    response_description="Version object.",
)
async def version():
    return {
        "name": constant.PROJECT_NAME,
        "version": constant.VERSION,
        "schema_version": constant.SCHEMA_VERSION,
        "api": constant.API_V1_STR,
    }
