"""
Resource URL registry used by theme helpers.

Every rendered resource is registered with its relative URL (experts live at
``/expert/<slug>/`` and posts at ``/<slug>/``). Helpers look URLs up by
resource id so they never need to know the routing scheme.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urlparse

from expertpress.core.logging_config import get_logger
from expertpress.server.core.config import settings

from .utils import lookup

logger = get_logger(__name__)

NOT_FOUND_URL = "/404/"


class UrlService:
    """Registry of resource id to relative URL for one site."""

    def __init__(self, site_url: str) -> None:
        self.site_url = site_url.rstrip("/")
        self.subdirectory = urlparse(site_url).path.rstrip("/")
        self._urls: Dict[str, str] = {}

    def register_resource(self, resource_id: str, url: str) -> str:
        self._urls[str(resource_id)] = url
        return url

    def register_expert(self, expert: Any) -> str:
        return self.register_resource(lookup(expert, "id"), f"/expert/{lookup(expert, 'slug')}/")

    def register_post(self, post: Any) -> str:
        return self.register_resource(lookup(post, "id"), f"/{lookup(post, 'slug')}/")

    def get_url_by_resource_id(
        self, resource_id: Optional[str], with_subdirectory: bool = False, absolute: bool = False
    ) -> str:
        """Look up the URL of a registered resource.

        Args:
            resource_id: Id of an expert or post
            with_subdirectory: Prefix the path the site is mounted under
            absolute: Return a full URL including the site origin

        Returns:
            The URL, ``/404/`` for unknown resources
        """
        url = self._urls.get(str(resource_id)) if resource_id is not None else None
        if url is None:
            logger.debug(f"No URL registered for resource {resource_id}")
            url = NOT_FOUND_URL

        if absolute:
            return f"{self.site_url}{url}"
        if with_subdirectory:
            return f"{self.subdirectory}{url}"
        return url

    def reset(self) -> None:
        self._urls.clear()


url_service = UrlService(settings.site_url)
