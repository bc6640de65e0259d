"""
Output serializer for the experts API.

Responses are wrapped the same way for both entry points:
``{"experts": [...]}`` plus ``meta`` for collections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from expertpress.core.authorship.serialization import serialize_expert
from expertpress.core.database.entities.users import User
from expertpress.core.logging_config import get_logger
from expertpress.helpers.url import url_service

logger = get_logger(__name__)

# Removed from every response
PRIVATE_FIELDS = ("status",)
# Only returned to staff
STAFF_FIELDS = ("email", "created_at", "updated_at")


@dataclass(frozen=True)
class OutputContext:
    """Who the response is for and the post counts that were requested."""

    staff: bool = False
    post_counts: Optional[Dict[str, int]] = field(default=None)


def map_user(user: User, context: OutputContext) -> Dict[str, Any]:
    data = serialize_expert(user)

    for key in PRIVATE_FIELDS:
        data.pop(key, None)
    if not context.staff:
        for key in STAFF_FIELDS:
            data.pop(key, None)

    url_service.register_expert(user)
    data["url"] = url_service.get_url_by_resource_id(user.id, absolute=True)

    if context.post_counts is not None:
        data["count"] = {"posts": context.post_counts.get(user.id, 0)}

    return data


def browse(users: Iterable[User], meta: Dict[str, Any], context: OutputContext) -> Dict[str, Any]:
    logger.debug("browse")

    return {
        "experts": [map_user(user, context) for user in users],
        "meta": meta,
    }


def read(user: User, context: OutputContext) -> Dict[str, Any]:
    logger.debug("read")

    return {
        "experts": [map_user(user, context)],
    }
