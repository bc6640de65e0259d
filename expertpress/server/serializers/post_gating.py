"""
Members content gating for serialized posts.

When the members feature is enabled every post gets ``member_has_access``.
Without access, ``plaintext`` and ``html`` are cut to a preview for signed-in
members and blanked for anonymous readers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from expertpress.core.database.entities.posts import PostVisibility
from expertpress.helpers.downsize import downsize

GATED_FIELDS = ("plaintext", "html")
PREVIEW_PERCENT = 30
PAID_STATUSES = frozenset({"paid", "comped"})


@dataclass(frozen=True)
class Member:
    """Signed-in site member."""

    id: str
    status: str = "free"

    @property
    def is_paid(self) -> bool:
        return self.status in PAID_STATUSES


def check_post_access(attrs: Dict[str, Any], member: Optional[Member]) -> bool:
    """Whether ``member`` may read the full content of a post."""
    visibility = attrs.get("visibility") or PostVisibility.PUBLIC.value

    if visibility == PostVisibility.PUBLIC.value:
        return True
    if member is None:
        return False
    if visibility == PostVisibility.PAID.value:
        return member.is_paid
    return True


def preview_word_count(text: str) -> int:
    return int(len(text.split(" ")) * PREVIEW_PERCENT / 100)


def for_post(attrs: Dict[str, Any], member: Optional[Member], members_enabled: bool) -> Dict[str, Any]:
    """Apply content gating to serialized post attributes in place.

    Args:
        attrs: Serialized post
        member: Signed-in member, if any
        members_enabled: Whether the members feature is on

    Returns:
        ``attrs``, gated
    """
    if not members_enabled:
        return attrs

    member_has_access = check_post_access(attrs, member)
    attrs["member_has_access"] = member_has_access

    if not member_has_access:
        for key in GATED_FIELDS:
            if attrs.get(key) and member is not None:
                attrs[key] = downsize(attrs[key], words=preview_word_count(attrs[key]))
            else:
                attrs[key] = ""

    return attrs
