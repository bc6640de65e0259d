"""
Post serialization with the deprecated ``expert`` field.

``expert`` is returned either as the full primary expert (when the caller asked
for the ``expert`` relation) or as the bare ``expert_id``. ``primary_expert`` is
computed from ``experts`` when the column selection allows it.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from expertpress.core.database.entities.posts import Post
from expertpress.core.database.entities.users import User
from expertpress.core.errors import ValidationError

from .options import EXPERTS, LEGACY_EXPERT, FetchOptions

PRIMARY_EXPERT = "primary_expert"


def serialize_expert(user: User) -> Dict[str, Any]:
    return user.model_dump(mode="json")


def _select_columns(attrs: Dict[str, Any], columns: Sequence[str]) -> Dict[str, Any]:
    wanted = set(columns)
    if LEGACY_EXPERT in wanted:
        wanted.add("expert_id")
    return {key: value for key, value in attrs.items() if key in wanted}


def serialize_post(
    post: Post,
    options: Optional[FetchOptions] = None,
    columns: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """Serialize a post for output.

    Args:
        post: Post to serialize; ``experts`` must be loaded when
            ``options.loads_experts`` is set
        options: Options the post was fetched with
        columns: Optional column selection

    Returns:
        JSON-compatible post attributes

    Raises:
        ValidationError: If ``expert`` was requested and the post has no experts
    """
    options = options or FetchOptions()
    attrs = post.model_dump(mode="json")

    if columns:
        attrs = _select_columns(attrs, columns)

    if options.loads_experts:
        attrs[EXPERTS] = [serialize_expert(expert) for expert in post.experts]

    if options.requested(LEGACY_EXPERT):
        if not attrs.get(EXPERTS):
            raise ValidationError("The target post has no primary expert.")

        attrs[LEGACY_EXPERT] = attrs[EXPERTS][0]
        attrs.pop("expert_id", None)
    elif not columns or LEGACY_EXPERT in columns:
        attrs[LEGACY_EXPERT] = attrs.pop("expert_id", None)

    # experts may have been loaded only to serve ``expert`` or an update
    if not options.requested(EXPERTS):
        attrs.pop(EXPERTS, None)

    if not columns or PRIMARY_EXPERT in columns:
        experts = attrs.get(EXPERTS)
        attrs[PRIMARY_EXPERT] = experts[0] if experts else None

    return attrs
