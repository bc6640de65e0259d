"""
Creating and saving hooks keeping ``expert_id`` and ``experts`` in sync.

A post stores its experts twice: the ordered ``posts_experts`` rows and the
deprecated ``posts.expert_id`` column. Clients may send either one (or both);
these hooks reconcile them before anything is written so that
``expert_id`` always equals the id of the first expert.

Experts cannot be created through posts. Every reference is matched against
an existing user by ``id``, ``slug`` or ``email`` and falls back to the site
owner when nothing matches.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from expertpress.core.errors import ValidationError
from expertpress.core.logging_config import get_logger

logger = get_logger(__name__)

ExpertRef = Dict[str, Any]


class ExpertResolver(Protocol):
    """Lookup used to match expert references to users."""

    async def find_one(self, **query: Any) -> Any: ...

    async def get_owner_user(self) -> Any: ...


def on_creating(attrs: Dict[str, Any], context_user: Optional[str]) -> Dict[str, Any]:
    """Fill in the expert fields of a new post.

    Args:
        attrs: Incoming post attributes
        context_user: Id of the user creating the post

    Returns:
        A copy of ``attrs`` with ``expert_id`` and ``experts`` defaulted
    """
    attrs = dict(attrs)

    if not attrs.get("expert_id"):
        experts = attrs.get("experts")
        attrs["expert_id"] = experts[0].get("id") if experts else context_user

    if attrs.get("experts") is None:
        attrs["experts"] = [{"id": attrs["expert_id"]}]

    return attrs


async def match_experts(experts: Sequence[ExpertRef], resolver: ExpertResolver) -> List[ExpertRef]:
    """Resolve expert references to existing users.

    Args:
        experts: References carrying ``id``, ``slug`` or ``email``
        resolver: User lookup

    Returns:
        ``[{"id": ...}]`` in the incoming order, without duplicate users
    """
    owner = None
    matched: List[ExpertRef] = []
    seen = set()

    for ref in experts:
        user = await resolver.find_one(id=ref.get("id"), slug=ref.get("slug"), email=ref.get("email"))
        if user is None:
            if owner is None:
                owner = await resolver.get_owner_user()
            logger.debug(f"No user matches expert reference {ref}, falling back to owner {owner.id}")
            user = owner

        if user.id not in seen:
            seen.add(user.id)
            matched.append({"id": user.id})

    return matched


def reconcile_primary_expert(
    attrs: Dict[str, Any],
    *,
    expert_id_changed: bool,
    existing_experts: Sequence[str],
) -> Dict[str, Any]:
    """Make ``expert_id`` and the first entry of ``experts`` agree.

    Args:
        attrs: Post attributes after matching
        expert_id_changed: Whether ``expert_id`` differs from the stored value
        existing_experts: Ids of the currently stored experts, in order

    Returns:
        A copy of ``attrs`` with consistent ``expert_id`` and ``experts``
    """
    attrs = dict(attrs)
    experts = attrs.get("experts")

    if expert_id_changed and experts is None:
        # only expert_id was sent: it replaces the primary expert
        experts = [{"id": expert_id} for expert_id in existing_experts]
        primary = {"id": attrs["expert_id"]}
        if experts:
            experts[0] = primary
        else:
            experts = [primary]
        attrs["experts"] = experts

    if experts:
        attrs["expert_id"] = experts[0]["id"]

    return attrs


async def on_saving(
    attrs: Dict[str, Any],
    *,
    expert_id_changed: bool,
    existing_experts: Sequence[str],
    resolver: ExpertResolver,
) -> Dict[str, Any]:
    """Validate and reconcile the expert fields of a post about to be saved.

    Runs before both creating and updating.

    Args:
        attrs: Incoming post attributes; ``experts`` is ``None`` when not sent
        expert_id_changed: Whether ``expert_id`` differs from the stored value
        existing_experts: Ids of the currently stored experts, in order
        resolver: User lookup for matching references

    Returns:
        Attributes ready to be written

    Raises:
        ValidationError: If ``experts`` was sent empty
    """
    attrs = dict(attrs)

    # the deprecated ``expert`` object is never honored on write
    attrs.pop("expert", None)

    experts = attrs.get("experts")
    if experts is not None and not experts:
        raise ValidationError("At least one expert is required.")

    if experts is not None:
        attrs["experts"] = await match_experts(experts, resolver)

    return reconcile_primary_expert(
        attrs,
        expert_id_changed=expert_id_changed,
        existing_experts=existing_experts,
    )
