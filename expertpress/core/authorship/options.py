"""
Relation-aware fetch options for posts.

``experts`` is fetched by default in a few cases:

1. The caller asked for ``experts`` or for the removed ``expert`` relation,
   which is served from ``experts[0]``.
2. A post is fetched for update. Changing ``expert_id`` must rewrite the
   primary expert, so the existing experts are needed.
3. ``expert`` was requested and has to be filled from the primary expert.

The relations the caller originally asked for are remembered on the
returned :class:`FetchOptions` so serialization can drop anything that was
only loaded implicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

FETCHING = "fetching"
FETCHING_COLLECTION = "fetching_collection"
CREATING = "creating"
UPDATING = "updating"

LEGACY_EXPERT = "expert"
EXPERTS = "experts"


@dataclass(frozen=True)
class FetchOptions:
    """Effective and originally requested relations of a post query."""

    with_related: List[str] = field(default_factory=list)
    original_with_related: List[str] = field(default_factory=list)
    for_update: bool = False

    @property
    def loads_experts(self) -> bool:
        return EXPERTS in self.with_related

    def requested(self, relation: str) -> bool:
        """Whether the caller itself asked for ``relation``."""
        return relation in self.original_with_related


def handle_options(
    fn_name: str,
    with_related: Optional[Iterable[str]] = None,
    for_update: bool = False,
) -> FetchOptions:
    """Normalize the relations requested for a post hook.

    Args:
        fn_name: Hook being run (``fetching``, ``fetching_collection``,
            ``creating`` or ``updating``)
        with_related: Relations requested by the caller
        for_update: Whether the fetch precedes an edit

    Returns:
        FetchOptions holding the rewritten relations and the caller's originals
    """
    original = list(with_related or [])
    effective: List[str] = []
    for relation in original:
        relation = EXPERTS if relation == LEGACY_EXPERT else relation
        if relation not in effective:
            effective.append(relation)

    if for_update and fn_name in (FETCHING, FETCHING_COLLECTION) and EXPERTS not in effective:
        effective.append(EXPERTS)

    return FetchOptions(with_related=effective, original_with_related=original, for_update=for_update)
