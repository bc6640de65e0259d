"""
Visibility filtering for lists rendered by theme helpers.

An item passes when it has no ``visibility`` or its visibility is one of the
requested values. ``all`` lets every item through.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterable, List, Optional, Union

from .utils import lookup

DEFAULT_VISIBILITY = ["public"]
ALL = "all"


def parse_visibility(visibility: Union[str, Iterable[str], None]) -> List[str]:
    """Split a comma separated visibility argument.

    Args:
        visibility: ``"public, members"``, a list of values or nothing

    Returns:
        Trimmed visibility values, ``["public"]`` when nothing was given
    """
    if not visibility:
        return list(DEFAULT_VISIBILITY)

    values = visibility.split(",") if isinstance(visibility, str) else list(visibility)
    parsed = [value.strip() for value in values if value and value.strip()]
    return parsed or list(DEFAULT_VISIBILITY)


def _passes(item: Any, allowed: List[str]) -> bool:
    if ALL in allowed:
        return True
    item_visibility = lookup(item, "visibility")
    return not item_visibility or item_visibility in allowed


def filter_by_visibility(items: Any, visibility: Union[str, Iterable[str], None] = None, fn: Optional[Callable[[Any], Any]] = None) -> Any:
    """Keep the items matching ``visibility``.

    The shape of ``items`` is preserved: a mapping stays a mapping with the
    same keys, anything else becomes a list.

    Args:
        items: Sequence or mapping of items with an optional ``visibility``
        visibility: Allowed visibility values
        fn: Applied to every kept item

    Returns:
        The kept (and mapped) items
    """
    allowed = parse_visibility(visibility)
    transform = fn or (lambda item: item)

    if isinstance(items, Mapping):
        return {key: transform(item) for key, item in items.items() if _passes(item, allowed)}
    return [transform(item) for item in items or [] if _passes(item, allowed)]
