"""Small value helpers shared by the theme helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional


def lookup(scope: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a template scope that may be a mapping or an object."""
    if scope is None:
        return default
    if isinstance(scope, Mapping):
        return scope.get(name, default)
    return getattr(scope, name, default)


def parse_int(value: Any) -> Optional[int]:
    """Parse a helper argument as a base-10 integer; falsy values pass through as ``None``."""
    if not value:
        return None
    return int(str(value).strip(), 10)


def is_disabled(flag: Any) -> bool:
    """Whether a boolean helper argument was switched off (``False`` or ``'false'``)."""
    return flag is False or (isinstance(flag, str) and flag == "false")
