"""
Truncate helper.

Usage: ``{{ post.html|truncate(words=50) }}`` or
``{{ truncate(post.excerpt, characters=140) }}``.

Truncates HTML by words or characters and appends an ellipsis. Without
``words`` or ``characters`` the string is returned unchanged.
"""

from __future__ import annotations

from typing import Any, Optional

from markupsafe import Markup

from .downsize import downsize


def _parse_limit(value: Any) -> Optional[int]:
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    return int(value, 10)


def truncate(string: Optional[str], words: Any = None, characters: Any = None) -> Markup:
    if string is None:
        string = ""

    words = _parse_limit(words)
    characters = _parse_limit(characters)

    if words is not None or characters is not None:
        return Markup(downsize(str(string), words=words, characters=characters) + "...")

    return Markup(string)
