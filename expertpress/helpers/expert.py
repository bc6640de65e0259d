"""
Expert helper (deprecated, use ``experts``).

Usage: ``{{ expert(post) }}`` or ``{% call(expert) expert(post) %}...{% endcall %}``

Output form: returns a link to the primary expert of the post (or just the
escaped name with ``autolink=false``), or an empty string when the post has
no expert.

Block form: renders the block with the expert as its scope.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from markupsafe import Markup, escape

from .templates import link
from .url import url_service
from .utils import is_disabled, lookup


def expert(this: Any, autolink: Any = True, caller: Optional[Callable[..., str]] = None) -> Markup:
    post_expert = lookup(this, "expert")

    if caller is not None:
        return Markup(caller(post_expert)) if post_expert else Markup("")

    name = lookup(post_expert, "name")
    if not name:
        return Markup("")

    if is_disabled(autolink):
        return escape(name)

    return link(
        url_service.get_url_by_resource_id(lookup(post_expert, "id"), with_subdirectory=True),
        escape(name),
    )
