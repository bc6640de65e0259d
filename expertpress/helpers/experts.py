"""
Experts helper.

Usage: ``{{ experts(post) }}``, ``{{ post|experts(separator=' - ') }}``

Returns the experts of a post as a list of links joined by ``separator``
(``", "`` by default). ``from`` and ``to`` select a 1-indexed range, with
``from=0`` starting at the last expert like a negative slice. ``limit`` caps
the number of experts and ``visibility`` filters experts by their
visibility (``public`` by default). ``prefix`` and ``suffix`` wrap non-empty
output.

Looping over ``post.experts`` in a template is unaffected by this helper.
"""

from __future__ import annotations

from typing import Any

from markupsafe import Markup, escape

from .templates import link
from .url import url_service
from .utils import is_disabled, lookup, parse_int
from .visibility import filter_by_visibility


def experts(
    this: Any,
    autolink: Any = True,
    separator: str = ", ",
    prefix: str = "",
    suffix: str = "",
    limit: Any = None,
    visibility: Any = None,
    to: Any = None,
    **hash: Any,
) -> Markup:
    """Render the expert byline of a post.

    ``from`` is a Python keyword, so it is read from ``hash`` as either
    ``from`` or ``from_``.
    """
    autolink = not is_disabled(autolink)
    limit = parse_int(limit)
    start = hash.get("from", hash.get("from_"))
    start = 1 if start is None else parse_int(start) or 0
    to = parse_int(to)

    def render(post_expert: Any) -> str:
        name = escape(lookup(post_expert, "name") or "")
        if not autolink:
            return str(name)
        url = url_service.get_url_by_resource_id(lookup(post_expert, "id"), with_subdirectory=True)
        return str(link(url, name))

    output = ""
    post_experts = lookup(this, "experts")
    if post_experts:
        rendered = filter_by_visibility(post_experts, visibility, render)
        if isinstance(rendered, dict):
            rendered = list(rendered.values())
        # from is 1-indexed
        start -= 1
        end = to or ((limit + start) if limit else 0) or len(rendered)
        output = separator.join(rendered[start:end])

    if output:
        output = prefix + output + suffix

    return Markup(output)
