"""Shared HTML snippets rendered by theme helpers."""

from __future__ import annotations

from markupsafe import Markup


def link(url: str, text: str) -> Markup:
    """Render an anchor; ``url`` is escaped and ``text`` must already be safe."""
    return Markup('<a href="{}">{}</a>').format(url, Markup(text))
