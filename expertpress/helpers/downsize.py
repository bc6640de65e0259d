"""
HTML-aware truncation.

The text content of a fragment is cut after a number of words or characters
while the markup around it is kept; elements left open by the cut are closed
by the serializer and everything after the cut is dropped.
"""

from __future__ import annotations

import re
from typing import Optional

import lxml.html
from lxml import etree

WORD = re.compile(r"\S+")


class _Budget:
    """Words or characters still allowed in the output."""

    def __init__(self, limit: int, by_words: bool) -> None:
        self.remaining = limit
        self.by_words = by_words

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0

    def take(self, text: Optional[str]) -> Optional[str]:
        if not text:
            return text
        if self.exhausted:
            return ""

        if not self.by_words:
            kept = text[: self.remaining]
            self.remaining -= len(kept)
            return kept

        words = list(WORD.finditer(text))
        if len(words) <= self.remaining:
            self.remaining -= len(words)
            return text

        cut = words[self.remaining - 1].end()
        self.remaining = 0
        return text[:cut]


def _truncate(element, budget: _Budget) -> None:
    element.text = budget.take(element.text)
    for child in list(element):
        if budget.exhausted:
            # removes the child's tail as well
            element.remove(child)
            continue
        if not isinstance(child.tag, str):
            # comments and processing instructions carry no text budget
            child.tail = budget.take(child.tail)
            continue
        _truncate(child, budget)
        child.tail = budget.take(child.tail)


def downsize(html: Optional[str], words: Optional[int] = None, characters: Optional[int] = None) -> str:
    """Truncate an HTML fragment by words or characters.

    Args:
        html: HTML fragment or plain text
        words: Maximum number of words (runs of non-whitespace)
        characters: Maximum number of text characters, used when ``words`` is not given

    Returns:
        The truncated fragment, ``""`` for empty input or a zero limit
    """
    if not html:
        return ""

    if words is not None:
        budget = _Budget(words, by_words=True)
    elif characters is not None:
        budget = _Budget(characters, by_words=False)
    else:
        return html

    if budget.exhausted:
        return ""

    try:
        root = lxml.html.fragment_fromstring(html, create_parent="div")
    except etree.ParserError:
        return ""

    _truncate(root, budget)

    parts = [root.text or ""]
    parts.extend(lxml.html.tostring(child, encoding="unicode") for child in root)
    return "".join(parts)
