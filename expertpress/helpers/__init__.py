"""
Theme helpers rendering expert bylines.

- expert: primary expert of a post (deprecated)
- experts: joined list of a post's experts
- truncate: HTML-aware truncation
"""

from .environment import create_environment, register_helpers
from .expert import expert
from .experts import experts
from .truncate import truncate
from .url import UrlService, url_service

__all__ = [
    "UrlService",
    "create_environment",
    "expert",
    "experts",
    "register_helpers",
    "truncate",
    "url_service",
]
