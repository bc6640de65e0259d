"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- posts: Post create/update payloads and expert references
"""

from .posts import ExpertRef, PostCreate, PostUpdate

__all__ = [
    "ExpertRef",
    "PostCreate",
    "PostUpdate",
]
