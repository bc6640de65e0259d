"""Core request models shared by the API layer."""

from __future__ import annotations

from .io import ExpertRef, PostCreate, PostUpdate

__all__ = [
    "ExpertRef",
    "PostCreate",
    "PostUpdate",
]
