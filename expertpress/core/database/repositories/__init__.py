"""
Database repository layer using SQLModel.

Each module provides async data access operations for its entity models:

- base: AsyncBaseRepository interface and QueryBuilder utilities
- users: Users, roles and expert listings
- posts: Posts with their ordered experts and authorship hooks
"""

from . import posts, users
from .posts import PostRepository
from .users import UserRepository

__all__ = [
    "PostRepository",
    "UserRepository",
    "posts",
    "users",
]
