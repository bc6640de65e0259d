"""
Database entity models.

This package contains all database entity models organized by business domain
and table relationships.

Modules:
- users: Staff users, roles and the roles_users join table
- posts: Posts and the ordered posts_experts join table
"""

from . import posts, users
from .posts import Post, PostExpertLink, PostStatus, PostVisibility
from .users import Role, RoleName, User, UserRoleLink, UserStatus

__all__ = [
    "Post",
    "PostExpertLink",
    "PostStatus",
    "PostVisibility",
    "Role",
    "RoleName",
    "User",
    "UserRoleLink",
    "UserStatus",
    "posts",
    "users",
]
