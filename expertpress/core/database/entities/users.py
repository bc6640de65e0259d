"""
User and role entity models.

This module contains the database entities for staff users and the roles
granted to them. Users that write posts are called experts; the posts they
author are linked through the ``posts_experts`` table defined in
:mod:`expertpress.core.database.entities.posts`.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlmodel import Field, Relationship

from ..base import Base, object_id, utc_now_naive


class RoleName(str, Enum):
    """Built-in staff roles."""

    OWNER = "Owner"
    ADMINISTRATOR = "Administrator"
    EDITOR = "Editor"
    EXPERT = "Expert"
    CONTRIBUTOR = "Contributor"


class UserStatus(str, Enum):
    """Lifecycle status of a staff user."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    LOCKED = "locked"


class UserRoleLink(Base, table=True):
    """Join row granting a role to a user.

    Table: roles_users
    """

    __tablename__ = "roles_users"
    __table_args__ = ({"extend_existing": True},)

    user_id: Optional[str] = Field(default=None, foreign_key="users.id", primary_key=True, max_length=24)
    role_id: Optional[str] = Field(default=None, foreign_key="roles.id", primary_key=True, max_length=24)


class Role(Base, table=True):
    """Named staff role.

    Table: roles
    """

    __tablename__ = "roles"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=object_id, primary_key=True, max_length=24)
    name: str = Field(index=True, unique=True, max_length=50)
    description: Optional[str] = Field(default=None, max_length=2000)

    def __repr__(self) -> str:
        return f"Role(id={self.id}, name={self.name})"


class UserBase(Base):
    """Base fields for a staff user."""

    name: str = Field(max_length=191, description="Display name used in bylines")
    slug: str = Field(index=True, unique=True, max_length=191, description="URL slug of the expert page")
    email: str = Field(index=True, unique=True, max_length=191)
    profile_image: Optional[str] = Field(default=None, max_length=2000)
    bio: Optional[str] = Field(default=None)
    website: Optional[str] = Field(default=None, max_length=2000)
    status: str = Field(default=UserStatus.ACTIVE.value, max_length=50)
    visibility: str = Field(default="public", max_length=50)


class User(UserBase, table=True):
    """Persistent staff user.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=object_id, primary_key=True, max_length=24)

    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})

    roles: List[Role] = Relationship(link_model=UserRoleLink, sa_relationship_kwargs={"lazy": "selectin"})

    @property
    def role_names(self) -> List[str]:
        return [role.name for role in self.roles]

    def has_role(self, name: str | RoleName) -> bool:
        name = name.value if isinstance(name, RoleName) else name
        return name in self.role_names

    def __repr__(self) -> str:
        return f"User(id={self.id}, slug={self.slug})"
