"""
Post entity models.

This module contains the database entities for posts and the ordered
many-to-many relation between posts and their experts.

``Post.expert_id`` is the deprecated single-expert column. It is kept in
sync with the first row of ``posts_experts`` (the primary expert) by
:mod:`expertpress.core.authorship.lifecycle`.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from sqlmodel import Field, Relationship

from ..base import Base, object_id, utc_now_naive
from .users import User


class PostStatus(str, Enum):
    """Publication status of a post."""

    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"


class PostVisibility(str, Enum):
    """Audience allowed to read the full content of a post."""

    PUBLIC = "public"
    MEMBERS = "members"
    PAID = "paid"


class PostExpertLink(Base, table=True):
    """Ordered join row between a post and one of its experts.

    The row with the lowest ``sort_order`` is the primary expert.

    Table: posts_experts
    """

    __tablename__ = "posts_experts"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=object_id, primary_key=True, max_length=24)
    post_id: str = Field(foreign_key="posts.id", index=True, max_length=24)
    expert_id: str = Field(foreign_key="users.id", index=True, max_length=24)
    sort_order: int = Field(default=0)

    def __repr__(self) -> str:
        return f"PostExpertLink(post_id={self.post_id}, expert_id={self.expert_id}, sort_order={self.sort_order})"


class PostBase(Base):
    """Base fields for a post."""

    title: str = Field(max_length=2000)
    slug: str = Field(index=True, unique=True, max_length=191)
    html: Optional[str] = Field(default=None)
    plaintext: Optional[str] = Field(default=None)
    status: str = Field(default=PostStatus.DRAFT.value, index=True, max_length=50)
    visibility: str = Field(default=PostVisibility.PUBLIC.value, max_length=50)
    featured: bool = Field(default=False)


class Post(PostBase, table=True):
    """Persistent post.

    Table: posts
    """

    __tablename__ = "posts"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=object_id, primary_key=True, max_length=24)
    uuid: str = Field(default_factory=lambda: str(uuid4()), max_length=36)

    # Deprecated: mirrors the primary expert
    expert_id: str = Field(foreign_key="users.id", index=True, max_length=24)

    created_at: datetime = Field(default_factory=utc_now_naive, index=True)
    updated_at: datetime = Field(default_factory=utc_now_naive, sa_column_kwargs={"onupdate": utc_now_naive})
    published_at: Optional[datetime] = Field(default=None)

    # Read-only: rows are written by PostRepository so ``sort_order`` is kept
    experts: List[User] = Relationship(
        link_model=PostExpertLink,
        sa_relationship_kwargs={
            "lazy": "selectin",
            "order_by": "PostExpertLink.sort_order",
            "viewonly": True,
        },
    )

    def __repr__(self) -> str:
        return f"Post(id={self.id}, slug={self.slug}, expert_id={self.expert_id})"
