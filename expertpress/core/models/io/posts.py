"""
Post I/O models for API requests.

These models define what clients may send when creating or editing a post.
Experts are referenced by ``id``, ``slug`` or ``email``; the references are
matched against existing users when the post is saved.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from expertpress.core.database.entities.posts import PostStatus, PostVisibility


class ExpertRef(BaseModel):
    """Reference to an existing user acting as an expert of a post."""

    id: Optional[str] = Field(default=None, description="User id")
    slug: Optional[str] = Field(default=None, description="User slug")
    email: Optional[str] = Field(default=None, description="User email")


class PostCreate(BaseModel):
    """Schema for creating a post via API."""

    title: str = Field(description="Post title")
    slug: str = Field(description="URL slug")
    html: Optional[str] = Field(default=None)
    plaintext: Optional[str] = Field(default=None)
    status: PostStatus = Field(default=PostStatus.DRAFT)
    visibility: PostVisibility = Field(default=PostVisibility.PUBLIC)
    featured: bool = Field(default=False)
    published_at: Optional[datetime] = Field(default=None)
    expert_id: Optional[str] = Field(default=None, description="Deprecated: primary expert id")
    experts: Optional[List[ExpertRef]] = Field(default=None, description="Ordered experts, first is primary")
    expert: Optional[Dict[str, Any]] = Field(default=None, description="Deprecated: ignored on write")

    def to_attrs(self) -> Dict[str, Any]:
        """Attributes for the repository; ``experts`` stays ``None`` when not sent."""
        attrs = self.model_dump(mode="json", exclude_none=True, exclude={"experts", "published_at"})
        attrs["published_at"] = self.published_at
        attrs["experts"] = None if self.experts is None else [ref.model_dump(exclude_none=True) for ref in self.experts]
        return attrs


class PostUpdate(BaseModel):
    """Schema for editing a post via API. Only sent fields are applied."""

    title: Optional[str] = None
    slug: Optional[str] = None
    html: Optional[str] = None
    plaintext: Optional[str] = None
    status: Optional[PostStatus] = None
    visibility: Optional[PostVisibility] = None
    featured: Optional[bool] = None
    published_at: Optional[datetime] = None
    expert_id: Optional[str] = None
    experts: Optional[List[ExpertRef]] = None
    expert: Optional[Dict[str, Any]] = None

    @field_validator("title", "slug", "status", "visibility", "featured")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        # NOT NULL columns: omit the field to keep its value
        if value is None:
            raise ValueError("must not be null")
        return value

    def to_attrs(self) -> Dict[str, Any]:
        attrs = self.model_dump(exclude_unset=True, exclude={"experts"})
        for key in ("status", "visibility"):
            if attrs.get(key) is not None:
                attrs[key] = attrs[key].value
        if "experts" in self.model_fields_set:
            attrs["experts"] = None if self.experts is None else [ref.model_dump(exclude_none=True) for ref in self.experts]
        return attrs
