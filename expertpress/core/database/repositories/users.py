"""
User repository interface and implementation.

This module provides data access operations for staff users and roles,
including the lookups used to match experts sent with a post and the
post counts shown on expert pages.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from expertpress.core.errors import InternalServerError, NoPermissionError, NotFoundError
from expertpress.core.logging_config import get_logger
from expertpress.core.monitoring import log_expert_removed

from ..base import utc_now_naive
from ..entities.posts import Post, PostExpertLink, PostStatus
from ..entities.users import Role, RoleName, User, UserRoleLink, UserStatus
from .base import AsyncBaseRepository, QueryBuilder

logger = get_logger(__name__)

# Lookup keys in the order they are tried when matching a user reference
LOOKUP_KEYS = ("id", "slug", "email")


class UserRepository(AsyncBaseRepository[User]):
    """Repository for staff user data access operations using SQLModel."""

    def __init__(self, session) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session for database operations
        """
        super().__init__(session, User)

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User SQLModel instance

        Returns:
            Persisted User with generated fields
        """
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_one(self, **query: Any) -> Optional[User]:
        """Find a user by the first usable key of ``id``, ``slug`` or ``email``.

        Args:
            **query: Candidate lookup values; empty values are skipped

        Returns:
            Matching User or None when nothing matches or no key is usable
        """
        for key in LOOKUP_KEYS:
            value = query.get(key)
            if value:
                stmt = select(User).where(getattr(User, key) == value)
                result = await self.session.execute(stmt)
                return result.scalar_one_or_none()
        return None

    async def get_owner_user(self) -> User:
        """Get the site owner.

        Raises:
            NotFoundError: If no user holds the Owner role
        """
        stmt = (
            select(User)
            .join(UserRoleLink, UserRoleLink.user_id == User.id)
            .join(Role, Role.id == UserRoleLink.role_id)
            .where(Role.name == RoleName.OWNER.value)
        )
        result = await self.session.execute(stmt)
        owner = result.scalars().first()
        if owner is None:
            raise NotFoundError("Owner not found.")
        return owner

    async def update(self, user: User) -> User:
        user.updated_at = utc_now_naive()
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def delete(self, user_id: str) -> bool:
        """Delete a user row; role grants go with it.

        Posts are left untouched; use :meth:`destroy` to remove a user together
        with their authorship.

        Args:
            user_id: User ID to delete

        Returns:
            True if deleted, False if not found
        """
        user = await self.get_by_id(user_id)
        if not user:
            return False
        await self.session.delete(user)
        await self.session.commit()
        return True

    async def destroy(self, user_id: str) -> bool:
        """Delete a user after removing the posts they authored.

        Posts where the user is the primary expert are deleted; on other posts
        the user is only removed from the experts list.
        Both steps are committed together.

        Args:
            user_id: User ID to delete

        Returns:
            True if deleted, False if not found

        Raises:
            NoPermissionError: If the user is the site owner
            InternalServerError: If the database operation fails
        """
        from .posts import PostRepository

        user = await self.get_by_id(user_id)
        if not user:
            return False
        if user.has_role(RoleName.OWNER):
            raise NoPermissionError("The owner cannot be deleted.")

        destroyed = await PostRepository(self.session).destroy_by_expert(user_id, commit=False)
        try:
            await self.session.delete(user)
            await self.session.commit()
        except SQLAlchemyError as err:
            await self.session.rollback()
            logger.error(f"Failed to delete user {user_id}: {err}", exc_info=True)
            raise InternalServerError(err=err) from err

        logger.info(f"Deleted user {user_id} and {len(destroyed)} posts they authored")
        log_expert_removed(user_id, len(destroyed))
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[User]:
        """List users with optional pagination and filtering.

        Args:
            limit: Maximum records to return
            offset: Records to skip
            filters: Field filters (status, visibility, slug)

        Returns:
            List of User instances ordered by name
        """
        stmt = select(User).order_by(User.name)

        if filters:
            stmt = QueryBuilder.apply_filters(stmt, User, filters)

        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def browse_experts(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[User]:
        """List active users that are experts of at least one post."""
        authored = select(PostExpertLink.expert_id).distinct()
        stmt = (
            select(User)
            .where(User.id.in_(authored))  # type: ignore[union-attr]
            .where(User.status == UserStatus.ACTIVE.value)
            .order_by(User.name)
        )
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_posts(self, user_ids: Sequence[str], status: Optional[str] = PostStatus.PUBLISHED.value) -> Dict[str, int]:
        """Count the posts each user is an expert of.

        Args:
            user_ids: Users to count for
            status: Only count posts with this status, ``None`` for any

        Returns:
            Mapping of user id to number of posts (zero when none)
        """
        counts = {user_id: 0 for user_id in user_ids}
        if not user_ids:
            return counts

        stmt = (
            select(PostExpertLink.expert_id, func.count(PostExpertLink.post_id))
            .join(Post, Post.id == PostExpertLink.post_id)
            .where(PostExpertLink.expert_id.in_(list(user_ids)))  # type: ignore[attr-defined]
            .group_by(PostExpertLink.expert_id)
        )
        if status:
            stmt = stmt.where(Post.status == status)

        result = await self.session.execute(stmt)
        for expert_id, count in result.all():
            counts[expert_id] = count
        return counts

    async def get_role(self, name: str | RoleName) -> Optional[Role]:
        name = name.value if isinstance(name, RoleName) else name
        result = await self.session.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def ensure_roles(self) -> List[Role]:
        """Create any built-in role that does not exist yet."""
        roles = []
        for role_name in RoleName:
            role = await self.get_role(role_name)
            if role is None:
                role = Role(name=role_name.value)
                self.session.add(role)
            roles.append(role)
        await self.session.commit()
        return roles

    async def assign_role(self, user: User, name: str | RoleName) -> User:
        """Grant a role to a user.

        Raises:
            NotFoundError: If the role does not exist
        """
        name = name.value if isinstance(name, RoleName) else name
        role = await self.get_role(name)
        if role is None:
            raise NotFoundError(f"Role '{name}' not found.")
        if role.id not in {existing.id for existing in user.roles}:
            self.session.add(UserRoleLink(user_id=user.id, role_id=role.id))
            await self.session.commit()
            await self.session.refresh(user, ["roles"])
        return user
