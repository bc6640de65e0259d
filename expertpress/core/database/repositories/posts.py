"""
Post repository interface and implementation.

This module provides data access operations for posts and their ordered
experts. It runs the authorship hooks around every write:

- ``add``: creating hook, then saving hook
- ``edit``: fetch for update (experts included), then saving hook
- ``destroy_by_expert``: cleanup when a user is removed

Link rows in ``posts_experts`` are written here explicitly so the order of
``experts`` is preserved; ``Post.experts`` itself is read-only.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import select

from expertpress.core.authorship.lifecycle import on_creating, on_saving
from expertpress.core.authorship.options import (
    CREATING,
    FETCHING,
    FETCHING_COLLECTION,
    UPDATING,
    FetchOptions,
    handle_options,
)
from expertpress.core.authorship.permissions import (
    LoadedPermissions,
    PermissionContext,
    PermissionResult,
    permissible,
)
from expertpress.core.authorship.serialization import serialize_post
from expertpress.core.errors import InternalServerError, NotFoundError, ValidationError
from expertpress.core.logging_config import get_logger
from expertpress.core.monitoring import log_post_written

from ..base import utc_now_naive
from ..entities.posts import Post, PostExpertLink, PostStatus
from .base import AsyncBaseRepository, QueryBuilder
from .users import UserRepository

logger = get_logger(__name__)

# Attributes handled by the authorship hooks rather than copied onto the row
RELATION_ATTRS = ("experts", "expert")

STATUS_ALL = "all"


class PostRepository(AsyncBaseRepository[Post]):
    """Repository for post data access operations using SQLModel."""

    def __init__(self, session, users: Optional[UserRepository] = None) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session for database operations
            users: User repository used to match experts (built from ``session`` if omitted)
        """
        super().__init__(session, Post)
        self.users = users or UserRepository(session)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _select(self, options: FetchOptions):
        # link rows change outside the ORM, so loaded posts are refreshed
        stmt = select(Post).execution_options(populate_existing=True)
        if options.loads_experts:
            stmt = stmt.options(selectinload(Post.experts))  # type: ignore[arg-type]
        return stmt

    async def find_one(
        self,
        post_id: str,
        *,
        with_related: Optional[Iterable[str]] = None,
        for_update: bool = False,
        status: Optional[str] = STATUS_ALL,
    ) -> tuple[Optional[Post], FetchOptions]:
        """Fetch a single post.

        Args:
            post_id: Post ID
            with_related: Relations to load (``experts`` or the legacy ``expert``)
            for_update: Whether the post is about to be edited
            status: Restrict to a status, ``"all"`` for any

        Returns:
            The post (or None) and the options it was fetched with
        """
        options = handle_options(FETCHING, with_related, for_update=for_update)
        stmt = self._select(options).where(Post.id == post_id)
        if status and status != STATUS_ALL:
            stmt = stmt.where(Post.status == status)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none(), options

    async def get_by_id(self, post_id: str) -> Optional[Post]:
        post, _ = await self.find_one(post_id)
        return post

    async def browse(
        self,
        *,
        filters: Optional[Dict[str, Any]] = None,
        with_related: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> tuple[List[Post], FetchOptions]:
        """Fetch a page of posts, newest first.

        All posts of the page share the returned options.

        Args:
            filters: Field filters (status, visibility, expert_id, featured);
                ``status="all"`` disables the status filter
            with_related: Relations to load
            limit: Maximum records to return
            offset: Records to skip

        Returns:
            The posts and the options they were fetched with
        """
        options = handle_options(FETCHING_COLLECTION, with_related)
        stmt = self._select(options).order_by(Post.created_at.desc())  # type: ignore[attr-defined]

        filters = dict(filters or {})
        if filters.get("status") == STATUS_ALL:
            filters.pop("status")
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, Post, filters)

        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all()), options

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Post]:
        posts, _ = await self.browse(filters=filters, limit=limit, offset=offset)
        return posts

    async def get_by_slug(self, slug: str, *, with_related: Optional[Iterable[str]] = None) -> tuple[Optional[Post], FetchOptions]:
        options = handle_options(FETCHING, with_related)
        result = await self.session.execute(self._select(options).where(Post.slug == slug))
        return result.scalar_one_or_none(), options

    async def browse_by_expert(
        self,
        expert_id: str,
        *,
        status: Optional[str] = PostStatus.PUBLISHED.value,
        with_related: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> tuple[List[Post], FetchOptions]:
        """Fetch the posts a user is an expert of, newest first.

        Args:
            expert_id: User id, primary or co-expert
            status: Restrict to a status, ``"all"`` for any
            with_related: Relations to load
            limit: Maximum records to return
            offset: Records to skip

        Returns:
            The posts and the options they were fetched with
        """
        options = handle_options(FETCHING_COLLECTION, with_related)
        authored = select(PostExpertLink.post_id).where(PostExpertLink.expert_id == expert_id)
        stmt = (
            self._select(options)
            .where(Post.id.in_(authored))  # type: ignore[union-attr]
            .order_by(Post.created_at.desc())  # type: ignore[attr-defined]
        )
        if status and status != STATUS_ALL:
            stmt = stmt.where(Post.status == status)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all()), options

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        filters = dict(filters or {})
        if filters.get("status") == STATUS_ALL:
            filters.pop("status")
        stmt = QueryBuilder.apply_filters(select(func.count()).select_from(Post), Post, filters)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    async def _write_experts(self, post_id: str, experts: Sequence[Dict[str, Any]]) -> None:
        await self.session.execute(sa_delete(PostExpertLink).where(PostExpertLink.post_id == post_id))
        for sort_order, expert in enumerate(experts):
            self.session.add(PostExpertLink(post_id=post_id, expert_id=expert["id"], sort_order=sort_order))

    async def _persist(self, post: Post, experts: Optional[Sequence[Dict[str, Any]]]) -> None:
        slug = post.slug
        try:
            self.session.add(post)
            await self.session.flush()
            if experts is not None:
                await self._write_experts(post.id, experts)
            await self.session.commit()
        except IntegrityError as err:
            await self.session.rollback()
            logger.warning(f"Rejected post write with slug {slug}: {err.orig}")
            raise ValidationError("Post slug already exists.", err=err) from err

    async def _reload(self, post: Post, with_related: Optional[Iterable[str]], fn_name: str) -> tuple[Post, FetchOptions]:
        await self.session.refresh(post)
        await self.session.refresh(post, ["experts"])
        return post, handle_options(fn_name, with_related)

    async def create(self, post: Post) -> Post:
        """Persist a post built by the caller as-is.

        The post must already carry a valid ``expert_id``; a single link row is
        written for it.
        """
        self.session.add(post)
        await self._write_experts(post.id, [{"id": post.expert_id}])
        await self.session.commit()
        await self.session.refresh(post)
        return post

    async def add(
        self,
        attrs: Dict[str, Any],
        *,
        context_user: Optional[str] = None,
        with_related: Optional[Iterable[str]] = None,
    ) -> tuple[Post, FetchOptions]:
        """Create a post from incoming attributes.

        Args:
            attrs: Post attributes, optionally with ``expert_id`` and ``experts``
            context_user: Id of the acting user, the default expert
            with_related: Relations to return with the post

        Returns:
            The created post with experts loaded and the options for serialization

        Raises:
            ValidationError: If ``experts`` is empty or the slug is taken
        """
        attrs = on_creating(attrs, context_user)
        attrs = await on_saving(attrs, expert_id_changed=True, existing_experts=[], resolver=self.users)

        columns = {key: value for key, value in attrs.items() if key not in RELATION_ATTRS}
        if columns.get("status") == PostStatus.PUBLISHED.value and not columns.get("published_at"):
            columns["published_at"] = utc_now_naive()

        post = Post(**columns)
        await self._persist(post, attrs["experts"])

        logger.info(f"Created post {post.id} with experts {[expert['id'] for expert in attrs['experts']]}")
        log_post_written("created", post.id, [expert["id"] for expert in attrs["experts"]])
        return await self._reload(post, with_related, CREATING)

    async def edit(
        self,
        post_id: str,
        attrs: Dict[str, Any],
        *,
        with_related: Optional[Iterable[str]] = None,
    ) -> tuple[Post, FetchOptions]:
        """Update a post from incoming attributes.

        Args:
            post_id: Post ID
            attrs: Changed attributes; ``experts`` replaces the whole list
            with_related: Relations to return with the post

        Returns:
            The updated post with experts loaded and the options for serialization

        Raises:
            NotFoundError: If the post does not exist
            ValidationError: If ``experts`` is empty or the slug is taken
        """
        post, _ = await self.find_one(post_id, with_related=with_related, for_update=True)
        if post is None:
            raise NotFoundError("Post not found.")

        attrs = dict(attrs)
        if "expert_id" in attrs and not attrs["expert_id"]:
            attrs.pop("expert_id")

        existing_experts = [expert.id for expert in post.experts]
        expert_id_changed = "expert_id" in attrs and attrs["expert_id"] != post.expert_id

        attrs = await on_saving(
            attrs,
            expert_id_changed=expert_id_changed,
            existing_experts=existing_experts,
            resolver=self.users,
        )

        for key, value in attrs.items():
            if key not in RELATION_ATTRS and key != "id" and hasattr(post, key):
                setattr(post, key, value)
        if post.status == PostStatus.PUBLISHED.value and post.published_at is None:
            post.published_at = utc_now_naive()
        post.updated_at = utc_now_naive()

        await self._persist(post, attrs.get("experts"))

        post, options = await self._reload(post, with_related, UPDATING)
        log_post_written("edited", post.id, [expert.id for expert in post.experts])
        return post, options

    async def update(self, post: Post) -> Post:
        post.updated_at = utc_now_naive()
        self.session.add(post)
        await self.session.commit()
        await self.session.refresh(post)
        return post

    async def _delete_post(self, post: Post) -> None:
        await self.session.execute(sa_delete(PostExpertLink).where(PostExpertLink.post_id == post.id))
        await self.session.delete(post)

    async def delete(self, post_id: str) -> bool:
        """Delete a post and its expert relations.

        Args:
            post_id: Post ID to delete

        Returns:
            True if deleted, False if not found
        """
        post = await self.get_by_id(post_id)
        if not post:
            return False
        await self._delete_post(post)
        await self.session.commit()
        return True

    async def destroy(self, post_id: str) -> None:
        """Delete a post.

        Raises:
            NotFoundError: If the post does not exist
        """
        if not await self.delete(post_id):
            raise NotFoundError("Post not found.")

    async def destroy_by_expert(self, expert_id: Optional[str], *, commit: bool = True) -> List[Post]:
        """Remove the authorship of a user that is about to be deleted.

        Posts where the user is the primary expert are deleted together with
        their relations. On every other post the user is only removed from
        the experts list.

        Args:
            expert_id: Id of the user being removed
            commit: Commit when done; pass False when the caller owns the transaction

        Returns:
            The deleted posts

        Raises:
            NotFoundError: If no id was given
            InternalServerError: If the database operation fails
        """
        if not expert_id:
            raise NotFoundError("No user found")

        try:
            result = await self.session.execute(select(Post).where(Post.expert_id == expert_id))
            posts = list(result.scalars().all())
            for post in posts:
                await self._delete_post(post)

            await self.session.execute(sa_delete(PostExpertLink).where(PostExpertLink.expert_id == expert_id))
            if commit:
                await self.session.commit()
        except SQLAlchemyError as err:
            await self.session.rollback()
            logger.error(f"Failed to remove posts of expert {expert_id}: {err}", exc_info=True)
            raise InternalServerError(err=err) from err

        return posts

    # ------------------------------------------------------------------
    # Serialization and permissions
    # ------------------------------------------------------------------

    @staticmethod
    def serialize(post: Post, options: Optional[FetchOptions] = None, columns: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        return serialize_post(post, options, columns)

    async def _load_for_permissions(self, post_id: str) -> Optional[Post]:
        post, _ = await self.find_one(post_id, with_related=["experts"], status=STATUS_ALL)
        return post

    async def permissible(
        self,
        post_or_id,
        action: str,
        context: PermissionContext,
        unsafe_attrs: Optional[Dict[str, Any]],
        loaded_permissions: LoadedPermissions,
        has_user_permission: bool,
        has_app_permission: bool = True,
        has_api_key_permission: bool = True,
    ) -> PermissionResult:
        return await permissible(
            post_or_id,
            action,
            context,
            unsafe_attrs,
            loaded_permissions,
            has_user_permission,
            has_app_permission,
            has_api_key_permission,
            loader=self._load_for_permissions,
        )
