"""
Request Dependencies.

Provides the repository bundle for the request's database session and the
acting staff user and site member taken from the request headers:

- ``X-User-Id``: id of the staff user performing the request
- ``X-Member-Id`` / ``X-Member-Status``: signed-in site member and their status
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from expertpress.core.authorship.permissions import LoadedPermissions, LoadedUser, PermissionContext
from expertpress.core.database.session import get_session
from expertpress.core.database.utils import SqlRepoBundle, build_sql_repos
from expertpress.core.errors import NoPermissionError
from expertpress.core.logging_config import get_logger
from expertpress.server.serializers.post_gating import Member

logger = get_logger(__name__)


async def get_repos(session: AsyncSession = Depends(get_session)) -> SqlRepoBundle:
    return build_sql_repos(session)


ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]


@dataclass(frozen=True)
class RequestContext:
    """Acting staff user, their loaded roles and the signed-in member."""

    permissions: LoadedPermissions
    member: Optional[Member] = None

    @property
    def user_id(self) -> Optional[str]:
        return self.permissions.user.id if self.permissions.user else None

    @property
    def is_staff(self) -> bool:
        return self.permissions.user is not None

    @property
    def roles(self) -> list[str]:
        return list(self.permissions.user.roles) if self.permissions.user else []

    def permission_context(self) -> PermissionContext:
        return PermissionContext(user=self.user_id)


async def get_loaded_permissions(
    repos: ReposDep,
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> LoadedPermissions:
    """
    Load the staff user named by ``X-User-Id`` with their role names.

    Raises:
        NoPermissionError: If the header names an unknown or inactive user
    """
    if not x_user_id:
        return LoadedPermissions()

    user = await repos.users.get_by_id(x_user_id)
    if user is None or user.status != "active":
        logger.warning(f"Rejected request from unknown or inactive user {x_user_id}")
        raise NoPermissionError("Unknown staff user.")

    return LoadedPermissions(user=LoadedUser(id=user.id, roles=user.role_names))


def get_member(
    x_member_id: Annotated[Optional[str], Header()] = None,
    x_member_status: Annotated[Optional[str], Header()] = None,
) -> Optional[Member]:
    if not x_member_id:
        return None
    return Member(id=x_member_id, status=x_member_status or "free")


async def get_request_context(
    permissions: Annotated[LoadedPermissions, Depends(get_loaded_permissions)],
    member: Annotated[Optional[Member], Depends(get_member)],
) -> RequestContext:
    return RequestContext(permissions=permissions, member=member)


ContextDep = Annotated[RequestContext, Depends(get_request_context)]
