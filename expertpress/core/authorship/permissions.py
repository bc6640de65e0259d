"""
Authorization rules for adding, editing and destroying posts.

Contributors and experts may only work on posts they are an expert of and can
never hand a post over to somebody else. Other roles rely on their role grants,
with the primary expert of a post always allowed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

from expertpress.core.database.entities.posts import Post
from expertpress.core.database.entities.users import RoleName
from expertpress.core.errors import NoPermissionError, NotFoundError
from expertpress.core.logging_config import get_logger

logger = get_logger(__name__)

ADD = "add"
EDIT = "edit"
DESTROY = "destroy"
BROWSE = "browse"
READ = "read"

POST_ACTIONS = frozenset({BROWSE, READ, ADD, EDIT, DESTROY})

ROLE_GRANTS: Dict[str, frozenset] = {
    RoleName.OWNER.value: POST_ACTIONS,
    RoleName.ADMINISTRATOR.value: POST_ACTIONS,
    RoleName.EDITOR.value: POST_ACTIONS,
    RoleName.EXPERT.value: frozenset({BROWSE, READ, ADD}),
    RoleName.CONTRIBUTOR.value: frozenset({BROWSE, READ, ADD}),
}

PostLoader = Callable[[str], Awaitable[Optional[Post]]]


@dataclass(frozen=True)
class LoadedUser:
    """Acting staff user and the names of their roles."""

    id: str
    roles: List[str] = field(default_factory=list)

    def has_role(self, name: Union[str, RoleName]) -> bool:
        name = name.value if isinstance(name, RoleName) else name
        return name in self.roles


@dataclass(frozen=True)
class LoadedPermissions:
    user: Optional[LoadedUser] = None
    app: Optional[Any] = None
    api_key: Optional[Any] = None


@dataclass(frozen=True)
class PermissionContext:
    user: Optional[str] = None


@dataclass(frozen=True)
class PermissionResult:
    """Outcome of a successful permission check.

    ``excluded_attrs`` lists incoming attributes the caller must drop before
    saving.
    """

    excluded_attrs: List[str] = field(default_factory=list)


def has_role_permission(roles: Iterable[str], action: str) -> bool:
    """Whether any of ``roles`` is granted ``action`` on posts."""
    return any(action in ROLE_GRANTS.get(role, frozenset()) for role in roles)


async def permissible(
    post_or_id: Union[Post, str, int, None],
    action: str,
    context: PermissionContext,
    unsafe_attrs: Optional[Dict[str, Any]],
    loaded_permissions: LoadedPermissions,
    has_user_permission: bool,
    has_app_permission: bool = True,
    has_api_key_permission: bool = True,
    *,
    loader: Optional[PostLoader] = None,
) -> PermissionResult:
    """Decide whether the acting user may run ``action`` on a post.

    Args:
        post_or_id: Post with experts loaded, its id, or ``None`` when adding
        action: ``add``, ``edit`` or ``destroy`` (other actions use role grants)
        context: Acting user
        unsafe_attrs: Incoming ``expert_id`` / ``experts`` values
        loaded_permissions: Roles of the acting user
        has_user_permission: Result of the role grant check
        has_app_permission: Result of the app check
        has_api_key_permission: Result of the API key check
        loader: Loads a post with its experts when an id is given

    Returns:
        PermissionResult with the attributes to exclude from the save

    Raises:
        NotFoundError: If an id was given and no post matches
        NoPermissionError: If the action is not allowed
    """
    if isinstance(post_or_id, (str, int)):
        if loader is None:
            raise ValueError("A post loader is required to check permissions by id")

        found = await loader(str(post_or_id))
        if found is None:
            raise NotFoundError("Post not found.", level="critical")

        return await permissible(
            found,
            action,
            context,
            unsafe_attrs,
            loaded_permissions,
            has_user_permission,
            has_app_permission,
            has_api_key_permission,
            loader=loader,
        )

    post = post_or_id
    unsafe_attrs = unsafe_attrs or {}
    user = loaded_permissions.user

    is_contributor = user is not None and user.has_role(RoleName.CONTRIBUTOR)
    is_expert = user is not None and user.has_role(RoleName.EXPERT)
    is_edit = action == EDIT
    is_add = action == ADD
    is_destroy = action == DESTROY

    stored_experts = [expert.id for expert in post.experts] if post is not None else []
    stored_primary = stored_experts[0] if stored_experts else None

    def is_changing(attr: str) -> bool:
        value = unsafe_attrs.get(attr)
        return bool(value) and value != getattr(post, attr, None)

    def is_changing_experts() -> bool:
        experts = unsafe_attrs.get("experts")
        if experts is None:
            return False
        if not experts:
            return True
        return experts[0].get("id") != stored_primary

    def is_owner() -> bool:
        expert_id = unsafe_attrs.get("expert_id")
        experts = unsafe_attrs.get("experts")

        if not expert_id and experts is None:
            return False

        is_correct_owner = True
        if expert_id:
            is_correct_owner = expert_id == context.user
        if experts is not None:
            is_correct_owner = is_correct_owner and bool(experts) and experts[0].get("id") == context.user
        return is_correct_owner

    def is_primary_expert() -> bool:
        return stored_primary is not None and context.user == stored_primary

    def is_co_expert() -> bool:
        return context.user in stored_experts

    if is_contributor and is_edit:
        has_user_permission = not is_changing("expert_id") and not is_changing_experts() and is_co_expert()
    elif is_contributor and is_add:
        has_user_permission = is_owner()
    elif is_contributor and is_destroy:
        has_user_permission = is_primary_expert()
    elif is_expert and is_edit:
        has_user_permission = is_co_expert() and not is_changing("expert_id") and not is_changing_experts()
    elif is_expert and is_add:
        has_user_permission = is_owner()
    elif post is not None:
        has_user_permission = has_user_permission or is_primary_expert()

    if has_user_permission and has_api_key_permission and has_app_permission:
        excluded_attrs: List[str] = []
        # Only the primary expert is checked above; other changes to
        # ``experts`` are ignored for these roles.
        if is_contributor or is_expert:
            excluded_attrs = ["experts"] + excluded_attrs
        return PermissionResult(excluded_attrs=excluded_attrs)

    logger.debug(f"Denied {action} on post {getattr(post, 'id', None)} for user {context.user}")
    raise NoPermissionError("You do not have permission to perform this action")
