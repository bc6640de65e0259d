"""
Authorship model layer.

Keeps the ordered experts of a post and the deprecated single ``expert_id``
column consistent, serializes posts with backward compatible expert fields and
decides who may add, edit or destroy a post.

Modules:
- options: Relation rewriting for post fetches
- lifecycle: Creating/saving hooks and expert matching
- serialization: Post output with ``expert``/``primary_expert``
- permissions: The ``permissible`` authorization predicate
"""

from .lifecycle import match_experts, on_creating, on_saving, reconcile_primary_expert
from .options import FetchOptions, handle_options
from .permissions import (
    LoadedPermissions,
    LoadedUser,
    PermissionContext,
    PermissionResult,
    has_role_permission,
    permissible,
)
from .serialization import serialize_post

__all__ = [
    "FetchOptions",
    "LoadedPermissions",
    "LoadedUser",
    "PermissionContext",
    "PermissionResult",
    "handle_options",
    "has_role_permission",
    "match_experts",
    "on_creating",
    "on_saving",
    "permissible",
    "reconcile_primary_expert",
    "serialize_post",
]
