"""
Authorization module - role-based access control for the CMS.

Pure layer (no I/O, importable anywhere):
    from blog_cms.core.auth import permissions_for, has_permission, has_role, can_access

    can_access("author", permissions_for("author"), "posts.edit",
               owner_id=post.author_id, principal_id=user.id)

Request layer (FastAPI dependencies):
    from blog_cms.core.auth.dependencies import CurrentPrincipal, Authorize, with_auth, EDITORS

    @router.post("/categories")
    async def create(principal: Principal = Depends(with_auth(EDITORS))):
        ...

Configuration:
    AUTH_POLICY_ENGINE: "stored" (default) checks the permission snapshot on
    the user record, "catalog" re-reads the role catalog on every check.
"""

from .errors import AuthError, AuthenticationError, AuthorizationError
from .interfaces import AccessRule, PolicyDecision, PolicyEngine, Principal
from .permissions import (
    ROLE_PERMISSIONS,
    Permission,
    Role,
    can_access,
    has_permission,
    has_role,
    owned_variant,
    permissions_for,
)
from .registry import AuthRegistry
from .service import AuthorizationService, authorize_user

# Import to register default implementations
from . import policy  # noqa: F401

__all__ = [
    # Catalog and checks
    "ROLE_PERMISSIONS",
    "Permission",
    "Role",
    "permissions_for",
    "has_permission",
    "has_role",
    "can_access",
    "owned_variant",
    # Interfaces
    "AccessRule",
    "PolicyDecision",
    "PolicyEngine",
    "Principal",
    # Service
    "AuthorizationService",
    "authorize_user",
    "AuthRegistry",
    # Errors
    "AuthError",
    "AuthenticationError",
    "AuthorizationError",
]
