"""
Authorization service - Main facade for authorization.

Usage:
    # In route handlers:
    async def handler(post_id: str, auth: Authorize):
        post = await posts.get(post_id)
        auth.require("posts.edit", owner_id=post.author_id)

        if auth.can("posts.publish"):
            ...
"""

from typing import Iterable

import structlog

from .errors import AuthorizationError
from .interfaces import AccessRule, PolicyDecision, PolicyEngine, Principal
from .permissions import has_permission, has_role, owned_variant

logger = structlog.get_logger()


def authorize_user(
    principal: Principal,
    rule: AccessRule,
    resource_owner_id: str | None = None,
    held: Iterable[str] | None = None,
) -> None:
    """
    Role-gated check used at the request boundary.

    Raises:
        AuthorizationError: role not in rule.allowed_roles, or a required
            permission is missing (and the ".own" fallback does not apply)
    """
    held = tuple(principal.permissions if held is None else held)

    if rule.allowed_roles is not None and not has_role(principal.role, rule.allowed_roles):
        logger.warning(
            "Authorization denied",
            principal_id=principal.id,
            role=principal.role,
            reason="role",
        )
        raise AuthorizationError("Insufficient role permissions")

    for permission in rule.required_permissions or ():
        if has_permission(held, permission):
            continue
        if (
            rule.allow_owner
            and resource_owner_id is not None
            and resource_owner_id == principal.id
            and has_permission(held, owned_variant(permission))
        ):
            continue

        logger.warning(
            "Authorization denied",
            principal_id=principal.id,
            role=principal.role,
            permission=permission,
        )
        raise AuthorizationError(f"Missing permission: {permission}")


class AuthorizationService:
    """
    Binds a principal to the configured policy engine.

    Usage:
        auth = AuthorizationService(principal, policy_engine)
        auth.require("posts.delete")
        auth.can("posts.edit", owner_id=post.author_id)
    """

    def __init__(self, principal: Principal, policy_engine: PolicyEngine):
        self.principal = principal
        self.policy_engine = policy_engine

    def authorize(self, action: str, owner_id: str | None = None) -> PolicyDecision:
        """Evaluate an action. Never raises."""
        return self.policy_engine.evaluate(self.principal, action, owner_id=owner_id)

    def authorize_or_raise(self, action: str, owner_id: str | None = None) -> None:
        """
        Raises:
            AuthorizationError: 403 if not authorized
        """
        decision = self.authorize(action, owner_id=owner_id)

        if not decision.allowed:
            logger.warning(
                "Authorization denied",
                principal_id=self.principal.id,
                role=self.principal.role,
                permission=action,
                owner_id=owner_id,
            )
            raise AuthorizationError(decision.reason or "Permission denied")

    def require(self, action: str, owner_id: str | None = None) -> None:
        """Convenience alias for authorize_or_raise."""
        self.authorize_or_raise(action, owner_id=owner_id)

    def can(self, action: str, owner_id: str | None = None) -> bool:
        """
        Check if action is allowed (returns bool, no exception).

        Usage:
            if auth.can("posts.publish"):
                post.status = "published"
        """
        return self.authorize(action, owner_id=owner_id).allowed

    def check_rule(self, rule: AccessRule, resource_owner_id: str | None = None) -> None:
        """Apply a role-gated AccessRule using the engine's view of the permissions."""
        authorize_user(
            self.principal,
            rule,
            resource_owner_id=resource_owner_id,
            held=self.policy_engine.get_permissions(self.principal),
        )

    def get_permissions(self) -> set[str]:
        return self.policy_engine.get_permissions(self.principal)
