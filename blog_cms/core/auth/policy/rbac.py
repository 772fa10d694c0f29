"""
Role/permission policy engines - DEFAULT implementation.

Both engines make the same decision (admin bypass, exact or wildcard
permission, then the ".own" fallback for owners). They differ only in
where the held permissions come from:

    AUTH_POLICY_ENGINE=stored    # permissions snapshotted on the user record (default)
    AUTH_POLICY_ENGINE=catalog   # permissions re-read from the role catalog
"""

import structlog

from ..interfaces import PolicyEngine, PolicyDecision, Principal
from ..permissions import (
    Role,
    can_access,
    has_permission,
    owned_variant,
    permissions_for,
)
from ..registry import AuthRegistry

logger = structlog.get_logger()


@AuthRegistry.policy_engine("stored")
class StoredPermissionsPolicyEngine(PolicyEngine):
    """
    Checks the permission list stored on the principal.

    Authorization rules:
    - Admins can do anything
    - A held permission (exact or "<resource>.*") allows
    - Owners holding "<permission>.own" are allowed on their own resources
    """

    def held_permissions(self, principal: Principal) -> tuple[str, ...]:
        return tuple(principal.permissions)

    def evaluate(
        self,
        principal: Principal,
        action: str,
        owner_id: str | None = None,
    ) -> PolicyDecision:
        held = self.held_permissions(principal)
        allowed = can_access(principal.role, held, action, owner_id=owner_id, principal_id=principal.id)

        if not allowed:
            return PolicyDecision.deny(f"Missing permission: {action}")

        if principal.role == Role.ADMIN.value:
            decision = PolicyDecision.allow("Admin access")
        elif has_permission(held, action):
            decision = PolicyDecision.allow("Has permission")
        else:
            decision = PolicyDecision.allow("Resource owner")
            decision.metadata["permission"] = owned_variant(action)

        logger.debug(
            "Policy evaluated",
            principal_id=principal.id,
            action=action,
            reason=decision.reason,
        )
        return decision

    def get_permissions(self, principal: Principal) -> set[str]:
        return set(self.held_permissions(principal))


@AuthRegistry.policy_engine("catalog")
class CatalogPolicyEngine(StoredPermissionsPolicyEngine):
    """Ignores the stored snapshot and resolves permissions from the role."""

    def held_permissions(self, principal: Principal) -> tuple[str, ...]:
        return permissions_for(principal.role)
