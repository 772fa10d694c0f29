"""
Authorization interfaces - Core abstractions.

Route handlers and services depend on these types only; the concrete
policy engine is picked by name from the registry (AUTH_POLICY_ENGINE).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable

from .permissions import Role


# ============================================================
# PRINCIPAL
# ============================================================

@dataclass(frozen=True)
class Principal:
    """
    Authenticated actor for the current request.

    `permissions` is the snapshot stored on the user record when it was
    last written. It can lag behind the role catalog; the stored value is
    what gets checked.
    """
    id: str
    email: str
    role: str
    permissions: tuple[str, ...] = ()
    display_name: str | None = None
    active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


# ============================================================
# ACCESS RULE
# ============================================================

@dataclass(frozen=True)
class AccessRule:
    """
    Declarative requirement for an endpoint.

    Attributes:
        allowed_roles: Roles admitted at all (None = any role)
        required_permissions: Every one must be held (AND)
        allow_owner: Accept "<permission>.own" when the principal owns the resource
        owner_field: Path parameter or body field naming the resource owner
    """
    allowed_roles: tuple[str, ...] | None = None
    required_permissions: tuple[str, ...] | None = None
    allow_owner: bool = False
    owner_field: str | None = None

    @classmethod
    def build(
        cls,
        allowed_roles: Iterable[Role | str] | None = None,
        required_permissions: Iterable[str] | None = None,
        allow_owner: bool = False,
        owner_field: str | None = None,
    ) -> "AccessRule":
        roles = None
        if allowed_roles is not None:
            roles = tuple(r.value if isinstance(r, Role) else r for r in allowed_roles)
        perms = tuple(required_permissions) if required_permissions is not None else None
        return cls(roles, perms, allow_owner, owner_field)


# ============================================================
# POLICY DECISION
# ============================================================

@dataclass
class PolicyDecision:
    """
    Result of a policy evaluation.

    Attributes:
        allowed: Whether the action is permitted
        reason: Human-readable explanation (for errors/logging)
        metadata: Additional data about how the decision was reached
    """
    allowed: bool
    reason: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def allow(cls, reason: str | None = None) -> "PolicyDecision":
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str = "Permission denied") -> "PolicyDecision":
        return cls(allowed=False, reason=reason)


# ============================================================
# POLICY ENGINE
# ============================================================

class PolicyEngine(ABC):
    """
    Decides whether a principal may perform an action.

    Engines are pure: same inputs, same decision, no I/O.
    """

    @abstractmethod
    def evaluate(
        self,
        principal: Principal,
        action: str,
        owner_id: str | None = None,
    ) -> PolicyDecision:
        """
        Evaluate if principal can perform action.

        Args:
            principal: The authenticated actor
            action: Permission identifier (e.g., "posts.edit")
            owner_id: Owner of the resource being acted upon, if any
        """

    @abstractmethod
    def get_permissions(self, principal: Principal) -> set[str]:
        """All permission strings the principal holds."""

