"""
Role catalog and permission matching.

Pure functions over immutable data. Nothing here touches the database,
the request, or the clock, so every decision is a function of its inputs.

Permissions are dot-separated strings:
- "posts.edit"      plain permission
- "posts.edit.own"  owner-scoped variant (granted only on owned resources)
- "posts.*"         trailing wildcard (grants "posts.<anything>")

Usage:
    from blog_cms.core.auth.permissions import can_access, permissions_for

    held = permissions_for("author")
    can_access("author", held, "posts.edit", owner_id=post.author_id, principal_id=user.id)
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


SEPARATOR = "."
WILDCARD = "*"
OWN_SUFFIX = "own"


# ============================================================
# ROLES
# ============================================================

class Role(str, Enum):
    """Closed set of actor categories."""

    ADMIN = "admin"
    EDITOR = "editor"
    AUTHOR = "author"

    @classmethod
    def parse(cls, value: "Role | str | None") -> "Role | None":
        """Return the matching Role, or None for unknown values."""
        if isinstance(value, Role):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


def _role_value(role: "Role | str | None") -> str | None:
    if isinstance(role, Role):
        return role.value
    return role


# ============================================================
# PERMISSION VALUE TYPE
# ============================================================

@dataclass(frozen=True)
class Permission:
    """
    Parsed permission identifier.

    A trailing ".*" is stored as wildcard=True with the prefix segments kept.
    Any string parses; only strings listed in the catalog carry meaning.
    """

    segments: tuple[str, ...]
    wildcard: bool = False

    @classmethod
    def parse(cls, value: str) -> "Permission":
        if value.endswith(SEPARATOR + WILDCARD):
            prefix = value[: -len(SEPARATOR + WILDCARD)]
            return cls(segments=tuple(prefix.split(SEPARATOR)), wildcard=True)
        return cls(segments=tuple(value.split(SEPARATOR)), wildcard=False)

    @property
    def prefix(self) -> str:
        return SEPARATOR.join(self.segments)

    def grants(self, required: str) -> bool:
        """
        Whether holding this permission satisfies `required`.

        Wildcards match on the raw prefix followed by the separator, so
        "posts.*" covers "posts.edit" and "posts.edit.own" but not "posts"
        or "postsx.edit".
        """
        if self.wildcard:
            return required.startswith(self.prefix + SEPARATOR)
        return str(self) == required

    def __str__(self) -> str:
        if self.wildcard:
            return self.prefix + SEPARATOR + WILDCARD
        return self.prefix


def owned_variant(required: str) -> str:
    """The owner-scoped variant ("posts.edit" -> "posts.edit.own")."""
    return required + SEPARATOR + OWN_SUFFIX


# ============================================================
# CATALOG
# ============================================================

def _freeze(catalog: Mapping[Role, Iterable[str]]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({role.value: tuple(perms) for role, perms in catalog.items()})


ROLE_PERMISSIONS: Mapping[str, tuple[str, ...]] = _freeze({
    Role.ADMIN: [
        # Posts
        "posts.create",
        "posts.edit",
        "posts.delete",
        "posts.publish",
        "posts.moderate",
        # Categories
        "categories.create",
        "categories.edit",
        "categories.delete",
        # Users
        "users.create",
        "users.edit",
        "users.delete",
        "users.roles",
        "users.view",
        # Media
        "media.upload",
        "media.delete",
        "media.manage",
        # Settings
        "settings.edit",
        "settings.view",
        # Analytics
        "analytics.view",
        # System
        "system.backup",
        "system.maintenance",
    ],
    Role.EDITOR: [
        "posts.create",
        "posts.edit",
        "posts.publish",
        "posts.moderate",
        "categories.create",
        "categories.edit",
        "media.upload",
        "media.manage",
        "analytics.view",
        "users.view",
    ],
    Role.AUTHOR: [
        # Own content only
        "posts.create",
        "posts.edit.own",
        "posts.draft",
        "media.upload",
        "media.own",
    ],
})


def permissions_for(
    role: Role | str | None,
    catalog: Mapping[str, tuple[str, ...]] = ROLE_PERMISSIONS,
) -> tuple[str, ...]:
    """Canonical permission list for a role. Unknown roles get ()."""
    value = _role_value(role)
    if value is None:
        return ()
    return catalog.get(value, ())


# ============================================================
# DECISIONS
# ============================================================

def has_permission(held: Iterable[str], required: str) -> bool:
    """Exact membership, or a held "<prefix>.*" covering `required`."""
    held = list(held)
    if required in held:
        return True

    for value in held:
        if value.endswith(SEPARATOR + WILDCARD) and Permission.parse(value).grants(required):
            return True

    return False


def has_role(role: Role | str | None, allowed_roles: Iterable[Role | str]) -> bool:
    """Allow-list check. An empty allow-list denies everyone."""
    value = _role_value(role)
    return value is not None and value in {_role_value(r) for r in allowed_roles}


def can_access(
    role: Role | str | None,
    held: Iterable[str],
    required: str,
    owner_id: str | None = None,
    principal_id: str | None = None,
) -> bool:
    """
    Composite allow/deny decision.

    1. admin is always allowed, whatever its permission list holds
    2. a held permission (exact or wildcard) allows
    3. the owner of the resource is allowed if it holds "<required>.own"
    4. otherwise deny
    """
    if _role_value(role) == Role.ADMIN.value:
        return True

    held = list(held)
    if has_permission(held, required):
        return True

    if owner_id and principal_id and owner_id == principal_id:
        if has_permission(held, owned_variant(required)):
            return True

    return False
