"""Policy engines (importing registers them)."""

from .rbac import StoredPermissionsPolicyEngine, CatalogPolicyEngine

__all__ = ["StoredPermissionsPolicyEngine", "CatalogPolicyEngine"]
