"""
Tests for the role-gated check, the policy engines and the service facade.
"""

import pytest

from blog_cms.core.auth import (
    AccessRule,
    AuthRegistry,
    AuthenticationError,
    AuthorizationError,
    AuthorizationService,
    Principal,
    Role,
    authorize_user,
    permissions_for,
)
from blog_cms.core.auth.policy import CatalogPolicyEngine, StoredPermissionsPolicyEngine


def make_principal(role: Role | str, principal_id: str = "u1", permissions=None) -> Principal:
    if permissions is None:
        permissions = permissions_for(role)
    value = role.value if isinstance(role, Role) else role
    return Principal(id=principal_id, email=f"{principal_id}@example.com", role=value, permissions=tuple(permissions))


EDIT_OWN_POSTS = AccessRule.build(
    allowed_roles=[Role.ADMIN, Role.EDITOR, Role.AUTHOR],
    required_permissions=["posts.edit"],
    allow_owner=True,
    owner_field="author_id",
)


# ============ authorize_user ============


def test_role_outside_allow_list_is_rejected():
    rule = AccessRule.build(allowed_roles=[Role.ADMIN])

    with pytest.raises(AuthorizationError) as exc_info:
        authorize_user(make_principal(Role.EDITOR), rule)

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Insufficient role permissions"


def test_missing_permission_is_named():
    rule = AccessRule.build(
        allowed_roles=[Role.ADMIN, Role.EDITOR],
        required_permissions=["posts.delete"],
    )

    with pytest.raises(AuthorizationError) as exc_info:
        authorize_user(make_principal(Role.EDITOR), rule)

    assert exc_info.value.message == "Missing permission: posts.delete"
    assert exc_info.value.code == "AUTHORIZATION_ERROR"


def test_all_required_permissions_must_be_held():
    rule = AccessRule.build(required_permissions=["posts.create", "categories.create"])

    authorize_user(make_principal(Role.EDITOR), rule)
    with pytest.raises(AuthorizationError):
        authorize_user(make_principal(Role.AUTHOR), rule)


def test_owner_passes_with_own_variant():
    author = make_principal(Role.AUTHOR, principal_id="u7")

    authorize_user(author, EDIT_OWN_POSTS, resource_owner_id="u7")
    with pytest.raises(AuthorizationError):
        authorize_user(author, EDIT_OWN_POSTS, resource_owner_id="u8")


def test_owner_variant_ignored_unless_rule_allows_owner():
    rule = AccessRule.build(required_permissions=["posts.edit"])

    with pytest.raises(AuthorizationError):
        authorize_user(make_principal(Role.AUTHOR, principal_id="u7"), rule, resource_owner_id="u7")


def test_no_requirements_admits_everyone():
    authorize_user(make_principal("guest", permissions=()), AccessRule())


def test_empty_allow_list_denies_everyone():
    rule = AccessRule.build(allowed_roles=[])

    with pytest.raises(AuthorizationError):
        authorize_user(make_principal(Role.ADMIN), rule)


def test_authentication_and_authorization_errors_are_distinct():
    authn = AuthenticationError()
    authz = AuthorizationError()

    assert not isinstance(authn, AuthorizationError)
    assert not isinstance(authz, AuthenticationError)
    assert (authn.status_code, authn.code) == (401, "AUTH_ERROR")
    assert (authz.status_code, authz.code) == (403, "AUTHORIZATION_ERROR")
    assert authn.headers == {"WWW-Authenticate": "Bearer"}


# ============ Policy engines ============


def test_registry_lists_default_engines():
    assert AuthRegistry.has_policy_engine("stored")
    assert AuthRegistry.has_policy_engine("catalog")
    assert isinstance(AuthRegistry.get_policy_engine("stored"), StoredPermissionsPolicyEngine)


def test_registry_rejects_unknown_engine():
    with pytest.raises(ValueError):
        AuthRegistry.get_policy_engine("casbin")


def test_stored_engine_reports_reason():
    engine = StoredPermissionsPolicyEngine()

    assert engine.evaluate(make_principal(Role.ADMIN), "system.anything").reason == "Admin access"
    assert engine.evaluate(make_principal(Role.EDITOR), "posts.edit").reason == "Has permission"

    decision = engine.evaluate(make_principal(Role.AUTHOR, principal_id="u1"), "posts.edit", owner_id="u1")
    assert decision.allowed
    assert decision.reason == "Resource owner"
    assert decision.metadata["permission"] == "posts.edit.own"

    denied = engine.evaluate(make_principal(Role.EDITOR), "posts.delete")
    assert not denied.allowed
    assert denied.reason == "Missing permission: posts.delete"


def test_stored_engine_uses_snapshot():
    # Snapshot written before "posts.delete" was granted to this user
    stale_admin_like = make_principal(Role.EDITOR, permissions=["posts.*"])
    engine = StoredPermissionsPolicyEngine()

    assert engine.evaluate(stale_admin_like, "posts.delete").allowed
    assert engine.get_permissions(stale_admin_like) == {"posts.*"}


def test_catalog_engine_ignores_snapshot():
    principal = make_principal(Role.EDITOR, permissions=["posts.*"])
    engine = CatalogPolicyEngine()

    assert not engine.evaluate(principal, "posts.delete").allowed
    assert engine.get_permissions(principal) == set(permissions_for(Role.EDITOR))


# ============ AuthorizationService ============


def test_service_can_and_require():
    auth = AuthorizationService(make_principal(Role.AUTHOR, principal_id="u7"), StoredPermissionsPolicyEngine())

    assert auth.can("posts.create")
    assert auth.can("posts.edit", owner_id="u7")
    assert not auth.can("posts.edit", owner_id="u8")

    auth.require("posts.edit", owner_id="u7")
    with pytest.raises(AuthorizationError) as exc_info:
        auth.require("posts.publish")
    assert exc_info.value.message == "Missing permission: posts.publish"


def test_check_rule_uses_engine_permissions():
    principal = make_principal(Role.EDITOR, permissions=[])
    rule = AccessRule.build(required_permissions=["categories.create"])

    with pytest.raises(AuthorizationError):
        AuthorizationService(principal, StoredPermissionsPolicyEngine()).check_rule(rule)

    AuthorizationService(principal, CatalogPolicyEngine()).check_rule(rule)
