"""
Tests for the permission catalog and the pure access checks.
"""

import pytest

from blog_cms.core.auth.permissions import (
    ROLE_PERMISSIONS,
    Permission,
    Role,
    can_access,
    has_permission,
    has_role,
    owned_variant,
    permissions_for,
)

AUTHOR_HELD = ["posts.create", "posts.edit.own"]


# ============ Catalog ============


def test_admin_catalog_is_superset_of_editor():
    assert set(permissions_for(Role.EDITOR)) <= set(permissions_for(Role.ADMIN))


def test_editor_cannot_delete_posts():
    assert "posts.delete" in permissions_for("admin")
    assert "posts.delete" not in permissions_for("editor")


def test_author_holds_owner_scoped_variants():
    perms = permissions_for(Role.AUTHOR)
    assert "posts.edit.own" in perms
    assert "posts.edit" not in perms


def test_catalog_lists_keep_their_order():
    assert permissions_for("author") == (
        "posts.create",
        "posts.edit.own",
        "posts.draft",
        "media.upload",
        "media.own",
    )


@pytest.mark.parametrize("role", ["guest", "", "ADMIN", None])
def test_unknown_role_gets_no_permissions(role):
    assert permissions_for(role) == ()


def test_catalog_cannot_be_mutated():
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS["guest"] = ("posts.create",)
    with pytest.raises(AttributeError):
        permissions_for("editor").append("posts.delete")
    assert "posts.delete" not in permissions_for("editor")


def test_role_parse():
    assert Role.parse("editor") is Role.EDITOR
    assert Role.parse(Role.ADMIN) is Role.ADMIN
    assert Role.parse("guest") is None


# ============ Permission value type ============


def test_permission_parse_plain():
    perm = Permission.parse("posts.edit.own")
    assert perm.segments == ("posts", "edit", "own")
    assert not perm.wildcard
    assert str(perm) == "posts.edit.own"


def test_permission_parse_wildcard():
    perm = Permission.parse("posts.*")
    assert perm.segments == ("posts",)
    assert perm.wildcard
    assert perm.prefix == "posts"
    assert str(perm) == "posts.*"


def test_owned_variant():
    assert owned_variant("posts.edit") == "posts.edit.own"


# ============ Matcher ============


def test_exact_match():
    assert has_permission(["posts.create"], "posts.create")
    assert not has_permission(["posts.create"], "posts.edit")


def test_empty_held_never_matches():
    assert not has_permission([], "posts.create")
    assert not has_permission(set(), "")


@pytest.mark.parametrize(
    "required",
    ["posts.edit", "posts.edit.own", "posts.delete"],
)
def test_wildcard_matches_any_depth_below_prefix(required):
    assert has_permission({"posts.*"}, required)


@pytest.mark.parametrize("required", ["posts", "postsx.edit", "media.upload"])
def test_wildcard_requires_separator_after_prefix(required):
    assert not has_permission({"posts.*"}, required)


def test_wildcard_keeps_raw_prefix_semantics():
    # Only a single trailing wildcard; no structural validation of the rest
    assert has_permission({"posts.*"}, "posts..double")
    assert not has_permission({"posts.*.view"}, "posts.comments.view")


def test_nested_wildcard_prefix():
    assert has_permission({"posts.edit.*"}, "posts.edit.own")
    assert not has_permission({"posts.edit.*"}, "posts.edit")


# ============ Role gate ============


@pytest.mark.parametrize("role", list(Role))
def test_role_in_its_own_allow_list(role):
    assert has_role(role, {role})
    assert has_role(role.value, [role])


@pytest.mark.parametrize("role", list(Role))
def test_empty_allow_list_denies(role):
    assert not has_role(role, set())


def test_unknown_role_not_in_allow_list():
    assert not has_role("guest", {Role.ADMIN, Role.EDITOR, Role.AUTHOR})
    assert not has_role(None, {Role.ADMIN})


# ============ Ownership + facade ============


def test_admin_bypasses_permission_checks():
    assert can_access("admin", set(), "anything.nonexistent")
    assert can_access(Role.ADMIN, [], "posts.delete", owner_id="u1", principal_id="u2")


def test_owner_fallback():
    assert can_access("author", {"posts.edit.own"}, "posts.edit", owner_id="u1", principal_id="u1")
    assert not can_access("author", {"posts.edit.own"}, "posts.edit", owner_id="u1", principal_id="u2")


def test_owner_fallback_needs_both_ids():
    assert not can_access("author", {"posts.edit.own"}, "posts.edit", owner_id="u1")
    assert not can_access("author", {"posts.edit.own"}, "posts.edit", principal_id="u1")


def test_owner_fallback_honours_wildcards():
    assert can_access("author", {"posts.edit.*"}, "posts.edit", owner_id="u1", principal_id="u1")


def test_decisions_are_repeatable():
    args = ("author", AUTHOR_HELD, "posts.edit")
    kwargs = {"owner_id": "u7", "principal_id": "u7"}
    results = {can_access(*args, **kwargs) for _ in range(5)}
    assert results == {True}


def test_scenario_editor_cannot_delete():
    held = ["posts.create", "posts.edit", "categories.create"]
    assert not can_access("editor", held, "posts.delete")


def test_scenario_author_edits_own_post():
    assert can_access("author", AUTHOR_HELD, "posts.edit", owner_id="u7", principal_id="u7")


def test_scenario_author_cannot_edit_others_post():
    assert not can_access("author", AUTHOR_HELD, "posts.edit", owner_id="u7", principal_id="u8")


def test_scenario_unknown_role():
    assert permissions_for("guest") == ()
    assert not can_access("guest", [], "posts.create")
