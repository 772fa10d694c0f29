"""
Tests for post management endpoints and the post helpers.
"""

import pytest
from httpx import AsyncClient

from blog_cms.core.auth.permissions import Role
from blog_cms.models.post import PostStatus
from blog_cms.services.posts import calculate_reading_time, generate_slug

from .conftest import get_auth_headers


def post_payload(category_id: str, **overrides) -> dict:
    payload = {
        "title": "Hello World",
        "description": "A first post",
        "content": "word " * 450,
        "category_id": category_id,
        "tags": ["intro"],
    }
    payload.update(overrides)
    return payload


# ============ Helpers ============


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Hello World", "hello-world"),
        ("  Hello,   World!  ", "hello-world"),
        ("Python -- the  good parts", "python-the-good-parts"),
        ("snake_case stays", "snake_case-stays"),
    ],
)
def test_generate_slug(text, expected):
    assert generate_slug(text) == expected


def test_calculate_reading_time():
    assert calculate_reading_time("") == 0
    assert calculate_reading_time("word " * 200) == 1
    assert calculate_reading_time("word " * 201) == 2


# ============ Create ============


@pytest.mark.asyncio
async def test_editor_creates_published_post(
    client: AsyncClient,
    editor_user,
    editor_headers,
    category,
    db,
):
    response = await client.post(
        "/api/admin/posts",
        json=post_payload(category.id, status="published"),
        headers=editor_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "hello-world"
    assert data["status"] == "published"
    assert data["publish_date"] is not None
    assert data["author_id"] == editor_user.id
    assert data["reading_time"] == 3
    assert data["excerpt"] == "A first post"

    await db.refresh(category)
    await db.refresh(editor_user)
    assert category.post_count == 1
    assert editor_user.posts_count == 1
    assert editor_user.drafts_count == 0


@pytest.mark.asyncio
async def test_author_publishes_on_create(
    client: AsyncClient,
    author_user,
    author_headers,
    category,
    db,
):
    response = await client.post(
        "/api/admin/posts",
        json=post_payload(category.id, status="published"),
        headers=author_headers,
    )

    assert response.status_code == 201
    assert response.json()["status"] == "published"
    assert response.json()["publish_date"] is not None

    await db.refresh(author_user)
    assert (author_user.posts_count, author_user.drafts_count) == (1, 0)


@pytest.mark.asyncio
async def test_create_requires_known_category(client: AsyncClient, editor_headers):
    response = await client.post(
        "/api/admin/posts",
        json=post_payload("missing"),
        headers=editor_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Category not found"


@pytest.mark.asyncio
async def test_create_duplicate_title(client: AsyncClient, editor_headers, category):
    first = await client.post("/api/admin/posts", json=post_payload(category.id), headers=editor_headers)
    second = await client.post("/api/admin/posts", json=post_payload(category.id), headers=editor_headers)

    assert first.status_code == 201
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_create_rejects_archived_status(client: AsyncClient, editor_headers, category):
    response = await client.post(
        "/api/admin/posts",
        json=post_payload(category.id, status="archived"),
        headers=editor_headers,
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_without_posts_create_is_403(client: AsyncClient, user_factory, category):
    # Author record whose stored permissions predate "posts.create"
    user = await user_factory.create(role=Role.AUTHOR, permissions=["posts.edit.own"])

    response = await client.post(
        "/api/admin/posts",
        json=post_payload(category.id),
        headers=get_auth_headers(user),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Missing permission: posts.create"


@pytest.mark.asyncio
async def test_create_unauthenticated_is_401(client: AsyncClient, category):
    response = await client.post("/api/admin/posts", json=post_payload(category.id))

    assert response.status_code == 401


# ============ List ============


@pytest.mark.asyncio
async def test_author_lists_only_own_posts(
    client: AsyncClient,
    author_user,
    author_headers,
    editor_user,
    category,
    post_factory,
):
    mine = await post_factory.create(author_user, category, title="Mine")
    await post_factory.create(editor_user, category, title="Theirs")

    response = await client.get(
        f"/api/admin/posts?author={editor_user.id}",
        headers=author_headers,
    )

    assert response.status_code == 200
    assert [p["id"] for p in response.json()["posts"]] == [mine.id]


@pytest.mark.asyncio
async def test_editor_lists_with_filters(
    client: AsyncClient,
    author_user,
    editor_headers,
    category,
    post_factory,
):
    await post_factory.create(author_user, category, title="Draft One", status=PostStatus.DRAFT)
    await post_factory.create(author_user, category, title="Live One", content="python tips")

    drafts = await client.get("/api/admin/posts?status=draft", headers=editor_headers)
    assert [p["title"] for p in drafts.json()["posts"]] == ["Draft One"]

    found = await client.get("/api/admin/posts?search=PYTHON", headers=editor_headers)
    assert [p["title"] for p in found.json()["posts"]] == ["Live One"]

    by_author = await client.get(f"/api/admin/posts?author={author_user.id}", headers=editor_headers)
    assert by_author.json()["pagination"]["total"] == 2


# ============ Read / update ============


@pytest.mark.asyncio
async def test_author_reads_own_post_but_not_others(
    client: AsyncClient,
    author_user,
    author_headers,
    editor_user,
    category,
    post_factory,
):
    mine = await post_factory.create(author_user, category)
    theirs = await post_factory.create(editor_user, category)

    own = await client.get(f"/api/admin/posts/{mine.id}", headers=author_headers)
    assert own.status_code == 200

    other = await client.get(f"/api/admin/posts/{theirs.id}", headers=author_headers)
    assert other.status_code == 403
    assert other.json()["error"] == "Missing permission: posts.edit"


@pytest.mark.asyncio
async def test_author_edits_own_post(
    client: AsyncClient,
    author_user,
    author_headers,
    category,
    post_factory,
):
    post = await post_factory.create(author_user, category, status=PostStatus.DRAFT)

    response = await client.put(
        f"/api/admin/posts/{post.id}",
        json={"title": "Renamed Post", "content": "word " * 401},
        headers=author_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["slug"] == "renamed-post"
    assert data["reading_time"] == 3
    assert data["last_modified_by"] == author_user.id


@pytest.mark.asyncio
async def test_author_publishes_own_draft_on_update(
    client: AsyncClient,
    author_user,
    author_headers,
    category,
    post_factory,
):
    post = await post_factory.create(author_user, category, status=PostStatus.DRAFT)

    response = await client.put(
        f"/api/admin/posts/{post.id}",
        json={"status": "published"},
        headers=author_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "published"
    assert response.json()["publish_date"] is not None


@pytest.mark.asyncio
async def test_editor_edits_any_post_and_publishes(
    client: AsyncClient,
    author_user,
    editor_headers,
    category,
    post_factory,
):
    post = await post_factory.create(author_user, category, status=PostStatus.DRAFT)

    response = await client.put(
        f"/api/admin/posts/{post.id}",
        json={"status": "published"},
        headers=editor_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "published"
    assert response.json()["publish_date"] is not None


@pytest.mark.asyncio
async def test_update_moves_category_count(
    client: AsyncClient,
    admin_headers,
    author_user,
    category,
    category_factory,
    db,
):
    created = await client.post(
        "/api/admin/posts",
        json=post_payload(category.id),
        headers=admin_headers,
    )
    other = await category_factory.create(name="Design")

    response = await client.put(
        f"/api/admin/posts/{created.json()['id']}",
        json={"category_id": other.id},
        headers=admin_headers,
    )

    assert response.status_code == 200
    await db.refresh(category)
    await db.refresh(other)
    assert (category.post_count, other.post_count) == (0, 1)


@pytest.mark.asyncio
async def test_update_title_collision(
    client: AsyncClient,
    editor_headers,
    author_user,
    category,
    post_factory,
):
    await post_factory.create(author_user, category, title="Taken")
    post = await post_factory.create(author_user, category, title="Free")

    response = await client.put(
        f"/api/admin/posts/{post.id}",
        json={"title": "Taken"},
        headers=editor_headers,
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_missing_post_is_404(client: AsyncClient, editor_headers):
    response = await client.get("/api/admin/posts/nope", headers=editor_headers)

    assert response.status_code == 404


# ============ Delete ============


@pytest.mark.asyncio
async def test_editor_deletes_any_post(
    client: AsyncClient,
    author_user,
    editor_headers,
    category,
    post_factory,
):
    post = await post_factory.create(author_user, category)

    response = await client.delete(f"/api/admin/posts/{post.id}", headers=editor_headers)

    assert response.status_code == 200
    assert response.json()["id"] == post.id

    missing = await client.get(f"/api/admin/posts/{post.id}", headers=editor_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_author_cannot_delete_even_own_post(
    client: AsyncClient,
    author_user,
    author_headers,
    category,
    post_factory,
):
    post = await post_factory.create(author_user, category)

    response = await client.delete(f"/api/admin/posts/{post.id}", headers=author_headers)

    assert response.status_code == 403
    assert response.json()["error"] == "Insufficient role permissions"


@pytest.mark.asyncio
async def test_admin_deletes_post_and_counters_drop(
    client: AsyncClient,
    admin_headers,
    author_headers,
    author_user,
    category,
    db,
):
    created = await client.post(
        "/api/admin/posts",
        json=post_payload(category.id),
        headers=author_headers,
    )
    post_id = created.json()["id"]

    response = await client.delete(f"/api/admin/posts/{post_id}", headers=admin_headers)

    assert response.status_code == 200
    await db.refresh(category)
    await db.refresh(author_user)
    assert category.post_count == 0
    assert (author_user.posts_count, author_user.drafts_count) == (0, 0)
