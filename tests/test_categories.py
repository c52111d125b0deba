import pytest

from forum.models.category import Category, slugify
from forum.services.categories import DEFAULT_CATEGORIES, seed_categories


@pytest.fixture
def admin(make_user):
    return make_user("root", role="admin")


def test_slugify():
    assert slugify("Arts & Culture") == "arts---culture"
    assert slugify("Health&Wellness 2") == "health-wellness-2"


def test_slug_derived_when_missing():
    assert Category(name="Board Games").slug == "board-games"
    assert Category(name="Board Games", slug="boardgames").slug == "boardgames"


def test_seed_only_fills_empty_table(db):
    assert seed_categories(db) == len(DEFAULT_CATEGORIES)
    assert seed_categories(db) == 0
    assert db.query(Category).count() == len(DEFAULT_CATEGORIES)


def test_startup_seeds_categories(client):
    body = client.get("/categories/").json()

    assert body["success"] is True
    assert body["count"] == 5
    assert {c["slug"] for c in body["data"]} == {"technology", "gaming", "movies", "music", "sports"}


def test_lookup_by_id_and_slug(client):
    gaming = client.get("/categories/slug/gaming").json()["data"]
    assert gaming["icon"] == "🎮"

    same = client.get(f"/categories/id/{gaming['id']}").json()["data"]
    assert same["name"] == "Gaming"

    assert client.get("/categories/slug/knitting").status_code == 404
    assert client.get("/categories/id/999").status_code == 404


def test_create_requires_admin(client, make_user, auth_headers):
    member = make_user("member")

    assert client.post("/categories/", json={"name": "Books"}).status_code == 401
    resp = client.post("/categories/", json={"name": "Books"}, headers=auth_headers(member))
    assert resp.status_code == 403


def test_admin_manages_categories(client, admin, auth_headers):
    headers = auth_headers(admin)

    resp = client.post("/categories/", json={"name": "Arts & Culture", "description": "Art"},
                       headers=headers)
    assert resp.status_code == 201
    created = resp.json()["data"]
    assert created["slug"] == "arts---culture"
    assert created["icon"] == "folder"

    dup = client.post("/categories/", json={"name": "Arts & Culture"}, headers=headers)
    assert dup.status_code == 400

    resp = client.put(f"/categories/{created['id']}", json={"icon": "🎨"}, headers=headers)
    assert resp.json()["data"]["icon"] == "🎨"

    clash = client.put(f"/categories/{created['id']}", json={"slug": "music"}, headers=headers)
    assert clash.status_code == 400

    assert client.delete(f"/categories/{created['id']}", headers=headers).json() == {
        "success": True, "data": {}}
    assert client.get(f"/categories/id/{created['id']}").status_code == 404


def test_category_with_posts_cannot_be_deleted(client, admin, make_post, category, auth_headers):
    make_post(admin)

    resp = client.delete(f"/categories/{category.id}", headers=auth_headers(admin))

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Category still has posts"
