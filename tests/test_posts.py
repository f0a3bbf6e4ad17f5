"""
Posts Tests
===========

Slug generation, publishing, tag links, filters, ownership and slug retry.
"""

from quillpress.core.slugs import slugify


# ---------------------------------------------------------------------------
# Create / slugs
# ---------------------------------------------------------------------------

def test_create_post_derives_slug(create_post, admin):
    post = create_post("Hello, World!  Again")

    assert post["slug"] == "hello-world-again"
    assert post["published"] is False
    assert post["publishedAt"] is None
    assert post["author"]["username"] == "admin"
    assert post["authorId"] == admin[0]["id"]


def test_duplicate_titles_get_numeric_suffixes(create_post):
    slugs = [create_post("Same Title")["slug"] for _ in range(3)]
    assert slugs == ["same-title", "same-title-1", "same-title-2"]


def test_published_post_has_published_at(create_post):
    post = create_post("Live", published=True)
    assert post["published"] is True
    assert post["publishedAt"] is not None


def test_create_post_requires_admin(client, reader):
    _, reader_headers = reader
    response = client.post("/api/posts", json={"title": "Nope", "content": "x"},
                           headers=reader_headers)
    assert response.status_code == 403


def test_create_post_validation(client, admin_headers):
    response = client.post("/api/posts", json={"title": "", "content": "x",
                                               "coverImage": "not a url"},
                           headers=admin_headers)
    assert response.status_code == 400
    fields = {d["field"] for d in response.get_json()["details"]}
    assert {"title", "coverImage"} <= fields


def test_create_post_with_backdated_created_at(create_post):
    post = create_post("Archive", createdAt="2020-01-02T03:04:05.000Z")
    assert post["createdAt"] == "2020-01-02T03:04:05.000Z"


def test_create_post_rejects_bad_created_at(client, admin_headers):
    response = client.post("/api/posts", json={"title": "T", "content": "x",
                                               "createdAt": "yesterday"},
                           headers=admin_headers)
    assert response.status_code == 400
    assert "valid date" in response.get_json()["details"][0]["message"]


# ---------------------------------------------------------------------------
# Tags on posts
# ---------------------------------------------------------------------------

def test_post_tags_are_linked(create_post, create_tag):
    python = create_tag("Python")
    flask = create_tag("Flask")

    post = create_post("Tagged", tagIds=[python["id"], flask["id"], python["id"]])

    names = [entry["tag"]["name"] for entry in post["tags"]]
    assert names == ["Flask", "Python"]


def test_unknown_tag_id_rejected(client, admin_headers):
    response = client.post("/api/posts", json={"title": "T", "content": "x",
                                               "tagIds": ["missing"]},
                           headers=admin_headers)
    assert response.status_code == 400
    assert "missing" in response.get_json()["error"]


def test_update_replaces_tags(client, admin_headers, create_post, create_tag):
    a = create_tag("Alpha")
    b = create_tag("Beta")
    post = create_post("Swap", tagIds=[a["id"]])

    response = client.put(f"/api/posts/{post['id']}", json={"tagIds": [b["id"]]},
                          headers=admin_headers)
    assert [t["tag"]["slug"] for t in response.get_json()["data"]["post"]["tags"]] == ["beta"]


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

def test_rename_regenerates_slug_avoiding_collisions(client, admin_headers, create_post):
    create_post("Target Name")
    post = create_post("Original")

    response = client.put(f"/api/posts/{post['id']}", json={"title": "Target Name"},
                          headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()["data"]["post"]["slug"] == "target-name-1"


def test_same_title_update_keeps_slug(client, admin_headers, create_post):
    post = create_post("Stable")
    response = client.put(f"/api/posts/{post['id']}", json={"title": "Stable", "content": "new"},
                          headers=admin_headers)
    updated = response.get_json()["data"]["post"]
    assert updated["slug"] == "stable"
    assert updated["content"] == "new"


def test_publish_then_unpublish(client, admin_headers, create_post):
    post = create_post("Draft")

    published = client.put(f"/api/posts/{post['id']}", json={"published": True},
                           headers=admin_headers).get_json()["data"]["post"]
    assert published["publishedAt"] is not None

    # Publishing again keeps the original timestamp
    again = client.put(f"/api/posts/{post['id']}", json={"published": True},
                       headers=admin_headers).get_json()["data"]["post"]
    assert again["publishedAt"] == published["publishedAt"]

    unpublished = client.put(f"/api/posts/{post['id']}", json={"published": False},
                             headers=admin_headers).get_json()["data"]["post"]
    assert unpublished["published"] is False
    assert unpublished["publishedAt"] is None


def test_only_author_can_update_or_delete(client, admin_headers, register_user, create_post):
    other_admin, other_headers = register_user("editor")
    client.patch(f"/api/auth/users/{other_admin['id']}/admin", json={"isAdmin": True},
                 headers=admin_headers)
    post = create_post("Mine")

    response = client.put(f"/api/posts/{post['id']}", json={"title": "Yours"}, headers=other_headers)
    assert response.status_code == 403
    assert response.get_json()["error"] == "Not authorized to update this post"

    response = client.delete(f"/api/posts/{post['id']}", headers=other_headers)
    assert response.status_code == 403
    assert response.get_json()["error"] == "Not authorized to delete this post"


def test_update_missing_post(client, admin_headers):
    response = client.put("/api/posts/nope", json={"title": "x"}, headers=admin_headers)
    assert response.status_code == 404


def test_delete_post(client, admin_headers, create_post):
    post = create_post("Gone")

    response = client.delete(f"/api/posts/{post['id']}", headers=admin_headers)
    assert response.get_json() == {"success": True, "message": "Post deleted successfully"}
    assert client.get(f"/api/posts/{post['id']}").status_code == 404


# ---------------------------------------------------------------------------
# Reads and filters
# ---------------------------------------------------------------------------

def test_get_by_slug_includes_author_bio(client, admin_headers, create_post):
    client.put("/api/auth/profile", json={"bio": "About me"}, headers=admin_headers)
    create_post("Read Me")

    response = client.get("/api/posts/slug/read-me")
    assert response.status_code == 200
    assert response.get_json()["data"]["post"]["author"]["bio"] == "About me"

    assert client.get("/api/posts/slug/unknown").status_code == 404


def test_list_pagination(client, create_post):
    for i in range(3):
        create_post(f"Post {i}")

    response = client.get("/api/posts?page=2&limit=2")
    data = response.get_json()["data"]
    assert len(data["posts"]) == 1
    assert data["pagination"] == {
        "page": 2, "limit": 2, "totalCount": 3, "totalPages": 2,
        "hasNextPage": False, "hasPrevPage": True,
    }


def test_list_filters(client, create_post, create_tag):
    news = create_tag("News")
    create_post("Flask release notes", published=True, tagIds=[news["id"]])
    create_post("Draft about Django")
    create_post("Gardening", published=True, excerpt="All about flask-shaped vases")

    def titles(query):
        posts = client.get(f"/api/posts?{query}").get_json()["data"]["posts"]
        return sorted(p["title"] for p in posts)

    assert titles("search=FLASK") == ["Flask release notes", "Gardening"]
    assert titles("published=false") == ["Draft about Django"]
    assert titles("tags=news,unused") == ["Flask release notes"]
    assert titles("author=adm") == ["Draft about Django", "Flask release notes", "Gardening"]
    assert titles("author=nobody") == []


def test_my_posts_only_lists_callers_posts(client, admin_headers, register_user, create_post):
    other, other_headers = register_user("second")
    client.patch(f"/api/auth/users/{other['id']}/admin", json={"isAdmin": True},
                 headers=admin_headers)
    create_post("By admin")
    create_post("By second", headers=other_headers)

    posts = client.get("/api/posts/my", headers=other_headers).get_json()["data"]["posts"]
    assert [p["title"] for p in posts] == ["By second"]


# ---------------------------------------------------------------------------
# Slug retry under concurrent inserts
# ---------------------------------------------------------------------------

def test_slug_conflict_is_retried(client, admin_headers, create_post, monkeypatch):
    """A slug grabbed between lookup and commit is recomputed on retry."""
    from quillpress.modules.posts import routes as post_routes

    create_post("Race")
    real_unique_slug = post_routes.unique_slug
    calls = []

    def stale_first_lookup(model, base_slug, **kwargs):
        calls.append(base_slug)
        if len(calls) == 1:
            return base_slug
        return real_unique_slug(model, base_slug, **kwargs)

    monkeypatch.setattr(post_routes, "unique_slug", stale_first_lookup)

    response = client.post("/api/posts", json={"title": "Race", "content": "x"},
                           headers=admin_headers)
    assert response.status_code == 201
    assert response.get_json()["data"]["post"]["slug"] == "race-1"
    assert len(calls) == 2


def test_slug_retry_gives_up_with_400(app, client, admin_headers, create_post, monkeypatch):
    from quillpress.modules.posts import routes as post_routes

    create_post("Stuck")
    app.config["SLUG_RETRY_ATTEMPTS"] = 2
    monkeypatch.setattr(post_routes, "unique_slug", lambda model, base_slug, **kw: base_slug)

    response = client.post("/api/posts", json={"title": "Stuck", "content": "x"},
                           headers=admin_headers)
    assert response.status_code == 400
    assert response.get_json()["error"] == "Could not allocate a unique slug, please try again"

    posts = client.get("/api/posts").get_json()["data"]["posts"]
    assert len(posts) == 1


def test_slugify_rules():
    assert slugify("  Hello   World  ") == "hello-world"
    assert slugify("C++ & Rust -- a comparison") == "c-rust-a-comparison"
    assert slugify("Ünïcödé") == "ncd"
    assert slugify("!!!") == "untitled"
