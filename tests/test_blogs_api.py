from datetime import timedelta

from app.models.blog_post import BlogPost
from app.utils.dates import utcnow

BLOGS = "/api/blogs"


def _payload(**overrides):
    payload = {
        "title": "Inking Tips",
        "content": "Line weight matters. " * 120,
        "author": "Ada",
        "category": "News",
        "status": "published",
    }
    payload.update(overrides)
    return payload


def test_create_post_fills_defaults(client, db, category, admin_headers):
    response = client.post(BLOGS, json=_payload(), headers=admin_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["slug"] == "inking-tips"
    assert data["category"] == "news"
    assert data["reading_time"] == 2
    assert data["description"].endswith("...")
    assert data["meta_title"] == "Inking Tips"
    assert data["published_at"] is not None

    db.refresh(category)
    assert category.post_count == 1


def test_create_post_requires_admin(client, user_headers):
    assert client.post(BLOGS, json=_payload(), headers=user_headers).status_code == 403


def test_duplicate_titles_get_distinct_slugs(client, category, admin_headers):
    first = client.post(BLOGS, json=_payload(), headers=admin_headers).json()["data"]
    second = client.post(BLOGS, json=_payload(), headers=admin_headers).json()["data"]

    assert (first["slug"], second["slug"]) == ("inking-tips", "inking-tips-1")


def test_list_shows_only_published_to_public(client, make_post):
    make_post(title="Public")
    make_post(title="Secret", status="draft")

    body = client.get(BLOGS).json()

    assert [p["title"] for p in body["data"]] == ["Public"]
    assert "content" not in body["data"][0]


def test_list_sorts_by_title(client, make_post):
    for title in ("Beta", "Alpha", "Gamma"):
        make_post(title=title)

    body = client.get(BLOGS, params={"sort_by": "title", "sort_order": "asc"}).json()

    assert [p["title"] for p in body["data"]] == ["Alpha", "Beta", "Gamma"]


def test_get_by_slug_counts_views(client, make_post):
    make_post(title="Counted")

    client.get(f"{BLOGS}/counted")
    data = client.get(f"{BLOGS}/counted").json()["data"]

    assert data["views"] == 2
    assert "content" in data


def test_update_regenerates_slug_and_stamps_publish(client, make_post, admin_headers):
    post = make_post(title="Draft Title", status="draft")

    response = client.put(
        f"{BLOGS}/{post.id}",
        json={"title": "Final Title", "status": "published"},
        headers=admin_headers
    )

    data = response.json()["data"]
    assert data["slug"] == "final-title"
    assert data["published_at"] is not None


def test_update_deleted_post_is_rejected(client, make_post, admin_headers):
    post = make_post()
    client.delete(f"{BLOGS}/{post.id}", headers=admin_headers)

    response = client.put(f"{BLOGS}/{post.id}", json={"title": "Again"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot update deleted blog post"


def test_delete_archives_post(client, db, make_post, category, admin_headers):
    post = make_post(title="Old News")

    assert client.delete(f"{BLOGS}/{post.id}", headers=admin_headers).status_code == 200

    db.refresh(post)
    db.refresh(category)
    assert post.status == "archived"
    assert post.deleted_at is not None
    assert category.post_count == 0
    assert client.get(f"{BLOGS}/old-news").status_code == 404


def test_static_routes_are_not_treated_as_slugs(client, make_post):
    make_post(title="Spotlight", featured=True)

    featured = client.get(f"{BLOGS}/featured").json()["data"]
    categories = client.get(f"{BLOGS}/categories").json()["data"]

    assert [p["title"] for p in featured] == ["Spotlight"]
    assert categories[0]["name"] == "news"
    assert categories[0]["count"] == 1


def test_search_requires_two_characters(client):
    response = client.get(f"{BLOGS}/search", params={"q": "a"})

    assert response.status_code == 400


def test_search_ranks_title_matches_first(client, make_post):
    make_post(title="Unrelated", content="all about dragons " * 10)
    make_post(title="Dragons Everywhere", content="plain text " * 10)

    body = client.get(f"{BLOGS}/search", params={"q": "dragons"}).json()

    assert [p["title"] for p in body["data"]] == ["Dragons Everywhere", "Unrelated"]
    assert body["count"] == 2


def test_popular_and_trending_order(client, db, make_post):
    liked = make_post(title="Loved")
    viewed = make_post(title="Seen")
    db.query(BlogPost).filter(BlogPost.id == liked.id).update({BlogPost.likes: 9, BlogPost.views: 10})
    db.query(BlogPost).filter(BlogPost.id == viewed.id).update({BlogPost.likes: 1, BlogPost.views: 500})
    db.commit()

    popular = client.get(f"{BLOGS}/popular", params={"period": "all"}).json()["data"]
    trending = client.get(f"{BLOGS}/trending", params={"period": "all"}).json()["data"]

    assert [p["title"] for p in popular] == ["Loved", "Seen"]
    assert [p["title"] for p in trending] == ["Seen", "Loved"]


def test_popular_period_excludes_old_posts(client, make_post):
    make_post(title="Ancient", published_at=utcnow() - timedelta(days=40))
    make_post(title="Fresh")

    week = client.get(f"{BLOGS}/popular", params={"period": "week"}).json()["data"]

    assert [p["title"] for p in week] == ["Fresh"]


def test_popular_rejects_unknown_period(client):
    assert client.get(f"{BLOGS}/popular", params={"period": "decade"}).status_code == 400


def test_view_endpoint_counts_and_forbids_drafts(client, make_post):
    live = make_post(title="Live")
    draft = make_post(title="Hidden", status="draft")

    assert client.post(f"{BLOGS}/{live.id}/view").json()["data"]["views"] == 1
    assert client.post(f"{BLOGS}/{draft.id}/view").status_code == 403


def test_post_like_flow(client, make_post):
    post = make_post()
    url = f"{BLOGS}/{post.id}"

    first = client.post(f"{url}/like", json={"user_id": "1.2.3.4"}).json()
    second = client.post(f"{url}/like", json={"user_id": "1.2.3.4"}).json()
    has_liked = client.get(f"{url}/like-status", params={"userId": "1.2.3.4"}).json()["data"]["has_liked"]
    removed = client.post(f"{url}/unlike", json={"user_id": "1.2.3.4"}).json()

    assert first["message"] == "Post liked successfully"
    assert second["message"] == "Post already liked"
    assert has_liked is True
    assert removed["data"]["likes"] == 0


def test_like_draft_post_is_forbidden(client, make_post):
    post = make_post(status="draft")

    assert client.post(f"{BLOGS}/{post.id}/like", json={"user_id": "x"}).status_code == 403


def test_post_stats(client, db, make_post, admin_headers):
    post = make_post(content="word " * 1000)
    db.query(BlogPost).filter(BlogPost.id == post.id).update({BlogPost.views: 200, BlogPost.likes: 10})
    db.commit()

    data = client.get(f"{BLOGS}/{post.id}/stats", headers=admin_headers).json()["data"]

    assert data["word_count"] == 1000
    assert data["engagement_rate"] == 5.0
    assert data["estimated_completion"] == 50.0


def test_overview_stats(client, make_post, admin_headers):
    make_post(title="One")
    make_post(title="Two", status="draft", featured=True)

    overview = client.get(f"{BLOGS}/stats/overview", headers=admin_headers).json()["data"]

    assert overview["overview"]["total_posts"] == 2
    assert overview["overview"]["published_posts"] == 1
    assert overview["overview"]["draft_posts"] == 1
    assert overview["overview"]["featured_posts"] == 1
    assert overview["category_stats"][0]["category"] == "news"


def test_update_rejects_null_content(client, make_post, admin_headers):
    post = make_post()

    response = client.put(f"{BLOGS}/{post.id}", json={"content": None}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == ["content: Value error, cannot be null"]
