from app.models.blog_post import BlogPost
from app.models.comic import Comic
from app.utils.dates import utcnow

ANALYTICS = "/api/admin/analytics"


def _set_counts(db, model, row_id, views, likes):
    db.query(model).filter(model.id == row_id).update({model.views: views, model.likes: likes})
    db.commit()


def test_analytics_require_admin(client, user_headers):
    assert client.get(f"{ANALYTICS}/dashboard").status_code == 401
    assert client.get(f"{ANALYTICS}/dashboard", headers=user_headers).status_code == 403


def test_dashboard_totals(client, db, make_comic, make_post, admin_headers):
    comic = make_comic()
    make_comic(title="Unreleased", status="draft")
    post = make_post()
    _set_counts(db, Comic, comic.id, 100, 10)
    _set_counts(db, BlogPost, post.id, 50, 5)

    data = client.get(f"{ANALYTICS}/dashboard", headers=admin_headers).json()["data"]

    assert data["total_comics"] == 1
    assert data["comic_trend"] == 100.0
    assert data["total_blogs"] == 1
    assert data["total_subscribers"] == 0
    assert data["total_views"] == 150
    assert data["total_likes"] == 15


def test_overview_rejects_ranges_over_a_year(client, admin_headers):
    response = client.get(ANALYTICS, params={"days": 400}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Date range cannot exceed 365 days"


def test_overview_shape(client, make_comic, make_post, admin_headers):
    make_comic()
    make_post()

    body = client.get(ANALYTICS, params={"days": 7}, headers=admin_headers).json()

    assert body["period_days"] == 7
    data = body["data"]
    assert data["overview"]["total_comics"] == 1
    assert data["overview"]["total_blogs"] == 1
    assert data["trends"]["comic_growth"] == 100.0
    assert [c["title"] for c in data["popular"]["top_comics"]] == ["Skyborn"]
    assert data["charts"]["content_published"][0]["comics"] == 1
    assert any(i["title"] == "Low Engagement" for i in data["insights"])


def test_engagement_rejects_inverted_range(client, admin_headers):
    response = client.get(
        f"{ANALYTICS}/engagement",
        params={"start_date": "2026-02-01T00:00:00", "end_date": "2026-01-01T00:00:00"},
        headers=admin_headers
    )

    assert response.status_code == 400


def test_engagement_metrics(client, db, make_comic, admin_headers):
    comic = make_comic()
    _set_counts(db, Comic, comic.id, 40, 2)

    metrics = client.get(f"{ANALYTICS}/engagement", headers=admin_headers).json()["data"]["metrics"]

    assert metrics["total_views"] == 40
    assert metrics["total_likes"] == 2
    assert metrics["total_engagement"] == 42
    assert metrics["most_engaged_content"]["top_comics"][0]["score"] == 50


def test_content_performance_type_filter(client, db, make_comic, make_post, admin_headers):
    steady = make_comic(title="Steady")
    viral = make_comic(title="Viral")
    make_post()
    _set_counts(db, Comic, steady.id, 100, 1)
    _set_counts(db, Comic, viral.id, 10, 5)

    data = client.get(
        f"{ANALYTICS}/content-performance", params={"type": "comic"}, headers=admin_headers
    ).json()["data"]

    assert [(row["title"], row["type"]) for row in data] == [("Viral", "comic"), ("Steady", "comic")]
    assert data[0]["engagement_rate"] == 50.0


def test_content_performance_rejects_unknown_type(client, admin_headers):
    response = client.get(f"{ANALYTICS}/content-performance", params={"type": "video"}, headers=admin_headers)

    assert response.status_code == 400


def test_audience_groups_locations(client, make_user, admin_headers):
    make_user(country="Kenya", last_active_at=utcnow())
    make_user(country="Kenya", last_active_at=utcnow())
    make_user(location="Lisbon", last_active_at=utcnow())

    data = client.get(f"{ANALYTICS}/audience", headers=admin_headers).json()["data"]

    assert data["demographics"]["location"][0] == {"country": "Kenya", "users": 2}
    assert set(data["retention"]) == {"retention_rate", "churn_rate", "active_users", "returning_users"}


def test_growth_trends(client, make_comic, make_post, admin_headers):
    make_comic()
    make_post()

    body = client.get(f"{ANALYTICS}/growth-trends", params={"days": 7}, headers=admin_headers).json()

    today = body["data"]["content_published"][-1]
    assert (today["comics"], today["blogs"]) == (1, 1)
    assert body["data"]["user_growth"][-1]["value"] >= 1
