def test_root_and_health(client):
    root = client.get("/").json()
    health = client.get("/health").json()

    assert root["ok"] is True
    assert health["status"] == "healthy"


def test_db_health(client):
    data = client.get("/health/db").json()

    assert data["connection_test"] is True
    assert data["error"] is None


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"ok": False, "error": "Not Found"}


def test_unauthorized_response_advertises_bearer(client):
    response = client.get("/api/users/profile")

    assert response.headers["www-authenticate"] == "Bearer"


def test_routers_mounted_under_api_prefix(client):
    paths = client.app.openapi()["paths"]

    for expected in (
        "/api/users/register",
        "/api/users/profile",
        "/api/comics/{slug}",
        "/api/blogs/search",
        "/api/genres/{slug}/comics",
        "/api/tags/cloud",
        "/api/categories",
        "/api/subscribers/verify/{token}",
        "/api/admin/analytics/dashboard",
    ):
        assert expected in paths
