"""Tests for API endpoints."""

import pytest


@pytest.fixture
def api(client):
    client.post("/login", data={"username": "user1", "password": "password123"})
    return client


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "strategy": "cookie", "sessions": 0}


def test_favicon(client):
    assert client.get("/favicon.ico").status_code == 204


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/me"),
        ("get", "/api/tracks"),
        ("post", "/api/tracks"),
        ("put", "/api/tracks/1"),
        ("delete", "/api/tracks/1"),
        ("post", "/api/tracks/1/vote"),
    ],
)
def test_api_unauthorized(client, method, path):
    """API endpoints return 401 instead of redirecting."""
    response = getattr(client, method)(path)
    assert response.status_code == 401
    assert response.json() == {"detail": "Please log in first"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_api_me(api):
    response = api.get("/api/me")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == 1
    assert data["username"] == "user1"
    assert "session_issued_at" in data


def test_api_list_tracks(api):
    response = api.get("/api/tracks")
    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == [3, 1, 2]


def test_api_add_update_vote_delete(api):
    created = api.post("/api/tracks", json={"title": "API Song", "artist": "Curl"})
    assert created.status_code == 201
    track = created.json()
    assert track == {"id": 4, "title": "API Song", "artist": "Curl", "votes": 0}

    updated = api.put("/api/tracks/4", json={"title": "API Song 2", "artist": "Curl"})
    assert updated.status_code == 200
    assert updated.json()["title"] == "API Song 2"

    voted = api.post("/api/tracks/4/vote")
    assert voted.json()["votes"] == 1

    deleted = api.delete("/api/tracks/4")
    assert deleted.json() == {"status": "ok", "id": 4}
    assert api.delete("/api/tracks/4").status_code == 404


def test_api_validation(api):
    assert api.post("/api/tracks", json={"title": "", "artist": "x"}).status_code == 422
    assert api.post("/api/tracks", json={"title": "  ", "artist": "x"}).status_code == 400
    assert api.put("/api/tracks/1", json={"title": "ok", "artist": "  "}).status_code == 400


def test_api_unknown_track(api):
    assert api.put("/api/tracks/99", json={"title": "a", "artist": "b"}).status_code == 404
    assert api.post("/api/tracks/99/vote").status_code == 404


def test_health_signed_reports_revocations_not_sessions(signed_client):
    signed_client.post("/login", data={"username": "user1", "password": "password123"})
    assert signed_client.get("/health").json() == {
        "status": "healthy", "strategy": "signed", "revoked": 0,
    }

    signed_client.post("/logout", follow_redirects=False)
    health = signed_client.get("/health").json()
    assert health["revoked"] == 1
    assert "sessions" not in health
