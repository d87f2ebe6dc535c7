"""
Tests for the health endpoint and application wiring.
"""


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "healthy"
    assert payload["version"] == "1.0.0"


def test_landing_page_is_public(client, backend):
    response = client.get("/")
    assert response.status_code == 200
    assert "Sign in" in response.text
    # No backend cookies yet, so the session check is skipped
    assert backend.requests == []


def test_first_visit_issues_session_cookie(client):
    response = client.get("/")
    assert "carwash_session" in response.cookies
