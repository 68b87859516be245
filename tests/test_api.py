"""API endpoint tests: health, signup, login, sessions and error shape."""

from unittest.mock import MagicMock, patch

from src.models.user import User


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_signup(client):
    """Signup returns a token and the new user."""
    response = client.post(
        "/api/auth/signup",
        json={"email": "NewUser@Example.com", "password": "password123", "name": "New User"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["user"]["email"] == "newuser@example.com"
    assert data["user"]["is_admin"] is False


def test_signup_duplicate_email_is_case_insensitive(client, db, auth_headers):
    """Registering the same email in another case is a conflict."""
    response = client.post(
        "/api/auth/signup",
        json={"email": "TEST@example.com", "password": "password123", "name": "Duplicate"},
    )
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "conflict"
    assert "already registered" in body["detail"]
    assert db.query(User).filter(User.email == "test@example.com").count() == 1


def test_signup_short_password_is_bad_request(client):
    """Validation errors are reported as 400 with the error envelope."""
    response = client.post(
        "/api/auth/signup",
        json={"email": "short@example.com", "password": "short", "name": "Short"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "bad_request"


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    assert response.json()["token"]


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"
    assert response.headers["www-authenticate"] == "Bearer"


def test_login_unknown_email(client):
    response = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "whatever1"}
    )
    assert response.status_code == 401


def test_each_login_issues_a_new_token(client, auth_headers):
    first = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    second = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert first.json()["token"] != second.json()["token"]


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/me", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == auth_headers.email
    assert data["id"] == auth_headers.user_id


def test_me_without_token(client):
    response = client.get("/api/me")
    assert response.status_code == 401


def test_me_with_malformed_header(client, auth_headers):
    """A token without the Bearer scheme is rejected."""
    raw_token = auth_headers["Authorization"].split(" ", 1)[1]
    response = client.get("/api/me", headers={"Authorization": raw_token})
    assert response.status_code == 401


def test_bearer_scheme_is_case_insensitive(client, auth_headers):
    raw_token = auth_headers["Authorization"].split(" ", 1)[1]
    response = client.get("/api/me", headers={"Authorization": f"bearer {raw_token}"})
    assert response.status_code == 200


def test_logout_invalidates_token(client, auth_headers):
    """After logout the token no longer resolves; repeating logout is harmless."""
    response = client.post("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 204

    response = client.get("/api/me", headers=auth_headers)
    assert response.status_code == 401

    response = client.delete("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 204


def test_logout_without_token(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == 401


def test_dev_login_creates_then_reuses_user(client):
    first = client.post("/api/auth/dev-login", json={"email": "dev@example.com", "name": "Dev"})
    second = client.post("/api/auth/dev-login", json={"email": "DEV@example.com"})
    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["user"]["id"] == second.json()["user"]["id"]
    assert first.json()["token"] != second.json()["token"]


def test_dev_login_disabled(client):
    """When disabled the route behaves as if it did not exist."""
    settings = MagicMock(enable_dev_login=False)
    with patch("src.api.auth.get_settings", return_value=settings):
        response = client.post("/api/auth/dev-login", json={"email": "dev@example.com"})
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_dev_login_user_cannot_password_login(client):
    client.post("/api/auth/dev-login", json={"email": "nopass@example.com"})
    response = client.post(
        "/api/auth/login", json={"email": "nopass@example.com", "password": "anything"}
    )
    assert response.status_code == 401
