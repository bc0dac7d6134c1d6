"""
Tests for routes/auth.py — register, login, Google sign-in, me, logout.

Google token verification is mocked via the mock_verify_google_token fixture.
"""
import json

from conftest import unique_email


def _post(client, url, body):
    return client.post(url, data=json.dumps(body), content_type="application/json")


class TestRegisterRoute:
    """Tests for POST /api/auth/register."""

    def test_register_returns_token(self, client, db_session):
        email = unique_email("reg")
        resp = _post(client, "/api/auth/register", {
            "email": email, "password": "hunter22", "name": "Reg",
        })
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["token"]
        assert data["user"]["email"] == email
        assert "password_hash" not in data["user"]

    def test_register_duplicate_returns_409(self, client, db_session):
        email = unique_email("dup")
        body = {"email": email, "password": "hunter22", "name": "Dup"}
        _post(client, "/api/auth/register", body)
        resp = _post(client, "/api/auth/register", body)
        assert resp.status_code == 409

    def test_register_validation_error(self, client, db_session):
        resp = _post(client, "/api/auth/register", {
            "email": "bad", "password": "x", "name": "",
        })
        assert resp.status_code == 400

    def test_register_numeric_password_returns_400(self, client, db_session):
        resp = _post(client, "/api/auth/register", {
            "email": unique_email("num"), "password": 12345678, "name": "Num",
        })
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "password must be a string"}


class TestLoginRoute:
    """Tests for POST /api/auth/login."""

    def test_login_valid_credentials(self, client, db_session):
        email = unique_email("in")
        _post(client, "/api/auth/register", {
            "email": email, "password": "hunter22", "name": "In",
        })
        resp = _post(client, "/api/auth/login", {"email": email, "password": "hunter22"})
        assert resp.status_code == 200
        assert resp.get_json()["user"]["email"] == email

    def test_login_bad_password(self, client, db_session):
        email = unique_email("bad")
        _post(client, "/api/auth/register", {
            "email": email, "password": "hunter22", "name": "Bad",
        })
        resp = _post(client, "/api/auth/login", {"email": email, "password": "wrong-one"})
        assert resp.status_code == 401

    def test_login_missing_fields(self, client, db_session):
        resp = _post(client, "/api/auth/login", {})
        assert resp.status_code == 400

    def test_login_numeric_password_returns_400(self, client, db_session):
        resp = _post(client, "/api/auth/login", {
            "email": unique_email("num"), "password": 12345678,
        })
        assert resp.status_code == 400


class TestGoogleRoute:
    """Tests for POST /api/auth/google."""

    def test_google_valid_token(self, client, db_session, mock_verify_google_token):
        resp = _post(client, "/api/auth/google", {"token": "valid-google-id-token"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert "token" in data
        assert data["user"]["email"] == "googleuser@newsroom.test"

    def test_google_invalid_token(self, client, db_session, mock_verify_google_token):
        mock_verify_google_token.side_effect = ValueError("bad token")
        resp = _post(client, "/api/auth/google", {"token": "garbage"})
        assert resp.status_code == 401

    def test_google_missing_token(self, client, db_session):
        resp = _post(client, "/api/auth/google", {})
        assert resp.status_code == 400


class TestMeRoute:
    """Tests for GET /api/auth/me."""

    def test_me_without_token(self, client, db_session):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401

    def test_me_with_valid_token(self, client, db_session, auth_headers):
        headers = auth_headers("ADMIN")
        resp = client.get("/api/auth/me", headers=headers)
        assert resp.status_code == 200
        assert resp.get_json()["role"] == "ADMIN"


class TestLogoutRoute:
    """Tests for POST /api/auth/logout."""

    def test_logout_returns_200(self, client, db_session):
        resp = client.post("/api/auth/logout")
        assert resp.status_code == 200
        assert resp.get_json()["message"] == "logged out"
