"""Tests for customer registration, login and session routes."""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import NOMSA, csrf_headers, make_app
from secure_payments.errors import ConfigurationError
from secure_payments.jwt_utils import SessionClaims, SessionCodec

LOGIN = {
    "username": NOMSA["idNumber"],
    "accountNumber": NOMSA["accountNumber"],
    "password": NOMSA["password"],
}


def _session_cookie(response):
    return next(c for c in response.headers.getlist("Set-Cookie") if c.startswith("session="))


class TestRegister:
    def test_register_starts_a_session(self, client) -> None:
        response = client.post("/api/auth/register", json=NOMSA, headers=csrf_headers(client))
        assert response.status_code == 201
        body = response.get_json()
        assert body["status"] == "ok"
        assert body["user"]["fullName"] == "Nomsa Dlamini"
        assert body["user"]["accountNumber"] == "110000123456"
        assert "password" not in body["user"]

        cookie = _session_cookie(response)
        assert "HttpOnly" in cookie
        assert "SameSite=Strict" in cookie
        assert "Max-Age=28800" in cookie

        me = client.get("/api/auth/me").get_json()["user"]
        assert me == {
            "id": body["user"]["id"],
            "fullName": "Nomsa Dlamini",
            "idNumber": "8501011234088",
            "accountNumber": "110000123456",
        }

    def test_duplicate_identity_conflicts(self, customer_client, app) -> None:
        client = app.test_client()
        response = client.post("/api/auth/register", json=NOMSA, headers=csrf_headers(client))
        assert response.status_code == 409
        assert response.get_json()["error"] == "Conflict"

    def test_duplicate_account_number_conflicts(self, customer_client, app) -> None:
        client = app.test_client()
        payload = dict(NOMSA, idNumber="9912315000087")
        response = client.post("/api/auth/register", json=payload, headers=csrf_headers(client))
        assert response.status_code == 409

    def test_validation_errors(self, client) -> None:
        payload = dict(NOMSA, idNumber="123", password="weak")
        response = client.post("/api/auth/register", json=payload, headers=csrf_headers(client))
        assert response.status_code == 400
        body = response.get_json()
        assert body["error"] == "ValidationError"
        assert len(body["errors"]) == 2

    def test_non_json_body(self, client) -> None:
        response = client.post(
            "/api/auth/register",
            data="fullName=Nomsa",
            content_type="application/x-www-form-urlencoded",
            headers=csrf_headers(client),
        )
        assert response.status_code == 400


class TestLogin:
    def test_login(self, customer_client, app) -> None:
        client = app.test_client()
        response = client.post("/api/auth/login", json=LOGIN, headers=csrf_headers(client))
        assert response.status_code == 200
        assert response.get_json()["user"]["id"] == customer_client.user["id"]
        assert _session_cookie(response)
        assert client.get("/api/auth/me").status_code == 200

    @pytest.mark.parametrize(
        "changes",
        [
            {"password": "Wr0ng!Passw0rdX"},
            {"accountNumber": "110000999999"},
            {"username": "9912315000087"},
        ],
    )
    def test_bad_credentials(self, customer_client, app, changes) -> None:
        client = app.test_client()
        response = client.post("/api/auth/login", json=dict(LOGIN, **changes), headers=csrf_headers(client))
        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid credentials."
        assert client.get_cookie("session") is None

    def test_login_validation(self, client) -> None:
        response = client.post("/api/auth/login", json={"username": "x"}, headers=csrf_headers(client))
        assert response.status_code == 400


class TestSession:
    def test_me_without_cookie(self, client) -> None:
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.get_json()["error"] == "Unauthenticated"

    def test_me_with_garbage_cookie(self, client) -> None:
        client.set_cookie("session", "garbage")
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.get_json()["error"] == "InvalidSession"

    def test_expired_session(self, app, customer_client) -> None:
        codec = SessionCodec.from_config(app.config)
        past = datetime.now(timezone.utc) - timedelta(hours=9)
        claims = SessionClaims.new(customer_client.user["id"], "customer", "Nomsa Dlamini", "110000123456",
                                   codec.ttl, now=past)
        customer_client.set_cookie("session", codec.issue(claims))
        assert customer_client.get("/api/auth/me").status_code == 401

    def test_token_from_other_deployment(self, app, customer_client) -> None:
        other = SessionCodec(app.config["JWT_SECRET_KEY"], "another-deployment", timedelta(hours=8))
        claims = other.claims_for(customer_client.user["id"], "customer", "Nomsa Dlamini", "110000123456")
        customer_client.set_cookie("session", other.issue(claims))
        assert customer_client.get("/api/auth/me").status_code == 401

    def test_employee_token_in_customer_cookie(self, app, customer_client) -> None:
        codec = SessionCodec.from_config(app.config)
        claims = codec.claims_for(customer_client.user["id"], "employee", "Thandi Mokoena", "EMP-001")
        customer_client.set_cookie("session", codec.issue(claims))
        response = customer_client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.get_json()["error"] == "InvalidSession"

    def test_logout_clears_cookie(self, customer_client) -> None:
        response = customer_client.post("/api/auth/logout", headers=customer_client.csrf)
        assert response.status_code == 200
        assert customer_client.get_cookie("session") is None
        assert customer_client.get("/api/auth/me").status_code == 401

    def test_logout_requires_csrf(self, customer_client) -> None:
        assert customer_client.post("/api/auth/logout").status_code == 403
        assert customer_client.get("/api/auth/me").status_code == 200


class TestAppSurface:
    def test_health(self, client) -> None:
        response = client.get("/api/security/health")
        assert response.status_code == 200
        assert response.get_json()["status"] == "ok"

    def test_unknown_route(self, client) -> None:
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.get_json()["status"] == "error"

    def test_wrong_method(self, client) -> None:
        response = client.delete("/api/auth/me")
        assert response.status_code == 405
        assert response.get_json()["status"] == "error"

    def test_missing_jwt_secret(self) -> None:
        with pytest.raises(ConfigurationError):
            make_app(JWT_SECRET_KEY=None)
