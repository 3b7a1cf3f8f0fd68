"""Pytest configuration and fixtures."""

import pytest

from secure_payments import create_app
from secure_payments.models import db

EMPLOYEE_PASSWORD = "Staff!Passw0rd1"

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "JWT_SECRET_KEY": "test-jwt-secret-with-enough-length-for-hs256",
    "JWT_ISSUER": "secure-payments-test",
    "SECRET_KEY": "test-csrf-server-key",
    "BCRYPT_LOG_ROUNDS": 4,
    "COOKIE_SECURE": False,
    "SUBMIT_MARKS_SUBMITTED": False,
    "EMPLOYEE_SEED": [
        {"employeeId": "EMP-001", "fullName": "Thandi Mokoena", "password": EMPLOYEE_PASSWORD},
    ],
}

NOMSA = {
    "fullName": "Nomsa Dlamini",
    "idNumber": "8501011234088",
    "accountNumber": "110000123456",
    "password": "Str0ng!Passw0rd",
}

PIETER = {
    "fullName": "Pieter van der Merwe",
    "idNumber": "9002025800085",
    "accountNumber": "220000654321",
    "password": "An0ther!Passw0rd",
}

USD_PAYMENT = {
    "amount": 100.50,
    "currency": "USD",
    "provider": "SWIFT",
    "beneficiaryAccount": "GB29NWBK60161331926819",
    "swiftCode": "NWBKGB2L",
}


def make_app(**overrides):
    config = dict(TEST_CONFIG)
    config.update(overrides)
    return create_app(config)


def csrf_headers(client):
    """Fetch a CSRF token for this client and return the header to echo it."""
    token = client.get("/api/security/csrf-token").get_json()["csrfToken"]
    return {"X-CSRF-Token": token}


@pytest.fixture
def app():
    app = make_app()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customer_client(app):
    """A client logged in as Nomsa, with a CSRF token."""
    client = app.test_client()
    headers = csrf_headers(client)
    response = client.post("/api/auth/register", json=NOMSA, headers=headers)
    assert response.status_code == 201
    client.csrf = headers
    client.user = response.get_json()["user"]
    return client


@pytest.fixture
def staff_client(app):
    """A client logged in as employee EMP-001, with a CSRF token."""
    client = app.test_client()
    headers = csrf_headers(client)
    response = client.post(
        "/api/staff/login",
        json={"employeeId": "EMP-001", "password": EMPLOYEE_PASSWORD},
        headers=headers,
    )
    assert response.status_code == 200
    client.csrf = headers
    return client
