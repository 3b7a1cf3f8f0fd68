"""Tests for the requests-based API client, with the session mocked out."""

import json
from unittest import mock

import pytest
import requests

from secure_payments.client import ApiError, PaymentsClient


def _response(status_code, body):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode()
    response.headers["Content-Type"] = "application/json"
    return response


def _token(value):
    return _response(200, {"status": "ok", "csrfToken": value})


CSRF_REJECTED = {"status": "error", "error": "InvalidCsrfToken", "message": "Invalid CSRF token."}


@pytest.fixture
def session():
    return mock.Mock(spec=requests.Session)


@pytest.fixture
def api(session):
    return PaymentsClient("https://localhost:8443/api/", session=session)


def _sent_headers(session, call_index):
    return session.request.call_args_list[call_index].kwargs["headers"]


def test_get_does_not_fetch_csrf(api, session) -> None:
    session.request.return_value = _response(200, {"status": "ok", "message": "API healthy."})
    assert api.health()["status"] == "ok"
    session.request.assert_called_once()
    method, url = session.request.call_args.args
    assert method == "GET"
    assert url == "https://localhost:8443/api/security/health"
    assert _sent_headers(session, 0) == {}


def test_mutating_call_fetches_and_echoes_token(api, session) -> None:
    session.request.side_effect = [
        _token("tok-1"),
        _response(200, {"status": "ok", "message": "Logged out."}),
    ]
    api.logout()
    assert api.csrf_token == "tok-1"
    assert _sent_headers(session, 1) == {"X-CSRF-Token": "tok-1"}


def test_retries_once_after_csrf_rejection(api, session) -> None:
    session.request.side_effect = [
        _token("stale"),
        _response(403, CSRF_REJECTED),
        _token("fresh"),
        _response(200, {"status": "ok", "submitted": 3}),
    ]
    assert api.submit_verified() == 3
    assert session.request.call_count == 4
    assert _sent_headers(session, 3) == {"X-CSRF-Token": "fresh"}


def test_second_csrf_rejection_is_raised(api, session) -> None:
    session.request.side_effect = [
        _token("stale"),
        _response(403, CSRF_REJECTED),
        _token("still-stale"),
        _response(403, CSRF_REJECTED),
    ]
    with pytest.raises(ApiError) as excinfo:
        api.staff_logout()
    assert excinfo.value.status_code == 403
    assert excinfo.value.error == "InvalidCsrfToken"
    assert session.request.call_count == 4


def test_other_403_is_not_retried(api, session) -> None:
    api.csrf_token = "tok"
    session.request.return_value = _response(403, {"status": "error", "error": "Forbidden", "message": "No."})
    with pytest.raises(ApiError):
        api.logout()
    session.request.assert_called_once()


def test_validation_errors_are_carried(api, session) -> None:
    api.csrf_token = "tok"
    session.request.return_value = _response(400, {
        "status": "error",
        "error": "ValidationError",
        "message": "Request validation failed.",
        "errors": ["Invalid SWIFT code."],
    })
    with pytest.raises(ApiError) as excinfo:
        api.create_payment("10.00", "USD", "SWIFT", "GB29NWBK60161331926819", "BAD")
    assert excinfo.value.status_code == 400
    assert excinfo.value.errors == ["Invalid SWIFT code."]
    sent = session.request.call_args.kwargs["json"]
    assert sent["amount"] == "10.00"
    assert sent["swiftCode"] == "BAD"


def test_review_filter_is_comma_joined(api, session) -> None:
    session.request.return_value = _response(200, {"status": "ok", "payments": []})
    assert api.review_payments(["pending", "verified"]) == []
    assert session.request.call_args.kwargs["params"] == {"status": "pending,verified"}


def test_non_json_error_body(api, session) -> None:
    response = requests.Response()
    response.status_code = 502
    response.reason = "Bad Gateway"
    response._content = b"<html>upstream down</html>"
    session.request.return_value = response
    with pytest.raises(ApiError) as excinfo:
        api.me()
    assert excinfo.value.message == "Bad Gateway"
