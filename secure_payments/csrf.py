"""Double-submit CSRF protection.

The browser receives a random secret in an HTTP-only cookie and a token
derived from it. Mutating requests must echo the token in the ``X-CSRF-Token``
header (or a ``_csrf`` JSON field); the server recomputes the token from the
cookie, so no per-session state is kept.
"""

import base64
import hashlib
import hmac
import logging
import secrets
from functools import wraps

from flask import current_app, request

from secure_payments.errors import CsrfError

logger = logging.getLogger(__name__)

SECRET_COOKIE = "csrfSecret"
TOKEN_COOKIE = "csrfToken"
HEADER_NAME = "X-CSRF-Token"
BODY_FIELD = "_csrf"
SAFE_METHODS = frozenset(("GET", "HEAD", "OPTIONS"))

_SECRET_BYTES = 32


def _b64(raw):
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


class CsrfGuard:
    def __init__(self, server_key):
        if isinstance(server_key, str):
            server_key = server_key.encode("utf-8")
        if not server_key:
            raise ValueError("CSRF server key must not be empty")
        self._key = server_key

    @staticmethod
    def new_secret():
        return secrets.token_urlsafe(_SECRET_BYTES)

    @staticmethod
    def is_well_formed(secret):
        # token_urlsafe(32) always yields 43 characters
        return isinstance(secret, str) and len(secret) == 43

    def issue_token(self, secret):
        digest = hmac.new(self._key, secret.encode("utf-8"), hashlib.sha256).digest()
        return _b64(digest)

    def verify_token(self, secret, supplied):
        if not secret or not supplied:
            return False
        if not isinstance(secret, str) or not isinstance(supplied, str):
            return False
        expected = self.issue_token(secret)
        return hmac.compare_digest(expected.encode("ascii"), supplied.encode("utf-8"))


def csrf_guard():
    return CsrfGuard(current_app.config["SECRET_KEY"])


def _supplied_token():
    token = request.headers.get(HEADER_NAME)
    if token:
        return token
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        value = body.get(BODY_FIELD)
        return value if isinstance(value, str) else None
    return None


def csrf_protected(f):
    """Reject mutating requests whose token does not match the secret cookie."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        if request.method not in SAFE_METHODS:
            secret = request.cookies.get(SECRET_COOKIE)
            if not csrf_guard().verify_token(secret, _supplied_token()):
                logger.warning("CSRF check failed for %s %s", request.method, request.path)
                raise CsrfError()
        return f(*args, **kwargs)
    return wrapper


def attach_csrf_cookies(response, secret, token):
    secure = current_app.config["COOKIE_SECURE"]
    response.set_cookie(SECRET_COOKIE, secret, httponly=True, secure=secure, samesite="Strict", path="/")
    # readable by scripts so the frontend can echo it back
    response.set_cookie(TOKEN_COOKIE, token, httponly=False, secure=secure, samesite="Strict", path="/")
    return response
