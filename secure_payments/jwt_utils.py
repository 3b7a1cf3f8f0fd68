# jwt_utils.py
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from jwt import (
    DecodeError,
    ExpiredSignatureError,
    InvalidIssuerError,
    InvalidSignatureError,
    InvalidTokenError,
)
from flask import current_app, g, request

from secure_payments.errors import (
    ExpiredToken,
    InvalidIssuer,
    InvalidSession,
    InvalidSignature,
    MalformedToken,
    TokenError,
    Unauthenticated,
)

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
CUSTOMER_COOKIE = "session"
EMPLOYEE_COOKIE = "employee_session"
ROLES = ("customer", "employee")


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried inside a session token."""

    subject_id: int
    role: str
    display_name: str
    # account number for customers, employee id for staff
    reference: str
    issued_at: datetime
    expires_at: datetime

    @property
    def id(self):
        return self.subject_id

    @classmethod
    def new(cls, subject_id, role, display_name, reference, ttl, now=None):
        # JWT timestamps are whole seconds
        now = (now or datetime.now(timezone.utc)).replace(microsecond=0)
        return cls(
            subject_id=int(subject_id),
            role=role,
            display_name=display_name,
            reference=reference,
            issued_at=now,
            expires_at=now + ttl,
        )


class SessionCodec:
    """Signs and verifies session tokens (HS256 JWT).

    Tokens are stateless: nothing is stored server side, so logout cannot
    revoke a token before it expires.
    """

    def __init__(self, secret, issuer, ttl=timedelta(hours=8)):
        self.secret = secret
        self.issuer = issuer
        self.ttl = ttl

    @classmethod
    def from_config(cls, config):
        return cls(
            secret=config["JWT_SECRET_KEY"],
            issuer=config["JWT_ISSUER"],
            ttl=timedelta(hours=config["SESSION_TTL_HOURS"]),
        )

    def claims_for(self, subject_id, role, display_name, reference):
        return SessionClaims.new(subject_id, role, display_name, reference, self.ttl)

    def issue(self, claims):
        payload = {
            # PyJWT requires "sub" to be a string
            "sub": str(claims.subject_id),
            "role": claims.role,
            "name": claims.display_name,
            "ref": claims.reference,
            "iat": int(claims.issued_at.timestamp()),
            "exp": int(claims.expires_at.timestamp()),
            "iss": self.issuer,
        }
        return jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)

    def verify(self, token):
        """
        Verify a token and return its SessionClaims.
        Raises InvalidSignature, ExpiredToken, InvalidIssuer or MalformedToken.
        """
        if not token or not isinstance(token, str):
            raise MalformedToken()

        # signature is checked before exp and iss
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[JWT_ALGORITHM],
                issuer=self.issuer,
                options={"require": ["sub", "iat", "exp", "iss"]},
            )
        except InvalidSignatureError:
            raise InvalidSignature()
        except ExpiredSignatureError:
            raise ExpiredToken()
        except InvalidIssuerError:
            raise InvalidIssuer()
        except (DecodeError, InvalidTokenError):
            raise MalformedToken()

        try:
            role = payload["role"]
            if role not in ROLES:
                raise ValueError(role)
            return SessionClaims(
                subject_id=int(payload["sub"]),
                role=role,
                display_name=str(payload["name"]),
                reference=str(payload["ref"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError):
            raise MalformedToken()


def session_codec():
    return SessionCodec.from_config(current_app.config)


def _cookie_options():
    return {
        "httponly": True,
        "secure": current_app.config["COOKIE_SECURE"],
        "samesite": "Strict",
        "path": "/",
    }


def set_session_cookie(response, cookie_name, token):
    max_age = current_app.config["SESSION_TTL_HOURS"] * 60 * 60
    response.set_cookie(cookie_name, token, max_age=max_age, **_cookie_options())
    return response


def clear_session_cookie(response, cookie_name):
    response.delete_cookie(cookie_name, **_cookie_options())
    return response


def require_session(cookie_name, role):
    """
    Decorator factory for routes that need a session of the given role.
    Attaches the verified claims to g.identity.
    Raises Unauthenticated (no cookie) or InvalidSession.
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            token = request.cookies.get(cookie_name)
            if not token:
                raise Unauthenticated()

            try:
                claims = session_codec().verify(token)
            except TokenError as e:
                logger.info("Rejected %s cookie: %s", cookie_name, e.message)
                raise InvalidSession()

            # a customer token copied into the staff cookie (or the reverse)
            if claims.role != role:
                logger.warning("Rejected %s token presented as %s", claims.role, cookie_name)
                raise InvalidSession()

            g.identity = claims
            return f(*args, **kwargs)

        return wrapper
    return decorator


customer_required = require_session(CUSTOMER_COOKIE, "customer")
employee_required = require_session(EMPLOYEE_COOKIE, "employee")
