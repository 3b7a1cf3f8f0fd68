# secure_payments/config.py

import json
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _employee_seed():
    raw = os.getenv('EMPLOYEE_SEED', '').strip()
    return json.loads(raw) if raw else []


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///payments.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Key for deriving CSRF tokens (HMAC). Rotating it invalidates issued tokens.
    SECRET_KEY = os.getenv('SECRET_KEY', 'change-me-to-a-long-random-csrf-key')

    # --- SESSION TOKEN (JWT) ---
    # Required. create_app refuses to start without it.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET')
    JWT_ISSUER = os.getenv('JWT_ISSUER', 'secure-payments')
    SESSION_TTL_HOURS = int(os.getenv('SESSION_TTL_HOURS', 8))

    # Flask's own session cookie must not collide with our "session" cookie
    SESSION_COOKIE_NAME = 'flask_session'
    COOKIE_SECURE = _flag('COOKIE_SECURE', 'true')

    BCRYPT_LOG_ROUNDS = int(os.getenv('BCRYPT_LOG_ROUNDS', 12))
    BCRYPT_HANDLE_LONG_PASSWORDS = True

    ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.getenv('ALLOWED_ORIGINS', 'https://localhost:5173').split(',')
        if origin.strip()
    ]

    # False keeps the count-only behaviour of the SWIFT submit stub
    SUBMIT_MARKS_SUBMITTED = _flag('SUBMIT_MARKS_SUBMITTED')

    # Request bodies above this many bytes get a 413
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', 10 * 1024))

    EMPLOYEE_SEED = _employee_seed()

    RESTX_ERROR_404_HELP = False
    RESTX_MASK_SWAGGER = False

    # --- TLS SERVER ---
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', 8443))
    SSL_CERT_PATH = os.getenv('SSL_CERT_PATH', 'certs/server.crt')
    SSL_KEY_PATH = os.getenv('SSL_KEY_PATH', 'certs/server.key')
    SSL_CA_PATH = os.getenv('SSL_CA_PATH', '')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.getenv('LOG_FORMAT', 'standard')
