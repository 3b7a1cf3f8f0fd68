"""One-way password hashing on top of Flask-Bcrypt.

The cost factor comes from ``BCRYPT_LOG_ROUNDS`` when the extension is bound to
the app (12 unless overridden).
"""

from secure_payments.models import bcrypt


def hash_password(plaintext):
    return bcrypt.generate_password_hash(plaintext).decode('utf-8')


def verify_password(plaintext, digest):
    """Return True when ``plaintext`` matches ``digest``.

    A malformed or empty digest is a mismatch, not an error.
    """
    if not plaintext or not digest:
        return False
    try:
        return bcrypt.check_password_hash(digest, plaintext)
    except (ValueError, TypeError):
        return False
