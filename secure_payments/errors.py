"""Exception hierarchy shared by the API, the services and the client."""


class PaymentsError(Exception):
    """Base error. Carries the HTTP status and the machine-readable code."""

    status_code = 500
    code = "InternalError"
    default_message = "Unexpected server error."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"status": "error", "error": self.code, "message": self.message}


class ValidationError(PaymentsError):
    status_code = 400
    code = "ValidationError"
    default_message = "Request validation failed."

    def __init__(self, errors=None, message=None):
        self.errors = list(errors or [])
        super().__init__(message)

    def to_dict(self):
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class AuthenticationError(PaymentsError):
    status_code = 401
    code = "AuthenticationError"
    default_message = "Authentication required."


class Unauthenticated(AuthenticationError):
    code = "Unauthenticated"


class InvalidSession(AuthenticationError):
    code = "InvalidSession"
    default_message = "Invalid or expired session."


class TokenError(AuthenticationError):
    """Raised by the session codec. Routes never expose the exact reason."""

    code = "InvalidSession"
    default_message = "Invalid session token."


class ExpiredToken(TokenError):
    default_message = "Session token has expired."


class InvalidSignature(TokenError):
    default_message = "Session token signature does not match."


class InvalidIssuer(TokenError):
    default_message = "Session token was issued by another deployment."


class MalformedToken(TokenError):
    default_message = "Session token is malformed."


class CsrfError(PaymentsError):
    status_code = 403
    code = "InvalidCsrfToken"
    default_message = "Invalid CSRF token."


class NotFoundError(PaymentsError):
    status_code = 404
    code = "NotFound"
    default_message = "Resource not found."


class ConflictError(PaymentsError):
    status_code = 409
    code = "Conflict"
    default_message = "Resource already exists."


class InternalError(PaymentsError):
    pass


class ConfigurationError(PaymentsError):
    code = "ConfigurationError"
    default_message = "Invalid configuration."
