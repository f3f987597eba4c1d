"""Exception taxonomy shared by services and routes.

Every error carries the HTTP status it maps to and a message that is safe to
show to clients. The application renders them as ``{"error": message}``.
"""

from typing import Optional


class ServiceError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthenticated(ServiceError):
    status_code = 401
    message = "Authentication required"


class InvalidCredential(ServiceError):
    """Bearer token is malformed, badly signed or expired."""

    status_code = 403
    message = "Invalid token"


class InvalidCredentials(ServiceError):
    """Username/password pair rejected at login."""

    status_code = 401
    message = "Invalid credentials"


class DuplicateUsername(ServiceError):
    status_code = 500
    message = "Username already exists"


class DuplicateModelName(ServiceError):
    status_code = 500
    message = "AI model name already exists"


class ModelNotFound(ServiceError):
    status_code = 404
    message = "AI model not found"


class ChatNotFound(ServiceError):
    status_code = 404
    message = "Chat not found"


class InferenceFailed(ServiceError):
    status_code = 500
    message = "Failed to get response from AI"


class InternalError(ServiceError):
    status_code = 500
