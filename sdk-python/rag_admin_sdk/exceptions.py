"""RAG Admin SDK exceptions."""

from typing import Optional, Dict, Any


class RagAdminError(Exception):
    """Base exception for RAG Admin SDK."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[Dict[str, Any]] = None,
        backend_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body or {}
        # Message supplied by the backend, None when the body carried none
        self.backend_message = backend_message

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class AuthenticationError(RagAdminError):
    """Raised when the backend rejects the session (401)."""
    pass


class PermissionDeniedError(RagAdminError):
    """Raised when the authenticated user lacks access (403)."""
    pass


class NotFoundError(RagAdminError):
    """Raised when the requested entity does not exist (404)."""
    pass


class ConflictError(RagAdminError):
    """Raised when the request conflicts with existing state (409)."""
    pass


class ValidationError(RagAdminError):
    """Raised when request validation fails (400/422)."""
    pass


class ServerError(RagAdminError):
    """Raised when server returns an error (5xx)."""
    pass


class TransportError(RagAdminError):
    """Raised when the backend could not be reached at all."""
    pass


class ResponseDecodeError(RagAdminError):
    """Raised when a successful response body does not match the expected shape."""
    pass
