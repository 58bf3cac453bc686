"""
Shared error handling for the Versioned Gateway.
"""

from typing import Dict, Any, Optional, Sequence
from pydantic import BaseModel, Field

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for gateway errors surfaced over HTTP."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )

    def response_headers(self) -> Dict[str, str]:
        """Extra headers sent along with the error response."""
        return {}


class AuthenticationError(AccessLayerException):
    """Authentication-related errors.

    The message is fixed and no details are carried so that every rejection
    looks the same to the caller, whatever the underlying reason.
    """

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__("AUTHENTICATION_ERROR", message)

    def response_headers(self) -> Dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class AuthorizationError(AccessLayerException):
    """Authorization-related errors."""

    status_code = 403

    def __init__(self, message: str = "Authorization failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHORIZATION_ERROR", message, details)


class UnsupportedApiVersionError(AccessLayerException):
    """The resolved API version is not served by any mounted router."""

    def __init__(self, requested: str, supported: Sequence[str]):
        super().__init__(
            "UNSUPPORTED_API_VERSION",
            f"API version '{requested}' is not supported",
            details={"requested": requested, "supported": list(supported)}
        )


class ConfigurationError(Exception):
    """Raised at startup when the service cannot be configured safely.

    Not an HTTP error: it aborts initialization before any request is served.
    """
