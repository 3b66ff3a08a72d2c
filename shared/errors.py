"""
Shared error handling for the DNS gateway.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    error: str


class GatewayException(Exception):
    """Base exception for gateway errors.

    Every subclass pins the HTTP status it maps to, so the request boundary
    can turn any of them into an envelope without inspecting the type.
    """

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(error=self.message)


class AuthenticationError(GatewayException):
    """Missing or mismatched API token."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHENTICATION_ERROR", message, details)


class MalformedInputError(GatewayException):
    """Request body is not a JSON object."""

    def __init__(self, message: str = "Invalid JSON payload", details: Optional[Dict[str, Any]] = None):
        super().__init__("MALFORMED_INPUT", message, details)


class ValidationError(GatewayException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class RouteNotFoundError(GatewayException):
    """No route for the (method, path) pair."""

    status_code = 404

    def __init__(self, message: str = "Endpoint not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("ROUTE_NOT_FOUND", message, details)


class FacadeError(GatewayException):
    """Failure surfaced by the DNS service facade; the message is kept verbatim."""

    def __init__(self, message: str = "Service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("FACADE_ERROR", message, details)
