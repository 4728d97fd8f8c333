"""Exception types raised by the dry-run engine.

Every error carries the HTTP status the API layer responds with, so routes
never have to map exception classes to status codes themselves.
"""

from typing import Any, Dict, Optional


class MigrationError(Exception):
    """Base error for the dry-run engine."""

    status_code = 500
    default_message = "Dry run failed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = dict(details or {})
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the error body returned by the API."""
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidRequestError(MigrationError):
    """Malformed body or out-of-range options."""

    status_code = 400
    default_message = "Invalid request"


class UnsupportedSourceError(InvalidRequestError):
    """The requested source system is not supported."""

    def __init__(self, source: Optional[str]):
        super().__init__(f"Unsupported migration source: {source}")
        self.source = source


class MissingCredentialsError(InvalidRequestError):
    """Neither an API key nor an access token was supplied."""

    default_message = "API key or access token required"


class AuthenticationError(MigrationError):
    """No authenticated caller or resolved organization."""

    status_code = 401
    default_message = "Unauthorized"


class UpstreamError(MigrationError):
    """The source CRM could not be reached or returned an unusable response."""

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        details: Dict[str, Any] = {"provider": provider}
        if status is not None:
            details["status"] = status
        super().__init__(f"{provider}: {message}", details=details)
        self.provider = provider
        self.status = status


class StoreQueryError(MigrationError):
    """A read against the internal store failed."""

    default_message = "Internal store query failed"


class DryRunTimeoutError(MigrationError):
    """The dry run exceeded the request wall-clock ceiling."""

    def __init__(self, seconds: float):
        super().__init__(f"Dry run exceeded the {seconds:g}s time limit")
        self.seconds = seconds
