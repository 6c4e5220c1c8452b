"""
Exception hierarchy for the NetSuite gateway.

Provides layered exception structure for gateway errors. Every exception
carries the HTTP status it maps to, so pipeline stages, services and routers
can raise them directly and have a single renderer turn them into responses.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
            headers: Optional response headers the error requires
        """
        self.message = message
        self.details = details or {}
        self.headers = headers or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(GatewayError):
    """Raised when required configuration is missing or invalid."""

    status_code = 500


class InvalidInputError(GatewayError):
    """Raised when request input fails validation."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid input error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class InvalidEmailFormatError(InvalidInputError):
    """Raised when an email does not have the local@domain.tld shape."""

    def __init__(self) -> None:
        super().__init__("Invalid email format", field="email")


class UnauthorizedError(GatewayError):
    """Raised when a required credential is missing."""

    status_code = 401


class ForbiddenError(GatewayError):
    """Raised when a supplied credential is not accepted."""

    status_code = 403


class PayloadTooLargeError(GatewayError):
    """Raised when the declared request body exceeds the configured limit."""

    status_code = 413

    def __init__(self, content_length: int, max_size: int) -> None:
        super().__init__(
            "Request body too large",
            details={"contentLength": content_length, "maxSize": max_size},
        )


class UnsupportedMediaTypeError(GatewayError):
    """Raised when a mutating request declares a non-JSON content type."""

    status_code = 415


class RateLimitedError(GatewayError):
    """Raised when a caller exceeds its request quota for the current window."""

    status_code = 429

    def __init__(self, retry_after: int, headers: dict[str, str] | None = None) -> None:
        """
        Initialize rate limit error.

        Args:
            retry_after: Seconds until the caller's window resets
            headers: Rate limit headers describing the rejected state
        """
        headers = dict(headers or {})
        headers["Retry-After"] = str(retry_after)
        self.retry_after = retry_after
        super().__init__(
            "Too many requests. Please try again later.",
            details={"retryAfter": retry_after},
            headers=headers,
        )


class UpstreamError(GatewayError):
    """Base exception for failures talking to NetSuite."""

    status_code = 502


class BadGatewayError(UpstreamError):
    """Raised when NetSuite is unreachable or answers with a failure."""

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        upstream_body: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize bad gateway error.

        Args:
            message: Error message
            upstream_status: HTTP status returned by NetSuite, if any
            upstream_body: Response body returned by NetSuite, if any
            details: Additional context
        """
        details = details or {}
        details.setdefault("service", "NetSuite")
        if upstream_status is not None:
            details["upstreamStatus"] = upstream_status
        if upstream_body is not None:
            details["upstreamBody"] = upstream_body
        self.upstream_status = upstream_status
        super().__init__(message, details)


class GatewayTimeoutError(UpstreamError):
    """Raised when a NetSuite request exceeds its deadline."""

    status_code = 504

    def __init__(self, message: str = "NetSuite request timeout") -> None:
        super().__init__(
            message,
            details={"service": "NetSuite", "issue": "Request timeout"},
        )
