"""
Security gate pipeline stage.

Hardening response headers, API key authorization, payload size and content
type limits, and a pattern scan of the request shape for injection markers.
The scan runs in addition to the escaping done by the SuiteQL query builder:
the gate sees every query parameter and body field, the builder only the
values it interpolates.

Dependencies: starlette, gateway.core
System role: Second stage of the request pipeline
"""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from starlette.requests import Request

from gateway.configs.security import SecuritySettings
from gateway.core.context import RequestContext
from gateway.core.exceptions import (
    ForbiddenError,
    InvalidInputError,
    PayloadTooLargeError,
    UnauthorizedError,
    UnsupportedMediaTypeError,
)
from gateway.core.routes import MUTATING_METHODS, is_health_path, is_protected_path

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

FINGERPRINT_HEADERS = frozenset({"server", "x-powered-by"})

JSON_MEDIA_TYPE = "application/json"

DEFAULT_INJECTION_PATTERNS = (
    re.compile(r"\b(union|select|insert|delete|update|drop|create|alter)\b", re.IGNORECASE),
    re.compile(r"(--|/\*|\*/|;)"),
    re.compile(r"['\"`]"),
)


@dataclass(frozen=True)
class SecurityPolicy:
    """Immutable request security policy, loaded once at startup."""

    allowed_api_keys: frozenset[str] = frozenset()
    max_body_size: int = 1_048_576
    allowed_content_type: str = JSON_MEDIA_TYPE
    injection_patterns: tuple[re.Pattern, ...] = field(default=DEFAULT_INJECTION_PATTERNS)

    @classmethod
    def from_settings(cls, settings: SecuritySettings) -> "SecurityPolicy":
        return cls(
            allowed_api_keys=settings.api_keys,
            max_body_size=settings.max_body_size,
        )


def _iter_scannable(value: Any) -> Iterator[str]:
    """Yield every key and scalar value of a decoded JSON document."""
    if isinstance(value, dict):
        for key, item in value.items():
            yield str(key)
            yield from _iter_scannable(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _iter_scannable(item)
    elif value is not None:
        yield str(value)


class SecurityGate:
    """Rejects requests that violate the security policy."""

    def __init__(self, policy: SecurityPolicy) -> None:
        """
        Initialize security gate.

        Args:
            policy: Security policy to enforce
        """
        self.policy = policy

    async def process(self, request: Request, context: RequestContext) -> None:
        """
        Run all security checks in order.

        Args:
            request: Inbound request
            context: Pipeline context (receives security headers)

        Raises:
            GatewayError: On the first failed check
        """
        context.set_headers(SECURITY_HEADERS)
        context.strip_headers.update(FINGERPRINT_HEADERS)

        if self.requires_api_key(request):
            self.validate_api_key(request)

        self.validate_content_length(request)
        self.validate_content_type(request)
        await self.scan_for_injection(request, context)

    def requires_api_key(self, request: Request) -> bool:
        """Only NetSuite routes, except health, and only when keys are configured."""
        path = request.url.path
        return (
            is_protected_path(path)
            and not is_health_path(path)
            and bool(self.policy.allowed_api_keys)
        )

    def validate_api_key(self, request: Request) -> None:
        api_key = request.headers.get("x-api-key")

        if not api_key:
            logger.warning(
                "Missing API key",
                extra={"method": request.method, "path": request.url.path},
            )
            raise UnauthorizedError("API key required")

        if api_key not in self.policy.allowed_api_keys:
            logger.warning(
                "Invalid API key used",
                extra={"api_key_prefix": f"{api_key[:8]}...", "path": request.url.path},
            )
            raise ForbiddenError("Invalid API key")

    def validate_content_length(self, request: Request) -> None:
        raw = request.headers.get("content-length") or "0"
        try:
            content_length = int(raw)
        except ValueError:
            content_length = 0

        if content_length > self.policy.max_body_size:
            logger.warning(
                "Request body too large",
                extra={"content_length": content_length, "max_size": self.policy.max_body_size},
            )
            raise PayloadTooLargeError(content_length, self.policy.max_body_size)

    def validate_content_type(self, request: Request) -> None:
        if request.method not in MUTATING_METHODS:
            return

        content_type = request.headers.get("content-type")
        if content_type and self.policy.allowed_content_type not in content_type.lower():
            raise UnsupportedMediaTypeError(
                f"Only {self.policy.allowed_content_type} content type is supported"
            )

    async def scan_for_injection(self, request: Request, context: RequestContext) -> None:
        """
        Match query parameters and body against the injection patterns.

        Args:
            request: Inbound request
            context: Pipeline context holding the buffered body

        Raises:
            InvalidInputError: If any pattern matches
        """
        await context.load_body(request)
        text = "\n".join(self._scannable_parts(request, context))
        if not text:
            return

        for pattern in self.policy.injection_patterns:
            if pattern.search(text):
                logger.warning(
                    "Suspicious request pattern detected",
                    extra={"method": request.method, "path": request.url.path},
                )
                raise InvalidInputError("Invalid request format")

    @staticmethod
    def _scannable_parts(request: Request, context: RequestContext) -> Iterator[str]:
        for key, value in request.query_params.multi_items():
            yield key
            yield value

        if context.has_json_body:
            yield from _iter_scannable(context.json_body)
        elif context.body:
            yield context.body.decode("utf-8", errors="replace")
