"""
Core domain module.

Contains the exception hierarchy, route constants and the per-request
context shared by pipeline stages.
"""

from gateway.core.context import RequestContext
from gateway.core.exceptions import (
    BadGatewayError,
    ConfigurationError,
    ForbiddenError,
    GatewayError,
    GatewayTimeoutError,
    InvalidEmailFormatError,
    InvalidInputError,
    PayloadTooLargeError,
    RateLimitedError,
    UnauthorizedError,
    UnsupportedMediaTypeError,
    UpstreamError,
)

__all__ = [
    # Exceptions
    "GatewayError",
    "ConfigurationError",
    "InvalidInputError",
    "InvalidEmailFormatError",
    "UnauthorizedError",
    "ForbiddenError",
    "PayloadTooLargeError",
    "UnsupportedMediaTypeError",
    "RateLimitedError",
    "UpstreamError",
    "BadGatewayError",
    "GatewayTimeoutError",
    # Request state
    "RequestContext",
]
