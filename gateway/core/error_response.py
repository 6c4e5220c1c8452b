"""
Error response rendering.

Single renderer for every failure response, whether raised by a pipeline
stage, a route handler or an unexpected fault.

Dependencies: starlette
System role: Uniform error response body
"""

import traceback
from datetime import datetime, timezone
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse

from gateway.core.exceptions import GatewayError


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_error_response(
    request: Request,
    exc: Exception,
    include_diagnostics: bool,
) -> JSONResponse:
    """
    Render an exception as a JSON error response.

    Args:
        request: Request that failed
        exc: Raised exception (GatewayError or anything else)
        include_diagnostics: Whether to include details and stack trace

    Returns:
        JSONResponse: Error response with status, timestamp, path, method and message
    """
    if isinstance(exc, GatewayError):
        status_code = exc.status_code
        message = exc.message
        details: dict[str, Any] = exc.details
        headers = exc.headers
    else:
        status_code = 500
        message = "Internal server error"
        details = {"error": str(exc)}
        headers = {}

    body: dict[str, Any] = {
        "statusCode": status_code,
        "timestamp": utc_timestamp(),
        "path": request.url.path,
        "method": request.method,
        "message": message,
    }
    if include_diagnostics:
        body["details"] = details
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return JSONResponse(status_code=status_code, content=body, headers=headers)
