"""
Request/response logging pipeline stage.

Wraps the route handler: logs the request line (and a redacted body for
mutating NetSuite requests), runs the handler, then logs status and timing at
a level chosen by status class.

Dependencies: logging (stdlib), starlette, gateway.observability.log_utils
System role: Fourth stage of the request pipeline
"""

import json
import logging
import time
from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.responses import Response

from gateway.core.context import RequestContext
from gateway.core.routes import SAFE_METHODS, is_protected_path
from gateway.observability.log_utils import log_with_context, redact_sensitive_fields

logger = logging.getLogger(__name__)

Handler = Callable[[], Awaitable[Response]]


def level_for_status(status_code: int) -> int:
    """Map a response status to a log level."""
    if status_code >= 400:
        return logging.ERROR
    if status_code >= 300:
        return logging.WARNING
    return logging.INFO


class RequestLogger:
    """Logs request metadata and response outcome around a handler."""

    def __init__(self, log_request_bodies: bool = True) -> None:
        self.log_request_bodies = log_request_bodies

    async def wrap(self, request: Request, context: RequestContext, handler: Handler) -> Response:
        """
        Log around a handler call.

        Args:
            request: Inbound request
            context: Pipeline context (holds the buffered body)
            handler: Zero-argument coroutine producing the response

        Returns:
            Response: The handler's response, unchanged
        """
        start_time = time.time()
        self.log_request(request, context)

        response = await handler()

        duration_ms = round((time.time() - start_time) * 1000, 2)
        self.log_response(request, response.status_code, duration_ms)
        return response

    def log_request(self, request: Request, context: RequestContext) -> None:
        method = request.method
        path = request.url.path

        log_with_context(
            logger,
            logging.INFO,
            f"[REQUEST] {method} {path}",
            method=method,
            path=path,
            client_host=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent", ""),
        )

        if self.log_request_bodies and is_protected_path(path) and method not in SAFE_METHODS:
            logger.debug("[REQUEST BODY] %s", self._render_body(context))

    def log_response(self, request: Request, status_code: int, duration_ms: float) -> None:
        method = request.method
        path = request.url.path

        log_with_context(
            logger,
            level_for_status(status_code),
            f"[RESPONSE] {method} {path} - Status: {status_code} - Duration: {duration_ms}ms",
            method=method,
            path=path,
            status_code=status_code,
            process_time_ms=duration_ms,
        )

    @staticmethod
    def _render_body(context: RequestContext) -> str:
        if context.has_json_body:
            return json.dumps(redact_sensitive_fields(context.json_body))
        # Non-JSON bodies are never echoed
        return f"<non-JSON body, {len(context.body)} bytes>"
