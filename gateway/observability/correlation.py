"""
Correlation ID context.

Manages correlation ID propagation across async boundaries using contextvars,
and the pipeline stage that assigns one to every request.

Dependencies: contextvars, starlette
System role: Request tracing across service boundaries
"""

from contextvars import ContextVar
import uuid

from starlette.requests import Request

from gateway.core.context import RequestContext

CORRELATION_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set correlation ID in context.

    Args:
        correlation_id: Optional correlation ID (generates new if None)

    Returns:
        str: The correlation ID that was set
    """
    correlation_id = correlation_id or str(uuid.uuid4())
    correlation_id_ctx.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    """
    Get current correlation ID from context.

    Returns:
        str: Current correlation ID
    """
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    """Clear correlation ID from context."""
    correlation_id_ctx.set("")


class CorrelationContext:
    """Pipeline stage assigning the request's correlation ID."""

    async def process(self, request: Request, context: RequestContext) -> None:
        """
        Reuse a caller-supplied ID (X-Correlation-ID, then X-Request-ID) or
        generate one, and publish it to the context, request state and
        response headers.

        Args:
            request: Inbound request
            context: Pipeline context
        """
        incoming = request.headers.get(CORRELATION_HEADER) or request.headers.get(REQUEST_ID_HEADER)
        correlation_id = set_correlation_id(incoming)

        context.correlation_id = correlation_id
        request.state.correlation_id = correlation_id
        context.set_headers({CORRELATION_HEADER: correlation_id})
