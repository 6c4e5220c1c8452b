"""
FastAPI middleware for the request pipeline.

GatewayPipeline runs the request stages in a fixed order (correlation,
security, rate limiting) and wraps the route handler with request logging.
The first stage to fail short-circuits: its error becomes the response and
nothing later runs. Headers collected by the stages are applied to every
outcome.

Dependencies: fastapi, starlette, gateway.security, gateway.observability
System role: Request/response control and observability injection
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from gateway.core.context import RequestContext
from gateway.core.error_response import build_error_response
from gateway.core.exceptions import GatewayError
from gateway.observability.correlation import CorrelationContext, clear_correlation_id
from gateway.observability.log_utils import log_exception_with_context
from gateway.observability.request_logger import RequestLogger
from gateway.security.rate_limiter import RateLimiter
from gateway.security.security_gate import SecurityGate

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


class PipelineStage(Protocol):
    """A request check that may reject the request by raising GatewayError."""

    async def process(self, request: Request, context: RequestContext) -> None: ...


class GatewayPipeline:
    """Ordered request stages around a terminal handler."""

    def __init__(
        self,
        security_gate: SecurityGate,
        rate_limiter: RateLimiter,
        request_logger: RequestLogger,
        include_diagnostics: bool = False,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            security_gate: Security stage
            rate_limiter: Rate limiting stage
            request_logger: Logging stage wrapping the handler
            include_diagnostics: Include details and stack in error bodies
        """
        self.stages: tuple[PipelineStage, ...] = (
            CorrelationContext(),
            security_gate,
            rate_limiter,
        )
        self.request_logger = request_logger
        self.include_diagnostics = include_diagnostics

    async def run(self, request: Request, call_next: CallNext) -> Response:
        """
        Process a request through every stage and the handler.

        Args:
            request: Inbound request
            call_next: Terminal handler

        Returns:
            Response: Handler response, or the error response of the failing stage
        """
        context = RequestContext()
        request.state.context = context

        try:
            for stage in self.stages:
                await stage.process(request, context)
        except GatewayError as exc:
            logger.warning(
                f"Request rejected: {exc.message}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": exc.status_code,
                    "stage": type(stage).__name__,
                },
            )
            response = build_error_response(request, exc, self.include_diagnostics)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{request.method} {request.url.path} - Exception in {type(stage).__name__}",
                e,
                method=request.method,
                path=request.url.path,
            )
            response = build_error_response(request, e, self.include_diagnostics)
        else:
            response = await self.request_logger.wrap(
                request,
                context,
                lambda: self._call_handler(request, call_next),
            )

        context.apply_to(response)
        clear_correlation_id()
        return response

    async def _call_handler(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{request.method} {request.url.path} - Exception",
                e,
                method=request.method,
                path=request.url.path,
            )
            return build_error_response(request, e, self.include_diagnostics)


class PipelineMiddleware(BaseHTTPMiddleware):
    """Mounts a GatewayPipeline on the application."""

    def __init__(self, app, pipeline: GatewayPipeline) -> None:
        super().__init__(app)
        self.pipeline = pipeline

    async def dispatch(self, request: Request, call_next):
        """
        Run the request through the gateway pipeline.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response with pipeline headers applied
        """
        return await self.pipeline.run(request, call_next)
