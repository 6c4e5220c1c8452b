"""
Exception handlers for route-level errors.

Maps GatewayError and request validation failures raised inside route
handlers to the uniform error body. Pipeline stage failures never reach
these handlers; the pipeline renders them with the same builder.

Dependencies: fastapi, gateway.core
System role: Route error to HTTP response mapping
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from gateway.core.error_response import build_error_response
from gateway.core.exceptions import GatewayError, InvalidInputError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI, include_diagnostics: bool) -> None:
    """
    Register gateway exception handlers on an application.

    Args:
        app: FastAPI application
        include_diagnostics: Include details and stack in error bodies
    """

    async def handle_gateway_error(request: Request, exc: GatewayError):
        logger.error(
            f"[ERROR] {request.method} {request.url.path} - Status: {exc.status_code} - Message: {exc.message}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client_host": request.client.host if request.client else None,
                "status_code": exc.status_code,
            },
        )
        return build_error_response(request, exc, include_diagnostics)

    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg", "")}
            for err in exc.errors()
        ]
        invalid = InvalidInputError("Invalid request data", details={"validationErrors": errors})
        return await handle_gateway_error(request, invalid)

    app.add_exception_handler(GatewayError, handle_gateway_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
