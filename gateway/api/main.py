"""
FastAPI application with assembled routers.

Initializes the FastAPI app with the request pipeline, CORS, exception
handlers and the NetSuite router, and configures the uvicorn server.

Dependencies: fastapi, uvicorn, gateway.api.routers, gateway.observability
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gateway.api.deps import ServiceCache
from gateway.api.error_handlers import register_exception_handlers
from gateway.configs import Settings, get_settings
from gateway.core.routes import API_PREFIX
from gateway.observability.logger import configure_logging
from gateway.observability.middleware import GatewayPipeline, PipelineMiddleware
from gateway.observability.request_logger import RequestLogger
from gateway.security.rate_limiter import Clock, RateLimiter, RateLimitStore
from gateway.security.security_gate import SecurityGate, SecurityPolicy
from .routers import netsuite_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    logger.info("NetSuite API Gateway starting")

    yield

    # Shutdown
    await app.state.services.aclose()
    logger.info("Service cache cleared")


def build_pipeline(settings: Settings, clock: Clock | None = None) -> GatewayPipeline:
    """
    Build the request pipeline from settings.

    Args:
        settings: Application settings
        clock: Optional clock for the rate limit store (tests)

    Returns:
        GatewayPipeline: Configured pipeline with a fresh rate limit store
    """
    store_kwargs = {"clock": clock} if clock is not None else {}
    store = RateLimitStore(settings.security.rate_limit_window_seconds, **store_kwargs)

    return GatewayPipeline(
        security_gate=SecurityGate(SecurityPolicy.from_settings(settings.security)),
        rate_limiter=RateLimiter(store, settings.security.rate_limit_max),
        request_logger=RequestLogger(settings.observability.log_request_bodies),
        include_diagnostics=not settings.is_production,
    )


def create_app(settings: Settings | None = None, clock: Clock | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        settings: Application settings (defaults to environment settings)
        clock: Optional clock for the rate limit store (tests)

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="NetSuite API Gateway",
        description="API Gateway for NetSuite integrations",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=f"{API_PREFIX}/docs",
        openapi_url=f"{API_PREFIX}/openapi.json",
    )
    app.state.settings = settings
    app.state.services = ServiceCache(settings)

    pipeline = build_pipeline(settings, clock)
    app.state.pipeline = pipeline

    register_exception_handlers(app, include_diagnostics=pipeline.include_diagnostics)

    # Last added is outermost: CORS wraps the pipeline
    app.add_middleware(PipelineMiddleware, pipeline=pipeline)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    )

    app.include_router(netsuite_router, prefix=API_PREFIX)

    return app


def run() -> None:
    """Start the gateway with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.observability.log_format)

    port = settings.port
    logger.info(f"NetSuite API Gateway is running on: http://localhost:{port}")
    logger.info(f"Swagger documentation available at: http://localhost:{port}{API_PREFIX}/docs")

    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=port,
        server_header=False,
    )


if __name__ == "__main__":
    run()
