"""
Observability module.

Provides structured logging, correlation ID tracking, request logging and
the request pipeline middleware.
"""

from gateway.observability.correlation import CorrelationContext, get_correlation_id
from gateway.observability.logger import configure_logging

__all__ = ["CorrelationContext", "configure_logging", "get_correlation_id"]
