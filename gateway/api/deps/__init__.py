"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    get_customer_validation_service,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_customer_validation_service",
    "get_service_cache",
]
