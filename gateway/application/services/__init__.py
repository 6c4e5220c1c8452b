"""Service orchestrators."""

from .customer_validation_service import CustomerValidationService

__all__ = [
    "CustomerValidationService",
]
