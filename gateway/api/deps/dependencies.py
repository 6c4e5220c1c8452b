"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: gateway.configs, gateway.application, gateway.boundary
System role: DI container for service injection
"""

from fastapi import Depends, Request

from gateway.application.services.customer_validation_service import CustomerValidationService
from gateway.boundary.netsuite.query_builder import SuiteQLQueryBuilder
from gateway.boundary.netsuite.suiteql_client import SuiteQLClient
from gateway.configs import Settings


class ServiceCache:
    """Container for cached service instances, one per application."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._suiteql_client = None
        self._query_builder = None

    @property
    def suiteql_client(self) -> SuiteQLClient:
        """Get cached SuiteQL client (built on first use, so missing credentials only fail NetSuite calls)."""
        if self._suiteql_client is None:
            self._suiteql_client = SuiteQLClient.from_settings(self.settings.netsuite)
        return self._suiteql_client

    @property
    def query_builder(self) -> SuiteQLQueryBuilder:
        """Get cached query builder."""
        if self._query_builder is None:
            self._query_builder = SuiteQLQueryBuilder(self.settings.netsuite.subsidiary_id)
        return self._query_builder

    async def aclose(self) -> None:
        """Close and clear all cached instances."""
        if self._suiteql_client is not None:
            await self._suiteql_client.aclose()
        self._suiteql_client = None
        self._query_builder = None


def get_service_cache(request: Request) -> ServiceCache:
    """Get the application's service cache."""
    return request.app.state.services


def get_customer_validation_service(
    cache: ServiceCache = Depends(get_service_cache),
) -> CustomerValidationService:
    """
    Get customer validation service instance.

    Args:
        cache: Application service cache (injected via Depends)

    Returns:
        CustomerValidationService: Service with signed SuiteQL client
    """
    return CustomerValidationService(
        client=cache.suiteql_client,
        query_builder=cache.query_builder,
    )
