"""
Shared test fixtures and configuration for entire test suite.

Provides: Settings factories, a controllable clock, raw Starlette request
builders, service mocks and an app/client factory.
Dependencies: pytest, fastapi, starlette
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from gateway.api.deps import get_customer_validation_service
from gateway.api.main import create_app
from gateway.configs import Settings
from gateway.configs.netsuite import NetSuiteSettings
from gateway.configs.observability import ObservabilitySettings
from gateway.configs.security import SecuritySettings


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_settings(environment: str = "test", **security) -> Settings:
    """Settings isolated from the process environment for NetSuite credentials."""
    return Settings(
        environment=environment,
        netsuite=NetSuiteSettings(
            suiteql_base_url="https://1234567.suitetalk.api.netsuite.com/services/rest/query/v1",
            consumer_key="consumer-key",
            consumer_secret="consumer-secret",
            access_token="token-id",
            token_secret="token-secret",
            oauth_realm="1234567",
            subsidiary_id=2,
        ),
        security=SecuritySettings(**security),
        observability=ObservabilitySettings(),
    )


@pytest.fixture
def clock() -> FakeClock:
    """Provide controllable clock."""
    return FakeClock()


@pytest.fixture
def make_request():
    """
    Build raw Starlette requests for stage-level tests.

    Returns:
        Callable: Factory taking method, path, headers, body and query string
    """

    def _make(
        method: str = "GET",
        path: str = "/api/netsuite/health",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        query_string: bytes = b"",
        client: tuple[str, int] = ("10.0.0.1", 50000),
    ) -> Request:
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "server": ("testserver", 80),
            "root_path": "",
            "path": path,
            "raw_path": path.encode(),
            "query_string": query_string,
            "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
            "client": client,
        }

        async def receive():
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def mock_validation_service() -> AsyncMock:
    """
    Create mock CustomerValidationService for testing.

    Returns:
        AsyncMock: Mocked service with async methods
    """
    service = AsyncMock()
    service.check_customer_exists = AsyncMock(return_value=False)
    service.check_contact_exists = AsyncMock(return_value=False)
    service.validate = AsyncMock()
    return service


@pytest.fixture
def client_factory(clock, mock_validation_service):
    """
    Create TestClients over fresh apps (fresh rate limit store each time).

    Returns:
        Callable: Factory taking Settings overrides, returning TestClient
    """

    def _make(environment: str = "test", service=None, **security) -> TestClient:
        app = create_app(build_settings(environment, **security), clock=clock)
        override = service if service is not None else mock_validation_service
        app.dependency_overrides[get_customer_validation_service] = lambda: override
        return TestClient(app)

    return _make


@pytest.fixture
def client(client_factory) -> TestClient:
    """TestClient with default security settings."""
    return client_factory()
