"""
Test suite for the NetSuite HTTP API.

Covers the routes end to end through the request pipeline, with the
validation service mocked.

System role: Verification of routing, pipeline ordering and error mapping
"""

import logging
import uuid
from unittest.mock import AsyncMock

import pytest

from gateway.application.services.customer_validation_service import CustomerValidationService
from gateway.boundary.netsuite.query_builder import SuiteQLQueryBuilder
from gateway.core.exceptions import BadGatewayError, GatewayTimeoutError
from gateway.models.netsuite import ExistenceData, QueryResult, ValidationVerdict

CHECK_URL = "/api/netsuite/customer/check"
CUSTOMER_URL = "/api/netsuite/customer/{email}/exists"
CONTACT_URL = "/api/netsuite/contact/{email}/exists"
HEALTH_URL = "/api/netsuite/health"

SECURITY_HEADERS = {
    "x-content-type-options": "nosniff",
    "x-frame-options": "DENY",
    "x-xss-protection": "1; mode=block",
    "strict-transport-security": "max-age=31536000; includeSubDomains",
    "referrer-policy": "strict-origin-when-cross-origin",
}


def assert_error_body(response, status_code: int, path: str, method: str) -> None:
    body = response.json()
    assert body["statusCode"] == status_code
    assert body["path"] == path
    assert body["method"] == method
    assert body["message"]
    assert body["timestamp"].endswith("Z")


class TestHealth:
    """Health endpoint."""

    def test_health_check(self, client):
        response = client.get(HEALTH_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert "T" in body["timestamp"]

    def test_health_needs_no_api_key(self, client_factory):
        client = client_factory(allowed_api_keys="key-one,key-two")

        response = client.get(HEALTH_URL)

        assert response.status_code == 200

    def test_health_succeeds_when_caller_is_rate_limited(self, client_factory):
        client = client_factory(rate_limit_max=1)
        assert client.get(CUSTOMER_URL.format(email="a@example.com")).status_code == 200
        assert client.get(CUSTOMER_URL.format(email="a@example.com")).status_code == 429

        response = client.get(HEALTH_URL)

        assert response.status_code == 200
        assert "x-ratelimit-limit" not in response.headers


class TestResponseHeaders:
    """Headers every response carries."""

    def test_security_headers_on_success(self, client):
        response = client.get(HEALTH_URL)

        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value
        assert "x-powered-by" not in response.headers

    def test_security_and_correlation_headers_on_rejection(self, client_factory):
        client = client_factory(allowed_api_keys="key-one")

        response = client.get(CUSTOMER_URL.format(email="a@example.com"))

        assert response.status_code == 401
        assert response.headers["x-correlation-id"]
        for name, value in SECURITY_HEADERS.items():
            assert response.headers[name] == value

    def test_generates_correlation_id(self, client):
        response = client.get(HEALTH_URL)

        uuid.UUID(response.headers["x-correlation-id"])

    def test_reuses_correlation_id(self, client):
        response = client.get(HEALTH_URL, headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["x-correlation-id"] == "abc-123"

    def test_falls_back_to_request_id(self, client):
        response = client.get(HEALTH_URL, headers={"X-Request-ID": "req-9"})

        assert response.headers["x-correlation-id"] == "req-9"

    def test_correlation_id_header_wins_over_request_id(self, client):
        response = client.get(
            HEALTH_URL,
            headers={"X-Correlation-ID": "corr-1", "X-Request-ID": "req-1"},
        )

        assert response.headers["x-correlation-id"] == "corr-1"


class TestApiKey:
    """API key gating."""

    def test_missing_key_is_unauthorized(self, client_factory, mock_validation_service):
        client = client_factory(allowed_api_keys="key-one")
        url = CUSTOMER_URL.format(email="a@example.com")

        response = client.get(url)

        assert response.status_code == 401
        assert_error_body(response, 401, url, "GET")
        mock_validation_service.check_customer_exists.assert_not_called()

    def test_unknown_key_is_forbidden(self, client_factory):
        client = client_factory(allowed_api_keys="key-one")

        response = client.get(CUSTOMER_URL.format(email="a@example.com"), headers={"X-API-Key": "nope"})

        assert response.status_code == 403

    def test_allowed_key_passes(self, client_factory):
        client = client_factory(allowed_api_keys="key-one, key-two")

        response = client.get(CUSTOMER_URL.format(email="a@example.com"), headers={"X-API-Key": "key-two"})

        assert response.status_code == 200

    def test_no_allow_list_disables_check(self, client):
        response = client.get(CUSTOMER_URL.format(email="a@example.com"))

        assert response.status_code == 200


class TestRequestLimits:
    """Payload size, content type and injection scan."""

    def test_payload_too_large(self, client_factory, mock_validation_service):
        client = client_factory(max_body_size=16)

        response = client.post(CHECK_URL, json={"companyEmail": "someone@example.com"})

        assert response.status_code == 413
        mock_validation_service.validate.assert_not_called()

    def test_non_json_content_type_rejected(self, client):
        response = client.post(
            CHECK_URL,
            content=b"companyEmail=a@example.com",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 415

    def test_injection_in_query_rejected(self, client, mock_validation_service):
        response = client.get(
            CUSTOMER_URL.format(email="a@example.com"),
            params={"filter": "1; DROP TABLE customer"},
        )

        assert response.status_code == 400
        mock_validation_service.check_customer_exists.assert_not_called()

    def test_quote_in_body_rejected(self, client, mock_validation_service):
        response = client.post(CHECK_URL, json={"companyEmail": "o'brien@example.com"})

        assert response.status_code == 400
        mock_validation_service.validate.assert_not_called()

    def test_deeply_nested_body_gets_uniform_error(self, client, mock_validation_service):
        response = client.post(
            CHECK_URL,
            content=b"[" * 100_000 + b"]" * 100_000,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.headers["x-correlation-id"]
        assert response.headers["x-frame-options"] == "DENY"
        assert_error_body(response, 500, CHECK_URL, "POST")
        mock_validation_service.validate.assert_not_called()


class TestRateLimit:
    """Fixed window rate limiting through the API."""

    def test_quota_counts_down_then_rejects(self, client_factory):
        client = client_factory(rate_limit_max=3)
        url = CUSTOMER_URL.format(email="a@example.com")

        remaining = []
        for _ in range(3):
            response = client.get(url)
            assert response.status_code == 200
            assert response.headers["x-ratelimit-limit"] == "3"
            remaining.append(int(response.headers["x-ratelimit-remaining"]))

        assert remaining == [2, 1, 0]

        rejected = client.get(url)
        assert rejected.status_code == 429
        assert rejected.headers["x-ratelimit-remaining"] == "0"
        assert int(rejected.headers["retry-after"]) > 0
        assert rejected.headers["x-ratelimit-reset"]
        assert_error_body(rejected, 429, url, "GET")

    def test_new_window_after_reset(self, client_factory, clock):
        client = client_factory(rate_limit_max=2, rate_limit_window_ms=60_000)
        url = CUSTOMER_URL.format(email="a@example.com")
        client.get(url)
        client.get(url)
        assert client.get(url).status_code == 429

        clock.advance(61)
        response = client.get(url)

        assert response.status_code == 200
        assert response.headers["x-ratelimit-remaining"] == "1"

    def test_callers_limited_independently(self, client_factory):
        client = client_factory(rate_limit_max=1)
        url = CUSTOMER_URL.format(email="a@example.com")

        assert client.get(url, headers={"Authorization": "Bearer first-caller"}).status_code == 200
        assert client.get(url, headers={"Authorization": "Bearer other-caller"}).status_code == 200
        assert client.get(url, headers={"Authorization": "Bearer first-caller"}).status_code == 429


class TestCustomerCheck:
    """POST /customer/check."""

    def test_no_match(self, client, mock_validation_service):
        mock_validation_service.validate.return_value = ValidationVerdict(
            success=True,
            message="No existing customer or contact found",
            data=ExistenceData(customer_exists=False, contact_exists=False),
        )

        response = client.post(CHECK_URL, json={"companyEmail": "new@example.com"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "No existing customer or contact found",
            "data": {"customerExists": False, "contactExists": False},
        }
        mock_validation_service.validate.assert_awaited_once_with("new@example.com")

    def test_existing_customer_is_still_200(self, client, mock_validation_service):
        mock_validation_service.validate.return_value = ValidationVerdict(
            success=False,
            error="Customer already exists in NetSuite",
            data=ExistenceData(customer_exists=True, contact_exists=True),
        )

        response = client.post(CHECK_URL, json={"companyEmail": "old@example.com"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["data"]["customerExists"] is True

    def test_upstream_failure_uses_verdict_status(self, client, mock_validation_service):
        mock_validation_service.validate.return_value = ValidationVerdict(
            success=False,
            error="An error occurred while querying NetSuite: NetSuite service unavailable",
            status_code=502,
        )

        response = client.post(CHECK_URL, json={"companyEmail": "a@example.com"})

        assert response.status_code == 502
        assert response.json()["success"] is False
        assert "statusCode" not in response.json()

    @pytest.mark.parametrize(
        "payload",
        [
            {"companyEmail": "not-an-email"},
            {"companyEmail": ""},
            {},
            {"companyEmail": "a@example.com", "extra": "field"},
            ["a@example.com"],
        ],
    )
    def test_invalid_body_rejected_before_validation(self, client, mock_validation_service, payload):
        response = client.post(CHECK_URL, json=payload)

        assert response.status_code == 400
        assert_error_body(response, 400, CHECK_URL, "POST")
        mock_validation_service.validate.assert_not_called()

    def test_password_never_logged(self, client, caplog):
        caplog.set_level(logging.DEBUG)

        client.post(CHECK_URL, json={"companyEmail": "a@example.com", "password": "hunter2"})

        assert "hunter2" not in caplog.text
        assert "***MASKED***" in caplog.text


class TestExistenceLookups:
    """GET /customer/{email}/exists and /contact/{email}/exists."""

    def test_customer_exists(self, client, mock_validation_service):
        mock_validation_service.check_customer_exists.return_value = True

        response = client.get(CUSTOMER_URL.format(email="a@example.com"))

        assert response.status_code == 200
        assert response.json() == {"exists": True, "email": "a@example.com"}

    def test_contact_exists(self, client, mock_validation_service):
        mock_validation_service.check_contact_exists.return_value = False

        response = client.get(CONTACT_URL.format(email="b@example.com"))

        assert response.status_code == 200
        assert response.json() == {"exists": False, "email": "b@example.com"}

    @pytest.mark.parametrize("url", [CUSTOMER_URL, CONTACT_URL])
    def test_invalid_email_rejected_before_outbound_call(self, client_factory, url):
        suiteql_client = AsyncMock()
        suiteql_client.execute.return_value = QueryResult(count=1)
        service = CustomerValidationService(suiteql_client, SuiteQLQueryBuilder(subsidiary_id=2))
        client = client_factory(service=service)

        response = client.get(url.format(email="not-an-email"))

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid email format"
        suiteql_client.execute.assert_not_called()

    def test_upstream_bad_gateway(self, client, mock_validation_service):
        mock_validation_service.check_customer_exists.side_effect = BadGatewayError(
            "NetSuite service unavailable"
        )

        response = client.get(CUSTOMER_URL.format(email="a@example.com"))

        assert response.status_code == 502
        assert response.json()["message"] == "NetSuite service unavailable"

    def test_upstream_timeout(self, client, mock_validation_service):
        mock_validation_service.check_contact_exists.side_effect = GatewayTimeoutError()

        response = client.get(CONTACT_URL.format(email="a@example.com"))

        assert response.status_code == 504

    def test_unexpected_error_is_500_with_headers(self, client, mock_validation_service):
        mock_validation_service.check_customer_exists.side_effect = RuntimeError("boom")
        url = CUSTOMER_URL.format(email="a@example.com")

        response = client.get(url)

        assert response.status_code == 500
        assert_error_body(response, 500, url, "GET")
        assert response.headers["x-correlation-id"]
        assert response.headers["x-ratelimit-limit"] == "100"


class TestDiagnostics:
    """Verbose error detail depends on environment."""

    def test_details_outside_production(self, client_factory, mock_validation_service):
        mock_validation_service.check_customer_exists.side_effect = BadGatewayError(
            "Failed to execute NetSuite query: HTTP 401",
            upstream_status=401,
            upstream_body={"title": "Unauthorized"},
        )
        client = client_factory(environment="development")

        body = client.get(CUSTOMER_URL.format(email="a@example.com")).json()

        assert body["details"]["upstreamStatus"] == 401
        assert "stack" in body

    def test_no_details_in_production(self, client_factory, mock_validation_service):
        mock_validation_service.check_customer_exists.side_effect = BadGatewayError(
            "Failed to execute NetSuite query: HTTP 401",
            upstream_status=401,
            upstream_body={"title": "Unauthorized"},
        )
        client = client_factory(environment="production")

        body = client.get(CUSTOMER_URL.format(email="a@example.com")).json()

        assert "details" not in body
        assert "stack" not in body
