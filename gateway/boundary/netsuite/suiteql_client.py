"""
SuiteQL client for NetSuite.

Executes SuiteQL queries against the REST query service. Every request is
signed with OAuth 1.0a token-based authentication (HMAC-SHA256 with the
account realm) and sent with `Prefer: transient` so NetSuite does not keep
the result set. Failures are classified into gateway errors; nothing is
retried.

Dependencies: httpx, authlib
System role: Outbound NetSuite query execution
"""

import asyncio
import base64
import hashlib
import hmac
import logging
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any

import httpx
from authlib.oauth1 import ClientAuth
from authlib.oauth1.rfc5849.signature import generate_signature_base_string
from authlib.oauth1.rfc5849.util import escape
from pydantic import ValidationError

from gateway.configs.netsuite import NetSuiteSettings
from gateway.core.exceptions import BadGatewayError, ConfigurationError, GatewayTimeoutError
from gateway.models.netsuite import QueryResult

logger = logging.getLogger(__name__)

SIGNATURE_HMAC_SHA256 = "HMAC-SHA256"
QUERY_PATH = "/suiteql"
DEFAULT_TIMEOUT_SECONDS = 30.0


def sign_hmac_sha256(client, request) -> str:
    """
    Sign an OAuth 1.0a request with HMAC-SHA256.

    Same key and base string construction as authlib's HMAC-SHA1 method.

    Args:
        client: authlib ClientAuth holding the secrets
        request: authlib OAuth1Request being signed

    Returns:
        str: Base64 encoded signature
    """
    base_string = generate_signature_base_string(request)
    key = f"{escape(client.client_secret or '')}&{escape(client.token_secret or '')}"
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


ClientAuth.register_signature_method(SIGNATURE_HMAC_SHA256, sign_hmac_sha256)


class NetSuiteAuth(httpx.Auth):
    """
    httpx auth flow adding the OAuth 1.0a Authorization header.

    Only method, URL and oauth_* parameters are signed. The JSON body is sent
    as is, without an oauth_body_hash.
    """

    def __init__(self, signer: ClientAuth) -> None:
        self.signer = signer

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        _, headers, _ = self.signer.sign(request.method, str(request.url), {}, b"")
        request.headers["Authorization"] = headers["Authorization"]
        yield request


@dataclass(frozen=True)
class SigningCredentials:
    """OAuth 1.0a token-based authentication credentials."""

    consumer_key: str = field(repr=False)
    consumer_secret: str = field(repr=False)
    token: str = field(repr=False)
    token_secret: str = field(repr=False)
    realm: str
    signature_method: str = SIGNATURE_HMAC_SHA256

    @classmethod
    def from_settings(cls, settings: NetSuiteSettings) -> "SigningCredentials":
        """
        Build credentials from settings.

        Args:
            settings: NetSuite settings

        Returns:
            SigningCredentials: Credentials

        Raises:
            ConfigurationError: If any credential or the realm is missing
        """
        values = {
            "consumer_key": settings.consumer_key,
            "consumer_secret": settings.consumer_secret,
            "token": settings.access_token,
            "token_secret": settings.token_secret,
        }
        secrets = {name: value.get_secret_value() if value else "" for name, value in values.items()}
        missing = [name for name, value in secrets.items() if not value]
        if not settings.oauth_realm:
            missing.append("realm")
        if missing:
            raise ConfigurationError(
                "NetSuite OAuth parameters are not configured",
                details={"missing": missing},
            )

        return cls(
            realm=settings.oauth_realm,
            signature_method=settings.signature_method,
            **secrets,
        )

    def build_auth(self) -> NetSuiteAuth:
        """Create the httpx auth flow that signs each request."""
        return NetSuiteAuth(
            ClientAuth(
                client_id=self.consumer_key,
                client_secret=self.consumer_secret,
                token=self.token,
                token_secret=self.token_secret,
                signature_method=self.signature_method,
                realm=self.realm,
            )
        )


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class SuiteQLClient:
    """Signed SuiteQL query executor."""

    def __init__(
        self,
        base_url: str,
        credentials: SigningCredentials,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize SuiteQL client.

        Args:
            base_url: SuiteQL REST query service base URL
            credentials: OAuth 1.0a signing credentials
            timeout: Hard deadline per query in seconds
            transport: Optional httpx transport (tests)
        """
        if not base_url:
            raise ConfigurationError("NetSuite base URL is not configured")

        self.base_url = base_url
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Prefer": "transient"},
            timeout=httpx.Timeout(timeout),
            auth=credentials.build_auth(),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: NetSuiteSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "SuiteQLClient":
        """
        Build a client from settings.

        Args:
            settings: NetSuite settings
            transport: Optional httpx transport (tests)

        Returns:
            SuiteQLClient: Configured client

        Raises:
            ConfigurationError: If the base URL or credentials are missing
        """
        return cls(
            base_url=settings.suiteql_base_url,
            credentials=SigningCredentials.from_settings(settings),
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    async def execute(self, query: str) -> QueryResult:
        """
        Execute a SuiteQL query.

        Args:
            query: SuiteQL query text

        Returns:
            QueryResult: Parsed result page

        Raises:
            GatewayTimeoutError: If the deadline passes
            BadGatewayError: On connection failure, non-2xx status or unreadable body
        """
        logger.debug("Executing SuiteQL query", extra={"query": query})

        try:
            response = await asyncio.wait_for(
                self._client.post(QUERY_PATH, json={"q": query}),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error("SuiteQL query timed out", extra={"timeout_seconds": self.timeout})
            raise GatewayTimeoutError() from e
        except httpx.ConnectError as e:
            logger.error("NetSuite connection failed", extra={"error": str(e)})
            raise BadGatewayError(
                "NetSuite service unavailable",
                details={"issue": "Connection refused"},
            ) from e
        except httpx.HTTPStatusError as e:
            upstream = e.response
            body = _response_body(upstream)
            logger.error(
                "NetSuite API Error",
                extra={
                    "status": upstream.status_code,
                    "status_text": upstream.reason_phrase,
                    "data": body,
                    "url": str(upstream.request.url),
                },
            )
            raise BadGatewayError(
                f"Failed to execute NetSuite query: HTTP {upstream.status_code}",
                upstream_status=upstream.status_code,
                upstream_body=body,
            ) from e
        except httpx.HTTPError as e:
            logger.error("SuiteQL query failed", extra={"error": str(e)})
            raise BadGatewayError(f"Failed to execute NetSuite query: {e}") from e

        try:
            result = QueryResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise BadGatewayError(
                "Failed to execute NetSuite query: unreadable response",
                upstream_status=response.status_code,
                upstream_body=response.text,
            ) from e

        logger.debug("SuiteQL query result", extra={"count": result.count})
        return result

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
