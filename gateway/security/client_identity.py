"""
Caller identity derivation.

Derives the key a caller is rate limited under from request metadata.

Dependencies: starlette
System role: Per-caller key for rate limiting
"""

from dataclasses import dataclass
from enum import Enum

from starlette.requests import Request

API_KEY_PREFIX_LENGTH = 10


class IdentityKind(str, Enum):
    """How a caller was identified."""

    API_KEY = "api"
    IP = "ip"


@dataclass(frozen=True)
class ClientIdentity:
    """Stable per-caller key derived from request metadata."""

    kind: IdentityKind
    value: str

    @classmethod
    def from_request(cls, request: Request) -> "ClientIdentity":
        """
        Identify the caller of a request.

        Prefers the supplied API key (X-API-Key, then Authorization), truncated
        so the full credential never becomes a map key or log field. Falls back
        to the client address.

        Args:
            request: Inbound request

        Returns:
            ClientIdentity: Caller identity
        """
        api_key = request.headers.get("x-api-key") or request.headers.get("authorization")
        if api_key:
            return cls(IdentityKind.API_KEY, f"api:{api_key[:API_KEY_PREFIX_LENGTH]}")

        host = request.client.host if request.client else "unknown"
        return cls(IdentityKind.IP, f"ip:{host}")
