"""
Inbound request security module.

Caller identification, security gating and rate limiting stages of the
request pipeline.
"""

from gateway.security.client_identity import ClientIdentity, IdentityKind
from gateway.security.rate_limiter import RateLimitEntry, RateLimiter, RateLimitStore
from gateway.security.security_gate import SecurityGate, SecurityPolicy

__all__ = [
    "ClientIdentity",
    "IdentityKind",
    "RateLimitEntry",
    "RateLimitStore",
    "RateLimiter",
    "SecurityGate",
    "SecurityPolicy",
]
