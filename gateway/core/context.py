"""
Per-request pipeline context.

Carries state produced by one pipeline stage and consumed by later stages or
by the response finalizer: correlation id, caller identity, buffered body and
the headers every outcome must carry.

Dependencies: dataclasses, json
System role: Shared request state for the request pipeline
"""

import json
from dataclasses import dataclass, field
from typing import Any

# Sentinel for a body that is absent or not valid JSON
NO_JSON = object()


@dataclass
class RequestContext:
    """Mutable state for a single request as it moves through the pipeline."""

    correlation_id: str = ""
    client_id: str | None = None
    body: bytes = b""
    json_body: Any = NO_JSON
    body_loaded: bool = False
    response_headers: dict[str, str] = field(default_factory=dict)
    strip_headers: set[str] = field(default_factory=set)

    @property
    def has_json_body(self) -> bool:
        return self.json_body is not NO_JSON

    async def load_body(self, request) -> None:
        """
        Buffer and decode the request body once.

        Starlette caches the body on the request, so the route handler can
        still read it afterwards.

        Args:
            request: Inbound Starlette request
        """
        if self.body_loaded:
            return

        self.body = await request.body()
        self.body_loaded = True
        if not self.body:
            return
        try:
            self.json_body = json.loads(self.body)
        except ValueError:
            self.json_body = NO_JSON

    def set_headers(self, headers: dict[str, str]) -> None:
        """Queue headers to be applied to the eventual response."""
        self.response_headers.update(headers)

    def apply_to(self, response) -> None:
        """
        Apply queued headers to a response.

        Args:
            response: Starlette response about to be returned
        """
        for name in self.strip_headers:
            if name in response.headers:
                del response.headers[name]
        for name, value in self.response_headers.items():
            response.headers[name] = value
