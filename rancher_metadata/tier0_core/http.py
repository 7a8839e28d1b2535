"""
rancher_metadata.tier0_core.http
─────────────────────────────────
HTTP primitives for talking to the metadata service: status constants, the
JSON request headers, and the transport capability the query executor
depends on.

The executor only needs ``Transport.request``; ``HttpxTransport`` is the
default implementation, backed by a synchronous ``httpx.Client``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from rancher_metadata.tier0_core.errors import TransportError


# ── Status code constants ──────────────────────────────────────────────────

class HTTP:
    """Status codes the metadata service uses."""

    OK = 200
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500


JSON_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


# ── Transport capability ───────────────────────────────────────────────────

@dataclass(frozen=True)
class TransportResponse:
    """Whatever came back from one endpoint. Status is informational only."""
    status: int
    body: str


@runtime_checkable
class Transport(Protocol):
    def request(self, method: str, url: str, headers: dict[str, str]) -> TransportResponse:
        """Perform one request. Raise TransportError if no response arrives."""
        ...


class HttpxTransport:
    """
    Blocking transport over a shared ``httpx.Client``.

    Usage::

        transport = HttpxTransport(timeout=5.0)
        resp = transport.request("GET", "http://rancher-metadata/latest/self/host", JSON_HEADERS)
    """

    def __init__(
        self,
        *,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(timeout=timeout)

    def request(self, method: str, url: str, headers: dict[str, str]) -> TransportResponse:
        try:
            response = self._client.request(method, url, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Request to {url} failed: {exc}",
                url=url,
                error_type=type(exc).__name__,
            ) from exc
        return TransportResponse(status=response.status_code, body=response.text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["HTTP", "JSON_HEADERS", "Transport", "TransportResponse", "HttpxTransport"]
