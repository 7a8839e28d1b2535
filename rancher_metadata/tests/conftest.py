"""
rancher_metadata test configuration.

All tests run against in-memory fake transports, no metadata service
required. Override by setting environment variables before running pytest.
"""
from __future__ import annotations

import json
import os
from typing import Any, Callable

import pytest

# ── Test environment ───────────────────────────────────────────────────────
# These must be set before any rancher_metadata modules are imported.

os.environ.setdefault("RANCHER_METADATA_LOG_LEVEL", "WARNING")
os.environ.setdefault("RANCHER_METADATA_LOG_FORMAT", "console")

from rancher_metadata.tier0_core.errors import TransportError  # noqa: E402
from rancher_metadata.tier0_core.http import TransportResponse  # noqa: E402

ENDPOINT_A = "http://meta-a/2015-12-19"
ENDPOINT_B = "http://meta-b/2015-12-19"

NOT_FOUND_BODY = '{"code": 404, "message": "Not found"}'


class FakeTransport:
    """
    In-memory Transport. ``routes`` maps full URLs to a body: a string is sent
    as is, any other value is JSON-encoded, a callable is invoked per request.
    Unknown URLs answer with the service's not-found body. URLs under an
    endpoint listed in ``down`` raise TransportError.
    """

    def __init__(
        self,
        routes: dict[str, Any] | None = None,
        *,
        down: tuple[str, ...] = (),
        status: int = 200,
    ) -> None:
        self.routes = routes or {}
        self.down = down
        self.status = status
        self.calls: list[tuple[str, str, dict[str, str]]] = []

    @property
    def urls(self) -> list[str]:
        return [url for _, url, _ in self.calls]

    def request(self, method: str, url: str, headers: dict[str, str]) -> TransportResponse:
        self.calls.append((method, url, headers))
        for endpoint in self.down:
            if url.startswith(endpoint + "/"):
                raise TransportError(f"Request to {url} failed: connection refused", url=url)
        body = self.routes.get(url, NOT_FOUND_BODY)
        if callable(body):
            body = body()
        if not isinstance(body, str):
            body = json.dumps(body)
        return TransportResponse(status=self.status, body=body)


def sequence(*bodies: Any) -> Callable[[], Any]:
    """Route body that answers with each of *bodies* in turn, then repeats the last."""
    remaining = list(bodies)

    def next_body() -> Any:
        if len(remaining) > 1:
            return remaining.pop(0)
        return remaining[0]

    return next_body


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def reset_module_singletons():
    """
    Reset the cached config and global clock between tests so no state
    bleeds from one test to the next.
    """
    import rancher_metadata.tier0_core.config as _config
    import rancher_metadata.tier1_runtime.clock as _clock

    orig_clock = _clock._clock
    _config._reset_config()

    yield

    _clock._clock = orig_clock
    _config._reset_config()


@pytest.fixture
def config():
    """Two-endpoint config with the default three attempt rounds."""
    from rancher_metadata.tier0_core.config import load_config
    return load_config(endpoints=[ENDPOINT_A, ENDPOINT_B], max_attempts=3)


@pytest.fixture
def manual_clock():
    from rancher_metadata.tier1_runtime.clock import ManualClock
    return ManualClock()
