"""
rancher_metadata.tier2_metadata.query
───────────────────────────────────────
Query executor: the only component that performs I/O.

A query runs up to ``max_attempts`` rounds. Each round tries the configured
endpoints strictly in order; the first endpoint that answers at all ends the
query, whatever its HTTP status. Transport failures are logged and skipped.
Only when every endpoint failed on every round does the query raise
QueryExhaustedError.
"""
from __future__ import annotations

from typing import Any

from tenacity import RetryError

from rancher_metadata.tier0_core.config import MetadataConfig, get_config
from rancher_metadata.tier0_core.errors import QueryExhaustedError, TransportError
from rancher_metadata.tier0_core.http import JSON_HEADERS, HttpxTransport, Transport
from rancher_metadata.tier0_core.logging import get_logger
from rancher_metadata.tier1_runtime.retry import attempt_rounds
from rancher_metadata.tier1_runtime.serialize import (
    Decoded,
    Decoder,
    decode_body,
    json_decode,
    unwrap,
)

logger = get_logger(__name__)


class _RoundFailed(Exception):
    """Every endpoint failed at the transport level during one round."""

    def __init__(self, failures: list[tuple[str, str]]) -> None:
        self.failures = failures
        super().__init__(f"{len(failures)} endpoint(s) failed")


class QueryExecutor:
    """
    Bounded-retry, multi-endpoint GET against the metadata service.

    Usage::

        executor = QueryExecutor(load_config(endpoints=["http://10.0.0.5/latest"]))
        executor.fetch("/self/container/name")    # → "web_1"
        executor.query("/self/host/labels")       # → Structured({...}) | Raw(...) | ABSENT
    """

    def __init__(
        self,
        config: MetadataConfig | None = None,
        *,
        transport: Transport | None = None,
        decoder: Decoder = json_decode,
    ) -> None:
        self._config = config or get_config()
        self._transport = transport or HttpxTransport(timeout=self._config.timeout)
        self._decoder = decoder

    @property
    def config(self) -> MetadataConfig:
        return self._config

    def query(self, path: str) -> Decoded:
        """Run the query for *path* and return the tagged decode result."""
        failures: list[tuple[str, str]] = []
        try:
            for attempt in attempt_rounds(self._config.max_attempts, on=(_RoundFailed,)):
                with attempt:
                    return self._round(path, failures)
        except RetryError as exc:
            logger.error(
                "metadata.query_exhausted",
                path=path,
                attempts=self._config.max_attempts,
                endpoints=self._config.endpoints,
            )
            raise QueryExhaustedError(
                path=path,
                attempts=self._config.max_attempts,
                failures=failures,
            ) from exc.last_attempt.exception()
        raise AssertionError("attempt rounds ended without a result")

    def fetch(self, path: str) -> Any:
        """Run the query for *path* and return the plain value, or None if absent."""
        return unwrap(self.query(path))

    def _round(self, path: str, failures: list[tuple[str, str]]) -> Decoded:
        round_failures: list[tuple[str, str]] = []
        for endpoint in self._config.endpoints:
            url = f"{endpoint}{path}"
            try:
                response = self._transport.request("GET", url, dict(JSON_HEADERS))
            except TransportError as exc:
                logger.warning(
                    "metadata.endpoint_failed",
                    endpoint=endpoint,
                    path=path,
                    error=exc.detail,
                )
                round_failures.append((endpoint, exc.detail))
                continue
            logger.debug(
                "metadata.query_answered",
                endpoint=endpoint,
                path=path,
                status=response.status,
            )
            return decode_body(response.body, self._decoder)
        failures.extend(round_failures)
        raise _RoundFailed(round_failures)


__all__ = ["QueryExecutor"]
