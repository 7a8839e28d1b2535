"""
rancher_metadata.tier0_core.errors
───────────────────────────────────
Error taxonomy for the metadata client. Every error carries a stable
machine-readable code, a user-safe message and internal detail.

Not-found is NOT an error here: the metadata service answers missing paths
with a ``{"code": 404}`` body and the client turns that into an absent
result (see ``tier1_runtime.serialize.Absent``).
"""
from __future__ import annotations

from typing import Any


# ── Base error ────────────────────────────────────────────────────────────────

class MetadataError(Exception):
    """
    Base class for all metadata client errors. Every error has:
    - code: stable machine-readable string (snake_case)
    - user_message: safe to surface to end users
    - detail: internal context (endpoint URLs, transport messages)
    """

    code: str = "metadata_error"

    def __init__(
        self,
        user_message: str = "Metadata query failed.",
        *,
        code: str | None = None,
        detail: str | None = None,
        **metadata: Any,
    ) -> None:
        self.code = code or self.__class__.code
        self.user_message = user_message
        self.detail = detail or user_message
        self.metadata = metadata
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.user_message,
            }
        }


# ── Typed error classes ───────────────────────────────────────────────────────

class InvalidArgumentError(MetadataError, ValueError):
    """Caller omitted an identifier the requested path needs."""
    code = "invalid_argument"


class ConfigurationError(MetadataError):
    """Client configuration is unusable (no endpoints, bad attempt count)."""
    code = "configuration_error"

    def __init__(
        self,
        user_message: str = "Invalid metadata client configuration.",
        fields: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.fields = fields or {}
        super().__init__(user_message, **kwargs)

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.fields:
            d["error"]["fields"] = self.fields
        return d


class TransportError(MetadataError):
    """
    A single endpoint could not be reached or did not answer.
    Raised by transports and swallowed by the query executor, which moves
    on to the next endpoint.
    """
    code = "transport_error"

    def __init__(self, user_message: str, *, url: str | None = None, **kwargs: Any) -> None:
        self.url = url
        super().__init__(user_message, **kwargs)


class QueryExhaustedError(MetadataError):
    """Every endpoint failed at the transport level on every attempt round."""
    code = "query_exhausted"

    def __init__(
        self,
        path: str,
        attempts: int,
        failures: list[tuple[str, str]],
    ) -> None:
        self.path = path
        self.attempts = attempts
        self.failures = failures
        super().__init__(
            "Metadata service is unreachable.",
            detail=(
                f"Failed to query metadata path {path!r} "
                f"({attempts} out of {attempts} attempts failed)"
            ),
            path=path,
            attempts=attempts,
        )


__all__ = [
    "MetadataError",
    "InvalidArgumentError",
    "ConfigurationError",
    "TransportError",
    "QueryExhaustedError",
]
