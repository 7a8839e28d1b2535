"""
rancher_metadata.tier0_core.config
────────────────────────────────────
Typed client configuration with env layering. Reads from .env → environment
variables → keyword overrides. All fields are typed via Pydantic and the
model is frozen once built, so a client never sees its endpoints change.

Configure via: RANCHER_METADATA_ENDPOINTS (comma-separated),
               RANCHER_METADATA_MAX_ATTEMPTS, RANCHER_METADATA_TIMEOUT,
               RANCHER_METADATA_POLL_INTERVAL
"""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any

from pydantic import ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from rancher_metadata.tier0_core.errors import ConfigurationError

DEFAULT_ENDPOINT = "http://rancher-metadata/2015-12-19"


class MetadataConfig(BaseSettings):
    """
    Metadata client configuration. Immutable after construction.
    All env vars are prefixed with RANCHER_METADATA_.
    """

    model_config = SettingsConfigDict(
        env_prefix="RANCHER_METADATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ── Endpoints ─────────────────────────────────────────────────────────────
    endpoints: Annotated[tuple[str, ...], NoDecode] = (DEFAULT_ENDPOINT,)
    max_attempts: int = 3
    timeout: float = 5.0

    # ── Convergence watcher ───────────────────────────────────────────────────
    poll_interval: float = 0.5

    @field_validator("endpoints", mode="before")
    @classmethod
    def split_endpoints(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("endpoints")
    @classmethod
    def validate_endpoints(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("must pass one or more API endpoints")
        return tuple(url.rstrip("/") for url in v)

    @field_validator("max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_attempts must be >= 1, got {v}")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout must be positive, got {v}")
        return v

    @field_validator("poll_interval")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"poll_interval must not be negative, got {v}")
        return v


def load_config(**overrides: Any) -> MetadataConfig:
    """
    Build a MetadataConfig, raising ConfigurationError (not Pydantic's
    ValidationError) when a field is invalid.

    Usage:
        config = load_config(endpoints=["http://10.0.0.5/latest"], max_attempts=5)
    """
    try:
        return MetadataConfig(**overrides)
    except PydanticValidationError as exc:
        fields = {
            ".".join(str(loc) for loc in err["loc"]): err["msg"]
            for err in exc.errors()
        }
        raise ConfigurationError(
            "Invalid metadata client configuration.",
            fields=fields,
            detail=str(exc),
        ) from exc


@lru_cache(maxsize=1)
def get_config() -> MetadataConfig:
    """
    Return the configuration built from the environment. Cached after first call.
    Call _reset_config() in tests to pick up new env vars.
    """
    return load_config()


def _reset_config() -> None:
    """For tests: clear the config cache."""
    get_config.cache_clear()


__all__ = ["DEFAULT_ENDPOINT", "MetadataConfig", "load_config", "get_config"]
