"""
rancher_metadata.tier0_core.logging
────────────────────────────────────
Structured logs with levels, context injection and credential scrubbing
for endpoint URLs.

Minimal stack: structlog (stderr JSON or console)
Configure via: RANCHER_METADATA_LOG_LEVEL, RANCHER_METADATA_LOG_FORMAT=json|console
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import structlog


# ── Configuration ─────────────────────────────────────────────────────────────

def _configure_structlog() -> None:
    log_level = os.getenv("RANCHER_METADATA_LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("RANCHER_METADATA_LOG_FORMAT", "json").lower()

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _scrub_url_processor,
    ]

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger("rancher_metadata")
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, log_level, logging.INFO))
    package_logger.propagate = False


# ── URL scrubbing processor ───────────────────────────────────────────────────

_URL_KEYS = frozenset({"url", "endpoint", "endpoints"})


def scrub_url(url: str) -> str:
    """Drop user:password from a URL, keeping host and path."""
    parts = urlsplit(url)
    if parts.username is None and parts.password is None:
        return url
    host = parts.hostname or ""
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    return urlunsplit((parts.scheme, host, parts.path, parts.query, parts.fragment))


def _scrub_url_processor(
    logger: Any, method: str, event_dict: dict
) -> dict:
    """Strip credentials embedded in endpoint URLs before output."""
    for key in _URL_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = scrub_url(value)
        elif isinstance(value, (list, tuple)):
            event_dict[key] = [scrub_url(v) if isinstance(v, str) else v for v in value]
    return event_dict


# ── Public API ────────────────────────────────────────────────────────────────

_configured = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structured logger bound to the given name.

    Usage:
        log = get_logger(__name__)
        log.warning("metadata.endpoint_failed", endpoint=url, error=str(exc))
    """
    global _configured
    if not _configured:
        _configure_structlog()
        _configured = True
    return structlog.get_logger(name or __name__)


def bind_context(**kwargs: Any) -> None:
    """
    Bind key-value pairs to the current thread context.
    All subsequent log calls in this context will include these fields.

    Usage:
        bind_context(service_name="web", stack_name="frontend")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context-bound log fields."""
    structlog.contextvars.clear_contextvars()


__all__ = ["get_logger", "bind_context", "clear_context", "scrub_url"]
