"""
rancher_metadata
────────────────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from rancher_metadata.tier0_core.logging import get_logger
from rancher_metadata.tier0_core.errors import (
    MetadataError,
    InvalidArgumentError,
    ConfigurationError,
    TransportError,
    QueryExhaustedError,
)
from rancher_metadata.tier0_core.config import (
    DEFAULT_ENDPOINT,
    MetadataConfig,
    get_config,
    load_config,
)
from rancher_metadata.tier0_core.http import HttpxTransport, Transport, TransportResponse

from rancher_metadata.tier1_runtime.clock import Clock, ManualClock, get_clock, set_clock
from rancher_metadata.tier1_runtime.serialize import ABSENT, Raw, Structured

from rancher_metadata.tier2_metadata.query import QueryExecutor
from rancher_metadata.tier2_metadata.api import MetadataClient, normalize_container
from rancher_metadata.tier2_metadata.watcher import ConvergenceWatcher, WatchState

__version__ = "0.1.0"
__all__ = [
    # logging
    "get_logger",
    # errors
    "MetadataError", "InvalidArgumentError", "ConfigurationError",
    "TransportError", "QueryExhaustedError",
    # config
    "DEFAULT_ENDPOINT", "MetadataConfig", "get_config", "load_config",
    # http
    "HttpxTransport", "Transport", "TransportResponse",
    # clock
    "Clock", "ManualClock", "get_clock", "set_clock",
    # decoded results
    "ABSENT", "Raw", "Structured",
    # query
    "QueryExecutor",
    # accessors
    "MetadataClient", "normalize_container",
    # watcher
    "ConvergenceWatcher", "WatchState",
]
