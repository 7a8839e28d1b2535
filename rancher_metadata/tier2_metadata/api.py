"""
rancher_metadata.tier2_metadata.api
─────────────────────────────────────
Resource accessors over the query executor. Each accessor builds a path,
runs one query and applies light normalization:

  - ``create_index`` / ``service_index`` numeric strings become ints
  - service containers are grouped by name
  - a not-found answer becomes None (or an empty collection)

Nothing is cached; every call hits the metadata service again.

Usage::

    client = MetadataClient()
    client.get_container_name()                       # own container
    client.get_service_scale_size(service_name="db")  # sibling service in own stack
    for name, container in client.wait_service_containers():
        ...
"""
from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from rancher_metadata.tier0_core.config import MetadataConfig, get_config, load_config
from rancher_metadata.tier0_core.http import Transport
from rancher_metadata.tier0_core.logging import get_logger
from rancher_metadata.tier1_runtime.clock import Clock
from rancher_metadata.tier1_runtime.serialize import Decoder, Structured, json_decode
from rancher_metadata.tier2_metadata import paths
from rancher_metadata.tier2_metadata.query import QueryExecutor
from rancher_metadata.tier2_metadata.watcher import ContainerRecord, ConvergenceWatcher

logger = get_logger(__name__)

INDEX_FIELDS = ("create_index", "service_index")


# ── Normalization helpers ─────────────────────────────────────────────────────

def _coerce_int(value: Any) -> Any:
    """Turn a numeric string into an int; leave anything else untouched."""
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


def normalize_container(record: Any) -> Any:
    """
    Coerce the index fields of a container record to ints.
    Records without those fields, and non-mapping values, pass through.
    """
    if not isinstance(record, dict):
        return record
    for key in INDEX_FIELDS:
        if key in record:
            record[key] = _coerce_int(record[key])
    return record


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    coerced = _coerce_int(value)
    return coerced if isinstance(coerced, int) else None


# ── Client ────────────────────────────────────────────────────────────────────

class MetadataClient:
    """
    Read-only client for the metadata service.

    Args:
        config:     Explicit configuration. Defaults to the environment config.
        transport:  HTTP transport capability (defaults to httpx).
        decoder:    Body decoder (defaults to JSON).
        clock:      Clock used by the convergence watcher between polls.
        **overrides: Config fields (``endpoints``, ``max_attempts``, ...) applied
                     on top of *config*.
    """

    def __init__(
        self,
        config: MetadataConfig | None = None,
        *,
        transport: Transport | None = None,
        decoder: Decoder = json_decode,
        clock: Clock | None = None,
        **overrides: Any,
    ) -> None:
        if overrides:
            base = config.model_dump() if config is not None else {}
            config = load_config(**{**base, **overrides})
        self._executor = QueryExecutor(
            config or get_config(), transport=transport, decoder=decoder
        )
        self._clock = clock

    @property
    def config(self) -> MetadataConfig:
        return self._executor.config

    @property
    def executor(self) -> QueryExecutor:
        return self._executor

    def fetch(self, path: str) -> Any:
        """Query an arbitrary metadata path. None when the service reports not found."""
        return self._executor.fetch(path)

    # ── Services ──────────────────────────────────────────────────────────────

    def get_services(self) -> Any:
        return self.fetch(paths.collection_path("services"))

    def get_service(
        self, service_name: str | None = None, stack_name: str | None = None
    ) -> Any:
        return self.fetch(paths.service_path(service_name, stack_name))

    def get_service_field(
        self,
        field: str,
        service_name: str | None = None,
        stack_name: str | None = None,
    ) -> Any:
        return self.fetch(paths.service_path(service_name, stack_name, field))

    def get_service_scale_size(
        self, service_name: str | None = None, stack_name: str | None = None
    ) -> int:
        """Declared scale of the service; 0 when the service reports none."""
        scale = self.get_service_field("scale", service_name, stack_name)
        size = _optional_int(scale)
        if size is None:
            if scale is not None:
                logger.warning("metadata.scale_not_numeric", scale=scale)
            return 0
        return size

    def get_service_containers(
        self, service_name: str | None = None, stack_name: str | None = None
    ) -> dict[str, ContainerRecord]:
        """Containers of the service keyed by name, in the order the service lists them."""
        result = self._executor.query(
            paths.service_path(service_name, stack_name, "containers")
        )
        if not isinstance(result, Structured) or not isinstance(result.value, list):
            return {}
        containers: dict[str, ContainerRecord] = {}
        for record in result.value:
            if isinstance(record, dict) and "name" in record:
                containers[record["name"]] = normalize_container(record)
        return containers

    def get_service_metadata(
        self, service_name: str | None = None, stack_name: str | None = None
    ) -> Any:
        return self.get_service_field("metadata", service_name, stack_name)

    def get_service_links(
        self, service_name: str | None = None, stack_name: str | None = None
    ) -> Any:
        return self.get_service_field("links", service_name, stack_name)

    def wait_service_containers(
        self, service_name: str | None = None, stack_name: str | None = None
    ) -> Iterator[tuple[str, ContainerRecord]]:
        """
        Yield ``(name, container)`` for each container of the service as it
        appears, until as many containers exist as the service's scale.
        Blocks between polls.
        """
        # validate the identifiers before the first request
        paths.service_path(service_name, stack_name)
        watcher = ConvergenceWatcher(
            scale_fn=lambda: self.get_service_scale_size(service_name, stack_name),
            containers_fn=lambda: self.get_service_containers(service_name, stack_name),
            poll_interval=self.config.poll_interval,
            clock=self._clock,
        )
        return iter(watcher)

    # ── Stacks ────────────────────────────────────────────────────────────────

    def get_stacks(self) -> Any:
        return self.fetch(paths.collection_path("stacks"))

    def get_stack(self, stack_name: str | None = None) -> Any:
        return self.fetch(paths.stack_path(stack_name))

    def get_stack_services(self, stack_name: str | None = None) -> Any:
        return self.fetch(paths.stack_services_path(stack_name))

    # ── Containers ────────────────────────────────────────────────────────────

    def get_containers(self) -> list[ContainerRecord]:
        result = self._executor.query(paths.collection_path("containers"))
        if not isinstance(result, Structured) or not isinstance(result.value, list):
            return []
        return [normalize_container(record) for record in result.value]

    def get_container(self, container_name: str | None = None) -> ContainerRecord | None:
        return normalize_container(self.fetch(paths.container_path(container_name)))

    def get_container_field(self, field: str, container_name: str | None = None) -> Any:
        return self.fetch(paths.container_path(container_name, field))

    def get_container_create_index(self, container_name: str | None = None) -> int | None:
        return _optional_int(self.get_container_field("create_index", container_name))

    def get_container_service_index(self, container_name: str | None = None) -> int | None:
        return _optional_int(self.get_container_field("service_index", container_name))

    def get_container_name(self, container_name: str | None = None) -> Any:
        return self.get_container_field("name", container_name)

    def get_container_service_name(self, container_name: str | None = None) -> Any:
        return self.get_container_field("service_name", container_name)

    def get_container_stack_name(self, container_name: str | None = None) -> Any:
        return self.get_container_field("stack_name", container_name)

    def get_container_hostname(self, container_name: str | None = None) -> Any:
        return self.get_container_field("hostname", container_name)

    def get_container_host_uuid(self, container_name: str | None = None) -> Any:
        return self.get_container_field("host_uuid", container_name)

    def get_container_ip(self, container_name: str | None = None) -> Any:
        """
        IP address of a container. For the own container this is its managed
        network IP when it has one, otherwise the IP of the host it runs on.
        """
        if container_name:
            return self.get_container_field("primary_ip", container_name)
        if self.is_network_managed():
            return self.get_container_field("primary_ip")
        return self.get_host_ip()

    def is_network_managed(self) -> bool:
        """True when the own container sits on the platform-managed network."""
        return self.get_container_create_index() is not None

    # ── Hosts ─────────────────────────────────────────────────────────────────

    def get_hosts(self) -> Any:
        return self.fetch(paths.collection_path("hosts"))

    def get_host(self, host_name: str | None = None) -> Any:
        return self.fetch(paths.host_path(host_name))

    def get_host_field(self, field: str, host_name: str | None = None) -> Any:
        return self.fetch(paths.host_path(host_name, field))

    def get_host_ip(self, host_name: str | None = None) -> Any:
        return self.get_host_field("agent_ip", host_name)

    def get_host_uuid(self, host_name: str | None = None) -> Any:
        return self.get_host_field("uuid", host_name)

    def get_host_name(self, host_name: str | None = None) -> Any:
        return self.get_host_field("name", host_name)


__all__ = ["MetadataClient", "normalize_container", "INDEX_FIELDS"]
