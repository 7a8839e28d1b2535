"""
rancher_metadata.tier2_metadata.paths
───────────────────────────────────────
Pure mapping from a resource request to a metadata query path. No I/O.

Omitting an identifier, or passing an empty one, yields the self-relative
form, i.e. the entity the calling process runs in:

    service_path()                            → /self/service
    service_path("db")                        → /self/stack/services/db
    service_path("db", stack_name="app")      → /stacks/app/services/db
    container_path("app_db_1", "primary_ip")  → /containers/app_db_1/primary_ip
"""
from __future__ import annotations

from urllib.parse import quote

from rancher_metadata.tier0_core.errors import InvalidArgumentError

COLLECTIONS = frozenset({"services", "stacks", "containers", "hosts"})


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _with_field(prefix: str, field: str | None) -> str:
    return f"{prefix}/{_segment(field)}" if field else prefix


def service_path(
    service_name: str | None = None,
    stack_name: str | None = None,
    field: str | None = None,
) -> str:
    """
    Path of a service, or of one of its fields.

    Raises InvalidArgumentError when a stack is named but the service is not.
    """
    if not service_name:
        if stack_name:
            raise InvalidArgumentError(
                "Missing service name.",
                detail=f"stack {stack_name!r} given without a service name",
                stack_name=stack_name,
            )
        return _with_field("/self/service", field)
    if not stack_name:
        prefix = f"/self/stack/services/{_segment(service_name)}"
    else:
        prefix = f"/stacks/{_segment(stack_name)}/services/{_segment(service_name)}"
    return _with_field(prefix, field)


def stack_path(stack_name: str | None = None) -> str:
    return f"/stacks/{_segment(stack_name)}" if stack_name else "/self/stack"


def stack_services_path(stack_name: str | None = None) -> str:
    return f"{stack_path(stack_name)}/services"


def container_path(container_name: str | None = None, field: str | None = None) -> str:
    prefix = f"/containers/{_segment(container_name)}" if container_name else "/self/container"
    return _with_field(prefix, field)


def host_path(host_name: str | None = None, field: str | None = None) -> str:
    prefix = f"/hosts/{_segment(host_name)}" if host_name else "/self/host"
    return _with_field(prefix, field)


def collection_path(kind: str) -> str:
    """Path of a top-level collection (services, stacks, containers, hosts)."""
    if kind not in COLLECTIONS:
        raise InvalidArgumentError(
            f"Unknown collection {kind!r}.",
            allowed=sorted(COLLECTIONS),
        )
    return f"/{kind}"


__all__ = [
    "service_path",
    "stack_path",
    "stack_services_path",
    "container_path",
    "host_path",
    "collection_path",
]
