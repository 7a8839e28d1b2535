"""
rancher_metadata.tier2_metadata.watcher
─────────────────────────────────────────
Convergence watcher: follows a scaling service until the number of its
containers reaches the declared scale, yielding each container the first time
it shows up.

Two states, POLLING and DONE. The watcher has no iteration cap and no
timeout; a QueryExhaustedError from any poll ends the watch. Events already
yielded stay valid.

Usage::

    watcher = ConvergenceWatcher(
        scale_fn=lambda: client.get_service_scale_size(service_name="db"),
        containers_fn=lambda: client.get_service_containers(service_name="db"),
    )
    for name, container in watcher:
        register_peer(name, container["primary_ip"])
"""
from __future__ import annotations

from collections.abc import Callable, Iterator
from enum import Enum
from typing import Any

from rancher_metadata.tier0_core.logging import get_logger
from rancher_metadata.tier1_runtime.clock import Clock, get_clock

logger = get_logger(__name__)

ContainerRecord = dict[str, Any]

DEFAULT_POLL_INTERVAL = 0.5


class WatchState(str, Enum):
    POLLING = "polling"
    DONE = "done"


class ConvergenceWatcher:
    """
    Iterable over ``(name, container)`` membership events.

    Every ``iter()`` starts from an empty observed set and re-reads the
    target scale, so a watcher object can be iterated more than once.
    """

    def __init__(
        self,
        scale_fn: Callable[[], int],
        containers_fn: Callable[[], dict[str, ContainerRecord]],
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Clock | None = None,
    ) -> None:
        self._scale_fn = scale_fn
        self._containers_fn = containers_fn
        self._poll_interval = poll_interval
        self._clock = clock
        self.state = WatchState.DONE
        self.target_scale = 0
        self.observed_names: set[str] = set()
        self.polls = 0

    def __iter__(self) -> Iterator[tuple[str, ContainerRecord]]:
        clock = self._clock or get_clock()
        self.target_scale = self._scale_fn()
        self.observed_names = set()
        self.polls = 0
        self.state = WatchState.POLLING
        logger.info("metadata.watch_started", target_scale=self.target_scale)

        while self.state is WatchState.POLLING:
            containers = self._containers_fn()
            self.polls += 1
            for name, record in containers.items():
                if name in self.observed_names:
                    continue
                logger.debug("metadata.watch_member_joined", container=name)
                yield name, record
            self.observed_names = set(containers)

            if len(self.observed_names) >= self.target_scale:
                self.state = WatchState.DONE
                logger.info(
                    "metadata.watch_converged",
                    target_scale=self.target_scale,
                    observed=len(self.observed_names),
                    polls=self.polls,
                )
                break

            clock.sleep(self._poll_interval)


__all__ = ["ConvergenceWatcher", "ContainerRecord", "WatchState", "DEFAULT_POLL_INTERVAL"]
