"""
rancher_metadata.tier1_runtime.retry
───────────────────────────────────────
Bounded attempt rounds, backed by Tenacity. A round is one pass over every
endpoint; the caller raises a retryable exception when a whole round fails
and Tenacity starts the next one immediately (no backoff, no jitter).

Usage:
    for attempt in attempt_rounds(max_attempts=3, on=(RoundFailed,)):
        with attempt:
            return try_every_endpoint()
"""
from __future__ import annotations

from typing import Type

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from rancher_metadata.tier0_core.logging import get_logger

logger = get_logger(__name__)


def _log_round(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    if outcome is None or not outcome.failed:
        return
    logger.debug(
        "metadata.round_failed",
        attempt=retry_state.attempt_number,
        error=str(outcome.exception()),
    )


def attempt_rounds(
    max_attempts: int = 3,
    on: tuple[Type[BaseException], ...] = (Exception,),
) -> Retrying:
    """
    Return a Tenacity ``Retrying`` that runs up to *max_attempts* rounds.

    Args:
        max_attempts: Total number of rounds (including the first).
        on:           Exception types that mark a round as failed and retryable.
                      Anything else propagates immediately.

    When every round fails, iterating raises ``tenacity.RetryError`` whose
    ``last_attempt`` holds the final round's exception.
    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_none(),
        retry=retry_if_exception_type(on),
        after=_log_round,
        reraise=False,
    )


__all__ = ["attempt_rounds"]
