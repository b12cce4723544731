"""Backoff policies: attempt number -> seconds to wait before that attempt."""

from __future__ import annotations

from .constants import DEFAULT_BACKOFF_SECONDS
from .types import BackoffFunc


def simple_backoff(attempt: int) -> float:
    """Linear backoff: no wait on the first attempt, +0.5s for each one after."""

    return max(0, attempt - 1) * DEFAULT_BACKOFF_SECONDS


def linear_backoff(step_seconds: float) -> BackoffFunc:
    """Return a linear policy with a custom step."""

    step = max(0.0, step_seconds)

    def backoff(attempt: int) -> float:
        return max(0, attempt - 1) * step

    return backoff


def constant_backoff(seconds: float) -> BackoffFunc:
    """Return a policy that always waits the same duration."""

    wait = max(0.0, seconds)

    def backoff(attempt: int) -> float:
        return wait

    return backoff


__all__ = [
    "constant_backoff",
    "linear_backoff",
    "simple_backoff",
]
