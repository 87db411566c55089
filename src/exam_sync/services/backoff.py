"""Exponential backoff applied before re-delivering a failed submission."""

from __future__ import annotations

# Delay before the first retry of a submission with no recorded failures.
BASE_DELAY_MS = 5000


def retry_delay_ms(retry_count: int, base_delay_ms: int = BASE_DELAY_MS) -> int:
    """Return the wait in milliseconds for a submission with `retry_count` failures.

    The delay doubles with each recorded failure: 5000, 10000, 20000, ...
    There is no jitter and no upper bound.

    Raises:
        ValueError: If `retry_count` is negative.
    """
    if retry_count < 0:
        raise ValueError(f"retry_count must be non-negative, got {retry_count}")
    return base_delay_ms * 2**retry_count


def retry_delay_seconds(retry_count: int, base_delay_ms: int = BASE_DELAY_MS) -> float:
    """Return the same delay as `retry_delay_ms` in seconds."""
    return retry_delay_ms(retry_count, base_delay_ms) / 1000.0
