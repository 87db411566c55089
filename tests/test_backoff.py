"""Tests for the retry backoff schedule."""

import pytest

from exam_sync.services.backoff import BASE_DELAY_MS, retry_delay_ms, retry_delay_seconds


@pytest.mark.parametrize(
    ("retry_count", "expected_ms"),
    [(0, 5000), (1, 10000), (2, 20000), (3, 40000), (5, 160000)],
)
def test_delay_doubles_per_recorded_failure(retry_count: int, expected_ms: int) -> None:
    assert retry_delay_ms(retry_count) == expected_ms


def test_default_base_delay_is_five_seconds() -> None:
    assert BASE_DELAY_MS == 5000
    assert retry_delay_seconds(0) == 5.0


def test_custom_base_delay() -> None:
    assert retry_delay_ms(3, base_delay_ms=100) == 800
    assert retry_delay_seconds(1, base_delay_ms=250) == 0.5


def test_no_cap_on_large_retry_counts() -> None:
    assert retry_delay_ms(12) == 5000 * 4096


def test_negative_retry_count_is_rejected() -> None:
    with pytest.raises(ValueError):
        retry_delay_ms(-1)
