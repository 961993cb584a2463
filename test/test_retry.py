"""
Tests para wait_until_ready (espera acotada durante el arranque).
"""

from unittest.mock import Mock, patch

import pytest

from infrastructure.retry import wait_until_ready


@pytest.fixture
def sleep():
    with patch("infrastructure.retry.time.sleep") as mocked:
        yield mocked


def test_succeeds_on_first_attempt(sleep):
    probe = Mock(return_value=None)

    assert wait_until_ready(probe, max_retries=6, retry_delay_ms=1000) is True
    assert probe.call_count == 1
    sleep.assert_not_called()


def test_succeeds_on_third_attempt(sleep):
    probe = Mock(side_effect=[ConnectionError("down"), ConnectionError("down"), None])

    assert wait_until_ready(probe, max_retries=6, retry_delay_ms=1000) is True
    assert probe.call_count == 3
    assert sleep.call_count == 2


def test_gives_up_without_raising(sleep):
    probe = Mock(side_effect=ConnectionError("persistent failure"))

    assert wait_until_ready(probe, max_retries=6, retry_delay_ms=1000) is False
    assert probe.call_count == 6
    assert sleep.call_count == 5
    sleep.assert_called_with(1.0)


def test_any_exception_counts_as_failed_attempt(sleep):
    probe = Mock(side_effect=[ValueError("bad handshake"), None])

    assert wait_until_ready(probe, max_retries=2, retry_delay_ms=10) is True
    assert probe.call_count == 2


@pytest.mark.parametrize("max_retries", [0, 1])
def test_always_makes_at_least_one_attempt(sleep, max_retries):
    probe = Mock(side_effect=OSError("refused"))

    assert wait_until_ready(probe, max_retries=max_retries, retry_delay_ms=10) is False
    assert probe.call_count == 1
    sleep.assert_not_called()
