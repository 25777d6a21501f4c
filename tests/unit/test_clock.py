"""Tests for the injectable clocks."""

from datetime import datetime, timedelta, timezone

import pytest

from staking_kernel.domain.clock import (
    SECONDS_PER_DAY,
    DeterministicClock,
    SequentialClock,
    SystemClock,
    epoch_seconds,
)

START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestEpochSeconds:
    def test_aware_datetime(self):
        assert epoch_seconds(START) == 1_704_110_400

    def test_naive_is_treated_as_utc(self):
        assert epoch_seconds(START.replace(tzinfo=None)) == 1_704_110_400

    def test_fraction_truncated(self):
        assert epoch_seconds(START + timedelta(microseconds=999_999)) == 1_704_110_400


class TestDeterministicClock:
    def test_default_start(self):
        assert DeterministicClock().now() == START

    def test_stable_until_advanced(self):
        clock = DeterministicClock()
        assert clock.now() == clock.now()

    def test_advance_seconds(self):
        clock = DeterministicClock()
        clock.advance(30)
        assert clock.timestamp() == 1_704_110_430

    def test_advance_days(self):
        clock = DeterministicClock()
        clock.advance_days(90)
        assert clock.timestamp() - epoch_seconds(START) == 90 * SECONDS_PER_DAY

    def test_tick(self):
        clock = DeterministicClock()
        assert clock.tick() == START + timedelta(seconds=1)

    def test_set_time_resets_offset(self):
        clock = DeterministicClock()
        clock.advance(100)
        later = START + timedelta(days=1)
        clock.set_time(later)
        assert clock.now() == later


class TestSequentialClock:
    def test_returns_times_in_order_then_repeats_last(self):
        t1, t2 = START, START + timedelta(hours=1)
        clock = SequentialClock([t1, t2])
        assert clock.now() == t1
        assert clock.now() == t2
        assert clock.now() == t2

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            SequentialClock([])


class TestSystemClock:
    def test_timezone_aware(self):
        assert SystemClock().now().tzinfo is not None
