"""Tests for the 30-second window clock."""

from __future__ import annotations

import datetime

import pytest

from totpkeeper.clock import TimeWindowClock, unix_seconds


def frozen(t: float) -> TimeWindowClock:
    return TimeWindowClock(time_step=30, time_source=lambda: t)


def test_seconds_remaining_at_rollover():
    assert frozen(60).seconds_remaining() == 30
    assert frozen(60).is_rollover()


def test_seconds_remaining_last_second():
    assert frozen(59).seconds_remaining() == 1
    assert not frozen(59).is_rollover()


def test_seconds_remaining_range():
    values = {frozen(t).seconds_remaining() for t in range(90, 120)}
    assert values == set(range(1, 31))


def test_fractional_time_truncates():
    clock = frozen(59.9)
    assert clock.unix_time() == 59
    assert clock.counter() == 1
    assert clock.seconds_remaining() == 1


def test_counter():
    assert frozen(0).counter() == 0
    assert frozen(29).counter() == 0
    assert frozen(30).counter() == 1
    assert frozen(1234567890).counter() == 41152263


def test_progress_percent():
    assert frozen(30).progress_percent() == 100.0
    assert frozen(45).progress_percent() == 50.0
    assert frozen(59).progress_percent() == pytest.approx(100 / 30)


def test_explicit_now_overrides_source():
    clock = frozen(0)
    assert clock.counter(now=95) == 3
    assert clock.seconds_remaining(now=95) == 25
    assert clock.is_rollover(now=90)


def test_other_time_step():
    clock = TimeWindowClock(time_step=60, time_source=lambda: 61)
    assert clock.seconds_remaining() == 59
    assert clock.counter() == 1


def test_invalid_time_step():
    with pytest.raises(ValueError):
        TimeWindowClock(time_step=0)


def test_default_source_is_time_time(monkeypatch):
    monkeypatch.setattr("totpkeeper.clock.time.time", lambda: 120.25)
    clock = TimeWindowClock()
    assert clock.unix_time() == 120
    assert clock.seconds_remaining() == 30


def test_unix_seconds_datetime():
    moment = datetime.datetime(2009, 2, 13, 23, 31, 30, tzinfo=datetime.timezone.utc)
    assert unix_seconds(moment) == 1234567890
    assert unix_seconds(1234567890.7) == 1234567890
