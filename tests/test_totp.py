"""Tests for time-based code generation (RFC 6238)."""

from __future__ import annotations

import datetime

import pytest

import totpkeeper
from totpkeeper import TOTP, InvalidSecret, generate

RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"

RFC6238_SHA1 = [
    (59, "94287082"),
    (1111111109, "07081804"),
    (1111111111, "14050471"),
    (1234567890, "89005924"),
    (2000000000, "69279037"),
    (20000000000, "65353130"),
]


@pytest.mark.parametrize("for_time, expected", RFC6238_SHA1)
def test_rfc6238_eight_digits(for_time, expected):
    assert generate(RFC_SECRET, digits=8, for_time=for_time) == expected


@pytest.mark.parametrize("for_time, expected", RFC6238_SHA1)
def test_rfc6238_six_digits(for_time, expected):
    assert generate(RFC_SECRET, for_time=for_time) == expected[-6:]


def test_leading_zeros_preserved():
    assert generate(RFC_SECRET, for_time=1234567890) == "005924"


def test_known_secret_at_59():
    # counter 1
    assert generate("JBSWY3DPEHPK3PXP", time_step=30, digits=6, for_time=59) == "996554"


def test_known_secret_at_zero():
    assert generate("JBSWY3DPEHPK3PXP", for_time=0) == "282760"


def test_deterministic():
    assert generate("JBSWY3DPEHPK3PXP", for_time=1700000000) == generate("JBSWY3DPEHPK3PXP", for_time=1700000000)


@pytest.mark.parametrize("for_time", [0, 29, 59, 1111111109, 1700000015, 2**40])
def test_length_invariant(for_time):
    value = generate("JBSWY3DPEHPK3PXP", for_time=for_time)
    assert len(value) == 6
    assert value.isdigit()


def test_same_window_same_code():
    start = 1700000010  # 1700000010 % 30 == 0
    codes = {generate("JBSWY3DPEHPK3PXP", for_time=start + i) for i in range(30)}
    assert len(codes) == 1


def test_fractional_seconds_truncate():
    assert generate(RFC_SECRET, for_time=59.999) == generate(RFC_SECRET, for_time=59)
    assert generate(RFC_SECRET, for_time=60.0) == TOTP(RFC_SECRET).generate_otp(2)


def test_new_window_uses_new_counter():
    totp = TOTP(RFC_SECRET)
    assert totp.timecode(59) == 1
    assert totp.timecode(60) == 2
    assert totp.at(60) == totp.generate_otp(2)


def test_custom_time_step():
    totp = TOTP(RFC_SECRET, interval=60)
    assert totp.timecode(119) == 1
    assert generate(RFC_SECRET, time_step=60, for_time=119) == "287082"


def test_datetime_input():
    moment = datetime.datetime.fromtimestamp(1111111109, tz=datetime.timezone.utc)
    assert TOTP(RFC_SECRET).at(moment) == "081804"


def test_counter_offset():
    totp = TOTP(RFC_SECRET)
    assert totp.at(59, counter_offset=1) == totp.generate_otp(2)


def test_now_matches_current_window(monkeypatch):
    monkeypatch.setattr("totpkeeper.totp.time.time", lambda: 59.5)
    assert TOTP(RFC_SECRET).now() == "287082"
    assert generate(RFC_SECRET) == "287082"


def test_verify():
    totp = TOTP(RFC_SECRET)
    assert totp.verify("287082", for_time=59)
    assert not totp.verify("287083", for_time=59)
    assert not totp.verify("287082", for_time=60)


def test_verify_valid_window():
    totp = TOTP(RFC_SECRET)
    assert totp.verify("287082", for_time=60, valid_window=1)
    assert not totp.verify("287082", for_time=120, valid_window=1)
    # counter 0 is the earliest window; -1 is skipped
    assert totp.verify("755224", for_time=10, valid_window=1)


def test_invalid_interval():
    with pytest.raises(ValueError):
        TOTP(RFC_SECRET, interval=0)


def test_invalid_secret_fails_loudly():
    with pytest.raises(InvalidSecret):
        generate("1nvalid!", for_time=59)


def test_empty_key_is_invalid_secret():
    with pytest.raises(InvalidSecret):
        generate("A", for_time=59)


def test_clock_matches_interval():
    assert TOTP(RFC_SECRET, interval=45).clock().time_step == 45


def test_package_seconds_remaining(monkeypatch):
    monkeypatch.setattr("totpkeeper.clock.time.time", lambda: 89.0)
    assert totpkeeper.seconds_remaining() == 1
    assert totpkeeper.seconds_remaining(time_step=60) == 31
