import time
from typing import Optional

from . import utils
from .clock import TimeLike, TimeWindowClock, unix_seconds
from .otp import OTP


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(self, s: str, digits: int = 6, interval: int = 30, name: Optional[str] = None) -> None:
        """
        :param s: secret in base32 format
        :param digits: number of integers in the OTP
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        :param name: account name
        """
        if not isinstance(interval, int) or interval < 1:
            raise ValueError("interval must be a positive integer")
        self.interval = interval
        super().__init__(s=s, digits=digits, name=name)

    def at(self, for_time: TimeLike, counter_offset: int = 0) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        To get the time until the next timecode change (seconds until the current OTP expires), use this instead:

        .. code:: python

            totp = totpkeeper.TOTP(...)
            time_remaining = totp.clock().seconds_remaining()

        :param for_time: the time to generate an OTP for
        :param counter_offset: the amount of ticks to add to the time counter
        :returns: OTP value
        """
        return self.generate_otp(self.timecode(for_time) + counter_offset)

    def now(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return self.at(time.time())

    def verify(self, otp: str, for_time: Optional[TimeLike] = None, valid_window: int = 0) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param for_time: Time to check OTP at (defaults to now)
        :param valid_window: extends the validity to this many counter ticks before and after the current one
        :returns: True if verification succeeded, False otherwise
        """
        if for_time is None:
            for_time = time.time()

        if valid_window:
            for i in range(-valid_window, valid_window + 1):
                if self.timecode(for_time) + i < 0:
                    continue
                if utils.strings_equal(str(otp), str(self.at(for_time, i))):
                    return True
            return False

        return utils.strings_equal(str(otp), str(self.at(for_time)))

    def timecode(self, for_time: TimeLike) -> int:
        """
        Accepts a Unix timestamp, a timezone naive (`for_time.tzinfo is None`)
        or a timezone aware datetime as argument and returns the
        corresponding counter value (timecode).
        """
        return unix_seconds(for_time) // self.interval

    def clock(self) -> TimeWindowClock:
        return TimeWindowClock(time_step=self.interval)


def generate(
    secret: str,
    time_step: int = 30,
    digits: int = 6,
    for_time: Optional[TimeLike] = None,
) -> str:
    """
    Returns the TOTP code for ``secret`` at ``for_time`` (defaults to now).

    :param secret: secret in base32 format
    :param time_step: window length in seconds
    :param digits: code length
    :param for_time: Unix timestamp or datetime to generate the code for
    :raises InvalidSecret: if the secret does not decode to at least one byte
    """
    if for_time is None:
        for_time = time.time()
    return TOTP(secret, digits=digits, interval=time_step).at(for_time)
