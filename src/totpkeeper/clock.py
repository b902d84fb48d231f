import datetime
import time
from typing import Callable, Optional, Union

TimeLike = Union[int, float, datetime.datetime]


def unix_seconds(for_time: TimeLike) -> int:
    """
    Converts a timestamp or a datetime to whole Unix seconds.

    Fractions of a second are truncated, never rounded, so that a code and
    the countdown shown next to it always refer to the same window.
    Naive datetimes are taken as local time.
    """
    if isinstance(for_time, datetime.datetime):
        for_time = for_time.timestamp()
    return int(for_time)


class TimeWindowClock(object):
    """
    Tracks the position of the current time inside the global
    ``time_step``-second grid that TOTP counters are derived from.

    Every method reads the time source itself unless a ``now`` (whole Unix
    seconds, see :meth:`unix_time`) is passed in; callers that need several
    values for the same instant read the time once and pass it along.
    """

    def __init__(self, time_step: int = 30, time_source: Optional[Callable[[], float]] = None) -> None:
        """
        :param time_step: window length in seconds
        :param time_source: zero-argument callable returning Unix seconds,
            defaults to :func:`time.time`
        """
        if time_step < 1:
            raise ValueError("time_step must be a positive number of seconds")
        self.time_step = time_step
        self.time_source = time_source

    def unix_time(self) -> int:
        source = self.time_source or time.time
        return unix_seconds(source())

    def counter(self, now: Optional[int] = None) -> int:
        """
        Returns ``floor(unix_time / time_step)``, the TOTP counter.
        """
        if now is None:
            now = self.unix_time()
        return now // self.time_step

    def seconds_remaining(self, now: Optional[int] = None) -> int:
        """
        Returns the number of seconds left in the current window, in
        ``[1, time_step]``. It equals ``time_step`` exactly on the second the
        window rolls over.
        """
        if now is None:
            now = self.unix_time()
        return self.time_step - (now % self.time_step)

    def is_rollover(self, now: Optional[int] = None) -> bool:
        return self.seconds_remaining(now) == self.time_step

    def progress_percent(self, now: Optional[int] = None) -> float:
        return self.seconds_remaining(now) / self.time_step * 100

    def __repr__(self) -> str:
        return "TimeWindowClock(time_step={})".format(self.time_step)
