from .base32 import decode as decode_base32
from .clock import TimeWindowClock as TimeWindowClock
from .exceptions import DecodeError as DecodeError
from .exceptions import InvalidSecret as InvalidSecret
from .exceptions import TotpKeeperError as TotpKeeperError
from .otp import OTP as OTP
from .totp import TOTP as TOTP
from .totp import generate as generate

__version__ = "0.1.0"


def seconds_remaining(time_step: int = 30) -> int:
    """
    Returns how many seconds the current code for ``time_step`` stays valid.
    """
    return TimeWindowClock(time_step=time_step).seconds_remaining()


__all__ = [
    "OTP",
    "TOTP",
    "DecodeError",
    "InvalidSecret",
    "TimeWindowClock",
    "TotpKeeperError",
    "decode_base32",
    "generate",
    "seconds_remaining",
]
