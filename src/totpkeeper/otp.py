from typing import Optional

from . import base32
from .exceptions import DecodeError, InvalidSecret
from .utils import DIGEST_SIZE, hmac_sha1

MAX_COUNTER = 2**64 - 1


def decode_secret(s: str) -> bytes:
    """
    Decodes a base32 secret into HMAC key bytes.

    :param s: secret in base32 format
    :returns: the key, at least one byte long
    :raises InvalidSecret: if ``s`` is not base32 or decodes to nothing
    """
    try:
        key = base32.decode(s)
    except DecodeError as e:
        raise InvalidSecret("Secret is not valid base32: {}".format(e)) from e
    if not key:
        raise InvalidSecret("Secret decodes to an empty key")
    return key


class OTP(object):
    """
    Base class for OTP handlers.
    """

    def __init__(self, s: str, digits: int = 6, name: Optional[str] = None) -> None:
        """
        :param s: secret in base32 format
        :param digits: number of integers in the OTP
        :param name: account name
        """
        if digits < 1 or digits > 10:
            raise ValueError("digits must be between 1 and 10")
        self.digits = digits
        self.secret = s
        self.name = name or "Secret"

    def generate_otp(self, input: int) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
            For TOTP this is the number of time steps since the Unix epoch.
        """
        # Implements RFC 4226

        if input < 0:
            raise ValueError("input must be positive integer")
        if input > MAX_COUNTER:
            raise ValueError("input must fit in 64 bits")
        hmac_hash = bytearray(hmac_sha1(self.byte_secret(), self.int_to_bytestring(input)))
        # Dynamic truncation: the low nibble of the last byte picks which four
        # bytes (offset 0-15) make up the code. The top bit of the first of
        # them is masked off so the value is a non-negative 31-bit integer.
        offset = hmac_hash[DIGEST_SIZE - 1] & 0xF
        code = (
            (hmac_hash[offset] & 0x7F) << 24
            | (hmac_hash[offset + 1] & 0xFF) << 16
            | (hmac_hash[offset + 2] & 0xFF) << 8
            | (hmac_hash[offset + 3] & 0xFF)
        )
        return str(code % 10**self.digits).rjust(self.digits, "0")

    def byte_secret(self) -> bytes:
        return decode_secret(self.secret)

    @staticmethod
    def int_to_bytestring(i: int, padding: int = 8) -> bytes:
        """
        Turns an integer to the OATH specified
        bytestring, which is fed to the HMAC
        along with the secret
        """
        # Big-endian, most significant byte first, left-padded with zeros.
        return i.to_bytes(padding, "big")
