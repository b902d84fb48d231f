import hashlib
import hmac
import unicodedata
from hmac import compare_digest

DIGEST_SIZE = hashlib.sha1().digest_size


def hmac_sha1(key: bytes, message: bytes) -> bytes:
    """
    Returns the RFC 2104 HMAC-SHA1 of ``message`` under ``key``.

    Keys of any length are accepted; ``hmac`` pads short keys and hashes
    keys longer than the SHA-1 block size.

    :param key: raw secret bytes
    :param message: raw message bytes
    :returns: the 20-byte digest
    """
    return hmac.new(key, message, hashlib.sha1).digest()


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
