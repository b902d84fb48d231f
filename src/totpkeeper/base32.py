from .exceptions import DecodeError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_VALUES = {char: index for index, char in enumerate(ALPHABET)}


def normalize(s: str) -> str:
    """
    Upper-cases ``s``, drops trailing ``=`` padding and removes all whitespace.
    """
    return "".join(s.upper().rstrip("=").split())


def decode(s: str) -> bytes:
    """
    Decodes an RFC 4648 base32 string into raw bytes.

    Decoding is permissive about length: the padding is not checked against
    the input length, and trailing bits that do not fill a whole byte are
    dropped instead of zero-extended.

    :param s: base32 text, any case, whitespace allowed
    :returns: decoded bytes, possibly empty
    :raises DecodeError: on the first character outside ``A-Z2-7``
    """
    buffer = 0
    bits = 0
    result = bytearray()
    for position, char in enumerate(normalize(s)):
        value = _VALUES.get(char)
        if value is None:
            raise DecodeError(char, position)
        # Each character contributes 5 bits; once a whole byte is buffered
        # it is moved to the output, leaving at most 7 bits behind.
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            result.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    # Whatever is left in ``buffer`` now is the incomplete tail.
    return bytes(result)
