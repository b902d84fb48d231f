class TotpKeeperError(Exception):
    """
    Base class for errors raised by totpkeeper.
    """


class DecodeError(TotpKeeperError, ValueError):
    """
    Raised when a base32 string contains a character outside ``A-Z2-7``.
    """

    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__("Invalid base32 character {!r} at position {}".format(char, position))


class InvalidSecret(TotpKeeperError, ValueError):
    """
    Raised when a secret cannot be used to generate codes: it does not
    decode as base32, or it decodes to zero bytes.
    """
