"""Exception types raised by the averaging core."""


class InvalidArgumentError(ValueError):
    """Raised for malformed length, target, channel or buffer-set arguments.

    These are caller programming errors: they are raised immediately and are
    never retried.
    """


class WavFormatError(ValueError):
    """Raised when a byte sequence is not a 16-bit PCM WAV container."""
