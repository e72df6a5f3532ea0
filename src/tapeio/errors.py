"""Error types raised by the tape protocol.

A framing failure leaves the channel at an unknown position: bytes already
consumed are not put back and no resynchronization is attempted.
"""

from __future__ import annotations


class TapeError(Exception):
    """Base class for all tape protocol errors."""


class EncodeError(TapeError):
    """The codec cannot represent the value."""


class DecodeError(TapeError, ValueError):
    """Bytes are not a valid encoding of the requested type."""


class HeaderDecodeError(DecodeError):
    """A frame header is not UTF-8 or not a non-negative decimal integer."""


class ParseError(TapeError, ValueError):
    """A text line does not match the grammar of the requested type."""


class ChannelExhausted(TapeError, EOFError):
    """The channel has no more input.

    Host channels never signal end of input; only test doubles and
    stream adapters raise this.
    """


class TruncatedInputError(ChannelExhausted):
    """The channel ran out before a frame body was complete."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(
            f"Frame body truncated: expected {expected} bytes, got {received}"
        )
        self.expected = expected
        self.received = received
