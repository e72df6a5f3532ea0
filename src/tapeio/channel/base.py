"""Byte channel implementations.

A channel moves exactly one byte per call in each direction. There is no
buffering, peeking or end-of-stream signal in the contract; callers that
read past the intended end of input block (host channels) or get
``ChannelExhausted`` (test doubles and stream adapters).
"""

from __future__ import annotations

import logging
import sys
from typing import BinaryIO, Callable, Protocol, runtime_checkable

from ..errors import ChannelExhausted

logger = logging.getLogger(__name__)


@runtime_checkable
class ByteChannel(Protocol):
    """The host boundary: fetch one input byte, emit one output byte."""

    def read_byte(self) -> int: ...

    def write_byte(self, byte: int) -> None: ...


class CallableChannel:
    """Adapt a host ``getchar``/``putchar`` pair.

    The host returns a wider unsigned integer from ``getchar``; only its
    low 8 bits are kept.

    Usage::

        lib = ctypes.CDLL(None)
        channel = CallableChannel(lib.getchar, lib.putchar)
    """

    def __init__(
        self,
        getchar: Callable[[], int],
        putchar: Callable[[int], object],
    ) -> None:
        self._getchar = getchar
        self._putchar = putchar

    def read_byte(self) -> int:
        return self._getchar() & 0xFF

    def write_byte(self, byte: int) -> None:
        self._putchar(byte & 0xFF)


class StreamChannel:
    """Channel over binary file objects, stdin/stdout by default.

    The writer is flushed after every byte so each write is visible to the
    host immediately.
    """

    def __init__(
        self,
        reader: BinaryIO | None = None,
        writer: BinaryIO | None = None,
    ) -> None:
        self._reader = reader if reader is not None else sys.stdin.buffer
        self._writer = writer if writer is not None else sys.stdout.buffer

    def read_byte(self) -> int:
        data = self._reader.read(1)
        if not data:
            raise ChannelExhausted("End of input stream")
        return data[0]

    def write_byte(self, byte: int) -> None:
        self._writer.write(bytes([byte]))
        self._writer.flush()


class MemoryChannel:
    """In-memory channel for tests and offline decoding.

    Input is consumed front to back; reading past the end raises
    ``ChannelExhausted`` rather than blocking.
    """

    def __init__(self, data: bytes = b"") -> None:
        self._input = bytearray(data)
        self._pos = 0
        self._output = bytearray()

    def feed(self, data: bytes) -> None:
        """Append bytes to the unread input."""
        self._input.extend(data)

    @property
    def remaining(self) -> int:
        return len(self._input) - self._pos

    @property
    def consumed(self) -> int:
        return self._pos

    @property
    def output(self) -> bytes:
        return bytes(self._output)

    def read_byte(self) -> int:
        if self._pos >= len(self._input):
            raise ChannelExhausted(
                f"Memory channel exhausted after {self._pos} bytes"
            )
        byte = self._input[self._pos]
        self._pos += 1
        return byte

    def write_byte(self, byte: int) -> None:
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"Byte value must be 0-255, got {byte}")
        self._output.append(byte)

    def __repr__(self) -> str:
        return (
            f"MemoryChannel(remaining={self.remaining}, "
            f"written={len(self._output)})"
        )
