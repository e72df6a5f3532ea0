"""Fixed-length and delimiter-terminated byte transfer.

Every function issues one channel call per byte, in order. Nothing is
buffered, so a read that fails part way leaves the consumed bytes gone.
"""

from __future__ import annotations

from typing import Iterable

from ..channel.base import ByteChannel
from ..errors import ChannelExhausted, TruncatedInputError

NEWLINE = 0x0A


def _sentinel_value(sentinel: int | bytes) -> int:
    if isinstance(sentinel, (bytes, bytearray)):
        if len(sentinel) != 1:
            raise ValueError(f"Sentinel must be a single byte, got {sentinel!r}")
        return sentinel[0]
    if not 0 <= sentinel <= 0xFF:
        raise ValueError(f"Sentinel must be 0-255, got {sentinel}")
    return sentinel


def read_exact(channel: ByteChannel, n: int) -> bytes:
    """Read exactly ``n`` bytes from the channel.

    Raises:
        ValueError: If ``n`` is negative.
        TruncatedInputError: If the channel reports exhaustion first.
    """
    if n < 0:
        raise ValueError(f"Byte count must be non-negative, got {n}")
    buf = bytearray()
    try:
        for _ in range(n):
            buf.append(channel.read_byte())
    except ChannelExhausted as e:
        raise TruncatedInputError(n, len(buf)) from e
    return bytes(buf)


def read_until(channel: ByteChannel, sentinel: int | bytes = NEWLINE) -> bytes:
    """Read bytes up to and including ``sentinel``; return them without it.

    Never returns if the sentinel never arrives on a blocking channel.
    """
    stop = _sentinel_value(sentinel)
    buf = bytearray()
    while True:
        byte = channel.read_byte()
        if byte == stop:
            break
        buf.append(byte)
    return bytes(buf)


def write_bytes(channel: ByteChannel, buf: Iterable[int]) -> None:
    """Emit every byte of ``buf`` in order."""
    for byte in bytes(buf):
        channel.write_byte(byte)
