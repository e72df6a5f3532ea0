"""A channel and a codec bundled behind one handle."""

from __future__ import annotations

from typing import Any, Callable

from .channel.base import ByteChannel, StreamChannel
from .codec.base import DEFAULT_CODEC, Codec, resolve_codec
from .protocol import framing, lines, raw


class Tape:
    """All tape operations bound to one channel.

    Usage::

        tape = Tape(MemoryChannel(b"4\\n\\x00\\x00\\x00\\x2a"))
        tape.read(int)          # 42
        tape.write([1, 2, 3], list[U8])

    Separate ``Tape`` objects never share state, so tests can run many
    channels side by side. A single channel must not be used from more
    than one thread.
    """

    def __init__(
        self,
        channel: ByteChannel | None = None,
        codec: Codec | str = DEFAULT_CODEC,
    ) -> None:
        self.channel = channel if channel is not None else StreamChannel()
        self.codec = resolve_codec(codec)

    def read_exact(self, n: int) -> bytes:
        return raw.read_exact(self.channel, n)

    def read_until(self, sentinel: int | bytes = raw.NEWLINE) -> bytes:
        return raw.read_until(self.channel, sentinel)

    def write_bytes(self, buf: bytes) -> None:
        raw.write_bytes(self.channel, buf)

    def read_line(self, type_: type | Callable[[str], Any] = str) -> Any:
        return lines.read_line(self.channel, type_)

    def print_line(self, text: str) -> None:
        lines.print_line(self.channel, text)

    def read(self, type_: Any) -> Any:
        return framing.read(self.channel, type_, self.codec)

    def write(self, value: Any, type_: Any = None) -> None:
        framing.write(self.channel, value, type_, self.codec)

    def __repr__(self) -> str:
        return f"Tape(channel={self.channel!r}, codec={self.codec.name!r})"
