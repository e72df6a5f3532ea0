"""File-object views of a byte channel.

These let generic stream consumers (``io.BufferedReader``,
``io.TextIOWrapper``, ``shutil.copyfileobj``) pull from or push to a
channel. Reads always fill the whole buffer, so a read never returns
short; size reads to the data actually expected.
"""

from __future__ import annotations

import io

from .base import ByteChannel


class InputTape(io.RawIOBase):
    """Readable raw stream that pulls every byte from ``channel``."""

    def __init__(self, channel: ByteChannel) -> None:
        super().__init__()
        self._channel = channel

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        for i in range(len(view)):
            view[i] = self._channel.read_byte()
        return len(view)


class OutputTape(io.RawIOBase):
    """Writable raw stream that emits every byte to ``channel``."""

    def __init__(self, channel: ByteChannel) -> None:
        super().__init__()
        self._channel = channel

    def writable(self) -> bool:
        return True

    def write(self, buffer) -> int:
        data = memoryview(buffer).cast("B")
        for byte in data:
            self._channel.write_byte(byte)
        return len(data)
