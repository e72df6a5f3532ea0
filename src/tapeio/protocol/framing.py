"""Length-prefixed message framing over a byte channel.

Frame layout::

    +------------------------+---------+---------------------------+
    | Header                 | NEWLINE | Body                      |
    | ASCII decimal digits   | 0x0A    | exactly <header> bytes    |
    +------------------------+---------+---------------------------+

- Header: body length in decimal, no leading zeros (``0`` for empty)
- Body: codec encoding of the value

Example: the i32 ``42`` frames as ``b"4\\n\\x00\\x00\\x00\\x2a"``.

A failed read leaves the channel wherever it stopped. There is no way to
resynchronize, so callers should treat any framing error as fatal for the
channel.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from ..channel.base import ByteChannel
from ..codec.base import Codec, resolve_codec
from ..errors import HeaderDecodeError, TruncatedInputError
from .raw import NEWLINE, read_exact, read_until, write_bytes

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(rb"[0-9]+")


def build_header(length: int) -> bytes:
    """Render a body length as a frame header, delimiter included."""
    if length < 0:
        raise ValueError(f"Body length must be non-negative, got {length}")
    return str(length).encode("ascii") + bytes([NEWLINE])


def parse_header(header: bytes) -> int:
    """Parse header bytes (delimiter excluded) into a body length.

    Raises:
        HeaderDecodeError: If the bytes are not UTF-8 or not decimal digits.
    """
    try:
        header.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HeaderDecodeError(f"Frame header is not valid UTF-8: {e}") from e
    if not _HEADER_RE.fullmatch(header):
        raise HeaderDecodeError(
            f"Frame header is not a non-negative decimal integer: {header!r}"
        )
    return int(header)


def build_frame(body: bytes) -> bytes:
    """Wrap an encoded body in a frame."""
    return build_header(len(body)) + bytes(body)


def parse_frame(data: bytes) -> tuple[bytes, bytes]:
    """Split the first frame off an in-memory buffer.

    Returns:
        ``(body, rest)`` where ``rest`` is everything after the frame.

    Raises:
        HeaderDecodeError: If the header is malformed or unterminated.
        TruncatedInputError: If the buffer ends before the body does.
    """
    newline = data.find(bytes([NEWLINE]))
    if newline < 0:
        raise HeaderDecodeError(f"Frame header has no terminator: {data[:20]!r}")
    length = parse_header(data[:newline])
    start = newline + 1
    body = data[start : start + length]
    if len(body) < length:
        raise TruncatedInputError(length, len(body))
    return bytes(body), data[start + length :]


def write(
    channel: ByteChannel,
    value: Any,
    type_: Any = None,
    codec: Codec | str | None = None,
) -> None:
    """Encode ``value`` and write it to the channel as one frame.

    Nothing is written if encoding fails.

    Raises:
        EncodeError: If the codec cannot represent ``value``.
    """
    body = resolve_codec(codec).encode(value, type_)
    write_bytes(channel, build_header(len(body)))
    write_bytes(channel, body)
    logger.debug("Wrote frame: %d body bytes", len(body))


def read(channel: ByteChannel, type_: Any, codec: Codec | str | None = None) -> Any:
    """Read one frame from the channel and decode it as ``type_``.

    A malformed header fails before any body byte is consumed.

    Raises:
        HeaderDecodeError: If the header line is malformed.
        TruncatedInputError: If the channel runs out mid-body.
        DecodeError: If the body is not a valid encoding of ``type_``.
    """
    codec_obj = resolve_codec(codec)
    header = read_until(channel, NEWLINE)
    try:
        length = parse_header(header)
    except HeaderDecodeError:
        logger.warning("Bad frame header: %r", header[:40])
        raise
    logger.debug("Reading frame: %d body bytes", length)
    try:
        body = read_exact(channel, length)
    except TruncatedInputError as e:
        logger.warning("%s", e)
        raise
    return codec_obj.decode(body, type_)
