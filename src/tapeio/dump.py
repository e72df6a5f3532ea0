"""Inspect captured tape traffic.

Reads a raw byte dump of framed messages and prints one line per frame::

    $ python -m tapeio capture.bin --decode int
    #0 len=4 00 00 00 2a -> 42
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Iterator

from .codec import F32, I8, I16, I32, I64, U8, U16, U32, U64, Codecs
from .codec.base import DEFAULT_CODEC
from .errors import TapeError
from .protocol.framing import parse_frame

logger = logging.getLogger(__name__)

DECODE_TYPES: dict[str, type] = {
    "int": int,
    "float": float,
    "bool": bool,
    "str": str,
    "bytes": bytes,
    "u8": U8,
    "u16": U16,
    "u32": U32,
    "u64": U64,
    "i8": I8,
    "i16": I16,
    "i32": I32,
    "i64": I64,
    "f32": F32,
}


@dataclass
class DumpedFrame:
    """One frame found in a dump."""

    index: int
    body: bytes

    def __repr__(self) -> str:
        return (
            f"#{self.index} len={len(self.body)} "
            f"{self.body.hex(' ') if self.body else '(empty)'}"
        )


def iter_frames(data: bytes) -> Iterator[DumpedFrame]:
    """Yield every frame in ``data`` in order.

    Raises:
        HeaderDecodeError: On a malformed header.
        TruncatedInputError: If the dump ends inside a body.
    """
    index = 0
    rest = bytes(data)
    while rest:
        body, rest = parse_frame(rest)
        yield DumpedFrame(index=index, body=body)
        index += 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tapeio",
        description="List the length-prefixed frames in a byte dump.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="dump file to read (default: stdin)",
    )
    parser.add_argument(
        "--decode",
        choices=sorted(DECODE_TYPES),
        help="decode each body as this type",
    )
    parser.add_argument(
        "--codec",
        default=DEFAULT_CODEC,
        choices=Codecs.names(),
        help="codec used with --decode (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the dump tool; returns the process exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.file:
        with open(args.file, "rb") as f:
            data = f.read()
    else:
        data = sys.stdin.buffer.read()
    logger.debug("Read %d dump bytes", len(data))

    codec = Codecs.get(args.codec)
    count = 0
    try:
        for frame in iter_frames(data):
            line = repr(frame)
            if args.decode:
                value = codec.decode(frame.body, DECODE_TYPES[args.decode])
                line += f" -> {value!r}"
            print(line)
            count += 1
    except TapeError as e:
        logger.error("Malformed dump after %d frames: %s", count, e)
        return 1
    logger.info("%d frames", count)
    return 0
