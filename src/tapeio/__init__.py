"""Length-prefixed structured messages over a byte-at-a-time channel.

Public API:
- Tape: a channel and codec bundled behind one handle
- ByteChannel: the single-byte host boundary; MemoryChannel, StreamChannel,
  CallableChannel implement it; InputTape, OutputTape wrap it as streams
- read_exact, read_until, write_bytes: raw transfer
- read_line, print_line: newline-terminated UTF-8 text
- read, write: framed values (decimal length header + codec body)
- build_frame, parse_frame: framing on in-memory buffers
- Codec, Codecs, BincodeCodec, MsgPackCodec: body encodings
"""

from .channel import (
    ByteChannel,
    CallableChannel,
    InputTape,
    MemoryChannel,
    OutputTape,
    StreamChannel,
)
from .codec import (
    F32,
    I8,
    I16,
    I32,
    I64,
    U8,
    U16,
    U32,
    U64,
    BincodeCodec,
    Codec,
    Codecs,
    MsgPackCodec,
)
from .errors import (
    ChannelExhausted,
    DecodeError,
    EncodeError,
    HeaderDecodeError,
    ParseError,
    TapeError,
    TruncatedInputError,
)
from .protocol import (
    NEWLINE,
    build_frame,
    parse_frame,
    print_line,
    read,
    read_exact,
    read_line,
    read_until,
    write,
    write_bytes,
)
from .tape import Tape

__all__ = [
    "Tape",
    "ByteChannel",
    "CallableChannel",
    "InputTape",
    "MemoryChannel",
    "OutputTape",
    "StreamChannel",
    "Codec",
    "Codecs",
    "BincodeCodec",
    "MsgPackCodec",
    "U8",
    "U16",
    "U32",
    "U64",
    "I8",
    "I16",
    "I32",
    "I64",
    "F32",
    "TapeError",
    "EncodeError",
    "DecodeError",
    "HeaderDecodeError",
    "ParseError",
    "ChannelExhausted",
    "TruncatedInputError",
    "NEWLINE",
    "read_exact",
    "read_until",
    "write_bytes",
    "read_line",
    "print_line",
    "read",
    "write",
    "build_frame",
    "parse_frame",
]

__version__ = "0.1.0"
