"""Tests for length-prefixed frame building and parsing."""

from dataclasses import dataclass

import pytest

from tapeio.channel import MemoryChannel
from tapeio.codec import U8, U16
from tapeio.errors import DecodeError, EncodeError, HeaderDecodeError, TruncatedInputError
from tapeio.protocol.framing import (
    build_frame,
    build_header,
    parse_frame,
    parse_header,
    read,
    write,
)


@dataclass
class Point:
    x: int
    y: int
    label: str


def test_write_int_wire_bytes():
    """The i32 42 frames as a 4-byte big-endian body."""
    channel = MemoryChannel()
    write(channel, 42)
    assert channel.output == b"4\n\x00\x00\x00\x2a"


def test_read_int():
    assert read(MemoryChannel(b"4\n\x00\x00\x00\x2a"), int) == 42


def test_header_matches_body_length():
    """The decimal header always equals the body length."""
    for value in ["", "abc", [1, 2, 3], Point(1, 2, "p")]:
        channel = MemoryChannel()
        write(channel, value)
        body, rest = parse_frame(channel.output)
        header = channel.output.split(b"\n", 1)[0]
        assert int(header) == len(body)
        assert rest == b""


def test_empty_body_header_is_zero():
    """A zero-length body renders its header as a single 0."""
    channel = MemoryChannel()
    write(channel, None)
    assert channel.output == b"0\n"
    assert read(MemoryChannel(b"0\n"), type(None)) is None


def test_build_header_no_leading_zeros():
    assert build_header(0) == b"0\n"
    assert build_header(10) == b"10\n"
    assert build_header(1234) == b"1234\n"


def test_build_header_negative():
    with pytest.raises(ValueError):
        build_header(-1)


def test_parse_header_accepts_leading_zeros():
    assert parse_header(b"007") == 7


@pytest.mark.parametrize("header", [b"12x", b"", b"-1", b"+4", b" 4", b"4\r", b"\xff"])
def test_parse_header_rejects(header):
    with pytest.raises(HeaderDecodeError):
        parse_header(header)


def test_malformed_header_consumes_only_header_line():
    """A bad header fails before any body byte is read."""
    channel = MemoryChannel(b"12x\nBODYBYTES")
    with pytest.raises(HeaderDecodeError):
        read(channel, int)
    assert channel.remaining == len(b"BODYBYTES")


def test_header_error_is_decode_error():
    assert issubclass(HeaderDecodeError, DecodeError)


def test_truncated_body():
    """A channel that runs dry mid-body reports the shortfall."""
    with pytest.raises(TruncatedInputError) as exc_info:
        read(MemoryChannel(b"4\n\x00\x00"), int)
    assert exc_info.value.expected == 4
    assert exc_info.value.received == 2


def test_body_wrong_length_for_type():
    """A 2-byte body is not an i32."""
    with pytest.raises(DecodeError):
        read(MemoryChannel(b"2\n\x00\x01"), int)


def test_body_trailing_bytes():
    """Extra body bytes beyond the type's shape are rejected."""
    with pytest.raises(DecodeError):
        read(MemoryChannel(b"5\n\x00\x00\x00\x2a\x00"), int)


def test_encode_error_writes_nothing():
    """An unencodable value leaves the channel untouched."""
    channel = MemoryChannel()
    with pytest.raises(EncodeError):
        write(channel, 2**40)
    assert channel.output == b""


def test_consecutive_messages_in_order():
    """The n-th message written is the n-th message read."""
    channel = MemoryChannel()
    write(channel, 1)
    write(channel, "two")
    write(channel, Point(3, 4, "three"))
    reader = MemoryChannel(channel.output)
    assert read(reader, int) == 1
    assert read(reader, str) == "two"
    assert read(reader, Point) == Point(3, 4, "three")
    assert reader.remaining == 0


def test_explicit_type_on_write():
    channel = MemoryChannel()
    write(channel, [1, 2], list[U16])
    assert channel.output == b"12\n" + b"\x00" * 7 + b"\x02" + b"\x00\x01\x00\x02"


def test_msgpack_codec_by_name():
    channel = MemoryChannel()
    write(channel, {"a": 1}, codec="msgpack")
    reader = MemoryChannel(channel.output)
    assert read(reader, dict, codec="msgpack") == {"a": 1}


def test_unknown_codec_name():
    with pytest.raises(ValueError):
        write(MemoryChannel(), 1, codec="nope")


def test_build_frame():
    assert build_frame(b"\x01\x02") == b"2\n\x01\x02"
    assert build_frame(b"") == b"0\n"


def test_parse_frame_returns_rest():
    body, rest = parse_frame(b"3\nabc2\nde")
    assert body == b"abc"
    assert rest == b"2\nde"


def test_parse_frame_unterminated_header():
    with pytest.raises(HeaderDecodeError):
        parse_frame(b"123")


def test_parse_frame_truncated():
    with pytest.raises(TruncatedInputError):
        parse_frame(b"5\nab")


def test_frame_then_read_matches_codec():
    """Framing a codec body and reading it back recovers the value."""
    from tapeio.codec import BincodeCodec

    codec = BincodeCodec()
    value = [U8(1), U8(255)]
    frame = build_frame(codec.encode(value, list[U8]))
    assert read(MemoryChannel(frame), list[U8]) == value
