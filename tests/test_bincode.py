"""Tests for the big-endian bincode layout."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import pytest

from tapeio.codec import F32, I8, I16, I64, U8, U16, U32, U64, BincodeCodec
from tapeio.errors import DecodeError, EncodeError


class Color(Enum):
    RED = "r"
    GREEN = "g"
    BLUE = "b"


@dataclass
class Header:
    version: U8
    flags: U16
    name: str
    tags: list[str] = field(default_factory=list)
    parent: Optional[int] = None
    color: Color = Color.RED


codec = BincodeCodec()


def test_int_is_i32_big_endian():
    assert codec.encode(42) == b"\x00\x00\x00\x2a"
    assert codec.encode(-1) == b"\xff\xff\xff\xff"


def test_fixed_width_sizes():
    """Each marker type encodes with its own width."""
    assert len(codec.encode(U8(1))) == 1
    assert len(codec.encode(U16(1))) == 2
    assert len(codec.encode(U32(1))) == 4
    assert len(codec.encode(U64(1))) == 8
    assert len(codec.encode(I8(-1))) == 1
    assert len(codec.encode(I16(-1))) == 2
    assert len(codec.encode(I64(-1))) == 8
    assert len(codec.encode(F32(1.5))) == 4
    assert len(codec.encode(1.5)) == 8


def test_u16_byte_order():
    assert codec.encode(U16(0x1234)) == b"\x12\x34"
    assert codec.decode(b"\x12\x34", U16) == 0x1234


def test_i32_out_of_range():
    with pytest.raises(EncodeError):
        codec.encode(2**31)


def test_u8_out_of_range():
    with pytest.raises(EncodeError):
        codec.encode(256, U8)
    with pytest.raises(EncodeError):
        codec.encode(-1, U8)


def test_bool():
    assert codec.encode(True) == b"\x01"
    assert codec.encode(False) == b"\x00"
    assert codec.decode(b"\x01", bool) is True


def test_bool_invalid_byte():
    with pytest.raises(DecodeError):
        codec.decode(b"\x02", bool)


def test_str_length_prefix():
    """Strings carry a u64 byte length before their UTF-8 bytes."""
    assert codec.encode("hé") == b"\x00" * 7 + b"\x03" + "hé".encode("utf-8")
    assert codec.decode(codec.encode("hé"), str) == "hé"


def test_str_invalid_utf8():
    with pytest.raises(DecodeError):
        codec.decode(b"\x00" * 7 + b"\x01\xff", str)


def test_bytes():
    assert codec.encode(b"\x01\x02") == b"\x00" * 7 + b"\x02\x01\x02"
    assert codec.decode(codec.encode(b"\x01\x02"), bytes) == b"\x01\x02"


def test_optional():
    assert codec.encode(None, Optional[U8]) == b"\x00"
    assert codec.encode(7, Optional[U8]) == b"\x01\x07"
    assert codec.decode(b"\x00", Optional[U8]) is None
    assert codec.decode(b"\x01\x07", U8 | None) == 7


def test_optional_bad_tag():
    with pytest.raises(DecodeError):
        codec.decode(b"\x05\x07", Optional[U8])


def test_enum_variant_index():
    """Enums encode their position, not their value."""
    assert codec.encode(Color.BLUE) == b"\x00\x00\x00\x02"
    assert codec.decode(b"\x00\x00\x00\x01", Color) is Color.GREEN


def test_enum_bad_index():
    with pytest.raises(DecodeError):
        codec.decode(b"\x00\x00\x00\x09", Color)


def test_fixed_tuple_has_no_count():
    assert codec.encode((U8(1), U8(2)), tuple[U8, U8]) == b"\x01\x02"
    assert codec.decode(b"\x01\x02", tuple[U8, U8]) == (1, 2)


def test_fixed_tuple_wrong_arity():
    with pytest.raises(EncodeError):
        codec.encode((1, 2, 3), tuple[int, int])


def test_variable_tuple():
    data = codec.encode((1, 2), tuple[U8, ...])
    assert data == b"\x00" * 7 + b"\x02\x01\x02"
    assert codec.decode(data, tuple[U8, ...]) == (1, 2)


def test_dict_pairs():
    data = codec.encode({"a": U8(1)}, dict[str, U8])
    assert data == b"\x00" * 7 + b"\x01" + b"\x00" * 7 + b"\x01a\x01"
    assert codec.decode(data, dict[str, U8]) == {"a": 1}


def test_dataclass_roundtrip():
    header = Header(
        version=U8(2),
        flags=U16(0x0102),
        name="frame",
        tags=["a", "bc"],
        parent=99,
        color=Color.GREEN,
    )
    data = codec.encode(header)
    assert data[:3] == b"\x02\x01\x02"
    assert codec.decode(data, Header) == header


def test_dataclass_same_shape_same_length():
    """Values of the same shape always encode to the same length."""
    a = codec.encode(Header(U8(1), U16(2), "abc"))
    b = codec.encode(Header(U8(9), U16(8), "xyz"))
    assert len(a) == len(b)
    assert codec.encode(Header(U8(1), U16(2), "abc")) == a


def test_dataclass_wrong_instance():
    with pytest.raises(EncodeError):
        codec.encode("not a header", Header)


def test_short_input():
    with pytest.raises(DecodeError):
        codec.decode(b"\x00\x00", int)


def test_trailing_bytes():
    with pytest.raises(DecodeError):
        codec.decode(b"\x00\x00\x00\x01\x00", int)


def test_bare_list_needs_item_type():
    with pytest.raises(DecodeError):
        codec.decode(b"\x00" * 8, list)


def test_unsupported_value():
    with pytest.raises(EncodeError):
        codec.encode(object())


def test_type_mismatch():
    with pytest.raises(EncodeError):
        codec.encode("x", int)
    with pytest.raises(EncodeError):
        codec.encode(1, str)


def test_unsupported_union():
    with pytest.raises(EncodeError):
        codec.encode(1, int | str)
    with pytest.raises(DecodeError):
        codec.decode(b"\x00", int | str)


def test_f32_precision():
    value = codec.decode(codec.encode(F32(0.5)), F32)
    assert value == 0.5
    assert isinstance(value, F32)


def test_marker_repr():
    assert repr(U8(5)) == "U8(5)"


def test_f32_inexact_roundtrip():
    """Values not exact in binary32 survive encode then decode."""
    value = F32(0.1)
    assert codec.decode(codec.encode(value), F32) == value
    assert float(value) != 0.1


def test_f32_rounds_on_construction():
    assert F32(0.1) == F32(F32(0.1))
    assert repr(F32(0.1)) == "F32(0.10000000149011612)"


def test_zero_sized_items_rejected_on_encode():
    with pytest.raises(EncodeError):
        codec.encode([None, None], list[None])
    with pytest.raises(EncodeError):
        codec.encode([None])


def test_empty_zero_sized_list_allowed():
    assert codec.decode(codec.encode([], list[None]), list[None]) == []


def test_forged_count_zero_sized_items():
    """A huge count of zero-sized items fails instead of looping."""
    with pytest.raises(DecodeError):
        codec.decode(b"\xff" * 8, list[None])


def test_forged_count_exceeds_input():
    """A count larger than the remaining input fails up front."""
    with pytest.raises(DecodeError):
        codec.decode(b"\xff" * 8 + b"\x01", list[U8])
    with pytest.raises(DecodeError):
        codec.decode(b"\x00" * 7 + b"\x02" + b"\x01", dict[U8, U8])
