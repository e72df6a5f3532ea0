"""Deterministic big-endian binary codec.

Values are laid out back to back with no padding and no type tags::

    +-------------------+---------------------------------------------+
    | Type              | Encoding                                    |
    +-------------------+---------------------------------------------+
    | bool              | u8, 0 or 1                                  |
    | int               | i32                                         |
    | U8 .. U64         | unsigned, 1/2/4/8 bytes                     |
    | I8 .. I64         | signed two's complement, 1/2/4/8 bytes      |
    | float / F32       | IEEE 754 binary64 / binary32                |
    | str               | u64 byte length + UTF-8                     |
    | bytes             | u64 length + raw octets                     |
    | list[T]           | u64 count + items                           |
    | tuple[T, ...]     | u64 count + items                           |
    | tuple[A, B, ...]  | items, no count                             |
    | dict[K, V]        | u64 count + key, value pairs                |
    | Optional[T]       | u8 tag (0 = None, 1 = Some) + T             |
    | Enum              | u32 member index in definition order        |
    | dataclass         | fields in declaration order                 |
    | None              | nothing                                     |
    +-------------------+---------------------------------------------+

All multi-byte numbers are big-endian. Without an explicit type the type
is inferred from the value, so ``encode(42)`` is the 4-byte i32
``00 00 00 2A``.
"""

from __future__ import annotations

import dataclasses
import logging
import struct
import types
import typing
from enum import Enum
from typing import Any, ClassVar, Union

from ..errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

LENGTH_FORMAT = struct.Struct(">Q")
VARIANT_FORMAT = struct.Struct(">I")
TAG_FORMAT = struct.Struct(">B")
INT_FORMAT = struct.Struct(">i")
FLOAT_FORMAT = struct.Struct(">d")


class FixedInt(int):
    """An int that encodes with a fixed width."""

    FORMAT: ClassVar[struct.Struct]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"


class U8(FixedInt):
    FORMAT = struct.Struct(">B")


class U16(FixedInt):
    FORMAT = struct.Struct(">H")


class U32(FixedInt):
    FORMAT = struct.Struct(">I")


class U64(FixedInt):
    FORMAT = struct.Struct(">Q")


class I8(FixedInt):
    FORMAT = struct.Struct(">b")


class I16(FixedInt):
    FORMAT = struct.Struct(">h")


class I32(FixedInt):
    FORMAT = struct.Struct(">i")


class I64(FixedInt):
    FORMAT = struct.Struct(">q")


class F32(float):
    """A float that encodes as IEEE 754 binary32.

    The value is rounded to binary32 on construction, so what is held is
    exactly what decodes back.
    """

    FORMAT: ClassVar[struct.Struct] = struct.Struct(">f")

    def __new__(cls, value: float = 0.0) -> F32:
        return super().__new__(cls, cls.FORMAT.unpack(cls.FORMAT.pack(value))[0])

    def __repr__(self) -> str:
        return f"F32({float(self)!r})"


def _is_optional(tp: Any) -> bool:
    return typing.get_origin(tp) in (Union, types.UnionType)


def _optional_inner(tp: Any) -> Any:
    args = [a for a in typing.get_args(tp) if a is not type(None)]
    if len(args) != 1 or len(typing.get_args(tp)) != 2:
        raise TypeError(f"Only Optional[T] unions are supported, got {tp!r}")
    return args[0]


def _field_types(cls: type) -> list[tuple[str, Any]]:
    hints = typing.get_type_hints(cls)
    return [(f.name, hints[f.name]) for f in dataclasses.fields(cls) if f.init]


def min_size(tp: Any) -> int:
    """Smallest number of bytes any value of ``tp`` encodes to."""
    if tp is None or tp is type(None):
        return 0
    if tp is bool or _is_optional(tp):
        return TAG_FORMAT.size
    if isinstance(tp, type) and issubclass(tp, (FixedInt, F32)):
        return tp.FORMAT.size
    if tp is int:
        return INT_FORMAT.size
    if tp is float:
        return FLOAT_FORMAT.size
    if isinstance(tp, type) and issubclass(tp, Enum):
        return VARIANT_FORMAT.size
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return sum(min_size(ft) for _, ft in _field_types(tp))
    args = typing.get_args(tp)
    if typing.get_origin(tp) is tuple and args and args[-1] is not Ellipsis:
        return sum(min_size(a) for a in args)
    return LENGTH_FORMAT.size


def infer_type(value: Any) -> Any:
    """Return the type a value encodes as when none is given."""
    if value is None:
        return type(None)
    if isinstance(value, (bool, Enum, FixedInt, F32)):
        return type(value)
    if isinstance(value, int):
        return int
    if isinstance(value, float):
        return float
    if isinstance(value, str):
        return str
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return type(value)
    for container in (list, tuple, dict):
        if isinstance(value, container):
            return container
    raise EncodeError(f"Cannot encode value of type {type(value).__name__}")


class _Writer:
    def __init__(self) -> None:
        self.buf = bytearray()

    def pack(self, fmt: struct.Struct, value: Any) -> None:
        try:
            self.buf += fmt.pack(value)
        except (struct.error, OverflowError) as e:
            raise EncodeError(
                f"Value {value!r} does not fit format {fmt.format!r}: {e}"
            ) from e

    def length(self, n: int) -> None:
        self.pack(LENGTH_FORMAT, n)

    def check_item_size(self, item_type: Any) -> None:
        if min_size(item_type) == 0:
            raise EncodeError(
                f"Sequences of zero-sized {item_type!r} items are not supported"
            )

    def encode(self, value: Any, tp: Any) -> None:
        if tp is None:
            tp = infer_type(value)
        origin = typing.get_origin(tp)
        args = typing.get_args(tp)

        if tp is type(None):
            if value is not None:
                raise EncodeError(f"Expected None, got {value!r}")
        elif _is_optional(tp):
            inner = _optional_inner(tp)
            if value is None:
                self.pack(TAG_FORMAT, 0)
            else:
                self.pack(TAG_FORMAT, 1)
                self.encode(value, inner)
        elif tp is bool:
            if not isinstance(value, bool):
                raise EncodeError(f"Expected bool, got {value!r}")
            self.pack(TAG_FORMAT, int(value))
        elif isinstance(tp, type) and issubclass(tp, (FixedInt, F32)):
            self.pack(tp.FORMAT, value)
        elif tp is int:
            if not isinstance(value, int):
                raise EncodeError(f"Expected int, got {value!r}")
            self.pack(INT_FORMAT, value)
        elif tp is float:
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise EncodeError(f"Expected float, got {value!r}")
            self.pack(FLOAT_FORMAT, value)
        elif tp is str:
            if not isinstance(value, str):
                raise EncodeError(f"Expected str, got {value!r}")
            try:
                data = value.encode("utf-8")
            except UnicodeEncodeError as e:
                raise EncodeError(f"String is not encodable as UTF-8: {e}") from e
            self.length(len(data))
            self.buf += data
        elif tp in (bytes, bytearray):
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise EncodeError(f"Expected bytes, got {value!r}")
            data = bytes(value)
            self.length(len(data))
            self.buf += data
        elif isinstance(tp, type) and issubclass(tp, Enum):
            if not isinstance(value, tp):
                raise EncodeError(f"Expected {tp.__name__}, got {value!r}")
            self.pack(VARIANT_FORMAT, list(tp).index(value))
        elif isinstance(tp, type) and dataclasses.is_dataclass(tp):
            if not isinstance(value, tp):
                raise EncodeError(f"Expected {tp.__name__}, got {value!r}")
            for name, field_type in _field_types(tp):
                self.encode(getattr(value, name), field_type)
        elif tp is list or origin is list:
            if not isinstance(value, (list, tuple)):
                raise EncodeError(f"Expected list, got {value!r}")
            item_type = args[0] if args else None
            if value:
                self.check_item_size(item_type or infer_type(value[0]))
            self.length(len(value))
            for item in value:
                self.encode(item, item_type)
        elif tp is tuple or origin is tuple:
            if not isinstance(value, (list, tuple)):
                raise EncodeError(f"Expected tuple, got {value!r}")
            if len(args) == 2 and args[1] is Ellipsis:
                if value:
                    self.check_item_size(args[0])
                self.length(len(value))
                for item in value:
                    self.encode(item, args[0])
            elif args:
                if len(value) != len(args):
                    raise EncodeError(
                        f"Expected {len(args)}-tuple, got {len(value)} items"
                    )
                for item, item_type in zip(value, args):
                    self.encode(item, item_type)
            else:
                for item in value:
                    self.encode(item, None)
        elif tp is dict or origin is dict:
            if not isinstance(value, dict):
                raise EncodeError(f"Expected dict, got {value!r}")
            key_type, value_type = args if args else (None, None)
            self.length(len(value))
            for key, item in value.items():
                self.encode(key, key_type)
                self.encode(item, value_type)
        else:
            raise EncodeError(f"Unsupported type {tp!r}")


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.pos = 0

    def take(self, n: int) -> bytes:
        end = self.pos + n
        if end > len(self.data):
            raise DecodeError(
                f"Unexpected end of input: need {n} bytes at offset "
                f"{self.pos}, have {len(self.data) - self.pos}"
            )
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def unpack(self, fmt: struct.Struct) -> Any:
        return fmt.unpack(self.take(fmt.size))[0]

    def length(self) -> int:
        return self.unpack(LENGTH_FORMAT)

    def count(self, item_size: int) -> int:
        """Read an item count and check the input can hold that many items."""
        n = self.length()
        if n and item_size == 0:
            raise DecodeError("Sequences of zero-sized items are not supported")
        remaining = len(self.data) - self.pos
        if n * item_size > remaining:
            raise DecodeError(
                f"Count {n} needs at least {n * item_size} bytes, have {remaining}"
            )
        return n

    def decode(self, tp: Any) -> Any:
        origin = typing.get_origin(tp)
        args = typing.get_args(tp)

        if tp is type(None) or tp is None:
            return None
        if _is_optional(tp):
            inner = _optional_inner(tp)
            tag = self.unpack(TAG_FORMAT)
            if tag == 0:
                return None
            if tag == 1:
                return self.decode(inner)
            raise DecodeError(f"Invalid option tag {tag} at offset {self.pos - 1}")
        if tp is bool:
            tag = self.unpack(TAG_FORMAT)
            if tag > 1:
                raise DecodeError(f"Invalid bool value {tag} at offset {self.pos - 1}")
            return tag == 1
        if isinstance(tp, type) and issubclass(tp, (FixedInt, F32)):
            return tp(self.unpack(tp.FORMAT))
        if tp is int:
            return self.unpack(INT_FORMAT)
        if tp is float:
            return self.unpack(FLOAT_FORMAT)
        if tp is str:
            raw = self.take(self.length())
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"String is not valid UTF-8: {e}") from e
        if tp in (bytes, bytearray):
            return tp(self.take(self.length()))
        if isinstance(tp, type) and issubclass(tp, Enum):
            index = self.unpack(VARIANT_FORMAT)
            members = list(tp)
            if index >= len(members):
                raise DecodeError(
                    f"Invalid {tp.__name__} variant index {index} "
                    f"(has {len(members)} members)"
                )
            return members[index]
        if isinstance(tp, type) and dataclasses.is_dataclass(tp):
            kwargs = {name: self.decode(ft) for name, ft in _field_types(tp)}
            return tp(**kwargs)
        if origin is list:
            count = self.count(min_size(args[0]))
            return [self.decode(args[0]) for _ in range(count)]
        if origin is tuple and args:
            if len(args) == 2 and args[1] is Ellipsis:
                count = self.count(min_size(args[0]))
                return tuple(self.decode(args[0]) for _ in range(count))
            return tuple(self.decode(item_type) for item_type in args)
        if origin is dict:
            count = self.count(min_size(args[0]) + min_size(args[1]))
            result = {}
            for _ in range(count):
                key = self.decode(args[0])
                result[key] = self.decode(args[1])
            return result
        if tp in (list, tuple, dict):
            raise DecodeError(
                f"Cannot decode bare {tp.__name__}: item types are required"
            )
        raise DecodeError(f"Unsupported type {tp!r}")


class BincodeCodec:
    """Big-endian, fixed-width integer binary codec."""

    name = "bincode"

    def encode(self, value: Any, type_: Any = None) -> bytes:
        writer = _Writer()
        try:
            writer.encode(value, type_)
        except TypeError as e:
            raise EncodeError(str(e)) from e
        return bytes(writer.buf)

    def decode(self, data: bytes, type_: Any) -> Any:
        reader = _Reader(data)
        try:
            value = reader.decode(type_)
        except TypeError as e:
            raise DecodeError(str(e)) from e
        if reader.pos != len(reader.data):
            raise DecodeError(
                f"{len(reader.data) - reader.pos} trailing bytes after "
                f"decoding {getattr(type_, '__name__', type_)!s}"
            )
        return value
