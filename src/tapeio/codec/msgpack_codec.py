"""MessagePack codec backed by the ``msgpack`` library.

Self-describing alternative to the bincode layout. Arrays unpack as
tuples and maps accept any hashable key; the decoded object is then
checked against ``type_`` and rebuilt from its hints (lists, tuples,
dicts, Optional, Enum, nested dataclasses). A body whose shape does not
match ``type_`` raises ``DecodeError``. With ``type_=None`` the raw
unpacked object is returned.
"""

from __future__ import annotations

import dataclasses
import typing
from enum import Enum
from typing import Any

import msgpack

from ..errors import DecodeError, EncodeError
from .bincode import F32, FixedInt, _field_types, _is_optional, _optional_inner


def _default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Cannot serialize {type(obj).__name__}")


def _mismatch(obj: Any, tp: Any) -> DecodeError:
    name = getattr(tp, "__name__", repr(tp))
    return DecodeError(f"Expected {name}, got {type(obj).__name__}: {obj!r}")


def _convert(obj: Any, tp: Any) -> Any:
    if tp is None or tp is Any:
        return obj
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if tp is type(None):
        if obj is not None:
            raise _mismatch(obj, tp)
        return None
    if _is_optional(tp):
        return None if obj is None else _convert(obj, _optional_inner(tp))
    if tp is bool:
        if not isinstance(obj, bool):
            raise _mismatch(obj, tp)
        return obj
    if isinstance(tp, type) and issubclass(tp, Enum):
        try:
            return tp(obj)
        except ValueError as e:
            raise DecodeError(f"Invalid {tp.__name__} value {obj!r}") from e
    if tp is int or (isinstance(tp, type) and issubclass(tp, FixedInt)):
        if not isinstance(obj, int) or isinstance(obj, bool):
            raise _mismatch(obj, tp)
        return tp(obj)
    if tp is float or (isinstance(tp, type) and issubclass(tp, F32)):
        if not isinstance(obj, (int, float)) or isinstance(obj, bool):
            raise _mismatch(obj, tp)
        return tp(obj)
    if tp in (str, bytes, bytearray):
        if not isinstance(obj, (str if tp is str else bytes)):
            raise _mismatch(obj, tp)
        return tp(obj) if tp is bytearray else obj
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        if not isinstance(obj, dict):
            raise _mismatch(obj, tp)
        fields = dict(_field_types(tp))
        unknown = set(obj) - set(fields)
        if unknown:
            raise DecodeError(f"Unknown fields for {tp.__name__}: {sorted(map(str, unknown))}")
        kwargs = {name: _convert(value, fields[name]) for name, value in obj.items()}
        try:
            return tp(**kwargs)
        except TypeError as e:
            raise DecodeError(f"Cannot build {tp.__name__}: {e}") from e
    if tp is list or origin is list:
        if not isinstance(obj, (list, tuple)):
            raise _mismatch(obj, tp)
        item_type = args[0] if args else None
        return [_convert(item, item_type) for item in obj]
    if tp is tuple or origin is tuple:
        if not isinstance(obj, (list, tuple)):
            raise _mismatch(obj, tp)
        if not args:
            return tuple(obj)
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_convert(item, args[0]) for item in obj)
        if len(obj) != len(args):
            raise DecodeError(f"Expected {len(args)}-tuple, got {len(obj)} items")
        return tuple(_convert(item, item_type) for item, item_type in zip(obj, args))
    if tp is dict or origin is dict:
        if not isinstance(obj, dict):
            raise _mismatch(obj, tp)
        key_type, value_type = args if args else (None, None)
        return {
            _convert(key, key_type): _convert(value, value_type)
            for key, value in obj.items()
        }
    raise DecodeError(f"Unsupported type {tp!r}")


class MsgPackCodec:
    name = "msgpack"

    def encode(self, value: Any, type_: Any = None) -> bytes:
        try:
            return msgpack.packb(value, use_bin_type=True, default=_default)
        except (TypeError, ValueError, OverflowError) as e:
            raise EncodeError(f"msgpack cannot encode {value!r}: {e}") from e

    def decode(self, data: bytes, type_: Any = None) -> Any:
        try:
            obj = msgpack.unpackb(
                data, raw=False, use_list=False, strict_map_key=False
            )
        except (ValueError, TypeError) as e:
            raise DecodeError(f"Invalid msgpack data: {e}") from e
        try:
            return _convert(obj, type_)
        except TypeError as e:
            raise DecodeError(str(e)) from e
