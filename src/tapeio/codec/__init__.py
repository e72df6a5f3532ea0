"""Codecs: deterministic value <-> bytes pairs used for frame bodies."""

from .base import DEFAULT_CODEC, Codec, Codecs, resolve_codec
from .bincode import (
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
    FixedInt,
)
from .msgpack_codec import MsgPackCodec

Codecs.register(BincodeCodec())
Codecs.register(MsgPackCodec())
