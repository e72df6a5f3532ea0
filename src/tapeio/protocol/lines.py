"""Newline-terminated UTF-8 text over the channel."""

from __future__ import annotations

import re
import struct
from typing import Any, Callable

from ..channel.base import ByteChannel
from ..codec.bincode import FixedInt
from ..errors import DecodeError, ParseError
from .raw import NEWLINE, read_until, write_bytes

_INT_RE = re.compile(r"[+-]?[0-9]+")
_ASCII_WHITESPACE = " \t\n\r\x0b\x0c"


def _parse_int(text: str, type_: type) -> int:
    if not _INT_RE.fullmatch(text):
        raise ParseError(f"Invalid integer literal: {text!r}")
    value = int(text)
    if issubclass(type_, FixedInt):
        try:
            type_.FORMAT.pack(value)
        except struct.error as e:
            raise ParseError(
                f"{value} is out of range for {type_.__name__}"
            ) from e
        return type_(value)
    if type_ is not int:
        try:
            return type_(value)
        except ValueError as e:
            raise ParseError(f"{value} is not a valid {type_.__name__}") from e
    return value


def _parse_float(text: str, type_: type) -> float:
    if not text or "_" in text:
        raise ParseError(f"Invalid float literal: {text!r}")
    try:
        return type_(text)
    except ValueError as e:
        raise ParseError(f"Invalid float literal: {text!r}") from e


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ParseError(f"Invalid bool literal: {text!r} (expected true or false)")


def parse_text(text: str, type_: type | Callable[[str], Any] = str) -> Any:
    """Convert trimmed line text to ``type_``."""
    if type_ is str:
        return text
    if type_ is bool:
        return _parse_bool(text)
    if isinstance(type_, type) and issubclass(type_, int):
        return _parse_int(text, type_)
    if isinstance(type_, type) and issubclass(type_, float):
        return _parse_float(text, type_)
    try:
        return type_(text)
    except (ValueError, TypeError, ArithmeticError) as e:
        name = getattr(type_, "__name__", repr(type_))
        raise ParseError(f"Cannot parse {text!r} as {name}: {e}") from e


def read_line(channel: ByteChannel, type_: type | Callable[[str], Any] = str) -> Any:
    """Read one newline-terminated line and parse it as ``type_``.

    Leading and trailing ASCII whitespace is stripped before parsing.

    Raises:
        DecodeError: If the line is not valid UTF-8.
        ParseError: If the text does not match the grammar of ``type_``.
    """
    raw = read_until(channel, NEWLINE)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Line is not valid UTF-8: {e}") from e
    return parse_text(text.strip(_ASCII_WHITESPACE), type_)


def print_line(channel: ByteChannel, text: str) -> None:
    """Write ``text`` as UTF-8 followed by a newline."""
    write_bytes(channel, text.encode("utf-8") + bytes([NEWLINE]))
