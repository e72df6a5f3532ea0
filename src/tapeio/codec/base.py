"""Codec contract and the name registry."""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Protocol

DEFAULT_CODEC = "bincode"


class Codec(Protocol):
    """Deterministic value <-> bytes pair.

    ``encode`` must always produce the same bytes for the same value, and
    ``decode`` must be its exact inverse for values of ``type_``.
    """

    name: str

    def encode(self, value: Any, type_: Any = None) -> bytes: ...

    def decode(self, data: bytes, type_: Any) -> Any: ...


class Codecs:
    """Registry of codec instances by name."""

    _registry: ClassVar[Dict[str, Codec]] = {}

    @classmethod
    def register(cls, codec: Codec) -> Codec:
        cls._registry[codec.name] = codec
        return codec

    @classmethod
    def get(cls, name: str) -> Codec:
        if name not in cls._registry:
            raise ValueError(
                f"Unknown codec '{name}'. Valid: {sorted(cls._registry)}"
            )
        return cls._registry[name]

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._registry)


def resolve_codec(codec: Codec | str | None) -> Codec:
    """Accept a codec instance, a registered name, or None for the default."""
    if codec is None:
        return Codecs.get(DEFAULT_CODEC)
    if isinstance(codec, str):
        return Codecs.get(codec)
    return codec
