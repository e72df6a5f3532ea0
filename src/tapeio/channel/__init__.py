"""Channel layer: the single-byte host boundary and its adapters."""

from .base import ByteChannel, CallableChannel, MemoryChannel, StreamChannel
from .streams import InputTape, OutputTape
