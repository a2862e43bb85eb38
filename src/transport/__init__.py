"""Transport layer for the modular device.

This module decouples the physical stream (UART, USB console, test doubles)
from the proxy and request logic. Callers work with JSON values; stream
implementations handle framing, buffering and physical transmission.
"""

from .base_stream import BaseStream
from .json_stream import JsonStream, encode_frame, decode_frame
from .ring_buffer import RingBuffer

__all__ = ['BaseStream', 'JsonStream', 'RingBuffer', 'encode_frame', 'decode_frame']
