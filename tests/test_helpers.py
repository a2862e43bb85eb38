"""Shared helpers for modular device unit tests.

Mock UARTs stand in for busio.UART so streams, the proxy and the
dispatcher can be exercised synchronously.
"""

import json


class MockUART:
    """In-memory UART: bytes fed with ``feed()`` are read back, writes are captured."""

    def __init__(self, accept_limit=None, fail_writes=False):
        self.written = bytearray()
        self.receive_buffer = bytearray()
        self.accept_limit = accept_limit
        self.fail_writes = fail_writes
        self.reset_count = 0

    @property
    def in_waiting(self):
        return len(self.receive_buffer)

    def feed(self, data):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.receive_buffer.extend(data)

    def feed_json(self, value):
        self.feed(json.dumps(value) + "\n")

    def read(self, n):
        n = min(n, len(self.receive_buffer))
        if n == 0:
            return None
        data = bytes(self.receive_buffer[:n])
        del self.receive_buffer[:n]
        return data

    def write(self, data):
        if self.fail_writes:
            raise OSError("UART disconnected")
        data = bytes(data)
        if self.accept_limit is not None:
            data = data[:self.accept_limit]
        self.written.extend(data)
        return len(data)

    def reset_input_buffer(self):
        self.receive_buffer.clear()
        self.reset_count += 1


def written_frames(stream):
    """Flush a JsonStream and decode every line its UART received."""
    stream.flush()
    lines = bytes(stream.uart.written).split(b"\n")
    return [json.loads(line) for line in lines if line.strip()]


def pending_frames(stream):
    """Decode the frames queued on a stream without flushing them."""
    lines = stream.pending().split(b"\n")
    return [json.loads(line) for line in lines if line.strip()]
