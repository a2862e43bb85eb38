#!/usr/bin/env python3
"""Unit tests for JsonStream framing and buffering."""

import asyncio

import pytest

from transport import BaseStream, JsonStream, encode_frame, decode_frame
from test_helpers import MockUART


def test_encode_frame_is_compact_and_terminated():
    assert encode_frame({"a": [1, 2]}) == b'{"a":[1,2]}\n'
    assert encode_frame("x") == b'"x"\n'


def test_encode_frame_rejects_nan_and_objects():
    with pytest.raises(ValueError):
        encode_frame([float("inf")])
    with pytest.raises(TypeError):
        encode_frame([object()])


def test_decode_frame():
    assert decode_frame(b'[1,{"b":null}]\n') == [1, {"b": None}]
    with pytest.raises(ValueError):
        decode_frame(b"{not json}\n")
    with pytest.raises(ValueError):
        decode_frame(b"\xff\xfe\n")


def test_write_queues_until_flush():
    uart = MockUART()
    stream = JsonStream(uart)

    stream.write(["ping"])
    stream.write({"id": 1})

    assert uart.written == b""
    assert stream.frames_written == 2
    assert stream.flush() == len(b'["ping"]\n{"id":1}\n')
    assert uart.written == b'["ping"]\n{"id":1}\n'
    assert stream.pending_bytes == 0


def test_write_is_all_or_nothing():
    stream = JsonStream(MockUART(), tx_buffer_size=16)
    stream.write([1, 2, 3])
    before = stream.pending()

    with pytest.raises(BufferError):
        stream.write(["this frame is far too long"])

    assert stream.pending() == before
    assert stream.frames_dropped == 1
    assert stream.frames_written == 1
    print("✓ All-or-nothing write test passed")


def test_serialization_failure_queues_nothing():
    stream = JsonStream(MockUART())
    with pytest.raises(TypeError):
        stream.write({"bad": b"bytes"})
    assert stream.pending_bytes == 0
    assert stream.frames_written == 0


def test_flush_wraps_around_ring():
    uart = MockUART(accept_limit=10)
    stream = JsonStream(uart, tx_buffer_size=20)
    frames = [["n", i] for i in range(3)]  # 8 bytes each

    stream.write(frames[0])
    stream.write(frames[1])
    assert stream._drain_once() == 10
    stream.write(frames[2])  # Crosses the physical end of the ring
    uart.accept_limit = None
    stream.flush()

    assert uart.written == b"".join(encode_frame(f) for f in frames)
    print("✓ Ring wrap-around flush test passed")


def test_partial_hardware_writes_are_resumed():
    uart = MockUART(accept_limit=3)
    stream = JsonStream(uart)
    stream.write({"method": "ping"})

    stream.flush()

    assert uart.written == b'{"method":"ping"}\n'


def test_hardware_write_error_discards_queue():
    uart = MockUART(fail_writes=True)
    stream = JsonStream(uart, name="serial9")
    stream.write(["lost"])

    assert stream.flush() == 0
    assert stream.pending_bytes == 0


def test_read_line_handles_fragments():
    uart = MockUART()
    stream = JsonStream(uart)

    uart.feed('["getDev')
    assert stream.read_line() is None
    uart.feed('iceInfo"]\n{"id":2,')
    assert stream.read_line() == ["getDeviceInfo"]
    assert stream.read_line() is None
    uart.feed('"method":"x"}\n')
    assert stream.read_line() == {"id": 2, "method": "x"}
    print("✓ Fragmented line read test passed")


def test_read_line_skips_blank_lines():
    uart = MockUART()
    stream = JsonStream(uart)
    uart.feed('\n\r\n["a"]\n')

    assert stream.read_line() == ["a"]
    assert stream.read_line() is None


def test_read_line_consumes_malformed_line():
    uart = MockUART()
    stream = JsonStream(uart)
    uart.feed('garbage\n["ok"]\n')

    with pytest.raises(ValueError):
        stream.read_line()
    assert stream.read_line() == ["ok"]


def test_read_line_overflow_clears_buffer():
    uart = MockUART()
    stream = JsonStream(uart, rx_buffer_size=16)
    uart.feed("x" * 16)

    with pytest.raises(ValueError):
        stream.read_line()

    uart.feed('["ok"]\n')
    assert stream.read_line() == ["ok"]


def test_clear_buffer():
    uart = MockUART()
    stream = JsonStream(uart)
    uart.feed('["partial')
    stream.read_line()

    stream.clear_buffer()
    uart.feed('["fresh"]\n')

    assert uart.reset_count == 1
    assert stream.read_line() == ["fresh"]


def test_tx_worker_drains_in_background():
    uart = MockUART()

    async def run():
        stream = JsonStream(uart)
        stream.start()
        stream.write(["one"])
        stream.write(["two"])
        for _ in range(10):
            await asyncio.sleep(0)
        stream.stop()
        return stream

    stream = asyncio.run(run())

    assert uart.written == b'["one"]\n["two"]\n'
    assert stream.pending_bytes == 0
    print("✓ Background TX worker test passed")


def test_base_stream_is_abstract():
    stream = BaseStream()
    for call in (lambda: stream.write(1), lambda: stream.write_raw(b""),
                 stream.read_line, stream.clear_buffer):
        with pytest.raises(NotImplementedError):
            call()
