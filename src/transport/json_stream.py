"""UART stream carrying one compact JSON value per newline-terminated line."""

import asyncio
import json

from adafruit_ticks import ticks_ms, ticks_diff

from protocol import FRAME_TERMINATOR
from utilities.logger import DeviceLogger
from .base_stream import BaseStream
from .ring_buffer import RingBuffer


def encode_frame(value):
    """Serialize a value to the bytes of one frame, terminator included.

    Raises:
        TypeError: If the value holds something JSON cannot represent.
        ValueError: If the value holds NaN or infinity.
    """
    text = json.dumps(value, separators=(",", ":"), allow_nan=False)
    return text.encode("utf-8") + FRAME_TERMINATOR


def decode_frame(line_bytes):
    """Parse the bytes of one frame (terminator optional) back into a value.

    Raises:
        ValueError: If the bytes are not valid UTF-8 JSON.
    """
    try:
        text = bytes(line_bytes).decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise ValueError(f"Frame is not valid UTF-8: {e}") from e
    return json.loads(text)


class JsonStream(BaseStream):
    """Non-blocking JSON line stream over a UART-like object.

    TX side: ``write()`` serializes the whole frame first, then copies it into
    a fixed-size ring buffer in one step. A frame that does not fit raises
    ``BufferError`` and leaves the buffer untouched, so no partial frame ever
    reaches the wire. A background task (or ``flush()``) drains the buffer.

    RX side: ``read_line()`` pulls whatever bytes are waiting into a second
    ring buffer and returns one decoded value per complete line.
    """
    TX_BUFFER_SIZE = 1024
    RX_BUFFER_SIZE = 1024

    def __init__(self, uart_hw, name="stream", tx_buffer_size=None, rx_buffer_size=None):
        """Initialize the stream.

        Parameters:
            uart_hw: The UART hardware for physical I/O.
                **REQUIREMENT**: uart_hw must not block. ``in_waiting`` must
                report buffered bytes accurately, since ``read`` is only called
                when it is non-zero.

                Required uart_hw interface:
                - `in_waiting`: number of bytes available to read.
                - `read(n)`: read n bytes.
                - `write(data)`: write bytes, returning the count written or None.
                - `reset_input_buffer()`: discard pending input.
            name (str): Label used in log lines.
            tx_buffer_size (int, optional): TX ring capacity in bytes.
            rx_buffer_size (int, optional): RX ring capacity in bytes.
        """
        self.uart = uart_hw
        self.name = name

        self._tx = RingBuffer(tx_buffer_size or self.TX_BUFFER_SIZE)
        self._rx = RingBuffer(rx_buffer_size or self.RX_BUFFER_SIZE)
        self._tx_event = asyncio.Event()
        self._tx_task = None

        self.frames_written = 0
        self.frames_dropped = 0
        self.last_write_ticks = None

#region --- TX ---
    def write(self, value):
        """Queue one value as a single frame.

        Raises:
            TypeError, ValueError: If the value cannot be serialized. Nothing is queued.
            BufferError: If the frame does not fit in the TX buffer. Nothing is queued.
        """
        self.write_raw(encode_frame(value))

    def write_raw(self, frame):
        """Queue pre-encoded frame bytes atomically."""
        try:
            self._tx.extend(frame)
        except BufferError:
            self.frames_dropped += 1
            raise
        self.frames_written += 1
        self.last_write_ticks = ticks_ms()
        self._tx_event.set()  # Signal TX worker that new data is available

    @property
    def pending_bytes(self):
        """Number of queued bytes not yet handed to hardware."""
        return len(self._tx)

    def pending(self):
        """Copy of the queued, unsent bytes."""
        return self._tx.peek()

    def idle_ms(self):
        """Milliseconds since the last queued frame, or None if nothing was ever written."""
        if self.last_write_ticks is None:
            return None
        return ticks_diff(ticks_ms(), self.last_write_ticks)

    def _drain_once(self):
        """Hand one contiguous chunk of the TX buffer to hardware.

        Returns:
            int: Number of bytes accepted by the hardware.
        """
        chunk = self._tx.contiguous()
        if not len(chunk):
            return 0
        try:
            written = self.uart.write(chunk)
        except OSError as e:
            # Channel is gone; queued frames cannot be delivered
            DeviceLogger.error("STRM", f"{self.name}: write failed, dropping {len(self._tx)} bytes: {e}")
            self._tx.clear()
            return 0
        if written is None:
            # Some UART implementations return None instead of the count
            written = len(chunk)
        self._tx.consume(written)
        return written

    def flush(self):
        """Synchronously drain the TX buffer until empty or hardware stops accepting bytes.

        Returns:
            int: Total bytes written.
        """
        total = 0
        while len(self._tx):
            written = self._drain_once()
            if written <= 0:
                break
            total += written
        return total
#endregion

#region --- RX ---
    def _read_hw(self):
        """Move waiting hardware bytes into the RX ring buffer."""
        waiting = self.uart.in_waiting
        if not waiting:
            return
        data = self.uart.read(min(waiting, self._rx.free_space) or waiting)
        if not data:
            return
        try:
            self._rx.extend(data)
        except BufferError:
            DeviceLogger.warning("STRM", f"{self.name}: RX buffer overflow - dropped input. Buffer cleared.")
            self._rx.clear()
            raise ValueError("RX buffer overflow - buffer has been cleared")

    def read_line(self):
        """Return the next complete inbound JSON value, or None if no full line is buffered.

        Empty lines are skipped.

        Raises:
            ValueError: If the RX buffer overflowed or a complete line was not valid
                JSON. The offending bytes are consumed either way.
        """
        self._read_hw()

        while True:
            newline_idx = self._rx.find(FRAME_TERMINATOR[0])
            if newline_idx < 0:
                if self._rx.free_space == 0:
                    self._rx.clear()
                    raise ValueError("RX line exceeds buffer size - buffer has been cleared")
                return None

            line_bytes = self._rx.peek(newline_idx + 1)
            self._rx.consume(newline_idx + 1)
            if line_bytes.strip():
                return decode_frame(line_bytes)

    def clear_buffer(self):
        """Clear the hardware input buffer and the RX ring buffer."""
        self.uart.reset_input_buffer()
        self._rx.clear()
#endregion

#region --- Background Worker ---
    async def _tx_worker(self):
        """Dedicated task that drains the TX buffer to hardware.

        This is the ONLY task that writes to the UART for this stream, so frames
        queued by separate handlers can never interleave mid-frame.
        """
        while True:
            await self._tx_event.wait()

            while len(self._tx):
                written = self._drain_once()
                if written < 1:
                    await asyncio.sleep(0.005)  # Hardware busy, yield to event loop
                else:
                    await asyncio.sleep(0)

            self._tx_event.clear()

    def start(self):
        """Start the TX worker task."""
        if self._tx_task is None:
            self._tx_task = asyncio.create_task(self._tx_worker())

    def stop(self):
        """Cancel the TX worker task if running."""
        if self._tx_task is not None:
            self._tx_task.cancel()
            self._tx_task = None
#endregion

    def __repr__(self):
        return f"JsonStream(name={self.name}, pending={self.pending_bytes})"
