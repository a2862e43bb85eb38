"""Fixed-capacity byte ring buffer shared by the TX and RX sides of a stream.

Capacity is fixed at construction so memory use stays bounded for the
lifetime of the process; writes that do not fit are refused whole.
"""


class RingBuffer:
    """A circular byte buffer with all-or-nothing writes.

    Provides O(1) append and consume operations without shifting data,
    which keeps per-byte UART handling cheap on microcontrollers.
    """

    def __init__(self, capacity=1024):
        """Initialize the ring buffer.

        Parameters:
            capacity: Maximum buffer capacity in bytes (default: 1024).
        """
        if capacity <= 0:
            raise ValueError(f"Ring buffer capacity must be positive, got {capacity}")
        self._buffer = bytearray(capacity)
        self._mv = memoryview(self._buffer)
        self._capacity = capacity
        self._head = 0  # Write position
        self._tail = 0  # Read position
        self._size = 0

    @property
    def capacity(self):
        return self._capacity

    @property
    def free_space(self):
        return self._capacity - self._size

    def __len__(self):
        return self._size

    def extend(self, data):
        """Append data to the buffer.

        Either every byte of ``data`` is stored or none is.

        Parameters:
            data: Bytes or bytearray to add to the buffer.

        Raises:
            BufferError: If data would exceed the free space.
        """
        data_len = len(data)
        if data_len > self.free_space:
            raise BufferError(
                f"Buffer overflow: cannot add {data_len} bytes with {self.free_space} bytes free"
            )
        if data_len == 0:
            return

        space_before_wrap = self._capacity - self._head
        if data_len <= space_before_wrap:
            self._mv[self._head:self._head + data_len] = data
        else:
            self._mv[self._head:self._capacity] = data[:space_before_wrap]
            self._mv[0:data_len - space_before_wrap] = data[space_before_wrap:]
        self._head = (self._head + data_len) % self._capacity
        self._size += data_len

    def find(self, byte_value):
        """Return the logical index of the first occurrence of a single byte, or -1.

        Parameters:
            byte_value (int): Byte to search for, e.g. ``0x0A``.
        """
        if self._size == 0:
            return -1

        first_chunk_end = min(self._capacity, self._tail + self._size)
        res = self._buffer.find(byte_value, self._tail, first_chunk_end)
        if res != -1:
            return res - self._tail

        if self._tail + self._size > self._capacity:
            second_chunk_end = (self._tail + self._size) % self._capacity
            res = self._buffer.find(byte_value, 0, second_chunk_end)
            if res != -1:
                return (self._capacity - self._tail) + res

        return -1

    def peek(self, length=None):
        """Copy up to ``length`` bytes from the front without consuming them.

        Returns:
            bytes: The requested bytes (fewer if the buffer holds less).
        """
        if length is None or length > self._size:
            length = self._size
        if self._tail + length <= self._capacity:
            return bytes(self._mv[self._tail:self._tail + length])
        first = bytes(self._mv[self._tail:self._capacity])
        return first + bytes(self._mv[0:length - len(first)])

    def contiguous(self):
        """Return a memoryview of the readable bytes up to the physical end of the buffer.

        Used by TX drains that hand a slice straight to ``uart.write``.
        """
        end = min(self._capacity, self._tail + self._size)
        return self._mv[self._tail:end]

    def consume(self, length):
        """Drop ``length`` bytes from the front of the buffer."""
        if length > self._size:
            length = self._size
        self._tail = (self._tail + length) % self._capacity
        self._size -= length
        if self._size == 0:
            self._head = 0
            self._tail = 0

    def clear(self):
        """Clear all data from the buffer."""
        self._head = 0
        self._tail = 0
        self._size = 0
