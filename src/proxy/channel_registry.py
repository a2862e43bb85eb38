"""Client streams and the fixed table that maps channel ids to them."""

from protocol import CLIENT_STREAM_COUNT_MAX
from utilities.logger import DeviceLogger


class ClientStream:
    """A named outgoing stream identified by one small integer id.

    The id and name are fixed at setup and never change while the device runs.
    """

    __slots__ = ("id", "name", "stream")

    def __init__(self, channel_id, name, stream):
        """
        Args:
            channel_id (int): Non-negative id used as a hop in address paths.
            name (str): Human-readable label, e.g. "serial1".
            stream: A BaseStream implementation; None marks the channel unavailable.
        """
        if isinstance(channel_id, bool) or not isinstance(channel_id, int) or channel_id < 0:
            raise ValueError(f"Client stream id must be a non-negative integer, got {channel_id!r}")
        self.id = channel_id
        self.name = name
        self.stream = stream

    def info(self):
        """Status snapshot for the getClientInfo method."""
        stream = self.stream
        return {
            "id": self.id,
            "name": self.name,
            "pending_bytes": getattr(stream, "pending_bytes", 0),
            "frames_written": getattr(stream, "frames_written", 0),
            "frames_dropped": getattr(stream, "frames_dropped", 0),
            "idle_ms": stream.idle_ms() if hasattr(stream, "idle_ms") else None,
        }

    def __repr__(self):
        return f"ClientStream(id={self.id}, name={self.name})"


class ChannelRegistry:
    """Fixed-capacity table of client streams, filled once at setup.

    Lookups are a linear scan: the table is bounded by the number of serial
    ports on the board, so the scan is short and its cost is constant.
    """

    def __init__(self, client_streams=(), capacity=CLIENT_STREAM_COUNT_MAX):
        """
        Args:
            client_streams: Iterable of ClientStream, in the order they should be listed.
            capacity (int): Maximum number of streams the table may hold.

        Raises:
            ValueError: On duplicate ids or more streams than ``capacity``.
        """
        self._capacity = capacity
        self._slots = [None] * capacity
        self._count = 0
        for client_stream in client_streams:
            self._register(client_stream)

    def _register(self, client_stream):
        if self._count >= self._capacity:
            raise ValueError(
                f"Cannot register {client_stream!r}: all {self._capacity} client stream slots in use"
            )
        if self.resolve(client_stream.id) is not None:
            raise ValueError(f"Duplicate client stream id {client_stream.id}")
        self._slots[self._count] = client_stream
        self._count += 1
        DeviceLogger.debug("CHAN", f"Registered client stream {client_stream.id} ({client_stream.name})")

    @classmethod
    def from_config(cls, stream_configs, streams, capacity=CLIENT_STREAM_COUNT_MAX):
        """Build a registry by pairing ``{"id", "name"}`` entries with stream objects.

        Args:
            stream_configs (list): Config entries, one per client stream.
            streams (list): Stream objects in the same order as ``stream_configs``.

        Raises:
            ValueError: If the lists differ in length or an entry is malformed.
        """
        if len(stream_configs) != len(streams):
            raise ValueError(
                f"{len(stream_configs)} client stream entries configured but {len(streams)} streams available"
            )
        client_streams = []
        for entry, stream in zip(stream_configs, streams):
            try:
                channel_id = entry["id"]
            except (KeyError, TypeError):
                raise ValueError(f"Client stream entry missing 'id': {entry!r}")
            client_streams.append(ClientStream(channel_id, entry.get("name", f"stream{channel_id}"), stream))
        return cls(client_streams, capacity=capacity)

    def resolve(self, channel_id):
        """Return the ClientStream with this id, or None if none is configured.

        Ids that are not plain non-negative integers resolve to None rather than raising.
        """
        if isinstance(channel_id, bool) or not isinstance(channel_id, int):
            return None
        for i in range(self._count):
            if self._slots[i].id == channel_id:
                return self._slots[i]
        return None

    @property
    def capacity(self):
        return self._capacity

    def ids(self):
        return [self._slots[i].id for i in range(self._count)]

    def info(self):
        return [self._slots[i].info() for i in range(self._count)]

    def __len__(self):
        return self._count

    def __iter__(self):
        for i in range(self._count):
            yield self._slots[i]

    def __contains__(self, channel_id):
        return self.resolve(channel_id) is not None
