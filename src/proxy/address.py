"""Address paths: the ordered client stream ids leading to a target device."""


class AddressPath:
    """Immutable sequence of channel ids describing a route from this device.

    An empty path means this device is the target. A non-empty path is
    consumed one hop at a time: ``first_hop()`` picks the outgoing client
    stream and ``remaining()`` is what the next device sees as its own path.

    No range or length checks happen here; the request dispatcher validates
    parameters before a path reaches the proxy.
    """

    __slots__ = ("_hops",)

    def __init__(self, hops=()):
        self._hops = tuple(hops)

    @classmethod
    def from_value(cls, value):
        """Build a path from a parsed request parameter (list, tuple or AddressPath)."""
        if isinstance(value, cls):
            return value
        return cls(value)

    def is_empty(self):
        return not self._hops

    def first_hop(self):
        """Return the id of the next client stream.

        Raises:
            IndexError: If the path is empty. Callers must check ``is_empty()`` first.
        """
        if not self._hops:
            raise IndexError("first_hop() called on an empty address path")
        return self._hops[0]

    def remaining(self):
        """Return the path after the first hop; empty for a single-hop path.

        Raises:
            IndexError: If the path is empty.
        """
        if not self._hops:
            raise IndexError("remaining() called on an empty address path")
        return AddressPath(self._hops[1:])

    def to_list(self):
        """Wire form of the path."""
        return list(self._hops)

    def __len__(self):
        return len(self._hops)

    def __iter__(self):
        return iter(self._hops)

    def __eq__(self, other):
        if isinstance(other, AddressPath):
            return self._hops == other._hops
        if isinstance(other, (list, tuple)):
            return self._hops == tuple(other)
        return NotImplemented

    def __hash__(self):
        return hash(self._hops)

    def __repr__(self):
        return f"AddressPath({list(self._hops)})"
