"""Address-based request forwarding to daisy-chained devices."""

from utilities.logger import DeviceLogger
from .address import AddressPath
from .encoder import FrameEncoder
from .errors import EmptyAddressError, UnknownChannelError, ProxyError


class Proxy:
    """Forwards one request one hop closer to the device its address names.

    ``forward()`` is synchronous and never waits on the downstream device:
    the frame is queued on the client stream's TX buffer and the call
    returns. There is no reply correlation and no retry. The device runs one
    request at a time, so only one forward touches a stream at any instant.
    """

    def __init__(self, registry, encoder=None):
        """
        Args:
            registry (ChannelRegistry): Configured client streams.
            encoder (FrameEncoder, optional): Frame shaping; a default is created if omitted.
        """
        self.registry = registry
        self.encoder = encoder or FrameEncoder()
        self.forward_count = 0
        self.failure_count = 0

    def forward(self, path, payload):
        """Relay ``payload`` along ``path``.

        On success exactly one frame is queued on exactly one client stream.
        On failure nothing is written anywhere.

        Args:
            path (AddressPath | list): Route from this device; must not be empty.
            payload: Request value to deliver, passed through untouched.

        Raises:
            EmptyAddressError: ``path`` is empty, so the request is for this device.
            UnknownChannelError: The first hop is not a configured client stream.
            ChannelWriteError: The stream could not take the frame.
            InvalidPayloadError: The payload cannot be serialized.
        """
        path = AddressPath.from_value(path)
        try:
            if path.is_empty():
                raise EmptyAddressError()

            hop = path.first_hop()
            client_stream = self.registry.resolve(hop)
            if client_stream is None:
                raise UnknownChannelError(hop)

            remaining = path.remaining()
            size = self.encoder.encode(remaining, payload, client_stream)
        except ProxyError as e:
            self.failure_count += 1
            DeviceLogger.warning("PRXY", f"Forward to {path.to_list()} failed: {e}")
            raise

        self.forward_count += 1
        kind = "terminal" if remaining.is_empty() else "relay"
        DeviceLogger.debug(
            "PRXY",
            f"Forwarded {kind} frame ({size} bytes) to {client_stream.name} [{hop}], {len(remaining)} hops left"
        )
