"""Failures reported by a single forward operation."""

from protocol import (
    ERROR_PROXY,
    ERROR_EMPTY_ADDRESS,
    ERROR_UNKNOWN_CHANNEL,
    ERROR_CHANNEL_WRITE,
)


class ProxyError(Exception):
    """Base class for forward failures. No error here is fatal to the device."""

    code = ERROR_PROXY

    def to_data(self):
        """Extra detail for the ``data`` field of an error response."""
        return None


class EmptyAddressError(ProxyError):
    """The address path already names this device; there is nothing to forward."""

    code = ERROR_EMPTY_ADDRESS

    def __init__(self):
        super().__init__("Address path is empty; request is for this device")


class UnknownChannelError(ProxyError):
    """The first hop does not match any configured client stream."""

    code = ERROR_UNKNOWN_CHANNEL

    def __init__(self, channel_id):
        self.channel_id = channel_id
        super().__init__(f"No client stream with id {channel_id!r}")

    def to_data(self):
        return {"channel_id": self.channel_id}


class ChannelWriteError(ProxyError):
    """The frame could not be queued on the resolved stream. Nothing was written."""

    code = ERROR_CHANNEL_WRITE

    def __init__(self, channel_id, reason):
        self.channel_id = channel_id
        self.reason = reason
        super().__init__(f"Write to client stream {channel_id} failed: {reason}")

    def to_data(self):
        return {"channel_id": self.channel_id, "reason": self.reason}


class InvalidPayloadError(ProxyError):
    """The payload is not representable as a JSON value."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"Request payload cannot be serialized: {reason}")
