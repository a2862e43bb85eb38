"""Clients bound to a device further down the chain."""

from utilities.logger import DeviceLogger
from .address import AddressPath
from .errors import EmptyAddressError


class AddressedClient:
    """Sends calls to the device at a fixed address through a Proxy.

    Each call becomes a compact request ``[method, *params]`` forwarded along
    the bound address, the same frame a host would produce with
    ``forwardToAddress(address, [method, *params])``. Calls are one-way:
    replies from the remote device are not collected.
    """

    def __init__(self, proxy, address):
        """
        Args:
            proxy (Proxy): Proxy owning the client streams.
            address (AddressPath | list): Route to the remote device; must not be empty.

        Raises:
            EmptyAddressError: If the address is empty.
        """
        self.proxy = proxy
        self.address = AddressPath.from_value(address)
        if self.address.is_empty():
            raise EmptyAddressError()
        self.calls_sent = 0

    def call(self, method, *params):
        """Forward ``[method, *params]`` to the remote device.

        Raises:
            ProxyError: If the proxy could not queue the request.
        """
        self.send([method, *params])

    def send(self, request):
        """Forward a prebuilt request value unchanged."""
        self.proxy.forward(self.address, request)
        self.calls_sent += 1
        DeviceLogger.debug("CLNT", f"Sent {request!r} to {self.address.to_list()}")

    def info(self):
        return {"address": self.address.to_list(), "calls_sent": self.calls_sent}

    def __repr__(self):
        return f"AddressedClient({self.address.to_list()})"
