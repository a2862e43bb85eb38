"""Address-based proxy for forwarding requests along chains of devices."""

from .address import AddressPath
from .channel_registry import ChannelRegistry, ClientStream
from .client import AddressedClient
from .encoder import FrameEncoder
from .errors import (
    ProxyError,
    EmptyAddressError,
    UnknownChannelError,
    ChannelWriteError,
    InvalidPayloadError,
)
from .proxy import Proxy

__all__ = [
    'AddressPath',
    'AddressedClient',
    'ChannelRegistry',
    'ClientStream',
    'FrameEncoder',
    'Proxy',
    'ProxyError',
    'EmptyAddressError',
    'UnknownChannelError',
    'ChannelWriteError',
    'InvalidPayloadError',
]
