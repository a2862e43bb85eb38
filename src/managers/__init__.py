"""Top-level package for manager classes."""

from .device_manager import DeviceManager
from .led_manager import LedManager

__all__ = [
    "DeviceManager",
    "LedManager",
]
