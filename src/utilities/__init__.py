# File: src/utilities/__init__.py
"""Utility modules for the modular device."""

from .config import DEFAULT_CONFIG, load_config
from .logger import DeviceLogger, LogLevel

__all__ = [
    'DEFAULT_CONFIG',
    'load_config',
    'DeviceLogger',
    'LogLevel',
    ]
