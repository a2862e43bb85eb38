# File: src/utilities/config.py
"""Loads device configuration from config.json merged over defaults."""

import json
import os

from protocol import (
    ADDRESS_MIN,
    ADDRESS_MAX,
    ADDRESS_ARRAY_LENGTH_MIN,
    ADDRESS_ARRAY_LENGTH_MAX,
    REQUEST_ARRAY_LENGTH_MIN,
    REQUEST_ARRAY_LENGTH_MAX,
)
from utilities.logger import DeviceLogger

CONFIG_FILE = "config.json"

DEFAULT_CONFIG = {
    "device_name": "modular_device_base",
    "form_factor": "3x2",
    "baudrate": 115200,
    "uart_buffer_size": 512,  # Hardware receive buffer handed to busio.UART
    "tx_buffer_size": 1024,   # Per-stream TX ring buffer
    "rx_buffer_size": 1024,   # Per-stream RX line buffer
    "usb_server_stream": False,  # Also accept requests on the USB console
    "client_streams": [
        {"id": 1, "name": "serial1"},
        {"id": 2, "name": "serial2"},
    ],
    "address_min": ADDRESS_MIN,
    "address_max": ADDRESS_MAX,
    "address_array_length_min": ADDRESS_ARRAY_LENGTH_MIN,
    "address_array_length_max": ADDRESS_ARRAY_LENGTH_MAX,
    "request_array_length_min": REQUEST_ARRAY_LENGTH_MIN,
    "request_array_length_max": REQUEST_ARRAY_LENGTH_MAX,
    "update_interval": 0.005,  # Seconds between request polls
    "leds_enabled": True,
    "log_level": "INFO",
    "log_to_file": False,
    "debug_mode": False,
}


def file_exists(filename):
    """Check if a file exists on the filesystem."""
    try:
        os.stat(filename)
        return True
    except OSError:
        return False


def load_config(path=CONFIG_FILE):
    """Load configuration from a JSON file if it exists, otherwise return defaults.

    Keys present in the file replace the default value wholesale; nested
    structures such as ``client_streams`` are not merged element-wise.

    Returns:
        dict: A new dict, safe for the caller to mutate.
    """
    merged_config = dict(DEFAULT_CONFIG)
    merged_config["client_streams"] = [dict(s) for s in DEFAULT_CONFIG["client_streams"]]

    if not file_exists(path):
        DeviceLogger.warning("CONF", f"No {path} found. Using default configuration.")
        return merged_config

    try:
        with open(path, "r", encoding="utf-8") as f:
            config_data = json.load(f)
    except (OSError, ValueError) as e:
        DeviceLogger.error("CONF", f"Error loading {path}: {e}")
        DeviceLogger.warning("CONF", "Using default configuration.")
        return merged_config

    if not isinstance(config_data, dict):
        DeviceLogger.error("CONF", f"{path} must contain a JSON object, got {type(config_data).__name__}")
        return merged_config

    merged_config.update(config_data)
    DeviceLogger.info("CONF", f"Configuration loaded from {path}")
    return merged_config
