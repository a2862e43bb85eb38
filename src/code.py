# File: src/code.py
"""
PROJECT: Modular Device Base - serial request server and chain proxy
"""

import asyncio

import busio

from managers.device_manager import DeviceManager
from managers.led_manager import LedManager
from transport import JsonStream
from utilities.config import load_config
from utilities.logger import DeviceLogger, LogLevel
from utilities.pins import Pins

# Init logger at DEBUG for initial boot
DeviceLogger.set_level(LogLevel.DEBUG)


def open_usb_stream(config):
    """Return a JsonStream on the USB CDC data channel, or None if unavailable."""
    if not config.get("usb_server_stream", False):
        return None
    try:
        import usb_cdc
    except ImportError:
        DeviceLogger.warning("CODE", "usb_cdc not available; USB server stream disabled")
        return None
    if usb_cdc.data is None:
        DeviceLogger.warning("CODE", "USB CDC data channel not enabled in boot.py")
        return None
    return JsonStream(usb_cdc.data, name="usb")


def open_uarts(config):
    """Create one busio.UART per configured client stream from the form factor pin map."""
    entries = config["client_streams"]
    if len(entries) > len(Pins.SERIAL_PORTS):
        raise ValueError(
            f"{len(entries)} client streams configured but form factor {Pins.FORM_FACTOR} "
            f"has {len(Pins.SERIAL_PORTS)} serial ports"
        )
    uarts = []
    for entry, (tx, rx) in zip(entries, Pins.SERIAL_PORTS):
        DeviceLogger.debug("CODE", f"Opening UART for client stream {entry.get('id')} ({entry.get('name')})")
        uarts.append(
            busio.UART(
                tx,
                rx,
                baudrate=config.get("baudrate", 115200),
                receiver_buffer_size=config.get("uart_buffer_size", 512),
                timeout=0,
            )
        )
    return uarts


def build_device(config):
    Pins.initialize(config.get("form_factor", "3x2"))
    hardware_info = {"processor": Pins.PROCESSOR, "board": Pins.HARDWARE}
    leds = LedManager(Pins.LEDS, enabled=config.get("leds_enabled", True))
    return DeviceManager.from_config(
        config,
        open_uarts(config),
        usb_stream=open_usb_stream(config),
        hardware_info=hardware_info,
        leds=leds,
    )


def main():
    DeviceLogger.info("CODE", "*** BOOTING MODULAR DEVICE ***")
    config = load_config()
    DeviceLogger.configure(config)

    device = build_device(config)
    device.set_debug_mode(config.get("debug_mode", False))
    asyncio.run(device.start())


if __name__ == "__main__":
    main()
