"""
boot.py - USB channel setup
Runs before code.py. Enables the second USB CDC channel so code.py can serve
JSON requests on it while the console stays free for the REPL and logs.
"""

import json

import usb_cdc

usb_server_stream = False
try:
    with open("config.json", "r", encoding="utf-8") as f:
        usb_server_stream = bool(json.load(f).get("usb_server_stream", False))
except (OSError, ValueError):
    pass  # No config yet; keep the default single console channel

usb_cdc.enable(console=True, data=usb_server_stream)
print(f"boot.py: USB CDC data channel {'enabled' if usb_server_stream else 'disabled'}")
