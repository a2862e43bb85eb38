# File: src/utilities/pins.py
"""Serial and status LED pin maps for each supported modular device form factor."""
import board

from protocol import LED_GREEN, LED_YELLOW


class FormFactor3x2Profile:
    """Teensy 3.2 carrier: Serial1 and Serial3 routed to the client ports."""

    NAME = "3x2"

    @classmethod
    def load(cls):
        p = {
            "PROCESSOR": {"name": "Teensy", "part_number": 0, "version_major": 3, "version_minor": 2},
            "HARDWARE": {"name": "modular_device_base", "part_number": 1001, "version_major": 1, "version_minor": 1},
            "SERIAL1_TX": getattr(board, "D1", None),
            "SERIAL1_RX": getattr(board, "D0", None),
            "SERIAL3_TX": getattr(board, "D8", None),
            "SERIAL3_RX": getattr(board, "D7", None),
            "BNC_A": getattr(board, "D33", None),
            "BNC_B": getattr(board, "D32", None),
            "LED_GREEN": getattr(board, "D13", None),
            "LED_YELLOW": getattr(board, "D14", None),
        }
        p["SERIAL_PORTS"] = [
            (p["SERIAL1_TX"], p["SERIAL1_RX"]),
            (p["SERIAL3_TX"], p["SERIAL3_RX"]),
        ]
        p["LEDS"] = {LED_GREEN: p["LED_GREEN"], LED_YELLOW: p["LED_YELLOW"]}
        return p


class FormFactor5x3Profile:
    """Teensy 3.5 carrier."""

    NAME = "5x3"

    @classmethod
    def load(cls):
        p = {
            "PROCESSOR": {"name": "Teensy", "part_number": 0, "version_major": 3, "version_minor": 5},
            "HARDWARE": {"name": "modular_device_base", "part_number": 1000, "version_major": 1, "version_minor": 1},
            "SERIAL1_TX": getattr(board, "D1", None),
            "SERIAL1_RX": getattr(board, "D0", None),
            "SERIAL2_TX": getattr(board, "D10", None),
            "SERIAL2_RX": getattr(board, "D9", None),
            "BNC_A": getattr(board, "D57", None),
            "BNC_B": getattr(board, "D56", None),
            "LED_GREEN": getattr(board, "D13", None),
            "LED_YELLOW": getattr(board, "D14", None),
        }
        p["SERIAL_PORTS"] = [
            (p["SERIAL1_TX"], p["SERIAL1_RX"]),
            (p["SERIAL2_TX"], p["SERIAL2_RX"]),
        ]
        p["LEDS"] = {LED_GREEN: p["LED_GREEN"], LED_YELLOW: p["LED_YELLOW"]}
        return p


class Pins:
    """Class-level pin map populated once at boot from a form factor profile."""

    PROFILES = {
        FormFactor3x2Profile.NAME: FormFactor3x2Profile,
        FormFactor5x3Profile.NAME: FormFactor5x3Profile,
    }

    FORM_FACTOR = None
    PROCESSOR = None
    HARDWARE = None
    SERIAL_PORTS = []
    LEDS = {}

    @classmethod
    def initialize(cls, form_factor="3x2"):
        """Load the pin profile for a form factor onto the class.

        Raises:
            ValueError: If the form factor is not supported.
        """
        profile = cls.PROFILES.get(form_factor)
        if profile is None:
            raise ValueError(
                f"Unknown form factor: {form_factor}. Expected one of {sorted(cls.PROFILES)}."
            )
        for key, value in profile.load().items():
            setattr(cls, key, value)
        cls.FORM_FACTOR = form_factor
