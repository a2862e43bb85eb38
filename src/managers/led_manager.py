# File: src/managers/led_manager.py
"""Status LEDs on the device carrier board."""

import digitalio

from utilities.logger import DeviceLogger


class LedManager:
    """Drives the named status LEDs.

    Each LED remembers whether it was asked to be on. While LEDs are
    disabled every output is held low; enabling them again restores the
    remembered states.
    """

    def __init__(self, led_pins, enabled=True):
        """
        Args:
            led_pins (dict): LED name -> board pin. Pins that are None are skipped.
            enabled (bool): Initial enabled state.
        """
        self._outputs = {}
        self._states = {}
        for name, pin in led_pins.items():
            if pin is None:
                DeviceLogger.warning("LEDS", f"No pin for LED '{name}' on this board")
                continue
            output = digitalio.DigitalInOut(pin)
            output.direction = digitalio.Direction.OUTPUT
            output.value = False
            self._outputs[name] = output
            self._states[name] = False
        self.enabled = bool(enabled)

    @property
    def names(self):
        return sorted(self._outputs)

    def _check(self, name):
        if name not in self._outputs:
            raise ValueError(f"Unknown LED '{name}', expected one of {self.names}")

    def _apply(self, name):
        self._outputs[name].value = self.enabled and self._states[name]

    def set_on(self, name):
        self._check(name)
        self._states[name] = True
        self._apply(name)

    def set_off(self, name):
        self._check(name)
        self._states[name] = False
        self._apply(name)

    def set_enabled(self, enabled):
        self.enabled = bool(enabled)
        for name in self._outputs:
            self._apply(name)
        DeviceLogger.debug("LEDS", f"LEDs {'enabled' if self.enabled else 'disabled'}")

    def is_on(self, name):
        """True when the LED is actually lit."""
        self._check(name)
        return bool(self._outputs[name].value)

    def info(self):
        return {
            "enabled": self.enabled,
            "leds": {name: self._states[name] for name in self.names},
        }
