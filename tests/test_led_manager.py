#!/usr/bin/env python3
"""Unit tests for LedManager."""

import pytest

from managers.led_manager import LedManager


@pytest.fixture
def leds():
    return LedManager({"green": "D13", "yellow": "D14"})


def test_leds_start_off(leds):
    assert leds.names == ["green", "yellow"]
    assert not leds.is_on("green")
    assert not leds.is_on("yellow")
    assert leds.info() == {"enabled": True, "leds": {"green": False, "yellow": False}}


def test_set_on_and_off_drive_one_led(leds):
    leds.set_on("green")

    assert leds.is_on("green")
    assert not leds.is_on("yellow")

    leds.set_off("green")
    assert not leds.is_on("green")
    print("✓ LED on/off test passed")


def test_disable_holds_outputs_low_and_enable_restores(leds):
    leds.set_on("yellow")

    leds.set_enabled(False)
    assert not leds.is_on("yellow")
    assert leds.info()["leds"]["yellow"] is True

    leds.set_on("green")
    assert not leds.is_on("green")

    leds.set_enabled(True)
    assert leds.is_on("yellow")
    assert leds.is_on("green")
    print("✓ LED enable/disable test passed")


def test_unknown_led_raises(leds):
    with pytest.raises(ValueError, match="Unknown LED"):
        leds.set_on("red")


def test_missing_pin_is_skipped():
    leds = LedManager({"green": "D13", "yellow": None})

    assert leds.names == ["green"]


def test_start_disabled():
    leds = LedManager({"green": "D13"}, enabled=False)

    leds.set_on("green")

    assert not leds.is_on("green")
