# tests/conftest.py
import os
import sys
from unittest import mock

import pytest

src_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if src_path not in sys.path:
    sys.path.insert(0, src_path)

tests_path = os.path.abspath(os.path.dirname(__file__))
if tests_path not in sys.path:
    sys.path.insert(0, tests_path)

# Board-level modules only exist on hardware (or under Blinka with a real board attached)
hardware_mocks = ['board', 'busio', 'digitalio', 'usb_cdc']

for module_name in hardware_mocks:
    sys.modules[module_name] = mock.MagicMock()

# One independent output per pin, so LED states do not alias
sys.modules["digitalio"].DigitalInOut.side_effect = lambda pin: mock.MagicMock(pin=pin, value=False)


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep DeviceLogger output out of test runs and restore its class state afterwards."""
    from utilities.logger import DeviceLogger, LogLevel

    saved = (DeviceLogger.LEVEL, DeviceLogger.PRINT_TO_CONSOLE, DeviceLogger.WRITE_TO_FILE,
             DeviceLogger.SOURCE, DeviceLogger.LOG_FILE_PATH)
    DeviceLogger.LEVEL = LogLevel.DEBUG
    DeviceLogger.PRINT_TO_CONSOLE = False
    DeviceLogger.WRITE_TO_FILE = False
    yield
    (DeviceLogger.LEVEL, DeviceLogger.PRINT_TO_CONSOLE, DeviceLogger.WRITE_TO_FILE,
     DeviceLogger.SOURCE, DeviceLogger.LOG_FILE_PATH) = saved
