"""Protocol definitions for the modular device RPC interface.

This module defines the method names, parameter names, parameter bounds and
error codes used on the JSON line protocol. These are application-specific
constants shared by the proxy core and the request dispatcher.

By centralizing these definitions here, the proxy and transport layers stay
reusable while the device firmware decides which methods it exposes.
"""

# --- Method Names (Avoid Magic Strings in Logic) ---
METHOD_FORWARD_TO_ADDRESS = "forwardToAddress"
METHOD_GET_CLIENT_INFO = "getClientInfo"
METHOD_GET_DEVICE_INFO = "getDeviceInfo"
METHOD_GET_METHODS = "getMethods"
METHOD_SET_LED_ON = "setLedOn"
METHOD_SET_LED_OFF = "setLedOff"
METHOD_SET_LEDS_ENABLED = "setLedsEnabled"
METHOD_GET_LED_INFO = "getLedInfo"

# --- Parameter Names ---
PARAM_ADDRESS = "address"
PARAM_REQUEST = "request"
PARAM_LED = "led"
PARAM_ENABLED = "enabled"

# --- Request / Response Keys ---
KEY_ID = "id"
KEY_METHOD = "method"
KEY_PARAMS = "params"
KEY_RESULT = "result"
KEY_ERROR = "error"
KEY_CODE = "code"
KEY_MESSAGE = "message"
KEY_DATA = "data"

# --- Parameter Bounds ---
# Address elements are channel ids, one byte each on the hardware side.
ADDRESS_MIN = 0
ADDRESS_MAX = 255
ADDRESS_ARRAY_LENGTH_MIN = 1
ADDRESS_ARRAY_LENGTH_MAX = 8
REQUEST_ARRAY_LENGTH_MIN = 1
REQUEST_ARRAY_LENGTH_MAX = 16

# Hardware-imposed maximum of client streams on any supported form factor
CLIENT_STREAM_COUNT_MAX = 8

# Addressed clients one device may hold, one per distinct address
CLIENT_COUNT_MAX = 8

# --- Status LEDs ---
LED_GREEN = "green"
LED_YELLOW = "yellow"

# --- Error Codes (JSON-RPC 2.0 reserved range plus device range) ---
ERROR_PARSE = -32700
ERROR_INVALID_REQUEST = -32600
ERROR_METHOD_NOT_FOUND = -32601
ERROR_INVALID_PARAMS = -32602
ERROR_PROXY = -32000
ERROR_EMPTY_ADDRESS = -32001
ERROR_UNKNOWN_CHANNEL = -32002
ERROR_CHANNEL_WRITE = -32003

ERROR_MESSAGES = {
    ERROR_PARSE: "Parse error",
    ERROR_INVALID_REQUEST: "Invalid Request",
    ERROR_METHOD_NOT_FOUND: "Method not found",
    ERROR_INVALID_PARAMS: "Invalid params",
    ERROR_PROXY: "Proxy error",
    ERROR_EMPTY_ADDRESS: "Empty address",
    ERROR_UNKNOWN_CHANNEL: "Unknown channel",
    ERROR_CHANNEL_WRITE: "Channel write failed",
}

# Line terminator for one JSON frame on a serial stream
FRAME_TERMINATOR = b"\n"
