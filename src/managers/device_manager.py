# File: src/managers/device_manager.py
"""Serves JSON requests on the device's streams and proxies calls down the chain."""

import asyncio

from adafruit_ticks import ticks_ms, ticks_diff

from protocol import (
    METHOD_FORWARD_TO_ADDRESS,
    METHOD_GET_CLIENT_INFO,
    METHOD_GET_DEVICE_INFO,
    METHOD_GET_METHODS,
    METHOD_SET_LED_ON,
    METHOD_SET_LED_OFF,
    METHOD_SET_LEDS_ENABLED,
    METHOD_GET_LED_INFO,
    PARAM_ADDRESS,
    PARAM_REQUEST,
    PARAM_LED,
    PARAM_ENABLED,
    ADDRESS_MIN,
    ADDRESS_MAX,
    ADDRESS_ARRAY_LENGTH_MIN,
    ADDRESS_ARRAY_LENGTH_MAX,
    REQUEST_ARRAY_LENGTH_MIN,
    REQUEST_ARRAY_LENGTH_MAX,
    CLIENT_COUNT_MAX,
    KEY_ID,
    KEY_METHOD,
    KEY_PARAMS,
    KEY_RESULT,
    KEY_ERROR,
    KEY_CODE,
    KEY_MESSAGE,
    KEY_DATA,
    ERROR_PARSE,
    ERROR_INVALID_REQUEST,
    ERROR_METHOD_NOT_FOUND,
    ERROR_INVALID_PARAMS,
    ERROR_MESSAGES,
)
from proxy import AddressPath, AddressedClient, ChannelRegistry, Proxy, ProxyError
from transport import JsonStream
from utilities.logger import DeviceLogger


class RequestError(Exception):
    """A request that can be answered only with an error response."""

    def __init__(self, code, message=None, data=None):
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, "Server error")
        self.data = data
        super().__init__(self.message)


def is_relay_frame(value):
    """True for ``[remaining_path, payload]`` frames sent by an upstream proxy.

    A relay frame is a two element array whose first element is a non-empty
    array of integers. Compact requests always start with a method name string,
    so the two shapes cannot be confused.
    """
    if not isinstance(value, list) or len(value) != 2:
        return False
    path = value[0]
    if not isinstance(path, list) or not path:
        return False
    return all(isinstance(hop, int) and not isinstance(hop, bool) for hop in path)


def is_response(value):
    """True for response objects, which carry a result or error but no method."""
    return (
        isinstance(value, dict)
        and KEY_METHOD not in value
        and (KEY_RESULT in value or KEY_ERROR in value)
    )


class DeviceManager:
    """Request dispatcher and proxy owner for one modular device.

    Responsibilities:
    - Poll every server stream for complete requests without blocking
    - Dispatch methods and write one response per request to the stream it arrived on
    - Validate forwardToAddress parameters against configured bounds
    - Hand relay frames from upstream devices straight to the proxy
    """

    def __init__(self, registry, server_streams, config=None, hardware_info=None, leds=None):
        """
        Args:
            registry (ChannelRegistry): Client streams reachable by the proxy.
            server_streams (list): Streams that deliver requests and take responses.
            config (dict, optional): Loaded configuration (see utilities.config).
            hardware_info (dict, optional): Processor and board descriptions for getDeviceInfo.
            leds (LedManager, optional): Status LEDs; the LED methods are only served when given.
        """
        cfg = config or {}
        self.registry = registry
        self.proxy = Proxy(registry)
        self.server_streams = list(server_streams)
        self.hardware_info = hardware_info or {}
        self.leds = leds
        self.clients = []

        self.device_name = cfg.get("device_name", "modular_device_base")
        self.form_factor = cfg.get("form_factor", "")
        self.update_interval = cfg.get("update_interval", 0.005)
        self._debug_mode = cfg.get("debug_mode", False)

        self.address_min = cfg.get("address_min", ADDRESS_MIN)
        self.address_max = cfg.get("address_max", ADDRESS_MAX)
        self.address_length_range = (
            cfg.get("address_array_length_min", ADDRESS_ARRAY_LENGTH_MIN),
            cfg.get("address_array_length_max", ADDRESS_ARRAY_LENGTH_MAX),
        )
        self.request_length_range = (
            cfg.get("request_array_length_min", REQUEST_ARRAY_LENGTH_MIN),
            cfg.get("request_array_length_max", REQUEST_ARRAY_LENGTH_MAX),
        )

        self.requests_handled = 0
        self._start_ticks = ticks_ms()
        self._running = False

        self._methods = {
            METHOD_FORWARD_TO_ADDRESS: self._handle_forward_to_address,
            METHOD_GET_CLIENT_INFO: self._handle_get_client_info,
            METHOD_GET_DEVICE_INFO: self._handle_get_device_info,
            METHOD_GET_METHODS: self._handle_get_methods,
        }
        if leds is not None:
            self._methods.update({
                METHOD_SET_LED_ON: self._handle_set_led_on,
                METHOD_SET_LED_OFF: self._handle_set_led_off,
                METHOD_SET_LEDS_ENABLED: self._handle_set_leds_enabled,
                METHOD_GET_LED_INFO: self._handle_get_led_info,
            })

        # Order in which named params are laid out as positional params
        self._param_names = {
            METHOD_FORWARD_TO_ADDRESS: (PARAM_ADDRESS, PARAM_REQUEST),
            METHOD_SET_LED_ON: (PARAM_LED,),
            METHOD_SET_LED_OFF: (PARAM_LED,),
            METHOD_SET_LEDS_ENABLED: (PARAM_ENABLED,),
        }

    @classmethod
    def from_config(cls, config, uarts, usb_stream=None, hardware_info=None, leds=None):
        """Wrap each hardware UART in a JsonStream and wire up the registry.

        Each serial UART is both a server stream and a client stream, so a
        device can take requests from either neighbour and forward to either.

        Args:
            config (dict): Loaded configuration.
            uarts (list): UART objects, one per ``config["client_streams"]`` entry, same order.
            usb_stream (BaseStream, optional): Extra server-only stream (USB console).

        Raises:
            ValueError: If the UART count does not match the configured client streams.
        """
        entries = config.get("client_streams", [])
        if len(entries) != len(uarts):
            raise ValueError(f"{len(entries)} client streams configured but {len(uarts)} UARTs provided")

        streams = [
            JsonStream(
                uart,
                name=entry.get("name", f"stream{i}"),
                tx_buffer_size=config.get("tx_buffer_size"),
                rx_buffer_size=config.get("rx_buffer_size"),
            )
            for i, (entry, uart) in enumerate(zip(entries, uarts))
        ]
        registry = ChannelRegistry.from_config(entries, streams)
        server_streams = ([usb_stream] if usb_stream is not None else []) + streams
        return cls(registry, server_streams, config, hardware_info, leds)

    def set_debug_mode(self, debug_mode):
        """Enable or disable logging of every request."""
        self._debug_mode = debug_mode

    def create_client_at_address(self, address):
        """Return the client for the device at ``address``, creating it on first use.

        Args:
            address (AddressPath | list): Route from this device, validated like
                the ``address`` parameter of forwardToAddress.

        Raises:
            ValueError: If the address is invalid or the client table is full.
        """
        try:
            path = self._validate_address(AddressPath.from_value(address).to_list())
        except RequestError as e:
            raise ValueError(e.message) from e
        for client in self.clients:
            if client.address == path:
                return client
        if len(self.clients) >= CLIENT_COUNT_MAX:
            raise ValueError(f"Client table full ({CLIENT_COUNT_MAX} addresses)")
        client = AddressedClient(self.proxy, path)
        self.clients.append(client)
        DeviceLogger.info("DEVM", f"Created client at address {path.to_list()}")
        return client

#region --- Parameter Validation ---
    def _check_array(self, name, value, length_range):
        if not isinstance(value, list):
            raise RequestError(ERROR_INVALID_PARAMS, f"Parameter '{name}' must be an array")
        low, high = length_range
        if not low <= len(value) <= high:
            raise RequestError(
                ERROR_INVALID_PARAMS,
                f"Parameter '{name}' array length {len(value)} outside [{low}, {high}]",
            )

    def _validate_address(self, address):
        self._check_array(PARAM_ADDRESS, address, self.address_length_range)
        for hop in address:
            if isinstance(hop, bool) or not isinstance(hop, int):
                raise RequestError(ERROR_INVALID_PARAMS, f"Parameter '{PARAM_ADDRESS}' elements must be integers")
            if not self.address_min <= hop <= self.address_max:
                raise RequestError(
                    ERROR_INVALID_PARAMS,
                    f"Parameter '{PARAM_ADDRESS}' element {hop} outside [{self.address_min}, {self.address_max}]",
                )
        return AddressPath(address)

    def _validate_request(self, request):
        self._check_array(PARAM_REQUEST, request, self.request_length_range)
        return request
#endregion

#region --- Method Handlers ---
    def _handle_forward_to_address(self, params):
        if len(params) != 2:
            raise RequestError(
                ERROR_INVALID_PARAMS,
                f"{METHOD_FORWARD_TO_ADDRESS} takes 2 parameters ({PARAM_ADDRESS}, {PARAM_REQUEST}), got {len(params)}",
            )
        path = self._validate_address(params[0])
        request = self._validate_request(params[1])
        try:
            self.proxy.forward(path, request)
        except ProxyError as e:
            raise RequestError(e.code, str(e), e.to_data()) from e
        return {}

    def _handle_get_client_info(self, params):
        return self.registry.info()

    def _handle_get_device_info(self, params):
        return {
            "name": self.device_name,
            "form_factor": self.form_factor,
            "hardware": self.hardware_info,
            "uptime_ms": ticks_diff(ticks_ms(), self._start_ticks),
            "requests_handled": self.requests_handled,
            "forwarded": self.proxy.forward_count,
        }

    def _handle_get_methods(self, params):
        return sorted(self._methods)

    def _led_name(self, method, params):
        if len(params) != 1:
            raise RequestError(ERROR_INVALID_PARAMS, f"{method} takes 1 parameter ({PARAM_LED}), got {len(params)}")
        name = params[0]
        if name not in self.leds.names:
            raise RequestError(
                ERROR_INVALID_PARAMS,
                f"Parameter '{PARAM_LED}' must be one of {self.leds.names}, got {name!r}",
            )
        return name

    def _handle_set_led_on(self, params):
        self.leds.set_on(self._led_name(METHOD_SET_LED_ON, params))
        return {}

    def _handle_set_led_off(self, params):
        self.leds.set_off(self._led_name(METHOD_SET_LED_OFF, params))
        return {}

    def _handle_set_leds_enabled(self, params):
        if len(params) != 1 or not isinstance(params[0], bool):
            raise RequestError(ERROR_INVALID_PARAMS, f"Parameter '{PARAM_ENABLED}' must be a boolean")
        self.leds.set_enabled(params[0])
        return {}

    def _handle_get_led_info(self, params):
        return self.leds.info()
#endregion

#region --- Dispatch ---
    def _parse_request(self, request):
        """Split a request into (id, method, params).

        Accepts ``{"id", "method", "params"}`` objects and compact
        ``["method", param, ...]`` arrays; a compact request's id is its method name.
        Params may be an array or an object keyed by parameter name.
        """
        if isinstance(request, dict):
            request_id = request.get(KEY_ID)
            method = request.get(KEY_METHOD)
            params = request.get(KEY_PARAMS, [])
        elif isinstance(request, list) and request:
            method = request[0]
            request_id = method
            params = request[1:]
        else:
            raise RequestError(ERROR_INVALID_REQUEST, "Request must be an object or a non-empty array")

        if not isinstance(method, str):
            raise RequestError(ERROR_INVALID_REQUEST, "Method must be a string")
        if isinstance(params, dict):
            names = self._param_names.get(method, ())
            params = [params.get(name) for name in names] if params else []
        elif not isinstance(params, list):
            raise RequestError(ERROR_INVALID_PARAMS, "Params must be an array or an object")
        return request_id, method, params

    def handle_request(self, request):
        """Dispatch one parsed request.

        Returns:
            dict: The response object to write back.
        """
        request_id = request.get(KEY_ID) if isinstance(request, dict) else None
        try:
            request_id, method, params = self._parse_request(request)
            handler = self._methods.get(method)
            if handler is None:
                raise RequestError(ERROR_METHOD_NOT_FOUND, f"Method not found: {method}")
            result = handler(params)
        except RequestError as e:
            return self._error_response(request_id, e)

        self.requests_handled += 1
        return {KEY_ID: request_id, KEY_RESULT: result}

    def _error_response(self, request_id, error):
        body = {KEY_CODE: error.code, KEY_MESSAGE: error.message}
        if error.data is not None:
            body[KEY_DATA] = error.data
        return {KEY_ID: request_id, KEY_ERROR: body}

    def handle_frame(self, frame):
        """Handle one inbound value: relay frames are forwarded, everything else is a request.

        Returns:
            dict or None: Response to write back, None for relay frames.
        """
        if is_relay_frame(frame):
            remaining, payload = frame
            try:
                self.proxy.forward(remaining, payload)
            except ProxyError as e:
                # Relays are fire-and-forget; the proxy already logged the failure
                DeviceLogger.debug("DEVM", f"Relay dropped: {e}")
            return None
        if is_response(frame):
            # Replies from downstream devices are not correlated; answering them would echo forever
            DeviceLogger.debug("DEVM", f"Ignoring downstream response: {frame}")
            return None
        if self._debug_mode:
            DeviceLogger.debug("DEVM", f"Request: {frame}")
        return self.handle_request(frame)

    def _service_stream(self, stream):
        """Read and answer at most one request from a server stream."""
        try:
            frame = stream.read_line()
        except ValueError as e:
            DeviceLogger.warning("DEVM", f"Bad input on {getattr(stream, 'name', stream)}: {e}")
            response = self._error_response(None, RequestError(ERROR_PARSE, str(e)))
        else:
            if frame is None:
                return False
            response = self.handle_frame(frame)
            if response is None:
                return True

        try:
            stream.write(response)
        except BufferError as e:
            DeviceLogger.warning("DEVM", f"Response dropped on {getattr(stream, 'name', stream)}: {e}")
        return True

    def update(self):
        """Handle pending requests, at most one per server stream. Never blocks.

        Returns:
            int: Number of frames handled in this pass.
        """
        handled = 0
        for stream in self.server_streams:
            if self._service_stream(stream):
                handled += 1
        return handled
#endregion

    def _all_streams(self):
        streams = []
        for stream in self.server_streams:
            if stream not in streams:
                streams.append(stream)
        for client_stream in self.registry:
            if client_stream.stream is not None and client_stream.stream not in streams:
                streams.append(client_stream.stream)
        return streams

    async def start(self):
        """Start the TX workers and serve requests until stop() is called."""
        DeviceLogger.info(
            "DEVM",
            f"{self.device_name} ({self.form_factor}) serving {len(self.server_streams)} streams, "
            f"client streams {self.registry.ids()}"
        )
        for stream in self._all_streams():
            if hasattr(stream, "start"):
                stream.start()

        self._running = True
        while self._running:
            if self.update():
                await asyncio.sleep(0)
            else:
                await asyncio.sleep(self.update_interval)

        for stream in self._all_streams():
            if hasattr(stream, "stop"):
                stream.stop()

    def stop(self):
        self._running = False
