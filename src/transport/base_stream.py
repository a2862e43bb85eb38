"""Base stream interface for device communication."""


class BaseStream:
    """Abstract base class for structured byte-stream endpoints.

    Stream classes handle the physical layer concerns:
    - Serializing one structured value into one frame
    - Buffering so writes never stall the control loop
    - Reassembling inbound bytes into complete frames

    This abstraction lets the proxy and the request dispatcher work with
    JSON values without knowing about UART, USB or test doubles.
    """

    def write(self, value):
        """Queue one value as a single frame.

        Parameters:
            value: JSON-compatible value (dict, list, str, int, float, bool, None).

        Raises:
            NotImplementedError: Must be implemented by subclass.
        """
        raise NotImplementedError("Subclass must implement write()")

    def write_raw(self, frame):
        """Queue pre-encoded frame bytes, all of them or none.

        Raises:
            NotImplementedError: Must be implemented by subclass.
        """
        raise NotImplementedError("Subclass must implement write_raw()")

    def read_line(self):
        """Return the next complete inbound value, or None if none is ready.

        Raises:
            NotImplementedError: Must be implemented by subclass.
        """
        raise NotImplementedError("Subclass must implement read_line()")

    def clear_buffer(self):
        """Clear any buffered data.

        Useful for recovery from error states.

        Raises:
            NotImplementedError: Must be implemented by subclass.
        """
        raise NotImplementedError("Subclass must implement clear_buffer()")
