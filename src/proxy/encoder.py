"""Frame shaping for forwarded requests."""

from transport.json_stream import encode_frame
from .errors import ChannelWriteError, InvalidPayloadError


class FrameEncoder:
    """Chooses terminal or relay framing and queues the frame on a client stream.

    Terminal frames carry the payload unchanged. Relay frames are
    ``[remaining_path, payload]``, so each device along a chain peels one hop
    and runs the same forward logic on what is left. Wrapping depth therefore
    equals the number of hops still to go.
    """

    @staticmethod
    def build_frame(remaining, payload):
        """Return the value to send to the next hop."""
        if remaining.is_empty():
            return payload
        return [remaining.to_list(), payload]

    def encode(self, remaining, payload, client_stream):
        """Serialize the frame and queue it on ``client_stream`` in one step.

        The frame is fully serialized before anything touches the stream, and
        the stream accepts it whole or not at all.

        Raises:
            InvalidPayloadError: If the payload is not a JSON value.
            ChannelWriteError: If the stream is unavailable or has no room.
        """
        frame = self.build_frame(remaining, payload)
        try:
            data = encode_frame(frame)
        except (TypeError, ValueError) as e:
            raise InvalidPayloadError(str(e)) from e

        stream = client_stream.stream
        if stream is None:
            raise ChannelWriteError(client_stream.id, "stream unavailable")
        try:
            stream.write_raw(data)
        except (BufferError, OSError) as e:
            raise ChannelWriteError(client_stream.id, str(e)) from e
        return len(data)
