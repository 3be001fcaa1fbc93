import logging
import struct
from typing import BinaryIO

from ignis.core.ports.transport import Transport


class StreamTransport(Transport):
    """
    Writes each encoded response to a binary stream, typically the
    process stdout owned by the host, and flushes it immediately.
    """
    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._logger = logging.getLogger("infra.stream_transport")

    def write(self, view: memoryview) -> None:
        written = self._stream.write(view)
        if written is not None and written != view.nbytes:
            self._logger.warning(f"Short write: {written}/{view.nbytes} bytes")
        self._stream.flush()


class FramedTransport(Transport):
    """
    Prefixes every buffer with its length before delegating to another
    transport, for hosts reading several responses from one stream.

    Each frame begins with a 4-byte big-endian length prefix followed by
    the encoded message.
    """
    def __init__(self, inner: Transport) -> None:
        self._inner = inner

    def write(self, view: memoryview) -> None:
        # "!I" = uint32 big-endian (network order)
        frame = struct.pack("!I", view.nbytes) + view.tobytes()
        with memoryview(frame) as framed:
            self._inner.write(framed)
