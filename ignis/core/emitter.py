import logging
from typing import Any

from ignis.core.codec.encoder import ResponseEncoder
from ignis.core.ports.transport import Transport
from ignis.core.validation.validator import ResponseValidator


class ResponseEmitter:
    """
    Runs the full outgoing path for one response:
    validate the candidate, encode it, and hand the buffer to the host.

    The flow is synchronous and keeps no state between calls. When the
    candidate is invalid the ValidationError reaches the caller and the
    transport is never touched.
    """
    def __init__(
        self,
        validator: ResponseValidator,
        encoder: ResponseEncoder,
        transport: Transport,
    ) -> None:
        self._validator = validator
        self._encoder = encoder
        self._transport = transport
        self._logger = logging.getLogger("core.emitter")

    @property
    def validator(self) -> ResponseValidator:
        return self._validator

    def emit(self, candidate: Any) -> None:
        message = self._validator.parse(candidate)
        buffer = self._encoder.encode(message)

        with memoryview(buffer) as view:
            self._transport.write(view)

        self._logger.debug(f"Handed {len(buffer)} bytes to transport")
