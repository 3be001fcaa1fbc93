import logging
from collections.abc import Callable
from http import HTTPStatus

from ignis.core.emitter import ResponseEmitter
from ignis.core.models.response import ResponseMessage
from ignis.core.validation.validator import ResponseValidator


class ResponseWriter:
    """
    Collects a response the way an HTTP handler produces it: headers are
    set or appended, the status is written once, and body chunks are
    appended as they arrive.

    Header names are kept exactly as given (no canonicalization).
    """
    def __init__(self) -> None:
        self.status_code: int = HTTPStatus.OK
        self.header: dict[str, list[str]] = {}
        self._body = bytearray()

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def add_header(self, name: str, value: str) -> None:
        """Append a value to the header, keeping previous values."""
        self.header.setdefault(name, []).append(value)

    def set_header(self, name: str, value: str) -> None:
        """Replace every value of the header with `value`."""
        self.header[name] = [value]

    def del_header(self, name: str) -> None:
        self.header.pop(name, None)

    def write_header(self, status_code: int) -> None:
        self.status_code = status_code

    def write(self, data: bytes) -> int:
        self._body.extend(data)
        return len(data)

    def to_message(self, validator: ResponseValidator) -> ResponseMessage:
        """
        Build the validated message. The length field is the size of the
        body written so far.
        """
        body = bytes(self._body)
        return validator.parse({
            "body": body,
            "statusCode": int(self.status_code),
            "length": len(body),
            "header": {
                name: {"fields": list(values)}
                for name, values in self.header.items()
            },
        })


Handler = Callable[[ResponseWriter], None]


def handle(handler: Handler, emitter: ResponseEmitter) -> None:
    """
    Run `handler` against a fresh ResponseWriter and emit what it wrote.

    Exceptions raised by the handler propagate unchanged and nothing is
    emitted in that case.
    """
    logger = logging.getLogger("core.writer")

    writer = ResponseWriter()
    handler(writer)

    message = writer.to_message(emitter.validator)
    logger.debug(f"Handler produced status={message.status_code} length={message.length}")
    emitter.emit(message)
