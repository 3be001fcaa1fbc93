from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1


@dataclass(frozen=True, slots=True)
class HeaderFields:
    """
    The repeated values of a single header, e.g. several Set-Cookie lines.
    Order is significant and preserved on the wire.
    """
    fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.fields, (str, bytes, bytearray)):
            raise TypeError(
                f"HeaderFields expects a sequence of strings, got {type(self.fields).__name__}"
            )
        object.__setattr__(self, "fields", tuple(self.fields))

    def to_dict(self) -> dict[str, Any]:
        return {"fields": list(self.fields)}


@dataclass(frozen=True, slots=True)
class ResponseMessage:
    """
    An HTTP-like response ready to cross the runtime boundary.

    Instances are immutable: the body is stored as bytes and the header
    mapping is wrapped in a read-only proxy, so the encoder always sees
    the value that was validated.
    """
    body: bytes
    """
    Raw response payload. May be empty.
    """

    status_code: int
    """
    Signed 32-bit status, conventionally an HTTP status code.
    """

    length: int
    """
    Caller-supplied payload length. It is expected to match len(body)
    but is carried on the wire as given and never derived here.
    """

    header: Mapping[str, HeaderFields] = field(default_factory=dict)
    """
    Header name (case-sensitive, as provided) to its values.
    """

    def __post_init__(self) -> None:
        object.__setattr__(self, "body", bytes(self.body))
        object.__setattr__(self, "header", MappingProxyType(dict(self.header)))

    @classmethod
    def from_headers(
        cls,
        body: bytes,
        status_code: int,
        length: int,
        headers: Mapping[str, Iterable[str]],
    ) -> "ResponseMessage":
        """Build a message from a plain name -> values mapping."""
        return cls(
            body=body,
            status_code=status_code,
            length=length,
            header={name: HeaderFields(values) for name, values in headers.items()},  # type: ignore[arg-type]
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire-named dictionary representation of the message."""
        return {
            "body": self.body,
            "statusCode": self.status_code,
            "length": self.length,
            "header": {name: value.to_dict() for name, value in self.header.items()},
        }
