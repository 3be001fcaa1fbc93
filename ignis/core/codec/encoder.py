import logging
from collections.abc import Mapping
from typing import Any, NamedTuple

from ignis.core.codec.varint import encode_tag, write_length_delimited, write_varint
from ignis.core.models.response import ResponseMessage
from ignis.core.ports.transport import TextEncoder, utf8_encode
from ignis.core.schema.registry import (
    RESPONSE_MESSAGE,
    RESPONSE_SCHEMA,
    FieldDescriptor,
    SchemaRegistry,
    ValueType,
)


class MapEntry(NamedTuple):
    """One key/value pair of a map field, encoded as a two-field submessage."""
    key: str
    value: Any


class ResponseEncoder:
    """
    Serializes a validated ResponseMessage into the tagged binary format.

    The encoder walks the schema registry rather than the Python object:
    for every registered field, in tag order, it reads the attribute named
    by the descriptor and emits `tag || payload`. Nested messages and map
    entries are encoded into their own buffer first so that their length
    prefix is exact, then appended to the parent.

    Wire rules:
    - varint scalars (statusCode, length) are always emitted, zero included
    - an empty singular bytes field (body) is omitted
    - repeated fields emit one entry per element, in input order, and
      nothing when empty
    - map entries follow the mapping's iteration order, or key order when
      `deterministic` is set

    No overall length prefix is added. Framing belongs to the transport.

    The encoder does not validate. It only accepts ResponseMessage values,
    which are produced by the validator or built explicitly by the caller.
    """
    def __init__(
        self,
        registry: SchemaRegistry = RESPONSE_SCHEMA,
        text_encoder: TextEncoder = utf8_encode,
        deterministic: bool = False,
    ) -> None:
        self._registry = registry
        self._text_encoder = text_encoder
        self._deterministic = deterministic
        self._logger = logging.getLogger("core.codec.encoder")

    def encode(self, message: ResponseMessage) -> bytes:
        if not isinstance(message, ResponseMessage):
            raise TypeError(
                f"ResponseEncoder expects a ResponseMessage, got {type(message).__name__}"
            )

        buf = bytearray()
        self._write_message(buf, RESPONSE_MESSAGE, message)

        self._logger.debug(
            f"Encoded response status={message.status_code} "
            f"headers={len(message.header)} into {len(buf)} bytes"
        )
        return bytes(buf)

    def _write_message(self, buf: bytearray, type_name: str, value: Any) -> None:
        for descriptor in self._registry.lookup(type_name):
            field_value = getattr(value, descriptor.attribute)

            if descriptor.value_type is ValueType.map:
                self._write_map(buf, descriptor, field_value)
            elif descriptor.repeated:
                for item in field_value:
                    self._write_field(buf, descriptor, item)
            else:
                self._write_field(buf, descriptor, field_value)

    def _write_map(
        self,
        buf: bytearray,
        descriptor: FieldDescriptor,
        mapping: Mapping[str, Any]
    ) -> None:
        keys = sorted(mapping) if self._deterministic else list(mapping)

        for key in keys:
            entry = MapEntry(key=key, value=mapping[key])
            self._write_submessage(buf, descriptor, entry)

    def _write_field(self, buf: bytearray, descriptor: FieldDescriptor, value: Any) -> None:
        match descriptor.value_type:
            case ValueType.int32:
                buf += encode_tag(descriptor.tag, descriptor.wire_type)
                write_varint(buf, value)

            case ValueType.bytes:
                if not descriptor.repeated and not value:
                    return
                buf += encode_tag(descriptor.tag, descriptor.wire_type)
                write_length_delimited(buf, value)

            case ValueType.string:
                buf += encode_tag(descriptor.tag, descriptor.wire_type)
                write_length_delimited(buf, self._text_encoder(value))

            case ValueType.message:
                self._write_submessage(buf, descriptor, value)

            case _:
                raise TypeError(f"Cannot encode {descriptor.value_type} field {descriptor.name!r}")

    def _write_submessage(self, buf: bytearray, descriptor: FieldDescriptor, value: Any) -> None:
        sub = bytearray()
        self._write_message(sub, descriptor.message_type, value)  # type: ignore[arg-type]

        buf += encode_tag(descriptor.tag, descriptor.wire_type)
        write_length_delimited(buf, sub)
