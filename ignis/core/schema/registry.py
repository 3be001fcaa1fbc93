from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from types import MappingProxyType

from ignis.core.errors import SchemaLookupError


class WireType(IntEnum):
    """
    Wire types used by the response schema. The value is stored in the
    low three bits of every field tag.
    """
    VARINT = 0
    LEN = 2


class ValueType(StrEnum):
    bytes = "bytes"
    int32 = "int32"
    string = "string"
    message = "message"
    map = "map"


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """
    Static description of one field of a message type.
    """
    name: str
    """
    Field name as it appears on the wire schema, e.g. "statusCode".
    """

    tag: int
    """
    Field number. Part of the wire contract, never reassigned.
    """

    wire_type: WireType

    repeated: bool

    value_type: ValueType

    attribute: str
    """
    Attribute holding the value on the Python object.
    """

    message_type: str | None = None
    """
    Registered type name for message fields and map entries.
    """


class SchemaRegistry:
    """
    Immutable table of message types and their field layouts.

    The registry is built once at import time and only exposes read
    operations, so it can be shared across threads without locking.
    """
    def __init__(self, types: Mapping[str, tuple[FieldDescriptor, ...]]) -> None:
        self._types = MappingProxyType({
            name: tuple(sorted(fields, key=lambda f: f.tag))
            for name, fields in types.items()
        })

    def lookup(self, type_name: str) -> tuple[FieldDescriptor, ...]:
        try:
            return self._types[type_name]
        except KeyError:
            raise SchemaLookupError(type_name) from None

    def field(self, type_name: str, name: str) -> FieldDescriptor:
        for descriptor in self.lookup(type_name):
            if descriptor.name == name:
                return descriptor
        raise SchemaLookupError(f"{type_name}.{name}")

    def type_names(self) -> tuple[str, ...]:
        return tuple(self._types)

    def render_proto(self, package: str = "ignis") -> str:
        """
        Render the registry as a proto3 document.

        Map entry types are folded back into `map<...>` fields, which is
        how the host side declares them.
        """
        lines = ['syntax = "proto3";', "", f"package {package};", ""]

        for type_name in self._types:
            if "." in type_name:
                continue

            lines.append(f"message {type_name} {{")
            for descriptor in self._types[type_name]:
                lines.append(f"  {self._proto_type(descriptor)} {descriptor.name} = {descriptor.tag};")
            lines.append("}")
            lines.append("")

        return "\n".join(lines)

    def _proto_type(self, descriptor: FieldDescriptor) -> str:
        if descriptor.value_type is ValueType.map:
            key, value = self.lookup(descriptor.message_type)  # type: ignore[arg-type]
            return f"map<{self._proto_type(key)}, {self._proto_type(value)}>"

        if descriptor.value_type is ValueType.message:
            name = descriptor.message_type
        else:
            name = descriptor.value_type.value

        return f"repeated {name}" if descriptor.repeated else str(name)


RESPONSE_MESSAGE = "ResponseMessage"
HEADER_ENTRY = "ResponseMessage.HeaderEntry"
HEADER_FIELDS = "HeaderFields"


RESPONSE_SCHEMA = SchemaRegistry({
    RESPONSE_MESSAGE: (
        FieldDescriptor(
            name="body",
            tag=1,
            wire_type=WireType.LEN,
            repeated=False,
            value_type=ValueType.bytes,
            attribute="body",
        ),
        FieldDescriptor(
            name="statusCode",
            tag=2,
            wire_type=WireType.VARINT,
            repeated=False,
            value_type=ValueType.int32,
            attribute="status_code",
        ),
        FieldDescriptor(
            name="length",
            tag=3,
            wire_type=WireType.VARINT,
            repeated=False,
            value_type=ValueType.int32,
            attribute="length",
        ),
        FieldDescriptor(
            name="header",
            tag=4,
            wire_type=WireType.LEN,
            repeated=True,
            value_type=ValueType.map,
            attribute="header",
            message_type=HEADER_ENTRY,
        ),
    ),
    HEADER_ENTRY: (
        FieldDescriptor(
            name="key",
            tag=1,
            wire_type=WireType.LEN,
            repeated=False,
            value_type=ValueType.string,
            attribute="key",
        ),
        FieldDescriptor(
            name="value",
            tag=2,
            wire_type=WireType.LEN,
            repeated=False,
            value_type=ValueType.message,
            attribute="value",
            message_type=HEADER_FIELDS,
        ),
    ),
    HEADER_FIELDS: (
        FieldDescriptor(
            name="fields",
            tag=1,
            wire_type=WireType.LEN,
            repeated=True,
            value_type=ValueType.string,
            attribute="fields",
        ),
    ),
})
