from ignis.core.schema.registry import WireType

_UINT64_MASK = (1 << 64) - 1


def write_varint(buf: bytearray, value: int) -> None:
    """
    Append `value` to `buf` as a base-128 varint, least significant
    group first.

    Negative values are written as their 64-bit two's complement, which
    is how protobuf encodes a negative int32 (always 10 bytes).
    """
    if value < 0:
        value &= _UINT64_MASK

    while value > 0x7F:
        buf.append((value & 0x7F) | 0x80)
        value >>= 7
    buf.append(value)


def encode_varint(value: int) -> bytes:
    buf = bytearray()
    write_varint(buf, value)
    return bytes(buf)


def encode_tag(field_number: int, wire_type: WireType) -> bytes:
    if field_number < 1:
        raise ValueError(f"Invalid field number: {field_number}")
    return encode_varint((field_number << 3) | wire_type)


def write_length_delimited(buf: bytearray, payload: bytes | bytearray | memoryview) -> None:
    """Append a varint byte count followed by exactly that payload."""
    write_varint(buf, len(payload))
    buf.extend(payload)
