import pytest

from tests.fake.fake_decoder import decode_response, iter_fields, read_varint

from ignis.core.codec.encoder import ResponseEncoder
from ignis.core.models.response import HeaderFields, ResponseMessage


def assert_length_prefixes(data: bytes, depth: int = 0) -> None:
    # iter_fields fails on any prefix that overruns its parent
    for number, wire_type, value in iter_fields(data):
        if wire_type == 2 and depth == 0 and number == 4:
            assert_length_prefixes(value, depth + 1)
        elif wire_type == 2 and depth == 1 and number == 2:
            list(iter_fields(value))


@pytest.mark.ut
def test_encode_exact_bytes(encoder):
    message = ResponseMessage(
        body=b"hi",
        status_code=200,
        length=2,
        header={"a": HeaderFields(("x",))},
    )

    assert encoder.encode(message) == (
        b"\x0a\x02hi"
        b"\x10\xc8\x01"
        b"\x18\x02"
        b"\x22\x08" b"\x0a\x01a" b"\x12\x03" b"\x0a\x01x"
    )


@pytest.mark.ut
def test_empty_body_and_headers_emit_only_varints(encoder):
    message = ResponseMessage(body=b"", status_code=204, length=0, header={})

    data = encoder.encode(message)

    assert data == b"\x10\xcc\x01\x18\x00"
    decoded = decode_response(data)
    assert decoded.body == b""
    assert dict(decoded.header) == {}
    assert decoded.status_code == 204
    assert decoded.length == 0


@pytest.mark.ut
def test_round_trip(encoder, sample_message):
    assert decode_response(encoder.encode(sample_message)) == sample_message


@pytest.mark.ut
def test_multi_valued_header_preserves_order(encoder):
    message = ResponseMessage(
        body=b"",
        status_code=200,
        length=0,
        header={"x-multi": HeaderFields(("a", "b", "c"))},
    )

    decoded = decode_response(encoder.encode(message))

    assert decoded.header["x-multi"].fields == ("a", "b", "c")


@pytest.mark.ut
def test_multiple_keys_survive(encoder):
    message = ResponseMessage.from_headers(
        body=b"{}",
        status_code=201,
        length=2,
        headers={"content-type": ["application/json"], "set-cookie": ["a=1", "b=2"]},
    )

    decoded = decode_response(encoder.encode(message))

    assert set(decoded.header) == {"content-type", "set-cookie"}
    assert decoded.header["content-type"].fields == ("application/json",)
    assert decoded.header["set-cookie"].fields == ("a=1", "b=2")


@pytest.mark.ut
def test_length_prefixes_match_payloads(encoder, sample_message):
    message = ResponseMessage(
        body=b"z" * 300,
        status_code=200,
        length=300,
        header={**sample_message.header, "x-long": HeaderFields(("v" * 200,))},
    )

    data = encoder.encode(message)
    assert_length_prefixes(data)

    tag, pos = read_varint(data)
    assert tag == 0x0a
    size, pos = read_varint(data, pos)
    assert size == 300
    assert data[pos:pos + size] == b"z" * 300


@pytest.mark.ut
def test_header_order_follows_mapping(encoder):
    message = ResponseMessage(
        body=b"",
        status_code=200,
        length=0,
        header={"b": HeaderFields(("2",)), "a": HeaderFields(("1",))},
    )

    keys = [list(iter_fields(value))[0][2] for number, _, value in iter_fields(encoder.encode(message)) if number == 4]

    assert keys == [b"b", b"a"]


@pytest.mark.ut
def test_deterministic_sorts_header_keys():
    encoder = ResponseEncoder(deterministic=True)
    first = ResponseMessage(
        body=b"",
        status_code=200,
        length=0,
        header={"b": HeaderFields(("2",)), "a": HeaderFields(("1",))},
    )
    second = ResponseMessage(
        body=b"",
        status_code=200,
        length=0,
        header={"a": HeaderFields(("1",)), "b": HeaderFields(("2",))},
    )

    assert encoder.encode(first) == encoder.encode(second)


@pytest.mark.ut
def test_empty_header_fields_still_emit_value(encoder):
    message = ResponseMessage(body=b"", status_code=200, length=0, header={"x": HeaderFields(())})

    data = encoder.encode(message)

    assert data.endswith(b"\x22\x05\x0a\x01x\x12\x00")
    assert decode_response(data).header["x"] == HeaderFields(())


@pytest.mark.ut
def test_empty_strings_in_fields_are_kept(encoder):
    message = ResponseMessage(body=b"", status_code=200, length=0, header={"x": HeaderFields(("", "a"))})

    assert decode_response(encoder.encode(message)).header["x"].fields == ("", "a")


@pytest.mark.ut
def test_negative_status_round_trips(encoder):
    message = ResponseMessage(body=b"", status_code=-1, length=-(2**31))

    data = encoder.encode(message)

    assert data[:11] == b"\x10" + b"\xff" * 9 + b"\x01"
    decoded = decode_response(data)
    assert decoded.status_code == -1
    assert decoded.length == -(2**31)


@pytest.mark.ut
def test_length_is_encoded_as_given(encoder):
    message = ResponseMessage(body=b"abc", status_code=200, length=42)

    assert decode_response(encoder.encode(message)).length == 42


@pytest.mark.ut
def test_non_ascii_text_uses_utf8(encoder):
    message = ResponseMessage(body=b"", status_code=200, length=0, header={"x-name": HeaderFields(("café",))})

    data = encoder.encode(message)

    assert "café".encode("utf-8") in data
    assert decode_response(data).header["x-name"].fields == ("café",)


@pytest.mark.ut
def test_injected_text_encoder_is_used():
    calls = []

    def text_encoder(text: str) -> bytes:
        calls.append(text)
        return text.upper().encode("ascii")

    encoder = ResponseEncoder(text_encoder=text_encoder)
    message = ResponseMessage(body=b"", status_code=200, length=0, header={"k": HeaderFields(("v",))})

    decoded = decode_response(encoder.encode(message))

    assert calls == ["k", "v"]
    assert decoded.header == {"K": HeaderFields(("V",))}


@pytest.mark.ut
def test_encoder_requires_response_message(encoder):
    with pytest.raises(TypeError):
        encoder.encode({"body": b"", "statusCode": 200, "length": 0, "header": {}})  # type: ignore[arg-type]


@pytest.mark.ut
def test_encode_returns_tight_bytes(encoder, sample_message):
    data = encoder.encode(sample_message)

    assert type(data) is bytes
    assert len(memoryview(data)) == len(data)
