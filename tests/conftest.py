import pytest

from tests.fake.fake_transport import FakeTransport

from ignis.core.codec.encoder import ResponseEncoder
from ignis.core.emitter import ResponseEmitter
from ignis.core.models.response import HeaderFields, ResponseMessage
from ignis.core.validation.validator import ResponseValidator


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def validator():
    return ResponseValidator()


@pytest.fixture
def encoder():
    return ResponseEncoder()


@pytest.fixture
def emitter(validator, encoder, transport):
    return ResponseEmitter(validator=validator, encoder=encoder, transport=transport)


@pytest.fixture
def sample_message() -> ResponseMessage:
    body = b'{"msg": "Hello from Ignis."}'
    return ResponseMessage(
        body=body,
        status_code=200,
        length=len(body),
        header={
            "content-type": HeaderFields(("application/json",)),
            "x-custom-header": HeaderFields(("value1", "value2")),
        },
    )
