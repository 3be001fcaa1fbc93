import json
import sys
from functools import lru_cache
from typing import BinaryIO

from pydantic import ValidationError

from ignis.bootstrap.config.settings import Framing, IgnisConfig
from ignis.core.codec.encoder import ResponseEncoder
from ignis.core.emitter import ResponseEmitter
from ignis.core.ports.transport import Transport
from ignis.core.validation.validator import ResponseValidator
from ignis.infra.stream_transport import FramedTransport, StreamTransport


@lru_cache
def get_config() -> IgnisConfig:
    try:
        return IgnisConfig()
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(part) for part in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))


def build_emitter(config: IgnisConfig, stream: BinaryIO) -> ResponseEmitter:
    transport: Transport = StreamTransport(stream)
    if config.transport.framing is Framing.length_prefixed:
        transport = FramedTransport(transport)

    return ResponseEmitter(
        validator=ResponseValidator(),
        encoder=ResponseEncoder(deterministic=config.encoder.deterministic),
        transport=transport,
    )


def open_output(config: IgnisConfig) -> BinaryIO:
    if config.transport.output is None:
        return sys.stdout.buffer
    return config.transport.output.open("ab")
