import base64
import binascii
from pathlib import Path
from typing import Any

import yaml

from ignis.core.ports.transport import TextEncoder, utf8_encode


class DocumentError(Exception):
    pass


def load_document(path: Path, text_encoder: TextEncoder = utf8_encode) -> dict[str, Any]:
    """
    Load a YAML response document into a ResponseMessage candidate.

    Accepted keys:
        body         text, encoded with `text_encoder`, or a list of byte values
        body_base64  raw bytes as base64 (takes precedence over body)
        statusCode   integer
        length       integer, defaults to the byte size of the body
        header       name -> list of values, or name -> {fields: [...]}

    Only the document format is handled here. Type checking is left to
    the validator.
    """
    try:
        with path.open("r", encoding="utf-8") as fp:
            raw = yaml.safe_load(fp)
    except (OSError, yaml.YAMLError) as exc:
        raise DocumentError(f"Cannot read response document '{path}': {exc}") from exc

    if not isinstance(raw, dict):
        raise DocumentError(f"Response document '{path}' must be a mapping")

    return to_candidate(raw, text_encoder)


def to_candidate(raw: dict[str, Any], text_encoder: TextEncoder = utf8_encode) -> dict[str, Any]:
    candidate = dict(raw)

    if "body_base64" in candidate:
        try:
            candidate["body"] = base64.b64decode(candidate.pop("body_base64"), validate=True)
        except (binascii.Error, TypeError, ValueError) as exc:
            raise DocumentError(f"Invalid body_base64: {exc}") from exc
    elif isinstance(candidate.get("body"), str):
        candidate["body"] = text_encoder(candidate["body"])
    elif candidate.get("body") is None:
        candidate["body"] = b""

    if "length" not in candidate and isinstance(candidate["body"], (bytes, bytearray, list, tuple)):
        candidate["length"] = len(candidate["body"])

    header = candidate.get("header")
    if header is None:
        candidate["header"] = {}
    elif isinstance(header, dict):
        candidate["header"] = {
            name: {"fields": value} if isinstance(value, list) else value
            for name, value in header.items()
        }

    return candidate
