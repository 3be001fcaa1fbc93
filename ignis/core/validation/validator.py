import logging
from collections.abc import Mapping
from typing import Annotated, Any

import pydantic
from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    model_validator,
)

from ignis.core.errors import ValidationError
from ignis.core.models.response import INT32_MAX, INT32_MIN, HeaderFields, ResponseMessage


def _as_bytes(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)

    if isinstance(value, (list, tuple)):
        try:
            return bytes(value)
        except (TypeError, ValueError):
            raise ValueError("byte sequence must only contain integers in range 0..255") from None

    return value


def _as_list(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value


def _as_dict(value: Any) -> Any:
    if isinstance(value, Mapping) and not isinstance(value, dict):
        return dict(value)
    return value


def _utf8(value: str) -> str:
    # UnicodeEncodeError is a ValueError, reported as a validation problem
    value.encode("utf-8")
    return value


Int32 = Annotated[int, Field(strict=True, ge=INT32_MIN, le=INT32_MAX)]
Utf8Str = Annotated[str, Field(strict=True), AfterValidator(_utf8)]


class HeaderFieldsShape(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    fields: Annotated[list[Utf8Str], BeforeValidator(_as_list)]

    @model_validator(mode="before")
    @classmethod
    def unwrap_header_fields(cls, data: Any) -> Any:
        if isinstance(data, HeaderFields):
            return {"fields": list(data.fields)}
        return _as_dict(data)


class ResponseShape(BaseModel):
    """
    Accepted shape of a ResponseMessage candidate.

    Strict mode: no str -> bytes or float -> int coercion happens.
    Unknown keys are ignored.
    """
    model_config = ConfigDict(strict=True, extra="ignore")

    body: Annotated[bytes, BeforeValidator(_as_bytes)]
    status_code: Int32 = Field(validation_alias=AliasChoices("statusCode", "status_code"))
    length: Int32
    header: Annotated[dict[Utf8Str, HeaderFieldsShape], BeforeValidator(_as_dict)]

    def to_message(self) -> ResponseMessage:
        return ResponseMessage(
            body=self.body,
            status_code=self.status_code,
            length=self.length,
            header={
                name: HeaderFields(tuple(value.fields))
                for name, value in self.header.items()
            },
        )


class ResponseValidator:
    """
    Checks a candidate response against the ResponseMessage schema.

    A candidate is either a ResponseMessage or a mapping using the wire
    field names (`body`, `statusCode`, `length`, `header`). Header values
    are HeaderFields instances or `{"fields": [...]}` mappings.

    All problems are collected in a single pass and reported as one
    ValidationError. Validation has no side effects.
    """
    def __init__(self) -> None:
        self._logger = logging.getLogger("core.validation.validator")

    def validate(self, candidate: Any) -> ValidationError | None:
        try:
            self.parse(candidate)
        except ValidationError as exc:
            return exc
        return None

    def parse(self, candidate: Any) -> ResponseMessage:
        """
        Validate `candidate` and return it as an immutable ResponseMessage.

        Raises:
            ValidationError: if the candidate does not match the schema.
        """
        if isinstance(candidate, ResponseMessage):
            # header values stay raw so bad entries are reported, not raised
            candidate = {
                "body": candidate.body,
                "statusCode": candidate.status_code,
                "length": candidate.length,
                "header": dict(candidate.header),
            }
        else:
            candidate = _as_dict(candidate)

        try:
            shape = ResponseShape.model_validate(candidate)
        except pydantic.ValidationError as exc:
            problems = [self._describe(err) for err in exc.errors()]
            self._logger.warning(f"Rejected response candidate: {len(problems)} problem(s)")
            raise ValidationError(problems) from None

        return shape.to_message()

    @staticmethod
    def _describe(err: Any) -> str:
        loc = ".".join(str(part) for part in err["loc"]) or "value"
        return f"{loc}: {err['msg']}"
