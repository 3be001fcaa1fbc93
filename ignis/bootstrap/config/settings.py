from enum import StrEnum
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from ignis.bootstrap.config.loader import get_configfile


class Framing(StrEnum):
    raw = "raw"
    length_prefixed = "length-prefixed"


class EncoderSettings(BaseModel):
    deterministic: Annotated[
        bool,
        Field(
            description=(
                "Emit header map entries sorted by key instead of insertion order.\n"
                "Two equal responses then always produce identical bytes."
            ),
            default=False
        )
    ]


class TransportSettings(BaseModel):
    framing: Annotated[
        Framing,
        Field(
            description=(
                "How each encoded response is delimited on the output stream.\n"
                "'raw' writes the message alone, the host knows where it ends.\n"
                "'length-prefixed' adds a 4-byte big-endian length before it."
            ),
            default=Framing.raw
        )
    ]

    output: Annotated[
        Path | None,
        Field(
            description="File receiving the encoded responses. Defaults to stdout.",
            default=None
        )
    ]


class IgnisConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="IGNIS_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    encoder: Annotated[
        EncoderSettings,
        Field(
            description="Encoder behaviour.",
            default_factory=EncoderSettings
        )
    ]

    transport: Annotated[
        TransportSettings,
        Field(
            description="Where and how encoded buffers are written.",
            default_factory=TransportSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: tuple[PydanticBaseSettingsSource, ...] = (init_settings, env_settings)

        configfile = get_configfile()
        if configfile is not None:
            sources += (YamlConfigSettingsSource(settings_cls, yaml_file=configfile),)

        return sources
