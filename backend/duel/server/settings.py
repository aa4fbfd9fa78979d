"""Duel server configuration via environment variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from shared.logging import LogFormat, LogLevel
from shared.validators import OriginListEnvSettingsSource, parse_origin_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class DuelServerSettings(BaseSettings):
    model_config = {"env_prefix": "DUEL_"}

    log_dir: str = "backend/logs/duel"
    log_format: LogFormat = "console"
    log_level: LogLevel = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]
    # unset keeps everything in process memory
    store_dir: str | None = None
    token_secret: str = Field(default="dev-only-duel-token-secret", min_length=16)
    # 0 disables the in-process sweep; an external caller hits /cleanup-rooms instead
    cleanup_interval_seconds: float = Field(default=0, ge=0)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_origin_list(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, OriginListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings)
