from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cardwise.domain.constants import DEFAULT_FORECAST_DAYS


class AppConfig(BaseSettings):
    """
    Configuration model for cardwise.
    Supports loading from:
    1. Environment variables (CARDWISE_*)
    2. Config file (~/.config/cardwise/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="CARDWISE_",
        extra="ignore",
    )

    # Paths
    store_path: Path = Field(
        default_factory=lambda: Path.home() / ".config/cardwise/cards.json"
    )

    # Scheduling
    strict_outcomes: bool = True
    forecast_days: int = Field(default=DEFAULT_FORECAST_DAYS, ge=1, le=365)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        toml_file = None
        for f in _config_files():
            if f.exists():
                toml_file = f
                break

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("store_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def _config_files() -> list[Path]:
    return [
        Path.home() / ".config/cardwise/config.toml",
        Path.home() / ".cardwise.toml",
    ]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/cardwise/config.toml (if exists)
    3. Environment variables (CARDWISE_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes every option; unset ones arrive as None and must not mask lower layers.
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
