"""Compiler configuration.

Values are read from an optional YAML file, then overridden by
``CONTRACT_FORGE_*`` environment variables, then by command-line options.
"""

from pathlib import Path

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from contract_forge.errors import ConfigError


class CompilerConfig(BaseSettings):
    """Settings for one compiler run (``CONTRACT_FORGE_*``)."""

    model_config = SettingsConfigDict(env_prefix="CONTRACT_FORGE_", extra="forbid")

    port: int = Field(default=3020, description="Port the generated server listens on")
    output: Path = Field(default=Path("generated"), description="Output directory")
    overwrite_endpoints: bool = Field(
        default=False, description="Replace existing endpoint implementations"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # init kwargs carry the config file, which the environment overrides
        return env_settings, init_settings


def load_config(config_path: Path | None = None) -> CompilerConfig:
    data: dict = {}
    if config_path is not None:
        try:
            loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"{config_path}: invalid YAML: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"{config_path}: configuration must be a mapping")
        data.update(loaded or {})

    try:
        return CompilerConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}") from e
