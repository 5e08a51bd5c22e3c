"""Configuration loading with pydantic-settings.

Sources, later ones winning:
1. Built-in defaults (``propmap.config.models``)
2. Global YAML file ``~/.config/propmap/config.yaml``, when present
3. Explicit YAML file passed to ``load_config``, layered over the global one
4. Environment variables ``PROPMAP__SECTION__KEY``
5. Keyword arguments to ``load_config``

A loaded config only takes effect once installed with ``set_config``; until
then ``get_config`` loads one from the global file and environment.
"""

import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from propmap.config.models import AdapterConfig, LoggingConfig, PropMapConfig
from propmap.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/propmap/config.yaml").expanduser()


def _read_yaml(path: Path) -> dict[str, Any]:
    """Parse one YAML file into a mapping; an empty file is an empty mapping."""
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _file_layers(config_path: Path | str | None) -> dict[str, Any]:
    layers: dict[str, Any] = {}
    if GLOBAL_CONFIG_PATH.is_file():
        layers = _read_yaml(GLOBAL_CONFIG_PATH)
    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.is_file():
            raise ConfigError.file_not_found(str(path))
        layers = _deep_merge(layers, _read_yaml(path))
    return layers


def _settings_for(file_values: dict[str, Any]) -> type[BaseSettings]:
    """Settings class whose lowest non-default source is ``file_values``."""

    class PropMapSettings(BaseSettings):
        model_config = SettingsConfigDict(
            env_prefix="PROPMAP__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        adapter: AdapterConfig = AdapterConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # First source wins; no .env or secrets directory
            files = InitSettingsSource(settings_cls, init_kwargs=file_values)
            return (init_settings, env_settings, files)

    return PropMapSettings


def load_config(config_path: Path | str | None = None, **kwargs: Any) -> PropMapConfig:
    """Build a config from files, environment and ``kwargs``.

    Args:
        config_path: YAML file layered over the global one. Must exist when
                     given.
        **kwargs: Section overrides, e.g. ``adapter={"default_tier": "resolved"}``.

    Raises:
        ConfigError: Missing explicit file, unparsable YAML or a value that
                     fails validation (the first failing field is reported).
    """
    settings_cls = _settings_for(_file_layers(config_path))
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(location, first.get("input"), first["msg"]) from e
    return PropMapConfig.model_validate(settings.model_dump())


_active_config: PropMapConfig | None = None
_active_lock = threading.Lock()


def get_config() -> PropMapConfig:
    """Active config, loaded from the global file and environment on first use."""
    global _active_config
    config = _active_config
    if config is None:
        loaded = load_config()
        with _active_lock:
            if _active_config is None:
                _active_config = loaded
            config = _active_config
    return config


def set_config(config: PropMapConfig | None) -> None:
    """Install ``config`` as the active config; ``None`` reloads on next use."""
    global _active_config
    with _active_lock:
        _active_config = config
