"""Config module exports."""

from propmap.config.loader import get_config, load_config, set_config
from propmap.config.models import (
    AdapterConfig,
    LoggingConfig,
    LogOutputConfig,
    PropMapConfig,
)

__all__ = [
    "load_config",
    "get_config",
    "set_config",
    "PropMapConfig",
    "AdapterConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
