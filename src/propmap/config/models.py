"""Config models for propmap. Defaults here are the lowest-precedence layer.

Every scalar can be overridden from the environment as
PROPMAP__<SECTION>__<KEY>=<VALUE>, for example:
    PROPMAP__LOGGING__LEVEL=DEBUG
    PROPMAP__ADAPTER__DEFAULT_TIER=resolved
    PROPMAP__ADAPTER__WARN_ON_WRITER_DEMOTION=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from propmap.adapter.models import AccessTier

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """One log destination. Lists of outputs are set in YAML, not env vars."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # or stdout, or an absolute file path
    level: LogLevel | None = None  # None: use LoggingConfig.level

    @field_validator("destination")
    @classmethod
    def _check_destination(cls, value: str) -> str:
        if value in ("stderr", "stdout"):
            return value
        path = Path(value).expanduser()
        if not path.is_absolute():
            raise ValueError(f"log file must be an absolute path, got {value!r}")
        return str(path)


class LoggingConfig(BaseModel):
    """Root log level and outputs.

    Env vars:
        PROPMAP__LOGGING__LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG shows discovery events for every adapted type.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class AdapterConfig(BaseModel):
    """Property adapter configuration.

    Env vars:
        PROPMAP__ADAPTER__DEFAULT_TIER: Handle tier used by adapt() when none is given
        PROPMAP__ADAPTER__WARN_ON_WRITER_DEMOTION: Log dropped writers at WARNING
    """

    default_tier: AccessTier = Field(
        default=AccessTier.COMPILED,
        description="Handle backend used when adapt() gets no tier. Tiers differ in "
        "setup and call cost only, never in behavior.",
    )
    warn_on_writer_demotion: bool = Field(
        default=False,
        description="Log a writer dropped for an incompatible type at WARNING instead "
        "of DEBUG. The property stays read-only either way.",
    )


class PropMapConfig(BaseModel):
    """Root config, as returned by ``load_config``."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    adapter: AdapterConfig = Field(default_factory=AdapterConfig)
