"""Structured logging for propmap.

The library emits a handful of structlog events (``properties_discovered``,
``handles_built``, ``writer_demoted``) and configures nothing on import.
Applications and the CLI call ``configure_logging`` to route them, along with
any stdlib logging records, through one or more outputs:

- ``stderr``/``stdout`` or an absolute file path
- console or JSON rendering
- a level per output, defaulting to the root level
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from propmap.config.models import LoggingConfig, LogOutputConfig


def _level(name: str | None, fallback: int) -> int:
    if not name:
        return fallback
    return logging.getLevelNamesMapping().get(name.upper(), fallback)


def _stream(destination: str) -> IO[str] | None:
    if destination == "stderr":
        return sys.stderr
    if destination == "stdout":
        return sys.stdout
    return None


def _event_processors() -> list[structlog.types.Processor]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]


def _make_formatter(
    output: LogOutputConfig, pre_chain: list[structlog.types.Processor]
) -> logging.Formatter:
    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        stream = _stream(output.destination)
        renderer = structlog.dev.ConsoleRenderer(
            colors=stream is not None and stream.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _make_handler(output: LogOutputConfig) -> logging.Handler:
    stream = _stream(output.destination)
    if stream is not None:
        return logging.StreamHandler(stream)
    path = Path(output.destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route propmap's structlog events through stdlib handlers.

    Args:
        config: Full logging configuration. When given, ``json_format`` and
            ``level`` are ignored.
        json_format: Render a single stderr output as JSON instead of console text
        level: Root level for the single stderr output

    Calling it again replaces every root handler installed before.
    """
    from propmap.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level, logging.INFO)
    pre_chain = _event_processors()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers are re-bound on every use so reconfiguration takes effect
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(root_level)

    for output in config.outputs:
        handler = _make_handler(output)
        handler.setLevel(_level(output.level, root_level))
        handler.setFormatter(_make_formatter(output, pre_chain))
        root.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Lazy logger proxy; safe to create at import time, before configuration."""
    if name:
        return structlog.get_logger(name)  # type: ignore[no-any-return]
    return structlog.get_logger()  # type: ignore[no-any-return]
