"""Shared fixtures. Tests always import propmap from this checkout's src/."""

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Drop any propmap imported before src/ was put first
for module_name in list(sys.modules.keys()):
    if module_name.startswith("propmap"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def isolated_propmap() -> Iterator[None]:
    """Fresh default config, empty caches and default logging for every test."""
    from propmap.adapter.ops import clear_caches
    from propmap.config.loader import set_config
    from propmap.config.models import PropMapConfig

    structlog.reset_defaults()
    set_config(PropMapConfig())
    clear_caches()
    yield
    clear_caches()
    set_config(None)
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
