"""Entry points of the property adapter.

``adapt`` wraps an object in a ``PropertyMap``. Everything it needs about the
object's type (property table, handles for the chosen tier) is discovered on
first use and cached for the life of the process, so adapting further
instances of the same type only allocates the map itself.
"""

from __future__ import annotations

from typing import Any

from propmap.adapter._internal import resolver
from propmap.adapter._internal.handles import HandleTable
from propmap.adapter._internal.introspection import ancestors_of
from propmap.adapter.cache import cache
from propmap.adapter.mapping import PropertyMap
from propmap.adapter.models import AccessTier, PropertyTable
from propmap.core.errors import DiscoveryError

__all__ = [
    "adapt",
    "ancestors_of",
    "clear_caches",
    "discover_properties",
    "property_handles",
    "property_table",
]


def _default_tier() -> AccessTier:
    from propmap.config.loader import get_config

    return get_config().adapter.default_tier


def _check_type(cls: Any) -> type:
    if not isinstance(cls, type):
        raise DiscoveryError.invalid_target(f"expected a class, got {type(cls).__name__}")
    return cls


def adapt(target: Any, tier: AccessTier | str | None = None) -> PropertyMap:
    """Expose ``target``'s properties as a mutable mapping.

    Args:
        target: Object to adapt. The map reads and writes it live.
        tier: Handle backend. ``None`` uses ``adapter.default_tier`` from the
            active config. The tier never changes observable behavior.

    Raises:
        DiscoveryError: ``target`` is ``None`` or an accessor of its type
            cannot be resolved.
    """
    if target is None:
        raise DiscoveryError.invalid_target("target is None")
    resolved_tier = _default_tier() if tier is None else AccessTier(tier)
    return PropertyMap(target, cache.handles(type(target), resolved_tier))


def discover_properties(cls: type) -> PropertyTable:
    """Scan ``cls`` without touching the cache."""
    from propmap.config.loader import get_config

    return resolver.discover_properties(
        _check_type(cls), warn_on_demotion=get_config().adapter.warn_on_writer_demotion
    )


def property_table(cls: type) -> PropertyTable:
    """Cached property table for ``cls``."""
    return cache.table(_check_type(cls))


def property_handles(cls: type, tier: AccessTier | str | None = None) -> HandleTable:
    """Cached handle table for ``cls`` at ``tier``."""
    resolved_tier = _default_tier() if tier is None else AccessTier(tier)
    return cache.handles(_check_type(cls), resolved_tier)


def clear_caches(cls: type | None = None) -> None:
    """Forget cached tables and handles for ``cls``, or for every type.

    Only needed when classes are redefined at runtime (reloads, tests).
    """
    cache.clear(cls)
