"""Per-type caches for property tables and handle tables.

Both caches are compute-once: a miss computes outside any lock, then
publishes with ``dict.setdefault`` so concurrent first use of a type
converges on whichever result landed first. A losing thread's result is
discarded. Cached tables are immutable, so reads never need locking.
"""

from __future__ import annotations

from propmap.adapter._internal.handles import (
    HandleTable,
    compiled_handles,
    reflective_handles,
    resolved_handles,
)
from propmap.adapter._internal.resolver import discover_properties
from propmap.adapter.models import AccessTier, PropertyTable
from propmap.core.logging import get_logger

log = get_logger("propmap.adapter.cache")


class PropertyCache:
    """Type -> property table and (type, tier) -> handle table."""

    def __init__(self) -> None:
        self._tables: dict[type, PropertyTable] = {}
        self._handles: dict[tuple[type, AccessTier], HandleTable] = {}

    def table(self, cls: type) -> PropertyTable:
        table = self._tables.get(cls)
        if table is None:
            from propmap.config.loader import get_config

            computed = discover_properties(
                cls, warn_on_demotion=get_config().adapter.warn_on_writer_demotion
            )
            table = self._tables.setdefault(cls, computed)
        return table

    def handles(self, cls: type, tier: AccessTier) -> HandleTable:
        """Handle table for ``cls`` at ``tier``.

        Each tier is built from the one below it, which is cached too.

        Raises:
            DiscoveryError: An accessor could not be resolved for this tier.
                Nothing is cached for the type at that tier.
        """
        key = (cls, tier)
        handles = self._handles.get(key)
        if handles is None:
            computed = self._build(cls, tier)
            handles = self._handles.setdefault(key, computed)
            if handles is computed:
                log.debug(
                    "handles_built", type=cls.__qualname__, tier=tier.value, count=len(handles)
                )
        return handles

    def _build(self, cls: type, tier: AccessTier) -> HandleTable:
        if tier is AccessTier.REFLECTIVE:
            return reflective_handles(self.table(cls))
        if tier is AccessTier.RESOLVED:
            return resolved_handles(self.handles(cls, AccessTier.REFLECTIVE))
        return compiled_handles(self.handles(cls, AccessTier.RESOLVED))

    def clear(self, cls: type | None = None) -> None:
        """Drop everything cached for ``cls``, or for every type."""
        if cls is None:
            self._tables.clear()
            self._handles.clear()
            return
        self._tables.pop(cls, None)
        for key in [key for key in list(self._handles) if key[0] is cls]:
            self._handles.pop(key, None)

    def __contains__(self, cls: object) -> bool:
        return cls in self._tables

    def __len__(self) -> int:
        return len(self._tables)


# Process-wide cache used by ``propmap.adapter.ops``
cache = PropertyCache()
