"""Property adapter - objects viewed as key-value mappings.

This module provides:
- Accessor discovery: readers and writers inferred from method shapes
- Conflict resolution: one reader/writer pair per property name
- Handles: three interchangeable invocation tiers
- PropertyMap: the mapping view returned by ``adapt``

Public API is in `propmap.adapter.ops`. Internal implementations are in
`propmap.adapter._internal/`.
"""

from propmap.adapter.mapping import PropertyEntry, PropertyEntrySet, PropertyMap
from propmap.adapter.markers import ExportMarker, export_property
from propmap.adapter.models import (
    Accessor,
    AccessorCandidate,
    AccessorKind,
    AccessTier,
    Direction,
    Evidence,
    ResolvedProperty,
)
from propmap.adapter.ops import (
    adapt,
    ancestors_of,
    clear_caches,
    discover_properties,
    property_handles,
    property_table,
)

__all__ = [
    # Operations
    "adapt",
    "ancestors_of",
    "clear_caches",
    "discover_properties",
    "property_handles",
    "property_table",
    # Mapping
    "PropertyMap",
    "PropertyEntry",
    "PropertyEntrySet",
    # Markers
    "ExportMarker",
    "export_property",
    # Models
    "Accessor",
    "AccessorCandidate",
    "AccessorKind",
    "AccessTier",
    "Direction",
    "Evidence",
    "ResolvedProperty",
]
