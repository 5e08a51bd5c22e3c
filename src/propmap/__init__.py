"""propmap - view any object as a mapping of its properties."""

from propmap.adapter import (
    AccessTier,
    PropertyMap,
    adapt,
    clear_caches,
    export_property,
)
from propmap.core.errors import (
    DiscoveryError,
    PropertyAccessError,
    PropMapError,
    UnsupportedOperationError,
)

__version__ = "0.1.0"

__all__ = [
    "AccessTier",
    "PropertyMap",
    "adapt",
    "clear_caches",
    "export_property",
    "DiscoveryError",
    "PropertyAccessError",
    "PropMapError",
    "UnsupportedOperationError",
    "__version__",
]
