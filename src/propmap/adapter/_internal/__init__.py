"""Internal components for property discovery - not part of public API."""

from propmap.adapter._internal.classifier import classify, decapitalize, prefixed_property_name
from propmap.adapter._internal.handles import (
    CompiledHandle,
    HandleTable,
    PropertyHandle,
    ReflectiveHandle,
    ResolvedHandle,
)
from propmap.adapter._internal.introspection import TypeIntrospector, ancestors_of
from propmap.adapter._internal.resolver import (
    discover_properties,
    is_assignable,
    resolve_properties,
)

__all__ = [
    "classify",
    "decapitalize",
    "prefixed_property_name",
    "CompiledHandle",
    "HandleTable",
    "PropertyHandle",
    "ReflectiveHandle",
    "ResolvedHandle",
    "TypeIntrospector",
    "ancestors_of",
    "discover_properties",
    "is_assignable",
    "resolve_properties",
]
