"""Accessor classification.

Decides, for one public attribute of a class, whether it can serve as a
property reader and/or writer, which property name it maps to and what
evidence backs that decision. Evidence, highest first:

1. EXPLICIT - ``export_property`` marker (on the method or an overridden
   ancestor declaration), or a native ``property``
2. NAME_MATCHES_FIELD - fluent accessor whose relevant type equals the type
   of a field named ``name`` or ``_name``
3. CONVENTIONAL_PREFIX - ``get_x`` / ``is_x`` / ``set_x`` or ``getX`` / ``isX`` / ``setX``
4. UNRANKED - right shape, no naming evidence; named after the method
"""

from __future__ import annotations

import inspect
import typing
from types import UnionType
from typing import Any, Union

from propmap.adapter._internal.introspection import Shape, TypeIntrospector
from propmap.adapter.models import (
    Accessor,
    AccessorCandidate,
    AccessorKind,
    Direction,
    Evidence,
)

READER_PREFIXES = ("is", "get")
WRITER_PREFIXES = ("set",)

# never accessors, whatever their shape
DIAGNOSTIC_METHODS = frozenset({"to_string", "hash_code"})


def decapitalize(name: str) -> str:
    """Lower the first character unless the first two are both upper case (``URL``)."""
    if not name:
        return name
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[0].lower() + name[1:]


def prefixed_property_name(
    method_name: str, prefixes: tuple[str, ...]
) -> tuple[str, str] | None:
    """Property name and matched prefix for a conventionally named accessor.

    ``get_full_name`` -> ``full_name``; ``getFullName`` -> ``fullName``;
    ``getURL`` -> ``URL``. A bare prefix (``get``, ``get_``) or a camel-case
    suffix starting in lower case (``getaway``, ``island``) yields ``None``.
    """
    for prefix in prefixes:
        if not method_name.startswith(prefix):
            continue
        rest = method_name[len(prefix) :]
        if rest.startswith("_"):
            suffix = rest[1:]
            if suffix and not suffix.startswith("_"):
                return suffix, prefix
        elif rest and rest[0].isupper():
            return decapitalize(rest), prefix
    return None


def _union_members(tp: Any) -> tuple[Any, ...] | None:
    origin = typing.get_origin(tp)
    if origin is Union or origin is UnionType:
        return typing.get_args(tp)
    return None


def reader_value_type(introspector: TypeIntrospector, shape: Shape) -> Any:
    """Return type of a reader shape, with fluent ``Self`` members dropped."""
    returns = shape.returns
    members = _union_members(returns)
    if members is None:
        return returns
    kept = tuple(m for m in members if not introspector.is_self_type(m))
    if not kept or len(kept) == len(members):
        return returns
    if len(kept) == 1:
        return kept[0]
    return Union[kept]  # noqa: UP007


def is_writer_return(introspector: TypeIntrospector, shape: Shape) -> bool:
    """Writers return nothing or the receiver (chained fluent writers)."""
    returns = shape.returns
    if returns is Any or shape.is_void or introspector.is_self_type(returns):
        return True
    members = _union_members(returns)
    return members is not None and any(introspector.is_self_type(m) for m in members)


def classify(introspector: TypeIntrospector, attribute: str, raw: Any) -> list[AccessorCandidate]:
    """Classify one public attribute of ``introspector.cls``.

    Returns at most one reader and one writer candidate. A single Python
    method yields both when its shapes allow it (overloads, or a defaulted
    parameter as in ``def name(self, value=...)``).
    """
    if attribute in DIAGNOSTIC_METHODS:
        return []
    if isinstance(raw, property):
        return _classify_descriptor(introspector, attribute, raw)
    if not inspect.isfunction(raw):
        # staticmethod, classmethod, plain data, nested classes, builtins
        return []

    accessor = Accessor(introspector.cls, attribute, raw)
    found: dict[Direction, AccessorCandidate] = {}
    for shape in introspector.shapes(raw):
        if Direction.READER not in found and shape.accepts_no_arguments() and not shape.is_void:
            found[Direction.READER] = _candidate(
                introspector,
                accessor,
                Direction.READER,
                reader_value_type(introspector, shape),
            )
        if (
            Direction.WRITER not in found
            and shape.accepts_one_argument()
            and is_writer_return(introspector, shape)
        ):
            found[Direction.WRITER] = _candidate(
                introspector, accessor, Direction.WRITER, shape.parameter_type
            )
    return [found[d] for d in (Direction.READER, Direction.WRITER) if d in found]


def _candidate(
    introspector: TypeIntrospector,
    accessor: Accessor,
    direction: Direction,
    value_type: Any,
) -> AccessorCandidate:
    attribute = accessor.attribute

    marker = introspector.find_marker(attribute, accessor.function)
    if marker is not None:
        return AccessorCandidate(
            marker.name or attribute, accessor, direction, Evidence.EXPLICIT, value_type
        )

    field_type = introspector.field_type(attribute)
    if field_type is not None and value_type is not Any and field_type == value_type:
        return AccessorCandidate(
            attribute, accessor, direction, Evidence.NAME_MATCHES_FIELD, value_type
        )

    prefixes = READER_PREFIXES if direction is Direction.READER else WRITER_PREFIXES
    named = prefixed_property_name(attribute, prefixes)
    if named is not None:
        name, prefix = named
        return AccessorCandidate(
            name, accessor, direction, Evidence.CONVENTIONAL_PREFIX, value_type, prefix
        )

    return AccessorCandidate(attribute, accessor, direction, Evidence.UNRANKED, value_type)


def _classify_descriptor(
    introspector: TypeIntrospector, attribute: str, prop: property
) -> list[AccessorCandidate]:
    marker = introspector.find_marker(attribute, prop.fget) if prop.fget is not None else None
    name = (marker.name if marker else None) or attribute
    candidates = []
    if prop.fget is not None:
        hints = introspector.hints(prop.fget)
        candidates.append(
            AccessorCandidate(
                name,
                Accessor(introspector.cls, attribute, prop.fget, AccessorKind.PROPERTY),
                Direction.READER,
                Evidence.EXPLICIT,
                hints.get("return", Any),
            )
        )
    if prop.fset is not None:
        hints = introspector.hints(prop.fset)
        params = list(inspect.signature(prop.fset).parameters)
        value_type = hints.get(params[1], Any) if len(params) > 1 else Any
        candidates.append(
            AccessorCandidate(
                name,
                Accessor(introspector.cls, attribute, prop.fset, AccessorKind.PROPERTY),
                Direction.WRITER,
                Evidence.EXPLICIT,
                value_type,
            )
        )
    return candidates
