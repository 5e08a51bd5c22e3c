"""Property resolution: conflict policy over classified accessors.

Candidates are grouped by property name. Per group the best reader and the
best writer are picked independently by ascending priority, first candidate
in enumeration order on ties. A group whose winners carry no naming evidence
at all is dropped. When the writer cannot accept what the reader returns it is
demoted away and the property becomes read-only; this is never an error.
"""

from __future__ import annotations

import typing
from collections.abc import Iterable
from types import MappingProxyType, UnionType
from typing import Annotated, Any, Literal, TypeVar, Union

from propmap.adapter._internal.classifier import classify
from propmap.adapter._internal.introspection import TypeIntrospector
from propmap.adapter.models import (
    AccessorCandidate,
    Direction,
    Evidence,
    PropertyTable,
    ResolvedProperty,
)
from propmap.core.logging import get_logger

log = get_logger("propmap.adapter.resolver")

# PEP 484 numeric tower: int is acceptable where float is, float where complex is
_NUMERIC_WIDENING: dict[type, tuple[type, ...]] = {
    int: (float, complex),
    float: (complex,),
}


def _reduce(tp: Any) -> Any:
    """Strip typing wrappers down to something comparable with issubclass."""
    while True:
        if isinstance(tp, TypeVar):
            tp = tp.__bound__ if tp.__bound__ is not None else Any
            continue
        supertype = getattr(tp, "__supertype__", None)  # NewType
        if supertype is not None:
            tp = supertype
            continue
        origin = typing.get_origin(tp)
        if origin is Annotated:
            tp = typing.get_args(tp)[0]
            continue
        return tp


def _members(tp: Any) -> tuple[Any, ...]:
    tp = _reduce(tp)
    if tp is None:
        return (type(None),)
    origin = typing.get_origin(tp)
    if origin is Union or origin is UnionType:
        return tuple(m for arg in typing.get_args(tp) for m in _members(arg))
    if origin is Literal:
        return tuple({type(value) for value in typing.get_args(tp)})
    if origin is not None:
        return (origin,)
    return (tp,)


def _is_unknown(tp: Any) -> bool:
    return tp is Any or isinstance(tp, str)


def is_assignable(source: Any, target: Any) -> bool:
    """True if a value typed ``source`` can be passed where ``target`` is expected.

    Unknown types (missing annotations, ``Any``, unresolved forward
    references) are compatible with everything. ``None`` in the source is
    ignored: nullability never makes a writer incompatible.
    """
    sources = tuple(s for s in _members(source) if s is not type(None)) or (type(None),)
    targets = _members(target)
    if any(_is_unknown(t) or t is object for t in targets):
        return True
    return all(
        _is_unknown(s) or any(_member_assignable(s, t) for t in targets) for s in sources
    )


def _member_assignable(source: Any, target: Any) -> bool:
    if source == target:
        return True
    if target in _NUMERIC_WIDENING.get(source, ()):
        return True
    try:
        return issubclass(source, target)
    except TypeError:
        # non-runtime protocols and other special forms cannot be judged
        return True


def _best(candidates: list[AccessorCandidate], direction: Direction) -> AccessorCandidate | None:
    best = None
    for candidate in candidates:
        if candidate.direction is not direction:
            continue
        if best is None or candidate.priority < best.priority:
            best = candidate
    return best


def _has_evidence(candidate: AccessorCandidate | None) -> bool:
    return candidate is not None and candidate.evidence is not Evidence.UNRANKED


def resolve_properties(
    candidates: Iterable[AccessorCandidate],
    *,
    warn_on_demotion: bool = False,
) -> dict[str, ResolvedProperty]:
    """Pick the winning reader and writer per property name."""
    groups: dict[str, list[AccessorCandidate]] = {}
    for candidate in candidates:
        groups.setdefault(candidate.property_name, []).append(candidate)

    resolved: dict[str, ResolvedProperty] = {}
    for name, group in groups.items():
        reader = _best(group, Direction.READER)
        writer = _best(group, Direction.WRITER)

        if not _has_evidence(reader) and not _has_evidence(writer):
            continue

        if reader is not None and writer is not None:
            if not is_assignable(reader.value_type, writer.value_type):
                emit = log.warning if warn_on_demotion else log.debug
                emit(
                    "writer_demoted",
                    property=name,
                    reader=reader.accessor.qualname,
                    writer=writer.accessor.qualname,
                    reader_type=repr(reader.value_type),
                    writer_type=repr(writer.value_type),
                )
                writer = None

        resolved[name] = ResolvedProperty(
            name=name,
            reader=reader.accessor if reader else None,
            writer=writer.accessor if writer else None,
            reader_evidence=reader.evidence if reader else None,
            writer_evidence=writer.evidence if writer else None,
        )
    return resolved


def discover_properties(cls: type, *, warn_on_demotion: bool = False) -> PropertyTable:
    """Scan ``cls`` and build its (uncached, read-only) property table."""
    introspector = TypeIntrospector(cls)
    candidates = [
        candidate
        for attribute, raw in introspector.members()
        for candidate in classify(introspector, attribute, raw)
    ]
    table = resolve_properties(candidates, warn_on_demotion=warn_on_demotion)
    log.debug("properties_discovered", type=cls.__qualname__, count=len(table))
    return MappingProxyType(table)
