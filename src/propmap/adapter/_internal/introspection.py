"""Type description facility for property discovery.

Everything discovery needs to know about a class goes through
``TypeIntrospector``: public member enumeration, method shapes (one per
``typing.overload`` declaration), resolved annotations, declared fields and
the ancestor closure used for marker lookup.

A ``TypeIntrospector`` is scratch state for exactly one discovery pass. It
memoizes the field map, the ancestor closure and resolved annotations, and is
dropped as soon as the pass finishes, so nothing leaks across types.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import cached_property
from typing import Any, ClassVar

from propmap.adapter.markers import ExportMarker, marker_of

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)
_VARIADIC = (
    inspect.Parameter.VAR_POSITIONAL,
    inspect.Parameter.VAR_KEYWORD,
)


def resolve_hints(obj: Any) -> dict[str, Any]:
    """Resolved annotations of a function or class.

    Falls back to the raw annotations when a forward reference cannot be
    resolved; unresolvable entries then stay strings.
    """
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError, AttributeError, SyntaxError):
        return _raw_annotations(obj)


def _raw_annotations(obj: Any) -> dict[str, Any]:
    try:
        return dict(inspect.get_annotations(obj))
    except NameError:
        return {}


@dataclass(frozen=True, slots=True)
class Shape:
    """One callable signature of a method, without ``self``."""

    parameters: tuple[inspect.Parameter, ...]
    hints: Mapping[str, Any]

    @property
    def returns(self) -> Any:
        return self.hints.get("return", Any)

    @property
    def is_void(self) -> bool:
        ret = self.hints.get("return", Any)
        return ret is None or ret is type(None) or ret == "None"

    def accepts_no_arguments(self) -> bool:
        return all(
            p.kind not in _VARIADIC and p.default is not inspect.Parameter.empty
            for p in self.parameters
        )

    def accepts_one_argument(self) -> bool:
        if not self.parameters or self.parameters[0].kind not in _POSITIONAL:
            return False
        return all(
            p.kind not in _VARIADIC and p.default is not inspect.Parameter.empty
            for p in self.parameters[1:]
        )

    @property
    def parameter_type(self) -> Any:
        return self.hints.get(self.parameters[0].name, Any)


class TypeIntrospector:
    """Scratch state for one discovery pass over ``cls``."""

    def __init__(self, cls: type) -> None:
        self.cls = cls
        self._hints: dict[int, dict[str, Any]] = {}

    @cached_property
    def ancestors(self) -> tuple[type, ...]:
        """Every base class and inherited interface, excluding ``cls`` and ``object``."""
        return tuple(klass for klass in self.cls.__mro__[1:] if klass is not object)

    @cached_property
    def field_types(self) -> dict[str, Any]:
        """Declared instance fields over the whole MRO, ``ClassVar`` excluded."""
        try:
            hints = typing.get_type_hints(self.cls)
        except (NameError, TypeError, AttributeError, SyntaxError):
            hints = {}
            for klass in reversed(self.cls.__mro__):
                if klass is not object:
                    hints.update(_raw_annotations(klass))
        return {
            name: tp
            for name, tp in hints.items()
            if tp is not ClassVar and typing.get_origin(tp) is not ClassVar
        }

    def members(self) -> Iterator[tuple[str, Any]]:
        """Public attributes, base-most declarations first, resolved on ``cls``."""
        seen: set[str] = set()
        for klass in reversed(self.cls.__mro__):
            if klass is object:
                continue
            for name in vars(klass):
                if name in seen or name.startswith("_"):
                    continue
                seen.add(name)
                yield name, inspect.getattr_static(self.cls, name)

    def hints(self, obj: Any) -> Mapping[str, Any]:
        key = id(obj)
        found = self._hints.get(key)
        if found is None:
            found = self._hints[key] = resolve_hints(obj)
        return found

    def shapes(self, fn: Any) -> list[Shape]:
        """One shape per overload declaration, else the implementation's own."""
        targets = list(typing.get_overloads(fn)) or [fn]
        shapes = []
        for target in targets:
            try:
                signature = inspect.signature(target)
            except (TypeError, ValueError):
                continue
            params = tuple(signature.parameters.values())
            if not params or params[0].kind not in _POSITIONAL:
                continue
            shapes.append(Shape(params[1:], self.hints(target)))
        return shapes

    def field_type(self, name: str) -> Any | None:
        """Type of the field backing accessor ``name`` (``name`` or ``_name``)."""
        fields = self.field_types
        if name in fields:
            return fields[name]
        return fields.get(f"_{name}")

    def is_self_type(self, tp: Any) -> bool:
        """True for ``Self``, ``cls`` or one of its ancestors (fluent return)."""
        if tp is typing.Self:
            return True
        if isinstance(tp, str):
            return tp == "Self" or any(tp == klass.__name__ for klass in self.cls.__mro__[:-1])
        return isinstance(tp, type) and tp is not object and issubclass(self.cls, tp)

    def find_marker(self, attribute: str, fn: Any) -> ExportMarker | None:
        """Marker on ``fn`` or on any same-named, same-arity ancestor declaration."""
        marker = marker_of(fn)
        if marker is not None:
            return marker
        arity = _arity(fn)
        for klass in self.ancestors:
            raw = vars(klass).get(attribute)
            declared = raw.fget if isinstance(raw, property) else raw
            if declared is fn or not inspect.isfunction(declared):
                continue
            if _arity(declared) != arity:
                continue
            marker = marker_of(declared)
            if marker is not None:
                return marker
        return None


def _arity(fn: Any) -> int:
    try:
        return len(inspect.signature(fn).parameters)
    except (TypeError, ValueError):
        return -1


def ancestors_of(cls: type) -> frozenset[type]:
    """All superclasses and inherited interfaces of ``cls``, excluding itself and ``object``."""
    return frozenset(TypeIntrospector(cls).ancestors)
