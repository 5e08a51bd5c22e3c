"""Explicit property marker.

Usage::

    class Member:
        @export_property
        def display(self) -> str: ...

        @export_property("nick")
        def nickname(self) -> str: ...

The marker is looked up on overridden declarations too, so marking an
abstract method on a base class exports every override.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar, overload

EXPORT_MARKER_ATTR = "__propmap_export__"

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True, slots=True)
class ExportMarker:
    """Marker payload. ``name=None`` means use the method's own name."""

    name: str | None = None


@overload
def export_property(fn: F, /) -> F: ...


@overload
def export_property(alias: str | None = None, /, *, name: str | None = None) -> Callable[[F], F]: ...


def export_property(target: Any = None, /, *, name: str | None = None) -> Any:
    """Declare a method (or property) as a named property accessor."""
    if isinstance(target, str):
        name, target = target, None

    def decorate(fn: Any) -> Any:
        marked = fn.fget if isinstance(fn, property) else fn
        if marked is None:
            raise TypeError("export_property requires a property with a getter")
        setattr(marked, EXPORT_MARKER_ATTR, ExportMarker(name or None))
        return fn

    if target is None:
        return decorate
    return decorate(target)


def marker_of(fn: Any) -> ExportMarker | None:
    """Return the export marker carried by ``fn``, if any."""
    marker = getattr(fn, EXPORT_MARKER_ATTR, None)
    return marker if isinstance(marker, ExportMarker) else None
