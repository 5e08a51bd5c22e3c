"""Handle backends: callable realizations of resolved properties.

Three interchangeable tiers, each built from the previous one:

- ``ReflectiveHandle`` looks the accessor up on its owning class, checks it
  and binds it to the target on every call. No setup, slowest calls.
- ``ResolvedHandle`` does that lookup and check once and keeps the plain
  function.
- ``CompiledHandle`` generates ``read(target)``, ``write(target, value)``
  and ``matches(target, value)`` per property with the accessor calls and
  error wrapping inlined. Highest setup cost, cheapest steady-state calls.

All tiers share the read/write/matches contract and wrap accessor failures
in ``PropertyAccessError`` the same way, so the tier is never observable.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, cast

from propmap.adapter.models import Accessor, AccessorKind, PropertyTable, ResolvedProperty
from propmap.core.errors import DiscoveryError, PropertyAccessError, PropMapError

Reader = Callable[[Any], Any]
Writer = Callable[[Any, Any], None]
HandleTable = Mapping[str, "PropertyHandle"]


def resolve_accessor(accessor: Accessor, cls: type, *, writing: bool) -> Callable[..., Any]:
    """Look ``accessor`` up on ``cls`` and return its plain function.

    Raises:
        DiscoveryError: The attribute is gone or no longer callable.
    """
    try:
        raw = inspect.getattr_static(cls, accessor.attribute)
    except AttributeError as e:
        raise DiscoveryError.access_denied(accessor.qualname, "attribute not found") from e

    if accessor.kind is AccessorKind.PROPERTY:
        if not isinstance(raw, property):
            raise DiscoveryError.access_denied(accessor.qualname, "not a property")
        fn = raw.fset if writing else raw.fget
    else:
        fn = raw

    if not callable(fn):
        raise DiscoveryError.access_denied(accessor.qualname, f"{type(fn).__name__} is not callable")
    return fn


class PropertyHandle(ABC):
    """Uniform invoke contract over one resolved property."""

    __slots__ = ("prop",)

    def __init__(self, prop: ResolvedProperty) -> None:
        self.prop = prop

    @property
    def name(self) -> str:
        return self.prop.name

    @property
    def readable(self) -> bool:
        return self.prop.reader is not None

    @property
    def writable(self) -> bool:
        return self.prop.writer is not None

    def read(self, target: Any) -> Any:
        """Current value, or ``None`` for a write-only property."""
        if not self.readable:
            return None
        try:
            return self._read(target)
        except PropMapError:
            raise
        except Exception as e:
            raise PropertyAccessError.invocation_failed(self.name, "read", e) from e

    def write(self, target: Any, value: Any) -> Any:
        """Write ``value`` and return the previous value.

        Read-only properties are left alone and ``None`` is returned; so is
        the previous value of a write-only property, which cannot be read.
        """
        if not self.writable:
            return None
        try:
            return self._exchange(target, value)
        except PropMapError:
            raise
        except Exception as e:
            raise PropertyAccessError.invocation_failed(self.name, "write", e) from e

    def matches(self, target: Any, value: Any) -> bool:
        """``read(target) == value``; never true without a reader."""
        if not self.readable:
            return False
        current = self.read(target)
        return current is value or current == value

    def _exchange(self, target: Any, value: Any) -> Any:
        previous = self._read(target) if self.readable else None
        self._write(target, value)
        return previous

    @abstractmethod
    def _read(self, target: Any) -> Any: ...

    @abstractmethod
    def _write(self, target: Any, value: Any) -> None: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ReflectiveHandle(PropertyHandle):
    """Dynamic lookup and bind on every invocation."""

    __slots__ = ()

    def _read(self, target: Any) -> Any:
        accessor = cast(Accessor, self.prop.reader)
        fn = resolve_accessor(accessor, accessor.owner, writing=False)
        return fn.__get__(target, accessor.owner)()

    def _write(self, target: Any, value: Any) -> None:
        accessor = cast(Accessor, self.prop.writer)
        fn = resolve_accessor(accessor, accessor.owner, writing=True)
        fn.__get__(target, accessor.owner)(value)


class ResolvedHandle(PropertyHandle):
    """Accessors resolved and checked once, then called as plain functions."""

    __slots__ = ("_reader", "_writer")

    def __init__(
        self,
        prop: ResolvedProperty,
        reader: Callable[..., Any] | None,
        writer: Callable[..., Any] | None,
    ) -> None:
        super().__init__(prop)
        self._reader = reader
        self._writer = writer

    @classmethod
    def from_handle(cls, handle: PropertyHandle) -> ResolvedHandle:
        prop = handle.prop
        reader = (
            resolve_accessor(prop.reader, prop.reader.owner, writing=False) if prop.reader else None
        )
        writer = (
            resolve_accessor(prop.writer, prop.writer.owner, writing=True) if prop.writer else None
        )
        return cls(prop, reader, writer)

    @property
    def reader_function(self) -> Callable[..., Any] | None:
        return self._reader

    @property
    def writer_function(self) -> Callable[..., Any] | None:
        return self._writer

    def _read(self, target: Any) -> Any:
        return self._reader(target)  # type: ignore[misc]

    def _write(self, target: Any, value: Any) -> None:
        self._writer(target, value)  # type: ignore[misc]


_READ_SOURCE = """\
def read(target):
    try:
        return _reader(target)
    except _PropMapError:
        raise
    except Exception as e:
        raise _PropertyAccessError.invocation_failed(_name, "read", e) from e
"""

_MATCHES_SOURCE = """\
def matches(target, value):
    try:
        current = _reader(target)
    except _PropMapError:
        raise
    except Exception as e:
        raise _PropertyAccessError.invocation_failed(_name, "read", e) from e
    return current is value or current == value
"""

_WRITE_SOURCE = """\
def write(target, value):
    try:
        previous = _reader(target)
        _writer(target, value)
    except _PropMapError:
        raise
    except Exception as e:
        raise _PropertyAccessError.invocation_failed(_name, "write", e) from e
    return previous
"""

_WRITE_ONLY_SOURCE = """\
def write(target, value):
    try:
        _writer(target, value)
    except _PropMapError:
        raise
    except Exception as e:
        raise _PropertyAccessError.invocation_failed(_name, "write", e) from e
"""

_UNREADABLE_SOURCE = """\
def read(target):
    return None

def matches(target, value):
    return False
"""

_UNWRITABLE_SOURCE = """\
def write(target, value):
    return None
"""


def _generate(source: str, qualname: str, namespace: dict[str, Any]) -> None:
    try:
        code = compile(source, f"<propmap {qualname}>", "exec")
        exec(code, namespace)
    except SyntaxError as e:
        raise DiscoveryError.generation_failed(qualname, str(e)) from e


class CompiledHandle(PropertyHandle):
    """Generated ``read``/``write``/``matches`` with the accessors inlined.

    The generated functions live in instance slots that shadow the inherited
    methods, so ``handle.read(target)`` is a single call into generated code.
    """

    __slots__ = ("_reader", "_writer", "read", "write", "matches")

    def __init__(
        self,
        prop: ResolvedProperty,
        reader: Reader | None,
        writer: Writer | None,
    ) -> None:
        super().__init__(prop)
        self._reader = reader
        self._writer = writer
        qualname = (prop.reader or prop.writer).qualname  # type: ignore[union-attr]
        namespace: dict[str, Any] = {
            "_reader": reader,
            "_writer": writer,
            "_name": prop.name,
            "_PropMapError": PropMapError,
            "_PropertyAccessError": PropertyAccessError,
        }
        sources = [_READ_SOURCE + _MATCHES_SOURCE if reader is not None else _UNREADABLE_SOURCE]
        if writer is None:
            sources.append(_UNWRITABLE_SOURCE)
        else:
            sources.append(_WRITE_SOURCE if reader is not None else _WRITE_ONLY_SOURCE)
        _generate("\n".join(sources), qualname, namespace)
        for name in ("read", "write", "matches"):
            fn = namespace[name]
            fn.__qualname__ = f"{qualname}.{name}"
            setattr(self, name, fn)

    @classmethod
    def from_handle(cls, handle: ResolvedHandle) -> CompiledHandle:
        return cls(handle.prop, handle.reader_function, handle.writer_function)

    def _read(self, target: Any) -> Any:
        return self._reader(target)  # type: ignore[misc]

    def _write(self, target: Any, value: Any) -> None:
        self._writer(target, value)  # type: ignore[misc]


def reflective_handles(table: PropertyTable) -> HandleTable:
    return MappingProxyType({name: ReflectiveHandle(prop) for name, prop in table.items()})


def resolved_handles(handles: HandleTable) -> HandleTable:
    return MappingProxyType(
        {name: ResolvedHandle.from_handle(handle) for name, handle in handles.items()}
    )


def compiled_handles(handles: HandleTable) -> HandleTable:
    compiled = {}
    for name, handle in handles.items():
        if not isinstance(handle, ResolvedHandle):
            raise TypeError(f"compiled handles are built from resolved handles, got {handle!r}")
        compiled[name] = CompiledHandle.from_handle(handle)
    return MappingProxyType(compiled)
