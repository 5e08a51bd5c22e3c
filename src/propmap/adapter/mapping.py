"""Map adapter: a type's resolved properties as a mutable mapping.

Keys are property names, fixed for the target's type. Values are read and
written through the type's handles on every access; nothing is copied.

- Unknown keys: ``adapter[key]`` raises ``KeyError``, ``get`` returns the
  default, writes are no-ops.
- Write-only keys read as ``None``.
- Read-only keys ignore writes.
- Keys can never be removed; removal raises ``UnsupportedOperationError``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping, Set
from typing import Any

from propmap.adapter._internal.handles import HandleTable, PropertyHandle
from propmap.core.errors import UnsupportedOperationError


class PropertyMap(MutableMapping[str, Any]):
    """Live key-value view over one object's properties."""

    __slots__ = ("_target", "_handles")

    def __init__(self, target: Any, handles: HandleTable) -> None:
        self._target = target
        self._handles = handles

    @property
    def target(self) -> Any:
        return self._target

    def handle(self, key: str) -> PropertyHandle | None:
        return self._handles.get(key)

    # Mapping protocol

    def __getitem__(self, key: str) -> Any:
        handle = self._handles.get(key)
        if handle is None:
            raise KeyError(key)
        return handle.read(self._target)

    def __setitem__(self, key: str, value: Any) -> None:
        self.put(key, value)

    def __delitem__(self, key: str) -> None:
        raise UnsupportedOperationError.removal("del")

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, key: object) -> bool:
        try:
            return key in self._handles
        except TypeError:
            return False

    def get(self, key: str, default: Any = None) -> Any:
        handle = self._handles.get(key)
        if handle is None:
            return default
        return handle.read(self._target)

    def put(self, key: str, value: Any) -> Any:
        """Write ``value`` and return the previous value.

        Unknown and read-only keys are left alone and return ``None``, as
        does a write-only key, whose previous value cannot be read.
        """
        handle = self._handles.get(key)
        if handle is None:
            return None
        return handle.write(self._target, value)

    def update(self, other: Any = (), /, **kwargs: Any) -> None:
        """Copy values for this object's own property names found in ``other``.

        Keys of ``other`` that are not properties are ignored.
        """
        source = dict(other) if not isinstance(other, Mapping) else other
        for name, handle in self._handles.items():
            if name in kwargs:
                handle.write(self._target, kwargs[name])
            elif name in source:
                handle.write(self._target, source[name])

    def put_all(self, other: Mapping[str, Any]) -> None:
        self.update(other)

    def contains_value(self, value: Any) -> bool:
        """True if a readable property currently holds ``value``."""
        return any(handle.matches(self._target, value) for handle in self._handles.values())

    def keys(self) -> frozenset[str]:  # type: ignore[override]
        return frozenset(self._handles)

    def values(self) -> list[Any]:  # type: ignore[override]
        return [handle.read(self._target) for handle in self._handles.values()]

    def items(self) -> PropertyEntrySet:  # type: ignore[override]
        return PropertyEntrySet(self)

    def pop(self, key: str, *default: Any) -> Any:  # noqa: ARG002
        raise UnsupportedOperationError.removal("pop")

    def popitem(self) -> tuple[str, Any]:
        raise UnsupportedOperationError.removal("popitem")

    def clear(self) -> None:
        raise UnsupportedOperationError.removal("clear")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._target!r})"

    def __str__(self) -> str:
        return str(self._target)


class PropertyEntry:
    """One ``(key, value)`` pair whose value is read and written live."""

    __slots__ = ("_map", "_key")

    def __init__(self, owner: PropertyMap, key: str) -> None:
        self._map = owner
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @property
    def value(self) -> Any:
        return self._map.get(self._key)

    @value.setter
    def value(self, value: Any) -> None:
        self._map.put(self._key, value)

    def set_value(self, value: Any) -> Any:
        return self._map.put(self._key, value)

    def __iter__(self) -> Iterator[Any]:
        yield self._key
        yield self.value

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int) -> Any:
        return (self._key, self.value)[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PropertyEntry):
            return (self._key, self.value) == (other.key, other.value)
        if isinstance(other, tuple):
            return (self._key, self.value) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._key, self.value))

    def __repr__(self) -> str:
        return repr((self._key, self.value))


class PropertyEntrySet(Set[PropertyEntry]):
    """Live set of entries. Supports adding values, never removing entries."""

    __slots__ = ("_map",)

    def __init__(self, owner: PropertyMap) -> None:
        self._map = owner

    @classmethod
    def _from_iterable(cls, it: Iterable[Any]) -> set[Any]:
        return set(it)

    def __len__(self) -> int:
        return len(self._map)

    def __iter__(self) -> Iterator[PropertyEntry]:
        return (PropertyEntry(self._map, key) for key in self._map)

    def __contains__(self, item: object) -> bool:
        try:
            key, value = item  # type: ignore[misc]
        except (TypeError, ValueError):
            return False
        if key not in self._map:
            return False
        current = self._map.get(key)
        return current is value or current == value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Set):
            return NotImplemented
        return len(self) == len(other) and all(tuple(entry) in other for entry in self)

    __hash__ = None  # type: ignore[assignment]

    def add(self, entry: tuple[str, Any] | PropertyEntry) -> bool:
        """Write one entry's value; True if the property's value changed.

        Entries for unknown or read-only properties change nothing.
        """
        key, value = entry
        handle = self._map.handle(key)
        if handle is None or not handle.writable:
            return False
        current = handle.read(self._map.target)
        if handle.readable and (current is value or current == value):
            return False
        handle.write(self._map.target, value)
        return True

    def add_all(self, entries: Iterable[tuple[str, Any] | PropertyEntry]) -> bool:
        changed = False
        for entry in entries:
            changed = self.add(entry) or changed
        return changed

    update = add_all

    def remove(self, entry: Any) -> None:  # noqa: ARG002
        raise UnsupportedOperationError.removal("remove")

    def discard(self, entry: Any) -> None:  # noqa: ARG002
        raise UnsupportedOperationError.removal("discard")

    def pop(self) -> PropertyEntry:
        raise UnsupportedOperationError.removal("pop")

    def clear(self) -> None:
        raise UnsupportedOperationError.removal("clear")

    def remove_all(self, entries: Iterable[Any]) -> bool:  # noqa: ARG002
        raise UnsupportedOperationError.removal("remove_all")

    def retain_all(self, entries: Iterable[Any]) -> bool:  # noqa: ARG002
        raise UnsupportedOperationError.removal("retain_all")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"
