"""Data model for property discovery.

Candidates are ephemeral (one discovery pass); resolved properties are
immutable and cached for the lifetime of their type.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class AccessTier(str, Enum):
    """Handle backend used to invoke accessors."""

    REFLECTIVE = "reflective"  # re-resolve and bind on every call
    RESOLVED = "resolved"  # resolve once, call the plain function
    COMPILED = "compiled"  # generated fixed-shape closures


class Direction(str, Enum):
    """Which side of a property an accessor serves."""

    READER = "reader"
    WRITER = "writer"


class Evidence(str, Enum):
    """Classification signal that justified treating a method as an accessor."""

    EXPLICIT = "explicit"  # export_property marker or native property
    NAME_MATCHES_FIELD = "name_matches_field"  # fluent accessor backed by a field
    CONVENTIONAL_PREFIX = "conventional_prefix"  # get_/is_/set_ naming
    UNRANKED = "unranked"  # shape only, no naming evidence


class AccessorKind(str, Enum):
    """How an accessor is bound on its class."""

    METHOD = "method"
    PROPERTY = "property"


UNRANKED_PRIORITY = sys.maxsize

_READER_PREFIX_PRIORITY = {"is": 3, "get": 4}
_WRITER_PREFIX_PRIORITY = {"set": 3}


@dataclass(frozen=True, slots=True)
class Accessor:
    """A callable descriptor: one attribute of a class used as reader or writer."""

    owner: type
    attribute: str
    function: Callable[..., Any]
    kind: AccessorKind = AccessorKind.METHOD

    @property
    def qualname(self) -> str:
        return f"{self.owner.__qualname__}.{self.attribute}"


@dataclass(frozen=True, slots=True)
class AccessorCandidate:
    """One classified accessor, before conflict resolution."""

    property_name: str
    accessor: Accessor
    direction: Direction
    evidence: Evidence
    value_type: Any = Any
    prefix: str | None = None

    @property
    def priority(self) -> int:
        """Lower wins. Ties keep enumeration order."""
        if self.evidence is Evidence.EXPLICIT:
            return 1
        if self.evidence is Evidence.NAME_MATCHES_FIELD:
            return 2
        if self.evidence is Evidence.CONVENTIONAL_PREFIX:
            table = (
                _READER_PREFIX_PRIORITY
                if self.direction is Direction.READER
                else _WRITER_PREFIX_PRIORITY
            )
            return table.get(self.prefix or "", UNRANKED_PRIORITY)
        return UNRANKED_PRIORITY


@dataclass(frozen=True, slots=True)
class ResolvedProperty:
    """Final reader/writer pair for one logical property name.

    Read-only (``writer is None``) and write-only (``reader is None``)
    properties are both valid.
    """

    name: str
    reader: Accessor | None = None
    writer: Accessor | None = None
    reader_evidence: Evidence | None = None
    writer_evidence: Evidence | None = None

    @property
    def readable(self) -> bool:
        return self.reader is not None

    @property
    def writable(self) -> bool:
        return self.writer is not None


PropertyTable = Mapping[str, ResolvedProperty]
