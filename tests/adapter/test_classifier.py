"""Tests for accessor classification."""

import inspect
from typing import Self, overload

import pytest

from propmap.adapter._internal.classifier import (
    DIAGNOSTIC_METHODS,
    READER_PREFIXES,
    WRITER_PREFIXES,
    classify,
    decapitalize,
    prefixed_property_name,
)
from propmap.adapter._internal.introspection import TypeIntrospector
from propmap.adapter.markers import export_property
from propmap.adapter.models import AccessorCandidate, AccessorKind, Direction, Evidence


class Sample:
    _title: str

    def __init__(self) -> None:
        self._title = "t"

    @overload
    def title(self) -> str: ...
    @overload
    def title(self, value: str) -> Self: ...
    def title(self, value: str | None = None) -> str | Self:
        if value is None:
            return self._title
        self._title = value
        return self

    def get_full_name(self) -> str:
        return "x"

    def getURL(self) -> str:  # noqa: N802
        return "u"

    def is_active(self) -> bool:
        return True

    def set_full_name(self, value: str) -> None:
        pass

    def with_parent(self, parent: "Sample") -> "Sample":
        return self

    def get_pair(self, index: int) -> int:
        return index

    def set_size(self, width: int, height: int) -> None:
        pass

    def refresh(self) -> None:
        pass

    def compute(self) -> int:
        return 1

    def get(self) -> int:
        return 0

    @export_property("nick")
    def nickname(self) -> str:
        return "n"

    @export_property
    def to_string(self) -> str:
        return "Sample"

    def hash_code(self) -> int:
        return 0

    @staticmethod
    def get_default() -> int:
        return 0

    @classmethod
    def get_kind(cls) -> str:
        return "sample"

    @property
    def size(self) -> int:
        return 1

    @size.setter
    def size(self, value: int) -> None:
        pass

    get_limit = 5


@pytest.fixture
def introspector() -> TypeIntrospector:
    return TypeIntrospector(Sample)


def _classify(introspector: TypeIntrospector, attribute: str) -> list[AccessorCandidate]:
    return classify(introspector, attribute, inspect.getattr_static(Sample, attribute))


class TestDecapitalize:
    """Property name casing."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Name", "name"),
            ("FullName", "fullName"),
            ("URL", "URL"),
            ("XPosition", "XPosition"),
            ("A", "a"),
            ("", ""),
        ],
    )
    def test_decapitalize(self, name: str, expected: str) -> None:
        """First character lowered unless the first two are both upper case."""
        assert decapitalize(name) == expected


class TestPrefixedPropertyName:
    """Conventional prefix parsing."""

    @pytest.mark.parametrize(
        ("method", "prefixes", "expected"),
        [
            ("get_full_name", READER_PREFIXES, ("full_name", "get")),
            ("getFullName", READER_PREFIXES, ("fullName", "get")),
            ("getURL", READER_PREFIXES, ("URL", "get")),
            ("is_active", READER_PREFIXES, ("active", "is")),
            ("isActive", READER_PREFIXES, ("active", "is")),
            ("set_name", WRITER_PREFIXES, ("name", "set")),
            ("setName", WRITER_PREFIXES, ("name", "set")),
        ],
    )
    def test_recognized(self, method: str, prefixes: tuple[str, ...], expected: tuple[str, str]) -> None:
        """Prefix plus a non-empty suffix yields a property name."""
        assert prefixed_property_name(method, prefixes) == expected

    @pytest.mark.parametrize(
        ("method", "prefixes"),
        [
            ("get", READER_PREFIXES),
            ("get_", READER_PREFIXES),
            ("is", READER_PREFIXES),
            ("set", WRITER_PREFIXES),
            ("getaway", READER_PREFIXES),
            ("island", READER_PREFIXES),
            ("settle", WRITER_PREFIXES),
            ("get__private", READER_PREFIXES),
            ("set_name", READER_PREFIXES),
            ("name", READER_PREFIXES),
        ],
    )
    def test_rejected(self, method: str, prefixes: tuple[str, ...]) -> None:
        """Bare prefixes and lower-case camel suffixes have no property name."""
        assert prefixed_property_name(method, prefixes) is None


class TestClassify:
    """Classification of individual class members."""

    def test_fluent_overloads_yield_reader_and_writer(self, introspector: TypeIntrospector) -> None:
        """Overloaded fluent accessor backed by _title is both reader and writer."""
        candidates = _classify(introspector, "title")

        assert [c.direction for c in candidates] == [Direction.READER, Direction.WRITER]
        assert all(c.property_name == "title" for c in candidates)
        assert all(c.evidence is Evidence.NAME_MATCHES_FIELD for c in candidates)
        assert all(c.value_type is str for c in candidates)

    @pytest.mark.parametrize(
        ("attribute", "name", "prefix"),
        [
            ("get_full_name", "full_name", "get"),
            ("getURL", "URL", "get"),
            ("is_active", "active", "is"),
        ],
    )
    def test_prefixed_reader(
        self, introspector: TypeIntrospector, attribute: str, name: str, prefix: str
    ) -> None:
        """Zero-argument prefixed methods with a return value are readers."""
        (candidate,) = _classify(introspector, attribute)

        assert candidate.direction is Direction.READER
        assert candidate.property_name == name
        assert candidate.evidence is Evidence.CONVENTIONAL_PREFIX
        assert candidate.prefix == prefix

    def test_prefixed_void_writer(self, introspector: TypeIntrospector) -> None:
        """One-argument void set_ method is a writer."""
        (candidate,) = _classify(introspector, "set_full_name")

        assert candidate.direction is Direction.WRITER
        assert candidate.property_name == "full_name"
        assert candidate.value_type is str

    def test_self_returning_writer(self, introspector: TypeIntrospector) -> None:
        """A one-argument method returning the declaring type is a chained writer."""
        (candidate,) = _classify(introspector, "with_parent")

        assert candidate.direction is Direction.WRITER
        assert candidate.evidence is Evidence.UNRANKED
        assert candidate.property_name == "with_parent"

    @pytest.mark.parametrize("attribute", ["get_pair", "set_size", "refresh"])
    def test_wrong_shape_is_not_an_accessor(
        self, introspector: TypeIntrospector, attribute: str
    ) -> None:
        """Readers with parameters, two-argument setters and void no-arg methods are ignored."""
        assert _classify(introspector, attribute) == []

    def test_plain_method_is_unranked(self, introspector: TypeIntrospector) -> None:
        """Right shape without naming evidence keeps the method name."""
        (candidate,) = _classify(introspector, "compute")

        assert candidate.evidence is Evidence.UNRANKED
        assert candidate.property_name == "compute"

    def test_bare_prefix_is_unranked(self, introspector: TypeIntrospector) -> None:
        """A method named just 'get' gets no prefix evidence."""
        (candidate,) = _classify(introspector, "get")

        assert candidate.evidence is Evidence.UNRANKED
        assert candidate.property_name == "get"

    def test_marker_overrides_name(self, introspector: TypeIntrospector) -> None:
        """An export marker with an alias names the property."""
        (candidate,) = _classify(introspector, "nickname")

        assert candidate.evidence is Evidence.EXPLICIT
        assert candidate.property_name == "nick"

    @pytest.mark.parametrize("attribute", sorted(DIAGNOSTIC_METHODS))
    def test_diagnostic_methods_excluded(
        self, introspector: TypeIntrospector, attribute: str
    ) -> None:
        """Diagnostic methods are never accessors, marked or not."""
        assert _classify(introspector, attribute) == []

    @pytest.mark.parametrize("attribute", ["get_default", "get_kind", "get_limit"])
    def test_non_instance_methods_excluded(
        self, introspector: TypeIntrospector, attribute: str
    ) -> None:
        """Static methods, class methods and plain class data are skipped."""
        assert _classify(introspector, attribute) == []

    def test_native_property_is_explicit(self, introspector: TypeIntrospector) -> None:
        """A property with a setter yields an explicit reader and writer."""
        reader, writer = _classify(introspector, "size")

        assert reader.direction is Direction.READER
        assert writer.direction is Direction.WRITER
        assert reader.evidence is writer.evidence is Evidence.EXPLICIT
        assert reader.accessor.kind is AccessorKind.PROPERTY
        assert reader.value_type is int
        assert writer.value_type is int


class TestMembers:
    """Member enumeration feeding the classifier."""

    def test_private_and_dunder_members_skipped(self, introspector: TypeIntrospector) -> None:
        """Only public names are enumerated."""
        names = [name for name, _ in introspector.members()]

        assert "__init__" not in names
        assert "_title" not in names
        assert "title" in names

    def test_base_members_first(self) -> None:
        """Inherited declarations come before the subclass's own."""

        class Base:
            def get_a(self) -> int:
                return 1

        class Child(Base):
            def get_b(self) -> int:
                return 2

            def get_a(self) -> int:
                return 3

        names = [name for name, _ in TypeIntrospector(Child).members()]
        assert names == ["get_a", "get_b"]
        assert dict(TypeIntrospector(Child).members())["get_a"] is Child.__dict__["get_a"]
