"""Tests for CLI inspect command.

Covers:
- load_class() target parsing
- Table and JSON output
- Tier validation
- Error reporting for bad targets
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from pathlib import Path

import click
import pytest
from click.testing import CliRunner, Result

from propmap.cli.inspect import load_class
from propmap.cli.main import cli

SAMPLE_MODULE = "propmap_cli_sample"

SAMPLE_SOURCE = '''
class Member:
    def __init__(self):
        self._name = "Ada"

    def get_name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    def get_age(self) -> int:
        return 1


class Empty:
    pass


class Outer:
    class Inner:
        def get_depth(self) -> int:
            return 2

LIMIT = 5
'''


@pytest.fixture
def sample_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Importable module with a few sample classes."""
    (tmp_path / f"{SAMPLE_MODULE}.py").write_text(SAMPLE_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    sys.modules.pop(SAMPLE_MODULE, None)
    yield SAMPLE_MODULE
    sys.modules.pop(SAMPLE_MODULE, None)


def _invoke(*args: str) -> Result:
    return CliRunner().invoke(cli, list(args), env={"COLUMNS": "200"})


class TestLoadClass:
    """Tests for load_class target parsing."""

    def test_loads_class(self, sample_module: str) -> None:
        """MODULE:CLASS resolves to the class."""
        cls = load_class(f"{sample_module}:Member")
        assert cls.__name__ == "Member"

    def test_loads_nested_class(self, sample_module: str) -> None:
        """Dotted qualnames reach nested classes."""
        cls = load_class(f"{sample_module}:Outer.Inner")
        assert cls.__qualname__ == "Outer.Inner"

    @pytest.mark.parametrize("spec", ["Member", ":Member", "module:", ""])
    def test_rejects_malformed(self, spec: str) -> None:
        """Targets must have both parts."""
        with pytest.raises(click.ClickException, match="Expected MODULE:CLASS"):
            load_class(spec)

    def test_rejects_missing_module(self) -> None:
        """Unimportable modules are reported."""
        with pytest.raises(click.ClickException, match="Cannot import module"):
            load_class("propmap_no_such_module:Thing")

    def test_rejects_missing_attribute(self, sample_module: str) -> None:
        """Missing classes are reported."""
        with pytest.raises(click.ClickException, match="has no attribute"):
            load_class(f"{sample_module}:Nope")

    def test_rejects_non_class(self, sample_module: str) -> None:
        """Module attributes that are not classes are rejected."""
        with pytest.raises(click.ClickException, match="is not a class"):
            load_class(f"{sample_module}:LIMIT")


class TestInspectCommand:
    """Tests for the inspect command output."""

    def test_table_output(self, sample_module: str) -> None:
        """Default output is a table of properties."""
        result = _invoke("inspect", f"{sample_module}:Member")

        assert result.exit_code == 0, result.output
        assert "Member.get_name" in result.output
        assert "Member.set_name" in result.output
        assert "age" in result.output

    def test_json_output(self, sample_module: str) -> None:
        """--json emits the full table."""
        result = _invoke("inspect", f"{sample_module}:Member", "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["type"] == f"{sample_module}.Member"
        assert data["tier"] is None
        assert data["properties"] == [
            {
                "name": "name",
                "reader": "Member.get_name",
                "writer": "Member.set_name",
                "reader_evidence": "conventional_prefix",
                "writer_evidence": "conventional_prefix",
            },
            {
                "name": "age",
                "reader": "Member.get_age",
                "writer": None,
                "reader_evidence": "conventional_prefix",
                "writer_evidence": None,
            },
        ]

    @pytest.mark.parametrize("tier", ["reflective", "resolved", "compiled"])
    def test_tier_option(self, sample_module: str, tier: str) -> None:
        """--tier builds handles and is echoed in JSON."""
        result = _invoke("inspect", f"{sample_module}:Member", "--tier", tier, "--json")

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["tier"] == tier

    def test_unknown_tier_rejected(self, sample_module: str) -> None:
        """--tier only accepts known tiers."""
        result = _invoke("inspect", f"{sample_module}:Member", "--tier", "jit")
        assert result.exit_code != 0

    def test_empty_class(self, sample_module: str) -> None:
        """Classes without properties say so."""
        result = _invoke("inspect", f"{sample_module}:Empty")

        assert result.exit_code == 0
        assert "No properties found" in result.output

    def test_bad_target_fails(self) -> None:
        """Bad targets exit non-zero with a message."""
        result = _invoke("inspect", "propmap_no_such_module:Thing")

        assert result.exit_code != 0
        assert "Cannot import module" in result.output

    def test_verbose_logs_discovery(self, sample_module: str) -> None:
        """-v turns on debug discovery events."""
        result = _invoke("-v", "inspect", f"{sample_module}:Member")

        assert result.exit_code == 0, result.output
        assert "properties_discovered" in result.output
