"""Tests for warg.loaders — JSON and TOML definition files."""

import json
from pathlib import Path

import pytest

from warg.errors import DefinitionError
from warg.loaders import load_definitions, loads_json_definitions, loads_toml_definitions
from warg.parser import parse

GIT_JSON = [
    {"names": ["-v", "--verbose"], "switch": True, "desc": "Verbose output"},
    {
        "names": ["-G", "--git"],
        "switch": True,
        "desc": "Git operations",
        "children": [
            {"names": ["-c", "--commit"], "switch": True, "desc": "Commit changes"},
            {"names": ["-m"], "switch": False, "desc": "Commit message"},
        ],
    },
]

GIT_TOML = """\
[[flags]]
names = ["-v", "--verbose"]
switch = true
desc = "Verbose output"

[[flags]]
names = ["-G", "--git"]
desc = "Git operations"

[[flags.children]]
names = ["-c", "--commit"]
switch = true

[[flags.children]]
names = ["-m"]
desc = "Commit message"
"""


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


class TestJsonDefinitions:
    def test_bare_array(self) -> None:
        defs = loads_json_definitions(json.dumps(GIT_JSON))
        assert [d.canonical_name for d in defs] == ["-v", "-G"]
        assert defs[1].children[1].description == "Commit message"

    def test_wrapped_object(self) -> None:
        defs = loads_json_definitions(json.dumps({"flags": GIT_JSON}))
        assert len(defs) == 2

    def test_object_without_flags(self) -> None:
        with pytest.raises(DefinitionError, match="expected a 'flags' list"):
            loads_json_definitions('{"defs": []}')

    def test_not_a_list(self) -> None:
        with pytest.raises(DefinitionError, match="must be a list"):
            loads_json_definitions('"-v"')

    def test_malformed_json(self) -> None:
        with pytest.raises(DefinitionError, match="failed to parse JSON"):
            loads_json_definitions("[{")

    def test_bad_entry_names_source(self) -> None:
        with pytest.raises(DefinitionError, match="flags.json"):
            loads_json_definitions('[{"names": []}]', source="flags.json")

    def test_loaded_definitions_parse(self) -> None:
        defs = loads_json_definitions(json.dumps(GIT_JSON))
        result = parse(defs, ["-G", "-c", "-m", "fix bug"])
        assert result.find("-m").value == "fix bug"  # type: ignore[union-attr]
        assert result.find("-m") in result.flags[0].children


# ---------------------------------------------------------------------------
# TOML
# ---------------------------------------------------------------------------


class TestTomlDefinitions:
    def test_nested_tables(self) -> None:
        defs = loads_toml_definitions(GIT_TOML)
        git = defs[1]
        assert git.is_switch is True
        assert [c.canonical_name for c in git.children] == ["-c", "-m"]
        assert git.children[1].is_switch is False

    def test_no_flags_is_empty(self) -> None:
        assert loads_toml_definitions("[warg]\nprog = 'x'\n") == []

    def test_malformed_toml(self) -> None:
        with pytest.raises(DefinitionError, match="failed to parse TOML"):
            loads_toml_definitions("[[flags]\n")

    def test_flags_must_be_array(self) -> None:
        with pytest.raises(DefinitionError, match="must be a list"):
            loads_toml_definitions("flags = 'nope'\n")


# ---------------------------------------------------------------------------
# load_definitions()
# ---------------------------------------------------------------------------


class TestLoadDefinitions:
    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "flags.json"
        path.write_text(json.dumps(GIT_JSON), encoding="utf-8")
        assert len(load_definitions(path)) == 2

    def test_toml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "flags.TOML"
        path.write_text(GIT_TOML, encoding="utf-8")
        assert len(load_definitions(path)) == 2

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "flags.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(DefinitionError, match="unsupported definitions format"):
            load_definitions(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DefinitionError, match="cannot read definitions"):
            load_definitions(tmp_path / "missing.json")

    @pytest.mark.parametrize("suffix", [".json", ".toml"])
    def test_invalid_utf8(self, tmp_path: Path, suffix: str) -> None:
        path = tmp_path / f"flags{suffix}"
        path.write_bytes(b'[{"names": ["-\xff"]}]')
        with pytest.raises(DefinitionError, match="not valid UTF-8") as exc_info:
            load_definitions(path)
        assert str(path) in str(exc_info.value)
