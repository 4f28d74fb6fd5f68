"""loaders.py – Read flag definitions from JSON or TOML.

JSON accepts either a bare array of definitions or ``{"flags": [...]}``.
TOML uses an array of tables, nesting children the same way::

    [[flags]]
    names = ["-G", "--git"]
    desc = "Git operations"

    [[flags.children]]
    names = ["-m", "--message"]
    desc = "Commit message"
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from warg.definition import FlagDefinition, definitions_from_dicts
from warg.errors import DefinitionError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


def _flag_list(raw: Any, source: str) -> list[FlagDefinition]:
    if isinstance(raw, dict):
        if "flags" not in raw:
            raise DefinitionError(f"{source}: expected a 'flags' list")
        raw = raw["flags"]
    if not isinstance(raw, list):
        raise DefinitionError(f"{source}: flag definitions must be a list, got {type(raw).__name__}")
    try:
        return definitions_from_dicts(raw)
    except DefinitionError as exc:
        raise DefinitionError(f"{source}: {exc}") from exc


def loads_json_definitions(text: str, source: str = "<json>") -> list[FlagDefinition]:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DefinitionError(f"{source}: failed to parse JSON definitions: {exc}") from exc
    return _flag_list(raw, source)


def loads_toml_definitions(text: str, source: str = "<toml>") -> list[FlagDefinition]:
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise DefinitionError(f"{source}: failed to parse TOML definitions: {exc}") from exc
    return _flag_list(raw.get("flags", []), source)


_LOADERS = {
    ".json": loads_json_definitions,
    ".toml": loads_toml_definitions,
}


def load_definitions(path: Path) -> list[FlagDefinition]:
    """Load definitions from *path*, picking the format from its suffix."""
    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        raise DefinitionError(
            f"{path}: unsupported definitions format {path.suffix!r} (expected .json or .toml)"
        )
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DefinitionError(f"{path}: cannot read definitions: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise DefinitionError(f"{path}: definitions are not valid UTF-8: {exc}") from exc
    return loader(text, source=str(path))
