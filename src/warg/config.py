"""Project configuration loader for warg.

Reads ``warg.toml`` from the project root.  The file holds the flag
definitions (``[[flags]]`` tables, see :mod:`warg.loaders`) and an optional
``[warg]`` table with display settings::

    [warg]
    prog = "deploy"

    [[flags]]
    names = ["-v", "--verbose"]
    switch = true

Usage::

    from warg.config import load_config

    cfg = load_config()
    result = Parser(cfg.definitions).parse(tokens)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

from warg.definition import FlagDefinition
from warg.errors import DefinitionError
from warg.loaders import load_definitions

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

CONFIG_NAME = "warg.toml"


@dataclass
class WargConfig:
    """Parsed project configuration."""

    # Directory holding warg.toml (or the explicit definitions file)
    root: Path

    # File the definitions were read from
    path: Path

    definitions: list[FlagDefinition] = field(default_factory=list)

    # --- [warg] ---
    prog: str = "warg"


def _find_root(start: Path | None = None) -> Path:
    """Walk up from *start* (or cwd) to the first directory containing warg.toml."""
    if start is not None:
        return start
    candidate = Path.cwd().resolve()
    while candidate != candidate.parent:
        if (candidate / CONFIG_NAME).exists():
            return candidate
        candidate = candidate.parent
    raise FileNotFoundError(
        f"Could not find {CONFIG_NAME} in any parent of the current directory. "
        "Pass --defs PATH or run from within a directory that contains one."
    )


def load_config(root: Path | None = None, path: Path | None = None) -> WargConfig:
    """Load flag definitions and settings.

    Args:
        root: Project root containing ``warg.toml``.  Auto-detected if ``None``.
        path: Explicit definitions file (``.toml`` or ``.json``); overrides
              root discovery.  Only TOML files can carry a ``[warg]`` table.
    """
    if path is None:
        root = _find_root(root)
        path = root / CONFIG_NAME
    else:
        root = path.parent
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    definitions = load_definitions(path)

    settings: dict = {}
    if path.suffix.lower() == ".toml":
        with open(path, "rb") as f:
            try:
                settings = tomllib.load(f).get("warg", {})
            except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
                raise DefinitionError(f"{path}: {exc}") from exc
        if not isinstance(settings, dict):
            raise DefinitionError(f"{path}: [warg] must be a table")

    return WargConfig(
        root=root,
        path=path,
        definitions=definitions,
        prog=str(settings.get("prog", "warg")),
    )
