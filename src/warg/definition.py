"""definition.py – Static flag definitions.

A :class:`FlagDefinition` is built once by the caller (or by
:mod:`warg.loaders`) and is read-only for every parse that borrows it.  A
definition that declares children is a *context* flag: matching it opens a
nested scope in which the children become resolvable.  Context flags never
consume a value, so ``is_switch`` is forced to ``True`` at construction time
rather than checked per occurrence.

Dict shape (shared with the JSON / TOML loaders)::

    {"names": ["-G", "--git"], "switch": true, "desc": "Git operations",
     "children": [{"names": ["-m"], "switch": false, "desc": "Message"}]}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from warg.errors import DefinitionError


def normalize_flag_name(name: str) -> str:
    """Add dashes to a bare flag name.

    ``"v"`` becomes ``"-v"`` and ``"verbose"`` becomes ``"--verbose"``;
    names that already start with a dash are returned unchanged.
    """
    if name.startswith("-"):
        return name
    if len(name) == 1:
        return "-" + name
    return "--" + name


@dataclass(frozen=True)
class FlagDefinition:
    """One flag: its accepted spellings, arity, help text and nested flags."""

    names: tuple[str, ...]
    is_switch: bool = False
    description: str = ""
    children: tuple[FlagDefinition, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if isinstance(self.names, str):
            raise DefinitionError(f"names must be a sequence of strings, got {self.names!r}")
        names = tuple(self.names)
        if not names:
            raise DefinitionError("flag definition needs at least one name")
        for name in names:
            if not isinstance(name, str) or not name:
                raise DefinitionError(f"invalid flag name {name!r} in {list(names)}")
        object.__setattr__(self, "names", names)
        object.__setattr__(self, "children", tuple(self.children))
        if self.children:
            object.__setattr__(self, "is_switch", True)

    @property
    def canonical_name(self) -> str:
        """The first declared name, used as the key in reports and errors."""
        return self.names[0]

    @property
    def is_context(self) -> bool:
        return bool(self.children)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlagDefinition:
        """Build a definition (recursively) from the loader dict shape."""
        if not isinstance(data, Mapping):
            raise DefinitionError(f"flag definition must be a table/object, got {type(data).__name__}")
        names = data.get("names")
        if not isinstance(names, list):
            raise DefinitionError(f"'names' must be a list, got {names!r}")
        children = data.get("children") or []
        if not isinstance(children, list):
            raise DefinitionError(f"'children' of {names} must be a list")
        switch = data.get("switch", False)
        if not isinstance(switch, bool):
            raise DefinitionError(f"'switch' of {names} must be true or false, got {switch!r}")
        return cls(
            names=tuple(names),
            is_switch=switch,
            description=str(data.get("desc", data.get("description", ""))),
            children=tuple(cls.from_dict(child) for child in children),
        )


def definitions_from_dicts(items: Iterable[Mapping[str, Any]]) -> list[FlagDefinition]:
    """Convert a list of definition dicts into :class:`FlagDefinition` objects."""
    return [FlagDefinition.from_dict(item) for item in items]
