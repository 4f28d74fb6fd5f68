"""context.py – One level of flag-name resolution.

A :class:`Context` maps every declared name at one nesting level (the root
definitions, or one context flag's children) to its definition, and links to
the enclosing level.  Lookups fall back to the parent chain only through that
explicit link.
"""

from __future__ import annotations

from collections.abc import Iterable

from warg.definition import FlagDefinition
from warg.errors import DefinitionError


class Context:
    """Name table for one nesting level."""

    def __init__(self, definitions: Iterable[FlagDefinition], parent: Context | None = None) -> None:
        self.parent = parent
        self.flags_by_name: dict[str, FlagDefinition] = {}
        for definition in definitions:
            for name in definition.names:
                existing = self.flags_by_name.get(name)
                if existing is not None and existing is not definition:
                    raise DefinitionError(
                        f"duplicate flag name within the same context: {name} "
                        f"(declared by {list(existing.names)} and {list(definition.names)})"
                    )
                self.flags_by_name[name] = definition

    def __contains__(self, name: str) -> bool:
        return name in self.flags_by_name

    def __repr__(self) -> str:
        return f"Context({sorted(self.flags_by_name)!r}, depth={self.depth})"

    @property
    def depth(self) -> int:
        """Number of ancestors (0 for the root)."""
        depth = 0
        ctx = self.parent
        while ctx is not None:
            depth += 1
            ctx = ctx.parent
        return depth

    def lookup(self, name: str) -> FlagDefinition | None:
        """Return the definition for *name*, searching this level then ancestors."""
        ctx: Context | None = self
        while ctx is not None:
            definition = ctx.flags_by_name.get(name)
            if definition is not None:
                return definition
            ctx = ctx.parent
        return None
