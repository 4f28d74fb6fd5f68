"""parser.py – Context-scoped flag parser.

Scans a token list left to right against a tree of
:class:`~warg.definition.FlagDefinition` objects and builds a parallel tree
of :class:`FlagValue` nodes.

Scan state
~~~~~~~~~~
Two stacks of equal length are kept for the duration of one :meth:`Parser.parse`
call: the *context stack* (starting with the root :class:`~warg.context.Context`)
and the *parent stack* (starting with ``None``).  ``parents[i]`` is the node
whose match opened ``contexts[i]``.  Matching a context flag pushes onto both.
Nothing ever pops them: once ``-G`` opens its scope, its children stay
resolvable for the rest of the token list, even after unrelated root flags.

Token rules
~~~~~~~~~~~
- ``--`` ends the scan; later tokens are left alone.
- Tokens not starting with ``-`` are skipped (positionals are not modelled).
- ``-abc`` expands to ``-a -b -c``, each resolved against whatever context is
  on top *at that moment*, so ``-Gc`` can open ``-G`` and then match its
  child ``-c``.  A value flag inside the group takes the next separate token
  and ends the group: only the last letter can usefully carry a value.
- ``-x`` / ``--long`` resolve directly.

Usage::

    from warg.parser import Parser

    result = Parser(definitions).parse(["-G", "-c", "-m", "fix bug"])
    message = result.find("-m").value
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

from warg.context import Context
from warg.definition import FlagDefinition
from warg.errors import MissingValueError, UnknownFlagError

log = logging.getLogger(__name__)

SEPARATOR = "--"


# ---------------------------------------------------------------------------
# Result tree
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class FlagValue:
    """One observed flag occurrence and the flags matched inside its scope."""

    definition: FlagDefinition
    present: bool = True
    value: str = ""
    children: list[FlagValue] = field(default_factory=list)

    def __repr__(self) -> str:
        shown = "" if self.definition.is_switch else f" value={self.value!r}"
        return f"FlagValue({self.name}{shown}, children={len(self.children)})"

    @property
    def name(self) -> str:
        return self.definition.canonical_name

    @property
    def is_switch(self) -> bool:
        return self.definition.is_switch

    def matches(self, name: str) -> bool:
        return name in self.definition.names

    def find(self, name: str) -> FlagValue | None:
        """Depth-first search of this subtree for a node declaring *name*."""
        if self.matches(name):
            return self
        for child in self.children:
            found = child.find(name)
            if found is not None:
                return found
        return None

    def walk(self, visitor: Callable[[FlagValue], None]) -> None:
        """Call *visitor* on this node and every descendant, pre-order."""
        visitor(self)
        for child in self.children:
            child.walk(visitor)

    def __iter__(self) -> Iterator[FlagValue]:
        yield self
        for child in self.children:
            yield from child


@dataclass(eq=False)
class ParseResult:
    """Ordered top-level nodes produced by one parse."""

    flags: list[FlagValue] = field(default_factory=list)

    def __iter__(self) -> Iterator[FlagValue]:
        """Every node in the tree, depth-first pre-order."""
        for flag in self.flags:
            yield from flag

    def find(self, name: str) -> FlagValue | None:
        for flag in self.flags:
            found = flag.find(name)
            if found is not None:
                return found
        return None

    def walk(self, visitor: Callable[[FlagValue], None]) -> None:
        for flag in self.flags:
            flag.walk(visitor)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def is_combined_short(token: str) -> bool:
    """True for ``-abc`` style groups (single dash, two or more letters)."""
    return token.startswith("-") and not token.startswith("--") and len(token) > 2


class _Scan:
    """Mutable state for a single parse; discarded when the parse returns."""

    def __init__(self, root: Context, tokens: Sequence[str]) -> None:
        self.tokens = tokens
        self.contexts: list[Context] = [root]
        self.parents: list[FlagValue | None] = [None]
        self.result = ParseResult()

    def attach(self, flag: str, next_index: int) -> int:
        """Resolve *flag*, attach its node, and return how many extra tokens it used."""
        top = self.contexts[-1]
        definition = top.lookup(flag)
        if definition is None:
            raise UnknownFlagError(flag)

        parent: FlagValue | None = None
        for level in range(len(self.contexts) - 1, -1, -1):
            if flag in self.contexts[level]:
                parent = self.parents[level]
                break

        consumed = 0
        node = FlagValue(definition=definition)
        if not definition.is_switch:
            if next_index >= len(self.tokens):
                raise MissingValueError(flag)
            node.value = self.tokens[next_index]
            consumed = 1

        if parent is None:
            self.result.flags.append(node)
        else:
            parent.children.append(node)
        log.debug(
            "matched %s under %s%s",
            flag,
            parent.name if parent is not None else "<root>",
            f" = {node.value!r}" if consumed else "",
        )

        if definition.is_context:
            self.contexts.append(Context(definition.children, top))
            self.parents.append(node)
            log.debug("opened context %s (depth %d)", definition.canonical_name, len(self.contexts) - 1)
        return consumed


class Parser:
    """Parses token lists against a fixed set of root definitions.

    The definitions are validated (duplicate names at one level) when the
    parser is built, and may be reused across any number of sequential
    :meth:`parse` calls.
    """

    def __init__(self, definitions: Sequence[FlagDefinition]) -> None:
        self.definitions = tuple(definitions)
        self.root = Context(self.definitions)
        _validate_children(self.definitions)

    def parse(self, tokens: Sequence[str]) -> ParseResult:
        """Scan *tokens* and return the result tree.

        Raises :class:`~warg.errors.UnknownFlagError` or
        :class:`~warg.errors.MissingValueError` on the first failure.
        """
        scan = _Scan(self.root, list(tokens))
        i = 0
        while i < len(scan.tokens):
            token = scan.tokens[i]

            if token == SEPARATOR:
                log.debug("separator at %d, %d token(s) left unscanned", i, len(scan.tokens) - i - 1)
                break

            if not token.startswith("-"):
                i += 1
                continue

            if is_combined_short(token):
                for letter in token[1:]:
                    consumed = scan.attach("-" + letter, i + 1)
                    if consumed:
                        i += consumed
                        break
                i += 1
                continue

            i += 1 + scan.attach(token, i + 1)

        return scan.result


def _validate_children(definitions: Sequence[FlagDefinition]) -> None:
    """Build every nested context once so duplicate names fail up front."""
    for definition in definitions:
        if definition.children:
            Context(definition.children)
            _validate_children(definition.children)


def parse(definitions: Sequence[FlagDefinition], tokens: Sequence[str]) -> ParseResult:
    """Convenience wrapper: ``Parser(definitions).parse(tokens)``."""
    return Parser(definitions).parse(tokens)
