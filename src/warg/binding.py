"""binding.py – Typed binding of parse results into plain Python values.

A :class:`Registry` is an explicit, caller-owned collection of flags.  Each
flag is registered under a destination key together with one setter
:class:`Kind` from a closed set; the kind decides both the arity (``BOOL`` is
a switch, every other kind takes a value) and how the parsed string is
converted.  Registries nest through :meth:`Registry.context`, mirroring the
definition tree the core parser works on.

Usage::

    from warg.binding import Kind, Registry

    reg = (
        Registry()
        .flag("verbose", ["v", "verbose"], Kind.BOOL, help="Verbose output")
        .flag("timeout", ["t", "timeout"], Kind.DURATION, default=timedelta(seconds=30))
        .context("git", ["G", "git"], lambda sub: sub
                 .flag("commit", ["c", "commit"], Kind.BOOL)
                 .flag("message", ["m"], help="Commit message"))
    )
    opts = reg.parse(["-v", "-Gcm", "fix bug"])
    opts.git.message   # "fix bug"

Contexts registered with ``repeat=True`` bind to a list holding one mapping
per occurrence, e.g. ``-A -n x -A -n y`` gives two entries.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from warg.definition import FlagDefinition, normalize_flag_name
from warg.errors import BindingError, DefinitionError
from warg.parser import FlagValue, Parser


class Kind(str, enum.Enum):
    """Closed set of setter kinds."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING_LIST = "string-list"
    DURATION = "duration"

    @property
    def is_switch(self) -> bool:
        return self is Kind.BOOL


# ---------------------------------------------------------------------------
# Duration parsing (Go time.ParseDuration syntax)
# ---------------------------------------------------------------------------

_DURATION_UNITS: dict[str, float] = {
    "ns": 1e-3,
    "us": 1.0,
    "µs": 1.0,  # U+00B5 micro sign
    "μs": 1.0,  # U+03BC greek mu
    "ms": 1e3,
    "s": 1e6,
    "m": 60e6,
    "h": 3600e6,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_FULL = re.compile(r"[+-]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+")


def parse_duration(text: str) -> timedelta:
    """Parse ``"1h30m"``, ``"250ms"``, ``"-1.5s"`` or ``"0"`` into a timedelta."""
    if text in ("0", "+0", "-0"):
        return timedelta(0)
    if not _DURATION_FULL.fullmatch(text):
        raise ValueError(f"invalid duration {text!r}")
    sign = -1 if text.startswith("-") else 1
    micros = sum(float(num) * _DURATION_UNITS[unit] for num, unit in _DURATION_PART.findall(text))
    try:
        return timedelta(microseconds=sign * micros)
    except OverflowError:
        raise ValueError(f"invalid duration {text!r}") from None


# ---------------------------------------------------------------------------
# Setters
# ---------------------------------------------------------------------------


def _set_string(current: Any, raw: str) -> Any:
    return raw


def _set_bool(current: Any, raw: str) -> Any:
    return True


def _set_int(current: Any, raw: str) -> Any:
    try:
        return int(raw, 10)
    except ValueError:
        raise ValueError(f"invalid integer {raw!r}") from None


def _set_float(current: Any, raw: str) -> Any:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"invalid number {raw!r}") from None


def _set_string_list(current: Any, raw: str) -> Any:
    items = list(current)
    if "," in raw:
        items.extend(part.strip() for part in raw.split(","))
    else:
        items.append(raw)
    return items


def _set_duration(current: Any, raw: str) -> Any:
    return parse_duration(raw)


_SETTERS: dict[Kind, Callable[[Any, str], Any]] = {
    Kind.STRING: _set_string,
    Kind.BOOL: _set_bool,
    Kind.INT: _set_int,
    Kind.FLOAT: _set_float,
    Kind.STRING_LIST: _set_string_list,
    Kind.DURATION: _set_duration,
}

_DEFAULTS: dict[Kind, Callable[[], Any]] = {
    Kind.STRING: str,
    Kind.BOOL: bool,
    Kind.INT: int,
    Kind.FLOAT: float,
    Kind.STRING_LIST: list,
    Kind.DURATION: timedelta,
}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class Bindings(dict):
    """Bound values keyed by destination; keys are also readable as attributes."""

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None


@dataclass(frozen=True)
class _FlagEntry:
    dest: str
    definition: FlagDefinition
    kind: Kind
    default: Any

    def initial(self) -> Any:
        if self.default is None:
            return _DEFAULTS[self.kind]()
        return list(self.default) if self.kind is Kind.STRING_LIST else self.default


@dataclass(frozen=True)
class _ContextEntry:
    dest: str
    definition: FlagDefinition
    registry: Registry
    repeat: bool

    def initial(self) -> Any:
        return [] if self.repeat else self.registry.defaults()


class Registry:
    """Caller-owned set of typed flags; build once, parse many times."""

    def __init__(self) -> None:
        self._entries: list[_FlagEntry | _ContextEntry] = []

    def _check_dest(self, dest: str) -> None:
        if hasattr(Bindings, dest):
            raise DefinitionError(f"destination {dest!r} clashes with a Bindings attribute")
        if any(entry.dest == dest for entry in self._entries):
            raise DefinitionError(f"duplicate destination {dest!r} in registry")

    def flag(
        self,
        dest: str,
        names: Sequence[str],
        kind: Kind | str = Kind.STRING,
        help: str = "",
        default: Any = None,
    ) -> Registry:
        """Register a flag bound to ``dest``; returns ``self`` for chaining."""
        self._check_dest(dest)
        kind = Kind(kind)
        definition = FlagDefinition(
            names=tuple(normalize_flag_name(n) for n in names),
            is_switch=kind.is_switch,
            description=help,
        )
        self._entries.append(_FlagEntry(dest, definition, kind, default))
        return self

    def context(
        self,
        dest: str,
        names: Sequence[str],
        build: Callable[[Registry], Registry | None],
        help: str = "",
        repeat: bool = False,
    ) -> Registry:
        """Register a context flag whose child flags are added by ``build(sub)``."""
        self._check_dest(dest)
        sub = Registry()
        built = build(sub)
        sub = built if built is not None else sub
        if not sub._entries:
            raise DefinitionError(f"context {dest!r} declares no child flags")
        definition = FlagDefinition(
            names=tuple(normalize_flag_name(n) for n in names),
            is_switch=True,
            description=help,
            children=tuple(sub.definitions()),
        )
        self._entries.append(_ContextEntry(dest, definition, sub, repeat))
        return self

    def definitions(self) -> list[FlagDefinition]:
        return [entry.definition for entry in self._entries]

    def defaults(self) -> Bindings:
        """Bindings as they would be after parsing no tokens at all."""
        return Bindings((entry.dest, entry.initial()) for entry in self._entries)

    def parser(self) -> Parser:
        return Parser(self.definitions())

    def parse(self, tokens: Sequence[str]) -> Bindings:
        """Parse *tokens* and return the bound values.

        Parse errors propagate unchanged; conversion failures raise
        :class:`~warg.errors.BindingError`.
        """
        result = self.parser().parse(tokens)
        bindings = self.defaults()
        self._bind(result.flags, bindings)
        return bindings

    def _bind(self, nodes: Iterable[FlagValue], out: Bindings) -> None:
        by_definition = {id(entry.definition): entry for entry in self._entries}
        for node in nodes:
            entry = by_definition[id(node.definition)]
            if isinstance(entry, _ContextEntry):
                if entry.repeat:
                    item = entry.registry.defaults()
                    entry.registry._bind(node.children, item)
                    out[entry.dest].append(item)
                else:
                    entry.registry._bind(node.children, out[entry.dest])
                continue
            try:
                out[entry.dest] = _SETTERS[entry.kind](out[entry.dest], node.value)
            except ValueError as exc:
                raise BindingError(entry.definition.canonical_name, node.value, str(exc)) from exc
