"""errors.py – Exception hierarchy for warg.

Every error raised by the library derives from :class:`WargError`, which is
itself a ``ValueError`` so callers that only care about "bad input" can catch
the builtin.  Errors carry the offending token or flag name as attributes so
the CLI (and tests) never need to parse messages.
"""

from __future__ import annotations


class WargError(ValueError):
    """Base class for all warg errors."""


class DefinitionError(WargError):
    """Flag definitions are malformed (raised before any token is scanned)."""


class ParseError(WargError):
    """Token scan failed.  The scan halts at the first error."""


class UnknownFlagError(ParseError):
    """A flag-like token resolved nowhere in the current context chain."""

    def __init__(self, token: str) -> None:
        super().__init__(f"unknown flag: {token}")
        self.token = token


class MissingValueError(ParseError):
    """A value flag was matched but no following token supplies its value."""

    def __init__(self, flag: str) -> None:
        super().__init__(f"flag {flag} requires a value")
        self.flag = flag


class BindingError(WargError):
    """A parsed string could not be converted by the flag's typed setter."""

    def __init__(self, flag: str, value: str, reason: str) -> None:
        super().__init__(f"error setting flag {flag}: {reason}")
        self.flag = flag
        self.value = value
        self.reason = reason
