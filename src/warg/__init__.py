"""warg — hierarchical command-line flag parser.

Parses token lists against nested flag definitions: combined short flags
(``-abc``), context flags that open nested scopes (``-G`` then ``-c``), and
lookups that fall back through the enclosing scopes.  A typed binding layer
turns the resulting tree into plain Python values.
"""

from warg.binding import Bindings, Kind, Registry
from warg.context import Context
from warg.definition import FlagDefinition, normalize_flag_name
from warg.errors import (
    BindingError,
    DefinitionError,
    MissingValueError,
    ParseError,
    UnknownFlagError,
    WargError,
)
from warg.parser import FlagValue, ParseResult, Parser, parse

__version__ = "0.1.0"

__all__ = [
    "BindingError",
    "Bindings",
    "Context",
    "DefinitionError",
    "FlagDefinition",
    "FlagValue",
    "Kind",
    "MissingValueError",
    "ParseError",
    "ParseResult",
    "Parser",
    "Registry",
    "UnknownFlagError",
    "WargError",
    "normalize_flag_name",
    "parse",
]
