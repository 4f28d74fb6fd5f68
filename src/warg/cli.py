"""Shared CLI utilities for the warg command.

Provides the common ``--defs`` option, config loading that turns failures
into clean exits, logging setup, and the rich renderers used by every
subcommand.

Usage in a command::

    from warg.cli import DefsOption, error_exit, get_config

    @app.command()
    def main(defs: Path | None = DefsOption) -> None:
        cfg = get_config(defs)
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.tree import Tree

from warg.config import WargConfig, load_config
from warg.definition import FlagDefinition
from warg.errors import WargError
from warg.parser import FlagValue, ParseResult

# Re-usable Typer option for --defs
DefsOption: Path | None = typer.Option(
    None,
    "--defs",
    "-d",
    help="Definitions file (.toml or .json). Default: nearest warg.toml.",
)

console = Console()
_err_console = Console(stderr=True, soft_wrap=True)


def configure_logging(verbose: bool) -> None:
    """Route library debug logs through rich when ``--verbose`` is given."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


def error_exit(msg: str, *, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}")
    raise typer.Exit(code=code)


def get_config(defs: Path | None = None) -> WargConfig:
    """Load definitions, exiting with an error message on failure."""
    try:
        return load_config(path=defs)
    except (FileNotFoundError, WargError) as exc:
        error_exit(str(exc))


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def _definition_label(definition: FlagDefinition) -> str:
    names = ", ".join(escape(n) for n in definition.names)
    if definition.is_context:
        arity = "[magenta]context[/magenta]"
    elif definition.is_switch:
        arity = "[cyan]switch[/cyan]"
    else:
        arity = "[green]value[/green]"
    label = f"[bold]{names}[/bold] {arity}"
    if definition.description:
        label += f" [dim]{escape(definition.description)}[/dim]"
    return label


def _add_definitions(tree: Tree, definitions: Iterable[FlagDefinition]) -> None:
    for definition in definitions:
        branch = tree.add(_definition_label(definition))
        _add_definitions(branch, definition.children)


def definitions_tree(title: str, definitions: Iterable[FlagDefinition]) -> Tree:
    tree = Tree(f"[bold]{escape(title)}[/bold]")
    _add_definitions(tree, definitions)
    return tree


def _value_label(node: FlagValue) -> str:
    label = f"[bold]{escape(node.name)}[/bold]"
    if node.is_switch:
        return label
    return f"{label} = [green]{escape(repr(node.value))}[/green]"


def _add_values(tree: Tree, nodes: Iterable[FlagValue]) -> None:
    for node in nodes:
        branch = tree.add(_value_label(node))
        _add_values(branch, node.children)


def result_tree(title: str, result: ParseResult) -> Tree:
    tree = Tree(f"[bold]{escape(title)}[/bold]")
    _add_values(tree, result.flags)
    return tree
