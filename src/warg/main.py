"""main.py – Entry point for the ``warg`` command.

Inspects flag definitions and shows how a token list parses against them.
The parse tree is printed as-is, including the never-closing context scopes,
which makes this the quickest way to check where a flag will attach.
"""

from pathlib import Path

import typer

from warg.cli import (
    DefsOption,
    configure_logging,
    console,
    definitions_tree,
    error_exit,
    get_config,
    result_tree,
)
from warg.config import WargConfig
from warg.errors import ParseError, WargError
from warg.parser import Parser

app = typer.Typer(
    help="Hierarchical flag parser: inspect definitions and parse token lists.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

warg check                          Validate the nearest warg.toml

warg check --defs flags.json        Validate a JSON definitions file

warg parse -- -G -c -m "fix bug"    Show the parse tree for a token list

[dim]Everything after '--' is handed to the parser unchanged.[/dim]""",
)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log scan steps to stderr."),
) -> None:
    configure_logging(verbose)


def _build_parser(cfg: WargConfig) -> Parser:
    try:
        return Parser(cfg.definitions)
    except WargError as exc:
        error_exit(f"{cfg.path}: {exc}")


@app.command()
def check(defs: Path | None = DefsOption) -> None:
    """Validate flag definitions and print their hierarchy."""
    cfg = get_config(defs)
    _build_parser(cfg)
    console.print(definitions_tree(f"{cfg.prog} ({cfg.path})", cfg.definitions))


@app.command()
def parse(
    tokens: list[str] = typer.Argument(None, help="Tokens to parse (put them after '--')."),
    defs: Path | None = DefsOption,
) -> None:
    """Parse TOKENS against the definitions and print the result tree."""
    cfg = get_config(defs)
    parser = _build_parser(cfg)
    try:
        result = parser.parse(tokens or [])
    except ParseError as exc:
        error_exit(str(exc))
    console.print(result_tree(cfg.prog, result))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
