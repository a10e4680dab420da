"""Shared CLI utilities for snapcheck commands.

Provides the common Typer options, config loading and standardised error /
JSON output so every command reports problems the same way.

Usage in a command::

    import typer
    from snapcheck.cli import CommentSyntaxOption, error_exit, get_config

    app = typer.Typer()

    @app.command()
    def main(comment_syntax: str | None = CommentSyntaxOption) -> None:
        cfg = get_config()
        ...
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from snapcheck.config import ConfigError, ProjectConfig, load_config

# Re-usable Typer option for --comment-syntax
CommentSyntaxOption: str | None = typer.Option(
    None,
    "--comment-syntax",
    "-c",
    help="Line-comment marker introducing annotations (default: '//' or snapcheck.toml).",
)

JsonOption: bool = typer.Option(False, "--json", help="Output results as JSON")


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True, highlight=False)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}", soft_wrap=True)
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2, ensure_ascii=False))


def get_config(root: Path | None = None, *, json_mode: bool = False) -> ProjectConfig:
    """Load the project config, exiting with an error if it is invalid."""
    try:
        return load_config(root)
    except ConfigError as exc:
        error_exit(str(exc), json_mode=json_mode)


def rel_display_path(filepath: Path, base_dir: Path | None = None) -> str:
    """Return *filepath* relative to *base_dir* when possible, else as given."""
    if base_dir is not None:
        try:
            return str(filepath.resolve().relative_to(base_dir.resolve()))
        except ValueError:
            pass
    return str(filepath)
