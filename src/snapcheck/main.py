"""main.py – Umbrella CLI entry point for snapcheck.

Lazily imports and registers the subcommand typer apps so that a broken
command module does not prevent the rest of the CLI from loading.

Every command module exposes a single ``main`` callback, registered as a
flat ``app.command()`` entry.
"""

import importlib
import sys
from collections.abc import Callable

import typer

from snapcheck import __version__

app = typer.Typer(
    help="Snapshot assertions for source-code indexes.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Typical workflow:[/bold]
  scip print --json index.scip > index.json
  snapcheck lint testdata/*.go     Check annotation syntax
  snapcheck test testdata          Validate annotations against index.json

[dim]Settings can be stored in snapcheck.toml at the project root.
Run 'snapcheck <cmd> --help' for details.[/dim]""",
)

# ---------------------------------------------------------------------------
# Subcommand registry
# ---------------------------------------------------------------------------

_SINGLE_COMMANDS: list[tuple[str, str, str]] = [
    ("test", "snapcheck.test", "Validate annotated snapshot files against an index."),
    ("lint", "snapcheck.lint", "Check annotation syntax without an index."),
]


def _make_stub_cmd(mod_name: str, err: ImportError) -> Callable[[], None]:
    """Create a stub command function that reports a missing dependency."""

    def _stub() -> None:
        print(f"Error: could not load '{mod_name}': {err}", file=sys.stderr)
        raise typer.Exit(code=1)

    return _stub


for _name, _module, _help in _SINGLE_COMMANDS:
    try:
        _mod = importlib.import_module(_module)
        _epilog = getattr(_mod.app.info, "epilog", None)
        if not isinstance(_epilog, str):
            _epilog = None
        app.command(name=_name, help=_help, epilog=_epilog)(_mod.main)
    except ImportError as _exc:
        app.command(name=_name, help=f"[unavailable] {_help}")(_make_stub_cmd(_module, _exc))


def _version_callback(value: bool) -> None:
    if value:
        print(f"snapcheck {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """Snapshot assertions for source-code indexes."""


def main() -> None:
    app()


if __name__ == "__main__":
    main()
