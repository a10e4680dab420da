"""test.py - Validate annotated source files against an index.

Every annotation comment below a code line asserts one attribute the index
must report for that line.  Files in the index are checked one at a time;
the command exits non-zero if any assertion fails.
"""

from __future__ import annotations

from pathlib import Path

import typer

from snapcheck.cli import CommentSyntaxOption, JsonOption, error_exit, get_config, json_print
from snapcheck.index import IndexFormatError, load_index
from snapcheck.report import out_console
from snapcheck.snapshot import check_index, syntax_resolver

app = typer.Typer(
    help="Validate annotated snapshot files against an index.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

snapcheck test                               Check sources under the cwd against index.json

snapcheck test --from out.json testdata      Sources in testdata/, index in out.json

scip print --json index.scip | snapcheck test --from -     Read the index from stdin

snapcheck test -c '#'                        Annotations use '#' comments

snapcheck test --files a.py --files b.py     Only check these documents

[bold]Annotation format:[/bold]

// ^ kind identifier          Caret inside the token, length unchecked

// ^^^ kind identifier        Exact start column and length

// <- kind identifier         Anchored at the comment marker column

// > text                     Auxiliary line (diagnostic message, docs)

[dim]A '.' token in an identifier matches any token at that position.[/dim]""",
)


@app.callback(invoke_without_command=True)
def main(
    directory: Path | None = typer.Argument(
        None, help="Directory the index's relative paths are resolved against."
    ),
    index_from: str | None = typer.Option(
        None, "--from", help="Index file in JSON form, or '-' for stdin (default: index.json)."
    ),
    comment_syntax: str | None = CommentSyntaxOption,
    files: list[str] = typer.Option(None, "--files", help="Only check these relative paths"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show failing files"),
    json_output: bool = JsonOption,
) -> None:
    """Validate annotated snapshot files against an index."""
    cfg = get_config(json_mode=json_output)
    source_dir = directory if directory is not None else cfg.source_root
    index_source = index_from if index_from is not None else str(cfg.index_path)

    if comment_syntax is not None:
        resolver = syntax_resolver(comment_syntax)
    else:
        resolver = syntax_resolver(cfg.comment_syntax, cfg.comment_syntax_by_extension)

    try:
        index = load_index(index_source)
    except FileNotFoundError:
        error_exit(f"Index not found: {index_source}", json_mode=json_output)
    except IndexFormatError as exc:
        error_exit(f"Invalid index {index_source}: {exc}", json_mode=json_output)

    try:
        summary = check_index(index, source_dir, resolver, only=set(files) if files else None)
    except FileNotFoundError as exc:
        error_exit(f"Source file not found: {exc.filename or exc}", json_mode=json_output)

    if json_output:
        json_print(summary.to_dict())
    else:
        summary.display(out_console, quiet=quiet)
        if len(summary.files) > 1:
            summary.display_totals(out_console)

    if not summary.passed:
        raise typer.Exit(code=1)


def main_entry() -> None:
    """Package entry point for ``snapcheck-test``."""
    app()


if __name__ == "__main__":
    main_entry()
