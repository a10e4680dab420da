"""lint.py - Annotation syntax checker for snapshot source files.

Reads annotation blocks exactly the way ``snapcheck test`` does, but without
an index: it only reports comment blocks that cannot be parsed, so broken
annotations can be caught before an index exists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.text import Text

from snapcheck.annotation import (
    DEFAULT_COMMENT_SYNTAX,
    AnnotationError,
    comment_block_length,
    test_cases_for_line,
)
from snapcheck.cli import CommentSyntaxOption, JsonOption, get_config, json_print

out_console = Console(highlight=False)

WARN_NO_IDENTIFIER = "W001"


@dataclass
class LintResult:
    """Accumulated annotation errors and warnings for a single source file."""

    filepath: Path
    annotations: int = 0
    errors: list[tuple[int, str, str]] = field(default_factory=list)
    warnings: list[tuple[int, str, str]] = field(default_factory=list)

    def error(self, line: int, code: str, msg: str) -> None:
        """Record an error diagnostic at *line* (1-based)."""
        self.errors.append((line, code, msg))

    def warning(self, line: int, code: str, msg: str) -> None:
        """Record a warning diagnostic at *line* (1-based)."""
        self.warnings.append((line, code, msg))

    @property
    def passed(self) -> bool:
        """True if no errors were recorded."""
        return len(self.errors) == 0

    def display(self, quiet: bool = False) -> None:
        """Print errors (and optionally warnings) to the console."""
        rel = str(self.filepath)
        for line, code, msg in self.errors:
            text = Text(f"  {rel}:{line}: ")
            text.append(code, style="red")
            text.append(f": {msg}")
            out_console.print(text, soft_wrap=True)
        if not quiet:
            for line, code, msg in self.warnings:
                text = Text(f"  {rel}:{line}: ")
                text.append(code, style="yellow")
                text.append(f": {msg}")
                out_console.print(text, soft_wrap=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "path": str(self.filepath),
            "annotations": self.annotations,
            "errors": [{"line": ln, "code": c, "message": m} for ln, c, m in self.errors],
            "warnings": [{"line": ln, "code": c, "message": m} for ln, c, m in self.warnings],
            "passed": self.passed,
        }


def lint_lines(
    filepath: Path, lines: list[str], comment_syntax: str = DEFAULT_COMMENT_SYNTAX
) -> LintResult:
    result = LintResult(filepath)
    line = 0
    while line < len(lines):
        try:
            cases, used = test_cases_for_line(line, lines, comment_syntax)
        except AnnotationError as exc:
            result.error(exc.line + 1, exc.code, exc.reason)
            line += 1 + comment_block_length(line, lines, comment_syntax)
            continue
        for case in cases:
            result.annotations += 1
            if not case.attribute.identifier:
                result.warning(
                    case.line + 1,
                    WARN_NO_IDENTIFIER,
                    f"'{case.attribute.kind}' annotation has no identifier",
                )
        line += 1 + used
    return result


def lint_file(filepath: Path, comment_syntax: str = DEFAULT_COMMENT_SYNTAX) -> LintResult:
    """Check every annotation block in *filepath*."""
    try:
        text = filepath.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        result = LintResult(filepath)
        result.error(0, "E000", f"Cannot read file: {e}")
        return result
    return lint_lines(filepath, text.split("\n"), comment_syntax)


app = typer.Typer(
    help="Check annotation syntax in snapshot source files.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

snapcheck lint testdata/main.go              Check one file

snapcheck lint -c '#' testdata/*.py          Python sources use '#' comments

snapcheck lint --json src/*.go               Machine-readable JSON output

[bold]Error codes:[/bold]

E000   File cannot be read

E001   Comment line below code has no '^' or '<-' anchor

E002   Annotation has an anchor but no kind

E003   '>' continuation line without a preceding annotation

W001   Annotation has no identifier""",
)


@app.callback(invoke_without_command=True)
def main(
    files: list[Path] = typer.Argument(..., help="Source files to check"),
    comment_syntax: str | None = CommentSyntaxOption,
    quiet: bool = typer.Option(False, help="Only show errors, suppress warnings"),
    json_output: bool = JsonOption,
) -> None:
    """Check annotation syntax in snapshot source files."""
    cfg = get_config(json_mode=json_output)

    total = 0
    passed = 0
    annotations = 0
    error_count = 0
    warning_count = 0
    all_results: list[LintResult] = []

    for path in files:
        syntax = comment_syntax or cfg.comment_syntax_for(path.name)
        result = lint_file(path, syntax)
        all_results.append(result)
        total += 1
        if result.passed:
            passed += 1
        if not json_output and (not result.passed or (not quiet and result.warnings)):
            result.display(quiet=quiet)
        annotations += result.annotations
        error_count += len(result.errors)
        warning_count += len(result.warnings)

    if json_output:
        json_print(
            {
                "total": total,
                "passed": passed,
                "annotations": annotations,
                "errors": error_count,
                "warnings": warning_count,
                "files": [r.to_dict() for r in all_results],
            }
        )
    else:
        pass_style = "green" if error_count == 0 else "red"
        result_text = Text()
        result_text.append(f"Checked {total} files ({annotations} annotations): ")
        result_text.append(f"{passed} passed", style=pass_style)
        result_text.append(", ")
        result_text.append(f"{error_count} errors", style="red" if error_count else "")
        result_text.append(f", {warning_count} warnings")
        out_console.print(result_text)

    if error_count > 0:
        raise typer.Exit(code=1)


def main_entry() -> None:
    """Package entry point for ``snapcheck-lint``."""
    app()


if __name__ == "__main__":
    main_entry()
