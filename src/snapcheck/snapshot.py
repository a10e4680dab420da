"""snapshot.py - Check annotated source files against an index.

Each line yields a :class:`LineOutcome`; a file's result is the concatenation
of its line outcomes.  Nothing is shared between lines or files, so
documents can be checked independently.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Collection, Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from snapcheck.annotation import (
    DEFAULT_COMMENT_SYNTAX,
    AnnotationError,
    comment_block_length,
    test_cases_for_line,
)
from snapcheck.attributes import attributes_at_line
from snapcheck.index import Document, Index, Occurrence
from snapcheck.matcher import is_satisfied
from snapcheck.report import Failure, FileResult, RunSummary


@dataclass(frozen=True)
class LineOutcome:
    """What one code line contributed: passes, failures and lines consumed."""

    successes: int = 0
    failures: tuple[Failure, ...] = ()
    consumed: int = 0


def check_line(
    line: int,
    lines: Sequence[str],
    occurrences: Sequence[Occurrence],
    comment_syntax: str = DEFAULT_COMMENT_SYNTAX,
) -> LineOutcome:
    """Evaluate the annotations below *line*.

    A malformed annotation block becomes a single failure and the whole
    comment block is skipped.
    """
    try:
        cases, used = test_cases_for_line(line, lines, comment_syntax)
    except AnnotationError as exc:
        return LineOutcome(
            failures=(Failure(line=exc.line, error=exc.reason),),
            consumed=comment_block_length(line, lines, comment_syntax),
        )
    if not cases:
        return LineOutcome(consumed=used)

    attributes = tuple(attributes_at_line(line, occurrences))
    successes = 0
    failures: list[Failure] = []
    for case in cases:
        if is_satisfied(case, attributes):
            successes += 1
        else:
            failures.append(Failure(line=line, expectation=case, actual=attributes))
    return LineOutcome(successes, tuple(failures), used)


def iter_line_outcomes(
    lines: Sequence[str],
    occurrences: Sequence[Occurrence],
    comment_syntax: str = DEFAULT_COMMENT_SYNTAX,
) -> Iterator[LineOutcome]:
    """Yield one outcome per code line, skipping consumed annotation lines."""
    line = 0
    while line < len(lines):
        outcome = check_line(line, lines, occurrences, comment_syntax)
        yield outcome
        line += 1 + outcome.consumed


def check_lines(
    path: str,
    lines: Sequence[str],
    occurrences: Sequence[Occurrence],
    comment_syntax: str = DEFAULT_COMMENT_SYNTAX,
) -> FileResult:
    outcomes = list(iter_line_outcomes(lines, occurrences, comment_syntax))
    return FileResult(
        path=path,
        successes=sum(o.successes for o in outcomes),
        failures=tuple(itertools.chain.from_iterable(o.failures for o in outcomes)),
    )


def check_document(
    document: Document,
    lines: Sequence[str],
    comment_syntax: str = DEFAULT_COMMENT_SYNTAX,
) -> FileResult:
    """Check one document against the already-split lines of its source."""
    return check_lines(document.relative_path, lines, document.occurrences, comment_syntax)


def read_source_lines(path: Path) -> list[str]:
    """Read a source file and split it on newlines.

    Raises:
        FileNotFoundError: *path* does not exist.
    """
    return path.read_text(encoding="utf-8", errors="replace").split("\n")


def syntax_resolver(
    default: str = DEFAULT_COMMENT_SYNTAX,
    by_extension: Mapping[str, str] | None = None,
) -> Callable[[str], str]:
    """Return a function mapping a relative path to its comment marker."""
    overrides = dict(by_extension or {})

    def resolve(relative_path: str) -> str:
        return overrides.get(Path(relative_path).suffix, default)

    return resolve


def check_index(
    index: Index,
    directory: Path,
    comment_syntax: str | Callable[[str], str] = DEFAULT_COMMENT_SYNTAX,
    *,
    only: Collection[str] | None = None,
) -> RunSummary:
    """Check every document of *index* against its source under *directory*.

    *comment_syntax* is either a marker or a function from relative path to
    marker.  *only* limits the run to those relative paths.

    Raises:
        FileNotFoundError: a document's source file is missing.  The run
            stops at the first missing file.
    """
    if isinstance(comment_syntax, str):
        comment_syntax = syntax_resolver(comment_syntax)

    summary = RunSummary()
    for document in index.documents:
        if only is not None and document.relative_path not in only:
            continue
        lines = read_source_lines(directory / document.relative_path)
        summary.files.append(
            check_document(document, lines, comment_syntax(document.relative_path))
        )
    return summary
