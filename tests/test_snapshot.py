"""Tests for snapcheck.snapshot - checking whole files and indexes."""

from pathlib import Path

import pytest

from snapcheck.index import Diagnostic, Document, Index, Occurrence, Range, SymbolRole
from snapcheck.snapshot import (
    LineOutcome,
    check_document,
    check_index,
    check_line,
    check_lines,
    iter_line_outcomes,
    read_source_lines,
    syntax_resolver,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

GO_SOURCE = """\
package pkg

func Foo() {}
//   ^^^ definition go pkg Foo().

func Bar() { Foo() }
//   ^^^ definition go pkg Bar().
//           ^ reference go pkg Foo().
"""

GO_OCCURRENCES = (
    Occurrence(Range(2, 5, 2, 8), "go pkg Foo().", SymbolRole.DEFINITION),
    Occurrence(Range(5, 5, 5, 8), "go pkg Bar().", SymbolRole.DEFINITION),
    Occurrence(Range(5, 13, 5, 16), "go pkg Foo()."),
)


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# check_line
# ---------------------------------------------------------------------------


class TestCheckLine:
    def test_no_annotations(self) -> None:
        assert check_line(0, ["a()", "b()"], ()) == LineOutcome()

    def test_success(self) -> None:
        lines = GO_SOURCE.split("\n")
        outcome = check_line(2, lines, GO_OCCURRENCES)
        assert outcome == LineOutcome(successes=1, failures=(), consumed=1)

    def test_failure_carries_actual_attributes(self) -> None:
        lines = ["func Foo() {}", "//   ^^^ reference go pkg Foo()."]
        occs = [Occurrence(Range(0, 5, 0, 8), "go pkg Foo().", SymbolRole.DEFINITION)]
        outcome = check_line(0, lines, occs)
        assert outcome.successes == 0
        [failure] = outcome.failures
        assert failure.line == 0
        assert failure.expectation is not None
        assert [a.describe() for a in failure.actual] == ["definition go pkg Foo()."]

    def test_malformed_block_skipped(self) -> None:
        lines = ["f()", "// ^ reference f", "// plain comment", "// ^ reference g", "g()"]
        outcome = check_line(0, lines, ())
        assert outcome.successes == 0
        [failure] = outcome.failures
        assert failure.malformed
        assert failure.line == 2
        assert outcome.consumed == 3


# ---------------------------------------------------------------------------
# Whole documents
# ---------------------------------------------------------------------------


class TestCheckLines:
    def test_all_pass(self) -> None:
        result = check_lines("main.go", GO_SOURCE.split("\n"), GO_OCCURRENCES)
        assert result.passed
        assert result.successes == 3
        assert result.path == "main.go"

    def test_failure_does_not_stop_later_lines(self) -> None:
        source = GO_SOURCE.replace("definition go pkg Foo().", "definition go pkg Baz().")
        result = check_lines("main.go", source.split("\n"), GO_OCCURRENCES)
        assert not result.passed
        assert result.successes == 2
        assert [f.line for f in result.failures] == [2]

    def test_annotation_lines_are_not_code_lines(self) -> None:
        # the '>' payload would be an orphan continuation if reparsed
        lines = ["x()", "// <- diagnostic Error", "// > boom", "// <- reference x", "y()"]
        occs = [
            Occurrence(Range(0, 0, 0, 1), "x", diagnostics=(Diagnostic("Error", "boom"),)),
        ]
        outcomes = list(iter_line_outcomes(lines, occs))
        assert len(outcomes) == 2
        assert outcomes[0].consumed == 3
        result = check_lines("a.go", lines, occs)
        assert result.passed
        assert result.successes == 2

    def test_malformed_reported_and_run_continues(self) -> None:
        lines = ["a()", "// nope", "b()", "//^ reference b"]
        occs = [Occurrence(Range(2, 0, 2, 3), "b")]
        result = check_lines("a.go", lines, occs)
        assert result.successes == 1
        [failure] = result.failures
        assert failure.malformed
        assert failure.error.startswith("no '^' or '<-' anchor")
        assert failure.to_dict()["line"] == 1

    def test_custom_comment_syntax(self) -> None:
        lines = ["def foo():", "#   ^^^ definition py foo()."]
        occs = [Occurrence(Range(0, 4, 0, 7), "py foo().", SymbolRole.DEFINITION)]
        assert check_lines("a.py", lines, occs, "#").passed

    def test_document_wrapper(self) -> None:
        doc = Document("main.go", GO_OCCURRENCES)
        result = check_document(doc, GO_SOURCE.split("\n"))
        assert result.passed
        assert result.successes == 3

    def test_no_annotations_passes_with_zero(self) -> None:
        result = check_lines("x.go", ["a", "b", ""], ())
        assert result.passed
        assert result.successes == 0

    def test_empty_file(self) -> None:
        assert check_lines("x.go", [""], ()).passed


# ---------------------------------------------------------------------------
# Whole index
# ---------------------------------------------------------------------------


class TestCheckIndex:
    def test_reads_sources(self, tmp_path: Path) -> None:
        _write(tmp_path / "pkg" / "main.go", GO_SOURCE)
        index = Index([Document("pkg/main.go", GO_OCCURRENCES)])
        summary = check_index(index, tmp_path)
        assert summary.passed
        assert summary.assertions == 3
        assert [r.path for r in summary.files] == ["pkg/main.go"]

    def test_missing_source_raises(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.go", GO_SOURCE)
        index = Index([Document("missing.go"), Document("a.go", GO_OCCURRENCES)])
        with pytest.raises(FileNotFoundError):
            check_index(index, tmp_path)

    def test_only_filter(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.go", GO_SOURCE)
        index = Index([Document("a.go", GO_OCCURRENCES), Document("missing.go")])
        summary = check_index(index, tmp_path, only={"a.go"})
        assert [r.path for r in summary.files] == ["a.go"]

    def test_per_extension_syntax(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.go", GO_SOURCE)
        _write(tmp_path / "b.py", "def foo():\n#   ^^^ definition py foo().\n")
        index = Index(
            [
                Document("a.go", GO_OCCURRENCES),
                Document(
                    "b.py",
                    (Occurrence(Range(0, 4, 0, 7), "py foo().", SymbolRole.DEFINITION),),
                ),
            ]
        )
        summary = check_index(index, tmp_path, syntax_resolver("//", {".py": "#"}))
        assert summary.passed
        assert summary.assertions == 4

    def test_failure_counts(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.go", GO_SOURCE)
        index = Index([Document("a.go", ())])
        summary = check_index(index, tmp_path)
        assert not summary.passed
        assert summary.failure_count == 3
        assert summary.failed_count == 1


class TestHelpers:
    def test_read_source_lines_keeps_trailing_empty_line(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "a.go", "a\nb\n")
        assert read_source_lines(path) == ["a", "b", ""]

    def test_syntax_resolver(self) -> None:
        resolve = syntax_resolver("//", {".py": "#"})
        assert resolve("x/y.py") == "#"
        assert resolve("x/y.go") == "//"
