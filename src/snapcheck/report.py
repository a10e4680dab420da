"""report.py - Per-file results and their console / JSON rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.text import Text

from snapcheck.annotation import Expectation
from snapcheck.attributes import SymbolAttribute

out_console = Console(highlight=False)


def indent(text: str, count: int) -> str:
    """Prefix every line of *text* with *count* spaces."""
    pad = " " * count
    return "\n".join(pad + line for line in text.split("\n"))


@dataclass(frozen=True)
class Failure:
    """An annotation that did not hold, or could not be parsed.

    For unsatisfied expectations ``expectation`` is set and ``actual`` lists
    every attribute the index reports on the line.  For malformed annotations
    ``expectation`` is ``None`` and ``error`` describes the problem.
    """

    line: int
    expectation: Expectation | None = None
    actual: tuple[SymbolAttribute, ...] = ()
    error: str = ""

    @property
    def malformed(self) -> bool:
        return self.expectation is None

    @property
    def column(self) -> int:
        return self.expectation.attribute.start if self.expectation else 0

    def format(self) -> str:
        if self.expectation is None:
            return f"Malformed annotation - row: {self.line}\n  {self.error}"
        expected = self.expectation.attribute
        desc = [
            f"Failure - row: {self.line}, column: {expected.start}",
            f"  Expected: '{expected.describe()}'",
        ]
        for extra in expected.auxiliary:
            desc.append(indent(f"'{extra}'", 12))
        desc.append("  Actual:")
        for attr in self.actual:
            desc.append(f"    - '{attr.describe()}'")
            for extra in attr.auxiliary:
                desc.append(indent(f"'{extra}'", 6))
        return "\n".join(desc)

    def to_dict(self) -> dict[str, Any]:
        if self.expectation is None:
            return {"line": self.line, "error": self.error}
        return {
            "line": self.line,
            "column": self.column,
            "expected": self.expectation.attribute.to_dict(),
            "enforce_position": self.expectation.enforce_position,
            "actual": [a.to_dict() for a in self.actual],
        }


@dataclass(frozen=True)
class FileResult:
    """Outcome of checking every annotation in one source file."""

    path: str
    successes: int = 0
    failures: tuple[Failure, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.failures

    def display(self, console: Console | None = None, quiet: bool = False) -> None:
        """Print a pass line, or a fail line followed by every failure."""
        console = console or out_console
        if self.passed:
            if not quiet:
                console.print(
                    Text(f"✓ {self.path} ({self.successes} assertions)", style="green"),
                    soft_wrap=True,
                )
            return
        console.print(Text(f"✗ {self.path}", style="red"), soft_wrap=True)
        for failure in self.failures:
            console.print(Text(indent(failure.format(), 4)), soft_wrap=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "passed": self.passed,
            "assertions": self.successes,
            "failures": [f.to_dict() for f in self.failures],
        }


@dataclass
class RunSummary:
    """Results for every checked file, in index order."""

    files: list[FileResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.files)

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.files if r.passed)

    @property
    def failed_count(self) -> int:
        return len(self.files) - self.passed_count

    @property
    def assertions(self) -> int:
        return sum(r.successes for r in self.files)

    @property
    def failure_count(self) -> int:
        return sum(len(r.failures) for r in self.files)

    def display(self, console: Console | None = None, quiet: bool = False) -> None:
        console = console or out_console
        for result in self.files:
            result.display(console, quiet=quiet)

    def display_totals(self, console: Console | None = None) -> None:
        console = console or out_console
        text = Text()
        text.append(f"\nChecked {len(self.files)} files: ")
        text.append(f"{self.passed_count} passed", style="green" if self.passed else "")
        text.append(", ")
        text.append(f"{self.failed_count} failed", style="red" if not self.passed else "")
        text.append(f", {self.assertions} assertions")
        console.print(text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": len(self.files),
            "passed": self.passed_count,
            "failed": self.failed_count,
            "assertions": self.assertions,
            "failures": self.failure_count,
            "files": [r.to_dict() for r in self.files],
        }
