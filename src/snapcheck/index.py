"""index.py - Read-only model of a SCIP-style code index.

The checker only needs a small slice of an index: documents, their
occurrences, and the diagnostics attached to each occurrence.  This module
defines those types and loads them from the JSON rendering of an index
(the output of ``scip print --json``, i.e. the protobuf JSON mapping).

Example input::

    {"documents": [{"relativePath": "main.go",
                    "occurrences": [{"range": [3, 5, 8],
                                     "symbol": "go pkg Foo().",
                                     "symbolRoles": 1}]}]}

Both camelCase (protobuf JSON) and snake_case keys are accepted.
"""

from __future__ import annotations

import enum
import json
import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SymbolRole(enum.IntFlag):
    """Bitset of roles an occurrence plays (mirrors ``scip.SymbolRole``)."""

    UNSPECIFIED = 0
    DEFINITION = 0x1
    IMPORT = 0x2
    WRITE_ACCESS = 0x4
    READ_ACCESS = 0x8
    GENERATED = 0x10
    TEST = 0x20
    FORWARD_DEFINITION = 0x40


# Severity enum names, indexed by their protobuf number.
SEVERITY_NAMES = ("UnspecifiedSeverity", "Error", "Warning", "Information", "Hint")


class IndexFormatError(ValueError):
    """Raised when index data cannot be interpreted."""


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Range:
    """Zero-based source range.  ``end_char`` is exclusive."""

    start_line: int
    start_char: int
    end_line: int
    end_char: int

    @classmethod
    def from_list(cls, values: list[int]) -> Range:
        """Build from SCIP's compact form (3 elements single-line, 4 multi-line)."""
        if len(values) == 3:
            line, start, end = values
            return cls(line, start, line, end)
        if len(values) == 4:
            return cls(*values)
        raise IndexFormatError(f"range must have 3 or 4 elements, got {len(values)}: {values!r}")

    @property
    def is_single_line(self) -> bool:
        return self.start_line == self.end_line


@dataclass(frozen=True)
class Diagnostic:
    """A diagnostic attached to an occurrence."""

    severity: str
    message: str
    code: str = ""
    source: str = ""


@dataclass(frozen=True)
class Occurrence:
    """One symbol occurrence inside a document."""

    range: Range
    symbol: str = ""
    roles: SymbolRole = SymbolRole.UNSPECIFIED
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def is_definition(self) -> bool:
        return bool(self.roles & SymbolRole.DEFINITION)

    @property
    def is_forward_definition(self) -> bool:
        return bool(self.roles & SymbolRole.FORWARD_DEFINITION)


@dataclass(frozen=True)
class Document:
    """A source file described by the index."""

    relative_path: str
    occurrences: tuple[Occurrence, ...] = ()
    language: str = ""


@dataclass
class Index:
    """The documents of an index, in index order."""

    documents: list[Document] = field(default_factory=list)
    project_root: str = ""

    def document(self, relative_path: str) -> Document | None:
        """Return the document with *relative_path*, or ``None``."""
        for doc in self.documents:
            if doc.relative_path == relative_path:
                return doc
        return None


# ---------------------------------------------------------------------------
# JSON decoding
# ---------------------------------------------------------------------------


def _get(raw: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    """Look up *camel* then *snake* in a decoded JSON object."""
    if camel in raw:
        return raw[camel]
    return raw.get(snake, default)


def severity_name(value: int | str | None) -> str:
    """Render a severity (enum name or number) to its enum name."""
    if value is None:
        return SEVERITY_NAMES[0]
    if isinstance(value, str):
        if value.isdigit():
            return severity_name(int(value))
        return value
    if 0 <= value < len(SEVERITY_NAMES):
        return SEVERITY_NAMES[value]
    warnings.warn(f"Unknown diagnostic severity {value}", stacklevel=2)
    return str(value)


def parse_diagnostic(raw: dict[str, Any]) -> Diagnostic:
    if not isinstance(raw, dict):
        raise IndexFormatError(f"diagnostic must be an object, got {type(raw).__name__}")
    return Diagnostic(
        severity=severity_name(raw.get("severity")),
        message=str(raw.get("message", "")),
        code=str(raw.get("code", "")),
        source=str(raw.get("source", "")),
    )


def parse_occurrence(raw: dict[str, Any]) -> Occurrence:
    if not isinstance(raw, dict):
        raise IndexFormatError(f"occurrence must be an object, got {type(raw).__name__}")
    rng = raw.get("range")
    if not isinstance(rng, list) or not all(isinstance(v, int) for v in rng):
        raise IndexFormatError(f"occurrence range must be a list of integers, got {rng!r}")
    roles = _get(raw, "symbolRoles", "symbol_roles", 0)
    try:
        roles = SymbolRole(int(roles))
    except (TypeError, ValueError) as exc:
        raise IndexFormatError(f"invalid symbol roles {roles!r}") from exc
    return Occurrence(
        range=Range.from_list(rng),
        symbol=str(raw.get("symbol", "")),
        roles=roles,
        diagnostics=tuple(parse_diagnostic(d) for d in raw.get("diagnostics", [])),
    )


def parse_document(raw: dict[str, Any]) -> Document:
    if not isinstance(raw, dict):
        raise IndexFormatError(f"document must be an object, got {type(raw).__name__}")
    path = _get(raw, "relativePath", "relative_path")
    if not path:
        raise IndexFormatError("document is missing relativePath")
    return Document(
        relative_path=str(path),
        occurrences=tuple(parse_occurrence(o) for o in raw.get("occurrences", [])),
        language=str(raw.get("language", "")),
    )


def parse_index(raw: dict[str, Any]) -> Index:
    """Build an :class:`Index` from decoded JSON."""
    if not isinstance(raw, dict):
        raise IndexFormatError(f"index must be a JSON object, got {type(raw).__name__}")
    metadata = raw.get("metadata") or {}
    return Index(
        documents=[parse_document(d) for d in raw.get("documents", [])],
        project_root=str(_get(metadata, "projectRoot", "project_root", "")),
    )


def load_index(source: str | Path) -> Index:
    """Load an index from a JSON file, or from stdin when *source* is ``-``.

    Raises:
        FileNotFoundError: the index file does not exist.
        IndexFormatError: the content is not a valid index.
    """
    if str(source) == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text(encoding="utf-8")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise IndexFormatError(f"{source}: not valid JSON: {exc}") from exc
    return parse_index(raw)
