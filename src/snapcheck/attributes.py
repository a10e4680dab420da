"""attributes.py - Normalised symbol attributes at a source line.

An *attribute* is one checkable fact about a line: a definition, a
reference, a diagnostic, or any free-form tag an annotation names.  Both the
expected side (parsed from annotation comments) and the actual side (projected
from the index) use :class:`SymbolAttribute`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from snapcheck.index import Occurrence


class Kind(str, Enum):
    """Attribute kinds produced from index data.

    Annotations may name other kinds (``documentation`` for example); those
    stay plain strings, see :func:`parse_kind`.  Members compare equal to
    their string value.
    """

    DEFINITION = "definition"
    FORWARD_DEFINITION = "forward_definition"
    REFERENCE = "reference"
    DIAGNOSTIC = "diagnostic"

    def __str__(self) -> str:
        return self.value


_KINDS_BY_NAME = {k.value: k for k in Kind}


def parse_kind(text: str) -> Kind | str:
    """Return the :class:`Kind` named by *text*, or *text* itself for free-form tags."""
    return _KINDS_BY_NAME.get(text, text)


@dataclass(frozen=True)
class SymbolAttribute:
    """A single attribute of a symbol at a line.

    ``identifier`` is the symbol string for occurrences and the severity name
    for diagnostics.  ``auxiliary`` holds extra payload lines (diagnostic
    messages, multi-line documentation).
    """

    start: int
    length: int
    kind: Kind | str
    identifier: str
    auxiliary: tuple[str, ...] = ()

    @property
    def end(self) -> int:
        """Exclusive end column."""
        return self.start + self.length

    def describe(self) -> str:
        """``'<kind> <identifier>'`` as shown in failure reports."""
        return f"{self.kind} {self.identifier}"

    def to_dict(self) -> dict[str, object]:
        return {
            "start": self.start,
            "length": self.length,
            "kind": str(self.kind),
            "identifier": self.identifier,
            "auxiliary": list(self.auxiliary),
        }


def occurrence_kind(occ: Occurrence) -> Kind:
    """Classify an occurrence; definition wins over forward definition."""
    if occ.is_definition:
        return Kind.DEFINITION
    if occ.is_forward_definition:
        return Kind.FORWARD_DEFINITION
    return Kind.REFERENCE


def attributes_for_occurrence(occ: Occurrence) -> list[SymbolAttribute]:
    """The occurrence's own attribute followed by one per diagnostic."""
    start = occ.range.start_char
    # Multi-line ranges can end at a column before they start.
    length = max(0, occ.range.end_char - start)
    result = [SymbolAttribute(start, length, occurrence_kind(occ), occ.symbol)]
    for diag in occ.diagnostics:
        result.append(
            SymbolAttribute(start, length, Kind.DIAGNOSTIC, diag.severity, (diag.message,))
        )
    return result


def attributes_at_line(line: int, occurrences: Iterable[Occurrence]) -> list[SymbolAttribute]:
    """Actual attributes for every occurrence whose range starts on *line*.

    Order follows the occurrence order of the index.
    """
    result: list[SymbolAttribute] = []
    for occ in occurrences:
        if occ.range.start_line == line:
            result.extend(attributes_for_occurrence(occ))
    return result
