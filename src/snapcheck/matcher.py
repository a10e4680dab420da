"""matcher.py - Decide whether an expectation holds at a line.

Identifiers are compared token by token after splitting on single spaces.
An expected token of ``.`` is a wildcard for the token at the same position,
so ``reference . . Foo().`` accepts any scheme and package.
"""

from __future__ import annotations

from collections.abc import Iterable

from snapcheck.annotation import Expectation
from snapcheck.attributes import SymbolAttribute

WILDCARD = "."


def symbol_tokens(identifier: str) -> list[str]:
    return identifier.split(" ")


def identifiers_match(expected: str, actual: str) -> bool:
    """Positional token comparison with ``.`` wildcards.

    Identifiers with different token counts never match.
    """
    expected_parts = symbol_tokens(expected)
    actual_parts = symbol_tokens(actual)
    if len(expected_parts) != len(actual_parts):
        return False
    return all(
        exp == WILDCARD or exp == act for exp, act in zip(expected_parts, actual_parts)
    )


def position_matches(expectation: Expectation, attr: SymbolAttribute) -> bool:
    expected = expectation.attribute
    if expectation.enforce_position:
        return expected.start == attr.start and expected.length == attr.length
    # inclusive on both ends; an empty actual span contains nothing
    return attr.start <= expected.start <= attr.start + attr.length - 1


def matches_attribute(expectation: Expectation, attr: SymbolAttribute) -> bool:
    """True if *attr* satisfies *expectation*."""
    expected = expectation.attribute
    if not position_matches(expectation, attr):
        return False
    if expected.kind != attr.kind:
        return False
    if not identifiers_match(expected.identifier, attr.identifier):
        return False
    # no auxiliary lines in the annotation means auxiliary data is not checked
    if expected.auxiliary and tuple(expected.auxiliary) != tuple(attr.auxiliary):
        return False
    return True


def is_satisfied(expectation: Expectation, attributes: Iterable[SymbolAttribute]) -> bool:
    """True if any of *attributes* satisfies *expectation*."""
    return any(matches_attribute(expectation, attr) for attr in attributes)
