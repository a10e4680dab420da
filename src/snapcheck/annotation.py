"""annotation.py - Parsing of test-case annotations in source comments.

A code line is followed by zero or more comment lines, each describing an
attribute the index must report for that line::

    func Foo() {}
    //   ^^^ definition pkg Foo().
    //   ^ reference pkg Foo().
    // <- diagnostic Warning
    // > unused function

Three anchor forms are recognised:

1. **Caret** ``^`` -- the expectation starts at the column of the first caret.
   A single caret only has to fall inside the actual token; two or more
   carets (``^^^``) enforce the exact start column *and* length.
2. **Arrow** ``<-`` -- anchors at the column of the comment marker itself,
   for tokens that sit at the start of the line.
3. **Continuation** ``>`` -- lines right after an annotation add auxiliary
   payload (diagnostic messages, documentation lines).

The text after the anchor is ``<kind> <identifier...>``.  The comment marker
is configurable (``//`` by default, ``#`` for Python, ...).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from snapcheck.attributes import SymbolAttribute, parse_kind

DEFAULT_COMMENT_SYNTAX = "//"

ARROW = "<-"
CARET = "^"
CONTINUATION = ">"

# Lint codes for malformed annotations
ERR_NO_ANCHOR = "E001"
ERR_NO_KIND = "E002"
ERR_ORPHAN_CONTINUATION = "E003"


class AnnotationError(ValueError):
    """A comment block that cannot be read as annotations.

    ``line`` is the zero-based index of the offending comment line and
    ``code`` one of the lint codes above.
    """

    def __init__(self, line: int, reason: str, code: str = ERR_NO_ANCHOR) -> None:
        super().__init__(f"line {line}: {reason}")
        self.line = line
        self.reason = reason
        self.code = code


@dataclass(frozen=True)
class Expectation:
    """An attribute an annotation asserts, plus how strictly to place it."""

    attribute: SymbolAttribute
    enforce_position: bool = False
    line: int = 0

    @property
    def consumed(self) -> int:
        """Source lines used: the annotation line plus its continuation lines."""
        return 1 + len(self.attribute.auxiliary)


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


def is_comment(line: str, comment_syntax: str = DEFAULT_COMMENT_SYNTAX) -> bool:
    return line.strip().startswith(comment_syntax)


def continuation_text(line: str, comment_syntax: str = DEFAULT_COMMENT_SYNTAX) -> str | None:
    """Return the payload of a ``> text`` continuation line, else ``None``."""
    if not is_comment(line, comment_syntax):
        return None
    rest = line.replace(comment_syntax, "", 1)
    if not rest.strip().startswith(CONTINUATION):
        return None
    return rest.replace(CONTINUATION, "", 1).strip()


def comment_block_length(line: int, lines: Sequence[str], comment_syntax: str) -> int:
    """Number of consecutive comment lines directly after *line*."""
    count = 0
    for text in lines[line + 1 :]:
        if not is_comment(text, comment_syntax):
            break
        count += 1
    return count


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def parse_test_case(
    text: str,
    following: Sequence[str],
    comment_syntax: str = DEFAULT_COMMENT_SYNTAX,
    *,
    line: int = 0,
) -> Expectation:
    """Parse one annotation line and the continuation lines after it.

    Args:
        text: The raw annotation line, comment marker included.
        following: The source lines after *text*, scanned for ``>`` lines.
        comment_syntax: The line-comment marker.
        line: Zero-based index of *text*, recorded on the expectation and
            used in error messages.

    Raises:
        AnnotationError: no anchor, or nothing after the anchor.
    """
    start = 0
    length = 0
    enforce_position = False

    if ARROW in text:
        start = text.index(comment_syntax)
        text = text.replace(ARROW, "", 1)
    elif CARET in text:
        start = text.index(CARET)
        # one caret points inside the token; several spell out its exact span
        if CARET * 2 in text:
            enforce_position = True
            length = text.count(CARET)
        text = text.replace(CARET, "")
    else:
        raise AnnotationError(
            line, f"no '{CARET}' or '{ARROW}' anchor in {text.strip()!r}", ERR_NO_ANCHOR
        )

    body = text.replace(comment_syntax, "", 1).strip()
    parts = body.split(None, 1)
    if not parts:
        raise AnnotationError(line, "annotation is missing a kind", ERR_NO_KIND)
    kind = parts[0]
    identifier = parts[1].strip() if len(parts) > 1 else ""

    auxiliary: list[str] = []
    for follower in following:
        payload = continuation_text(follower, comment_syntax)
        if payload is None:
            break
        auxiliary.append(payload)

    return Expectation(
        attribute=SymbolAttribute(
            start=start,
            length=length,
            kind=parse_kind(kind),
            identifier=identifier,
            auxiliary=tuple(auxiliary),
        ),
        enforce_position=enforce_position,
        line=line,
    )


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


def test_cases_for_line(
    line: int,
    lines: Sequence[str],
    comment_syntax: str = DEFAULT_COMMENT_SYNTAX,
) -> tuple[list[Expectation], int]:
    """Collect the expectations written directly below *line*.

    Returns the expectations and the number of lines they consumed, so the
    caller can continue after the annotation block.  Continuation lines are
    consumed by the annotation they belong to and never reparsed.

    Raises:
        AnnotationError: a malformed annotation line, or a ``>`` line that
            does not follow an annotation.
    """
    if line >= len(lines) - 1:
        return [], 0

    cases: list[Expectation] = []
    used = 0
    i = line + 1
    while i < len(lines) and is_comment(lines[i], comment_syntax):
        if continuation_text(lines[i], comment_syntax) is not None:
            raise AnnotationError(
                i, f"'{CONTINUATION}' line does not follow an annotation", ERR_ORPHAN_CONTINUATION
            )
        case = parse_test_case(lines[i], lines[i + 1 :], comment_syntax, line=i)
        cases.append(case)
        i += case.consumed
        used += case.consumed
    return cases, used


# not a pytest test function
test_cases_for_line.__test__ = False  # type: ignore[attr-defined]
