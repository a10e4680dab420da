"""snapcheck - snapshot assertions for source-code indexes.

Checks annotation comments embedded in source files (``// ^^^ definition
pkg Foo().``) against the occurrences and diagnostics an index reports for
the annotated lines.
"""

__version__ = "0.1.0"
