"""Project configuration loader for snapcheck.

Reads an optional ``snapcheck.toml`` from the project root.  Every setting
has a default, so a project without the file behaves like::

    index = "index.json"
    source_root = "."
    comment_syntax = "//"

    [comment_syntax_by_extension]
    # ".py" = "#"

Paths are resolved relative to the directory holding ``snapcheck.toml``.

Usage::

    from snapcheck.config import load_config
    cfg = load_config()
    cfg.index_path        # Path
    cfg.comment_syntax_for("pkg/main.py")
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from snapcheck.annotation import DEFAULT_COMMENT_SYNTAX

CONFIG_NAME = "snapcheck.toml"
DEFAULT_INDEX = "index.json"


class ConfigError(ValueError):
    """Raised for a ``snapcheck.toml`` with invalid values."""


@dataclass
class ProjectConfig:
    """Parsed project configuration with resolved paths."""

    # Directory containing snapcheck.toml (cwd when there is none)
    root: Path
    index_path: Path = field(default_factory=lambda: Path(DEFAULT_INDEX))
    source_root: Path = field(default_factory=lambda: Path("."))
    comment_syntax: str = DEFAULT_COMMENT_SYNTAX
    # ".py" -> "#", ...
    comment_syntax_by_extension: dict[str, str] = field(default_factory=dict)
    config_file: Path | None = None

    def comment_syntax_for(self, relative_path: str) -> str:
        """Comment marker for a source file, honouring extension overrides."""
        suffix = Path(relative_path).suffix
        return self.comment_syntax_by_extension.get(suffix, self.comment_syntax)


def _resolve(root: Path, rel: str | None) -> Path | None:
    """Resolve a path relative to project root."""
    if rel is None:
        return None
    p = Path(rel)
    if p.is_absolute():
        return p
    return root / p


def _find_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* (or cwd) looking for snapcheck.toml.

    Returns ``None`` when no parent directory has one.
    """
    candidate = (start or Path.cwd()).resolve()
    while True:
        if (candidate / CONFIG_NAME).exists():
            return candidate
        if candidate == candidate.parent:
            return None
        candidate = candidate.parent


def _require_str(raw: dict, key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{CONFIG_NAME}: '{key}' must be a non-empty string, got {value!r}")
    return value


def _extension_map(raw: dict) -> dict[str, str]:
    table = raw.get("comment_syntax_by_extension", {})
    if not isinstance(table, dict):
        raise ConfigError(f"{CONFIG_NAME}: [comment_syntax_by_extension] must be a table")
    result: dict[str, str] = {}
    for ext, marker in table.items():
        if not isinstance(marker, str) or not marker:
            raise ConfigError(
                f"{CONFIG_NAME}: comment syntax for '{ext}' must be a non-empty string"
            )
        # accept both "py" and ".py"
        key = ext if ext.startswith(".") else f".{ext}"
        result[key] = marker
    return result


def load_config(root: Path | None = None) -> ProjectConfig:
    """Load ``snapcheck.toml``, or return defaults when there is none.

    Args:
        root: Directory to start the search from.  Defaults to the cwd.

    Raises:
        ConfigError: the file exists but is not valid TOML or has bad values.
    """
    found = _find_root(root)
    if found is None:
        base = (root or Path.cwd()).resolve()
        return ProjectConfig(
            root=base,
            index_path=base / DEFAULT_INDEX,
            source_root=base,
        )

    toml_path = found / CONFIG_NAME
    try:
        with open(toml_path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{toml_path}: {exc}") from exc

    return ProjectConfig(
        root=found,
        index_path=_resolve(found, _require_str(raw, "index", DEFAULT_INDEX)),
        source_root=_resolve(found, _require_str(raw, "source_root", ".")),
        comment_syntax=_require_str(raw, "comment_syntax", DEFAULT_COMMENT_SYNTAX),
        comment_syntax_by_extension=_extension_map(raw),
        config_file=toml_path,
    )
