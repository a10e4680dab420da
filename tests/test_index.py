"""Tests for snapcheck.index - JSON index loading."""

import io
import json
from pathlib import Path

import pytest

from snapcheck.index import (
    Diagnostic,
    Index,
    IndexFormatError,
    Range,
    SymbolRole,
    load_index,
    parse_index,
    parse_occurrence,
    severity_name,
)

SAMPLE = {
    "metadata": {"projectRoot": "file:///src/proj"},
    "documents": [
        {
            "relativePath": "main.go",
            "language": "go",
            "occurrences": [
                {"range": [3, 5, 8], "symbol": "go pkg Foo().", "symbolRoles": 1},
                {
                    "range": [4, 1, 6, 2],
                    "symbol": "go pkg Bar().",
                    "diagnostics": [{"severity": "Warning", "message": "deprecated"}],
                },
            ],
        },
        {"relativePath": "empty.go"},
    ],
}


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


class TestRange:
    def test_three_elements(self) -> None:
        assert Range.from_list([3, 5, 8]) == Range(3, 5, 3, 8)
        assert Range.from_list([3, 5, 8]).is_single_line

    def test_four_elements(self) -> None:
        rng = Range.from_list([4, 1, 6, 2])
        assert rng == Range(4, 1, 6, 2)
        assert not rng.is_single_line

    @pytest.mark.parametrize("values", [[], [1], [1, 2], [1, 2, 3, 4, 5]])
    def test_bad_length(self, values: list[int]) -> None:
        with pytest.raises(IndexFormatError):
            Range.from_list(values)


# ---------------------------------------------------------------------------
# Occurrences & diagnostics
# ---------------------------------------------------------------------------


class TestParseOccurrence:
    def test_roles(self) -> None:
        occ = parse_occurrence({"range": [0, 0, 1], "symbolRoles": 0x41})
        assert occ.is_definition
        assert occ.is_forward_definition
        assert occ.roles == SymbolRole.DEFINITION | SymbolRole.FORWARD_DEFINITION

    def test_snake_case_roles(self) -> None:
        occ = parse_occurrence({"range": [0, 0, 1], "symbol_roles": 0x40})
        assert not occ.is_definition
        assert occ.is_forward_definition

    def test_defaults(self) -> None:
        occ = parse_occurrence({"range": [0, 0, 1]})
        assert occ.symbol == ""
        assert occ.roles == SymbolRole.UNSPECIFIED
        assert occ.diagnostics == ()

    def test_missing_range(self) -> None:
        with pytest.raises(IndexFormatError):
            parse_occurrence({"symbol": "x"})

    def test_non_integer_range(self) -> None:
        with pytest.raises(IndexFormatError):
            parse_occurrence({"range": ["0", 1, 2]})

    def test_not_an_object(self) -> None:
        with pytest.raises(IndexFormatError):
            parse_occurrence([0, 1, 2])  # type: ignore[arg-type]

    def test_diagnostics(self) -> None:
        occ = parse_occurrence(
            {
                "range": [0, 0, 1],
                "diagnostics": [
                    {"severity": 1, "message": "boom", "code": "E1"},
                    {"severity": "Hint", "message": "maybe"},
                ],
            }
        )
        assert occ.diagnostics == (
            Diagnostic("Error", "boom", code="E1"),
            Diagnostic("Hint", "maybe"),
        )


class TestSeverityName:
    @pytest.mark.parametrize(
        "value,name",
        [
            (0, "UnspecifiedSeverity"),
            (1, "Error"),
            (2, "Warning"),
            (3, "Information"),
            (4, "Hint"),
            ("Error", "Error"),
            ("2", "Warning"),
            (None, "UnspecifiedSeverity"),
        ],
    )
    def test_names(self, value: int | str | None, name: str) -> None:
        assert severity_name(value) == name

    def test_unknown_number_warns(self) -> None:
        with pytest.warns(UserWarning, match="Unknown diagnostic severity"):
            assert severity_name(9) == "9"


# ---------------------------------------------------------------------------
# Whole index
# ---------------------------------------------------------------------------


class TestParseIndex:
    def test_documents(self) -> None:
        index = parse_index(SAMPLE)
        assert [d.relative_path for d in index.documents] == ["main.go", "empty.go"]
        assert index.project_root == "file:///src/proj"
        main = index.documents[0]
        assert main.language == "go"
        assert len(main.occurrences) == 2
        assert main.occurrences[1].range == Range(4, 1, 6, 2)
        assert main.occurrences[1].diagnostics[0].message == "deprecated"

    def test_empty_document(self) -> None:
        assert parse_index(SAMPLE).documents[1].occurrences == ()

    def test_snake_case(self) -> None:
        index = parse_index({"documents": [{"relative_path": "a.py", "occurrences": []}]})
        assert index.documents[0].relative_path == "a.py"

    def test_missing_path(self) -> None:
        with pytest.raises(IndexFormatError, match="relativePath"):
            parse_index({"documents": [{"occurrences": []}]})

    def test_not_an_object(self) -> None:
        with pytest.raises(IndexFormatError):
            parse_index([])  # type: ignore[arg-type]

    def test_no_documents(self) -> None:
        assert parse_index({}).documents == []

    def test_document_lookup(self) -> None:
        index = parse_index(SAMPLE)
        assert index.document("empty.go") is index.documents[1]
        assert index.document("missing.go") is None

    def test_index_default(self) -> None:
        assert Index().documents == []


class TestLoadIndex:
    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text(json.dumps(SAMPLE), encoding="utf-8")
        index = load_index(path)
        assert len(index.documents) == 2

    def test_from_str_path(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text(json.dumps(SAMPLE), encoding="utf-8")
        assert len(load_index(str(path)).documents) == 2

    def test_from_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(SAMPLE)))
        assert load_index("-").documents[0].relative_path == "main.go"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_index(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(IndexFormatError, match="not valid JSON"):
            load_index(path)
