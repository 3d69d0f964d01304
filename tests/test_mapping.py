"""Tests for mapping types, entry validation and mapping file loading."""

from __future__ import annotations

import json

import pytest

from pssdiv.errors import MalformedEntryError, MappingFileError
from pssdiv.mapping.loader import iter_mapping_file, load_mapping
from pssdiv.mapping.types import (
    CodeElement,
    MappingElement,
    SourceFile,
    Variable,
    VariableState,
    make_entry,
    validate_entry,
)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class TestMappingTypes:
    """Identity rules of the mapping value types."""

    def test_variables_are_identified_by_name(self):
        a = Variable("FEATURE_X", type="bool", attributes={"default": "y"})
        b = Variable("FEATURE_X")
        assert a == b
        assert len({a, b}) == 1

    def test_code_element_identity_is_file_and_range(self):
        a = CodeElement(SourceFile("x.c"), 1, 10)
        assert a == CodeElement(SourceFile("x.c"), 1, 10)
        assert a != CodeElement(SourceFile("x.c"), 1, 11)
        assert a.descriptor == "x.c[1-10]"

    def test_mappings_are_frozen_sets(self):
        entry = MappingElement(
            variable_name="A",
            variable_state=VariableState.UNDEFINED,
            build_mapping=[SourceFile("a.c"), SourceFile("a.c")],
        )
        assert entry.build_mapping == frozenset({SourceFile("a.c")})
        assert entry.code_mapping == frozenset()

    def test_string_state_is_coerced(self):
        entry = MappingElement(variable_name="A", variable_state="unused")
        assert entry.variable_state is VariableState.UNUSED
        upper = MappingElement(variable_name="B", variable_state="USED_AND_DEFINED")
        assert upper.variable_state is VariableState.USED_AND_DEFINED

    def test_unknown_string_state_is_kept(self):
        entry = MappingElement(variable_name="A", variable_state="sometimes")
        assert entry.variable_state == "sometimes"

    def test_str(self, undefined_entry):
        assert str(undefined_entry) == "FEATURE_Y (undefined): 1 file(s), 0 code element(s)"


class TestValidateEntry:
    """Per-state invariants of mapping elements."""

    def test_well_formed_entries(self, unused_entry, undefined_entry, used_entry):
        for entry in (unused_entry, undefined_entry, used_entry):
            validate_entry(entry)

    def test_empty_name(self):
        with pytest.raises(MalformedEntryError, match="empty"):
            validate_entry(make_entry("", VariableState.UNDEFINED, files=["a.c"]))

    def test_variable_name_mismatch(self):
        entry = make_entry("A", VariableState.UNUSED, variable=Variable("B"))
        with pytest.raises(MalformedEntryError, match="named 'B'"):
            validate_entry(entry)

    def test_unused_without_variable(self):
        with pytest.raises(MalformedEntryError, match="without model entry"):
            validate_entry(make_entry("A", VariableState.UNUSED))

    def test_unused_with_artifacts(self):
        entry = make_entry("A", VariableState.UNUSED, variable=Variable("A"), files=["a.c"])
        with pytest.raises(MalformedEntryError, match="referenced by artifacts"):
            validate_entry(entry)

    def test_undefined_without_artifacts(self):
        with pytest.raises(MalformedEntryError) as exc_info:
            validate_entry(make_entry("A", VariableState.UNDEFINED))
        assert exc_info.value.variable_name == "A"
        assert isinstance(exc_info.value, ValueError)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class TestLoadMapping:
    """JSON documents and JSON Lines mapping files."""

    def test_document(self, mapping_file):
        entries = load_mapping(mapping_file)
        assert [e.variable_name for e in entries] == ["FEATURE_X", "FEATURE_Y", "FEATURE_Z"]
        assert [e.variable_state for e in entries] == [
            VariableState.UNUSED,
            VariableState.UNDEFINED,
            VariableState.USED_AND_DEFINED,
        ]
        assert entries[0].variable.type == "bool"
        assert entries[1].variable is None
        assert entries[1].build_mapping == frozenset({SourceFile("drivers/y.c")})
        assert entries[2].code_mapping == frozenset(
            {CodeElement(SourceFile("drivers/z.c"), 10, 20)}
        )

    def test_undefined_without_artifacts_rejected(self, tmp_path):
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps([{"variable_name": "GHOST", "variable_state": "UNDEFINED"}]))
        with pytest.raises(MappingFileError, match="requires build_mapping or code_mapping"):
            load_mapping(path)

    def test_undefined_without_artifacts_rejected_in_json_lines(self, tmp_path):
        path = tmp_path / "mapping.jsonl"
        path.write_text(
            '{"variable_name": "A", "variable_state": "UNDEFINED", "build_mapping": ["a.c"]}\n'
            '{"variable_name": "GHOST", "variable_state": "UNDEFINED"}\n'
        )
        with pytest.raises(MappingFileError) as exc_info:
            list(iter_mapping_file(path))
        assert exc_info.value.line == 2

    def test_unused_without_variable_rejected(self, tmp_path):
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps([{"variable_name": "A", "variable_state": "UNUSED"}]))
        with pytest.raises(MappingFileError, match="requires a 'variable' entry"):
            load_mapping(path)

    def test_unused_with_artifacts_rejected(self, tmp_path):
        path = tmp_path / "mapping.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "variable_name": "A",
                        "variable_state": "UNUSED",
                        "variable": {"name": "A"},
                        "build_mapping": ["a.c"],
                    }
                ]
            )
        )
        with pytest.raises(MappingFileError, match="must not be referenced"):
            load_mapping(path)

    def test_loaded_entries_satisfy_state_rules(self, mapping_file):
        for entry in load_mapping(mapping_file):
            validate_entry(entry)

    def test_document_not_utf8(self, tmp_path):
        path = tmp_path / "mapping.json"
        path.write_bytes(b"\xff\xfe")
        with pytest.raises(MappingFileError, match="not valid UTF-8"):
            load_mapping(path)

    def test_json_lines_not_utf8_reports_line(self, tmp_path):
        path = tmp_path / "mapping.jsonl"
        path.write_bytes(
            b'{"variable_name": "A", "variable_state": "UNDEFINED", "build_mapping": ["a.c"]}\n'
            b"\xff\xfe\n"
        )
        with pytest.raises(MappingFileError, match="not valid UTF-8") as exc_info:
            list(iter_mapping_file(path))
        assert exc_info.value.line == 2

    def test_bare_list(self, tmp_path):
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps([{"variable_name": "A", "variable_state": "undefined", "build_mapping": ["a.c"]}]))
        (entry,) = load_mapping(path)
        assert entry.variable_state is VariableState.UNDEFINED

    def test_json_lines_are_streamed(self, tmp_path):
        path = tmp_path / "mapping.jsonl"
        path.write_text(
            '{"variable_name": "A", "variable_state": "UNUSED", "variable": {"name": "A"}}\n'
            "\n"
            '{"variable_name": "B", "variable_state": "not-a-state"}\n'
        )
        entries = iter_mapping_file(path)
        first = next(entries)
        assert first.variable_name == "A"
        with pytest.raises(MappingFileError) as exc_info:
            next(entries)
        assert exc_info.value.line == 3

    def test_unknown_state_rejected(self, tmp_path):
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps({"entries": [{"variable_name": "A", "variable_state": "maybe"}]}))
        with pytest.raises(MappingFileError, match="variable_state"):
            load_mapping(path)

    def test_inverted_line_range_rejected(self, tmp_path):
        path = tmp_path / "mapping.json"
        path.write_text(
            json.dumps(
                {
                    "entries": [
                        {
                            "variable_name": "A",
                            "variable_state": "undefined",
                            "code_mapping": [{"path": "a.c", "line_start": 9, "line_end": 3}],
                        }
                    ]
                }
            )
        )
        with pytest.raises(MappingFileError, match="line_end"):
            load_mapping(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "mapping.json"
        path.write_text("{not json")
        with pytest.raises(MappingFileError, match="invalid JSON"):
            load_mapping(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(MappingFileError):
            load_mapping(tmp_path / "missing.json")

    def test_missing_json_lines_file(self, tmp_path):
        with pytest.raises(MappingFileError):
            list(iter_mapping_file(tmp_path / "missing.jsonl"))
