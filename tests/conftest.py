"""Shared test fixtures for the pssdiv test suite."""

import json
from pathlib import Path

import pytest
import structlog

from pssdiv.mapping.types import MappingElement, Variable, VariableState, make_entry


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog configuration a test (e.g. the CLI) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def unused_entry() -> MappingElement:
    """FEATURE_X: defined in the model, referenced by nothing."""
    return make_entry(
        "FEATURE_X",
        VariableState.UNUSED,
        variable=Variable("FEATURE_X", type="bool"),
    )


@pytest.fixture
def undefined_entry() -> MappingElement:
    """FEATURE_Y: referenced by drivers/y.c, not defined in the model."""
    return make_entry("FEATURE_Y", VariableState.UNDEFINED, files=["drivers/y.c"])


@pytest.fixture
def used_entry() -> MappingElement:
    """FEATURE_Z: defined and referenced -- consistent."""
    return make_entry(
        "FEATURE_Z",
        VariableState.USED_AND_DEFINED,
        variable=Variable("FEATURE_Z", type="tristate"),
        files=["drivers/z.c"],
        code=[("drivers/z.c", 10, 20)],
    )


@pytest.fixture
def mapping_file(tmp_path: Path) -> Path:
    """Write a small mapping document covering all three variable states."""
    path = tmp_path / "mapping.json"
    path.write_text(
        json.dumps(
            {
                "entries": [
                    {
                        "variable_name": "FEATURE_X",
                        "variable_state": "UNUSED",
                        "variable": {"name": "FEATURE_X", "type": "bool"},
                    },
                    {
                        "variable_name": "FEATURE_Y",
                        "variable_state": "UNDEFINED",
                        "build_mapping": ["drivers/y.c"],
                    },
                    {
                        "variable_name": "FEATURE_Z",
                        "variable_state": "USED_AND_DEFINED",
                        "variable": {"name": "FEATURE_Z", "type": "tristate"},
                        "build_mapping": ["drivers/z.c"],
                        "code_mapping": [
                            {"path": "drivers/z.c", "line_start": 10, "line_end": 20}
                        ],
                    },
                ]
            }
        )
    )
    return path
