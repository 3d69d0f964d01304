"""Problem/solution space mapping: types, file loaders and pull sources.

Public API:
  - VariableState, Variable, SourceFile, CodeElement, MappingElement
  - validate_entry: per-state invariant check for mapping elements
  - load_mapping / iter_mapping_file: JSON and JSON Lines mapping files
  - QueueMappingSource: blocking pull source fed by a producer thread
"""

from pssdiv.mapping.loader import iter_mapping_file, load_mapping
from pssdiv.mapping.source import QueueMappingSource
from pssdiv.mapping.types import (
    CodeElement,
    MappingElement,
    SourceFile,
    Variable,
    VariableState,
    make_entry,
    validate_entry,
)

__all__ = [
    "CodeElement",
    "MappingElement",
    "QueueMappingSource",
    "SourceFile",
    "Variable",
    "VariableState",
    "iter_mapping_file",
    "load_mapping",
    "make_entry",
    "validate_entry",
]
