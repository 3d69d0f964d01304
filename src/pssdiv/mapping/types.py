"""Canonical mapping types shared by the detector, the loaders and reports.

A *mapping element* describes one variable's relationship between the
problem space (the variability model declaring it) and the solution space
(the build and code artifacts referencing it).  All types here are frozen
dataclasses: the detector only reads them and never mutates a mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from pssdiv.errors import MalformedEntryError


class VariableState(str, Enum):
    """Role of a variable in the problem/solution space mapping."""

    USED_AND_DEFINED = "used_and_defined"
    UNUSED = "unused"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class Variable:
    """A configuration variable from the variability model.

    Attributes
    ----------
    name : str
        Variable name; the identity key within one mapping.
    type : str
        Model type of the variable (e.g. "bool", "tristate"). Empty when
        unknown, e.g. for placeholders of undefined variables.
    attributes : dict
        Further model attributes, carried opaquely.
    """

    name: str
    type: str = field(default="", compare=False)
    attributes: dict = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class SourceFile:
    """A solution-space file, identified by its path."""

    path: str


@dataclass(frozen=True)
class CodeElement:
    """A code region inside a source file, identified by file and line range."""

    source_file: SourceFile
    line_start: int
    line_end: int

    @property
    def descriptor(self) -> str:
        """Render as ``path[start-end]``."""
        return f"{self.source_file.path}[{self.line_start}-{self.line_end}]"


@dataclass(frozen=True)
class MappingElement:
    """One variable's entry in the problem/solution space mapping.

    Attributes
    ----------
    variable_name : str
        Name of the variable; always present.
    variable_state : VariableState
        How the variable is declared and used.
    variable : Variable | None
        The model variable. None when the variable is not defined in the
        variability model.
    build_mapping : frozenset[SourceFile]
        Files whose presence the variable controls.
    code_mapping : frozenset[CodeElement]
        Code regions whose presence the variable controls.
    """

    variable_name: str
    variable_state: VariableState
    variable: Variable | None = None
    build_mapping: frozenset[SourceFile] = frozenset()
    code_mapping: frozenset[CodeElement] = frozenset()

    def __post_init__(self) -> None:
        # Accept any iterable from callers but store immutable sets
        object.__setattr__(self, "build_mapping", frozenset(self.build_mapping))
        object.__setattr__(self, "code_mapping", frozenset(self.code_mapping))
        state = self.variable_state
        if isinstance(state, str) and not isinstance(state, VariableState):
            # Unknown strings stay as they are and fail in classify()
            known = {s.value: s for s in VariableState}
            if state.lower() in known:
                object.__setattr__(self, "variable_state", known[state.lower()])

    @property
    def has_artifacts(self) -> bool:
        return bool(self.build_mapping or self.code_mapping)

    def __str__(self) -> str:
        state = getattr(self.variable_state, "value", self.variable_state)
        return (
            f"{self.variable_name} ({state}): "
            f"{len(self.build_mapping)} file(s), "
            f"{len(self.code_mapping)} code element(s)"
        )


def make_entry(
    variable_name: str,
    state: VariableState,
    *,
    variable: Variable | None = None,
    files: Iterable[str] = (),
    code: Iterable[tuple[str, int, int]] = (),
) -> MappingElement:
    """Build a MappingElement from plain paths and ``(path, start, end)`` tuples."""
    return MappingElement(
        variable_name=variable_name,
        variable_state=state,
        variable=variable,
        build_mapping=frozenset(SourceFile(p) for p in files),
        code_mapping=frozenset(
            CodeElement(SourceFile(path), start, end) for path, start, end in code
        ),
    )


def validate_entry(entry: MappingElement) -> None:
    """Raise :class:`MalformedEntryError` if *entry* violates its invariants.

    Checks:
      - the variable name is non-empty
      - a present ``variable`` carries the same name as the entry
      - UNUSED entries have a variable and no artifacts
      - UNDEFINED entries have at least one artifact
    """
    name = entry.variable_name
    if not name:
        raise MalformedEntryError(name, "variable name is empty")

    if entry.variable is not None and entry.variable.name != name:
        raise MalformedEntryError(
            name, f"variable is named '{entry.variable.name}'"
        )

    if entry.variable_state is VariableState.UNUSED:
        if entry.variable is None:
            raise MalformedEntryError(name, "unused variable without model entry")
        if entry.has_artifacts:
            raise MalformedEntryError(name, "unused variable referenced by artifacts")
    elif entry.variable_state is VariableState.UNDEFINED:
        if not entry.has_artifacts:
            raise MalformedEntryError(
                name, "undefined variable not referenced by any artifact"
            )
