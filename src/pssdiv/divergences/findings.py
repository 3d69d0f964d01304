"""Divergence findings and their report rendering.

A finding aggregates the evidence for one divergence between the problem
space (variability model) and the solution space (build and code
artifacts): the involved variables, source files and code elements.

Finding kinds (closed set):
  1. UnusedVariableFinding: variable defined, referenced by no artifact
  2. UndefinedVariableFinding: variable referenced by artifacts, not defined

Findings are immutable.  Each kind gathers its evidence from one mapping
element in ``from_entry()`` and is then built in a single step.  Every
finding renders as a report row of three strings, see :data:`HEADER`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from pssdiv.errors import EmptyFindingError
from pssdiv.mapping.types import CodeElement, MappingElement, SourceFile, Variable

HEADER: tuple[str, str, str] = ("Type", "Problem Space Symptom", "Solution Space Symptom")


def describe(names: Sequence[str]) -> str:
    """Render *names* as a natural-language enumeration.

    Only the first and the last element are quoted when there are three or
    more; the elements in between stay bare::

        []              -> ''
        ['A']           -> '"A"'
        ['A', 'B']      -> '"A" and "B"'
        ['A', 'B', 'C'] -> '"A", B, and "C"'
    """
    if not names:
        return ""
    first = f'"{names[0]}"'
    if len(names) == 1:
        return first
    last = f'"{names[-1]}"'
    if len(names) == 2:
        return f"{first} and {last}"
    middle = ", ".join(names[1:-1])
    return f"{first}, {middle}, and {last}"


@dataclass(frozen=True)
class Finding(ABC):
    """Common base of all divergence findings.

    Attributes
    ----------
    involved_variables : frozenset[Variable]
        Variables involved in the divergence.
    involved_source_files : frozenset[SourceFile]
        Files whose presence is affected by the divergence.
    involved_code_elements : frozenset[CodeElement]
        Code regions whose presence is affected by the divergence.

    Any of the sets may be empty, but not all of them.
    """

    involved_variables: frozenset[Variable] = frozenset()
    involved_source_files: frozenset[SourceFile] = frozenset()
    involved_code_elements: frozenset[CodeElement] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "involved_variables", frozenset(self.involved_variables))
        object.__setattr__(self, "involved_source_files", frozenset(self.involved_source_files))
        object.__setattr__(self, "involved_code_elements", frozenset(self.involved_code_elements))
        for evidence in (
            self.involved_variables,
            self.involved_source_files,
            self.involved_code_elements,
        ):
            if None in evidence:
                raise EmptyFindingError(f"{type(self).__name__} evidence must not contain None")
        if not (
            self.involved_variables
            or self.involved_source_files
            or self.involved_code_elements
        ):
            raise EmptyFindingError(
                f"{type(self).__name__} requires at least one involved "
                "variable, source file, or code element"
            )

    # -- sorted views --------------------------------------------------------

    @property
    def involved_variable_names(self) -> list[str]:
        return sorted(v.name for v in self.involved_variables)

    @property
    def involved_source_file_paths(self) -> list[str]:
        return sorted(f.path for f in self.involved_source_files)

    @property
    def involved_code_element_descriptors(self) -> list[str]:
        ordered = sorted(
            self.involved_code_elements,
            key=lambda c: (c.source_file.path, c.line_start, c.line_end),
        )
        return [c.descriptor for c in ordered]

    # -- report fields -------------------------------------------------------

    @property
    def type(self) -> str:
        """Name of the finding kind, used as the report's type column."""
        return type(self).__name__

    @property
    @abstractmethod
    def problem_space_symptom(self) -> str:
        """Anomaly on the variability model side."""

    @property
    @abstractmethod
    def solution_space_symptom(self) -> str:
        """Anomaly on the build and code artifact side."""

    def to_row(self) -> tuple[str, str, str]:
        """Return the report row matching :data:`HEADER`."""
        return (self.type, self.problem_space_symptom, self.solution_space_symptom)

    def __str__(self) -> str:
        return (
            f"Divergence Type = {self.type}\t"
            f"Problem Space Symptom = {self.problem_space_symptom}\t"
            f"Solution Space Symptom = {self.solution_space_symptom}"
        )


@dataclass(frozen=True)
class UnusedVariableFinding(Finding):
    """A variable defined in the variability model but used by no artifact."""

    @classmethod
    def from_entry(cls, entry: MappingElement) -> "UnusedVariableFinding":
        # Unused variables have no files or code elements by definition
        variable = entry.variable if entry.variable is not None else Variable(entry.variable_name)
        return cls(involved_variables=frozenset({variable}))

    @property
    def problem_space_symptom(self) -> str:
        return f"{describe(self.involved_variable_names)} defined in variability model"

    @property
    def solution_space_symptom(self) -> str:
        return (
            f"{describe(self.involved_variable_names)} "
            "not referenced by any build or code artifact"
        )


@dataclass(frozen=True)
class UndefinedVariableFinding(Finding):
    """A variable referenced by build or code artifacts but not defined.

    Only the name of an undefined variable is known, so the involved
    variable is a placeholder without type or attributes.
    """

    undefined_variable_name: str = ""

    @classmethod
    def from_entry(cls, entry: MappingElement) -> "UndefinedVariableFinding":
        name = entry.variable_name
        return cls(
            involved_variables=frozenset({Variable(name)}),
            involved_source_files=entry.build_mapping,
            involved_code_elements=entry.code_mapping,
            undefined_variable_name=name,
        )

    @property
    def problem_space_symptom(self) -> str:
        return f"{describe([self.undefined_variable_name])} not defined in variability model"

    @property
    def solution_space_symptom(self) -> str:
        files = describe(self.involved_source_file_paths)
        code = describe(self.involved_code_element_descriptors)

        symptom = f"{describe([self.undefined_variable_name])} used to constrain presence of "
        if files:
            symptom += f"file(s) {files}"
        if code:
            if files:
                symptom += " as well as "
            symptom += f"code element(s) {code}"
        return symptom


FINDING_TYPES: tuple[type[Finding], ...] = (UnusedVariableFinding, UndefinedVariableFinding)
