"""Pydantic wire schemas for mapping files.

These models describe the JSON layout produced by upstream mapping tools
and convert into the canonical dataclasses in ``pssdiv.mapping.types``.
The wire schemas are kept separate from the domain types so that the
detector core does not depend on Pydantic.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from pssdiv.mapping.types import (
    CodeElement,
    MappingElement,
    SourceFile,
    Variable,
    VariableState,
)


class VariableModel(BaseModel):
    """A variable as declared in the variability model."""

    name: str = Field(min_length=1, description="Variable name")
    type: str = Field(default="", description="Model type, e.g. bool or tristate")
    attributes: dict = Field(
        default_factory=dict,
        description="Further model attributes, carried opaquely",
    )

    def to_domain(self) -> Variable:
        return Variable(name=self.name, type=self.type, attributes=dict(self.attributes))


class CodeElementModel(BaseModel):
    """A code region referencing a variable."""

    path: str = Field(min_length=1, description="Path of the enclosing file")
    line_start: int = Field(ge=0, description="First line of the region")
    line_end: int = Field(ge=0, description="Last line of the region")

    @model_validator(mode="after")
    def _check_range(self) -> "CodeElementModel":
        if self.line_end < self.line_start:
            raise ValueError(
                f"line_end ({self.line_end}) is before line_start ({self.line_start})"
            )
        return self

    def to_domain(self) -> CodeElement:
        return CodeElement(SourceFile(self.path), self.line_start, self.line_end)


class MappingElementModel(BaseModel):
    """One entry of a mapping file."""

    variable_name: str = Field(min_length=1)
    variable_state: VariableState
    variable: VariableModel | None = None
    build_mapping: list[str] = Field(default_factory=list)
    code_mapping: list[CodeElementModel] = Field(default_factory=list)

    @field_validator("variable_state", mode="before")
    @classmethod
    def _normalize_state(cls, value):
        # Upstream tools write the enum names in upper case
        if isinstance(value, str):
            return value.lower()
        return value

    @model_validator(mode="after")
    def _check_state(self) -> "MappingElementModel":
        has_artifacts = bool(self.build_mapping or self.code_mapping)
        if self.variable_state is VariableState.UNUSED:
            if self.variable is None:
                raise ValueError("unused variable requires a 'variable' entry")
            if has_artifacts:
                raise ValueError("unused variable must not be referenced by artifacts")
        elif self.variable_state is VariableState.UNDEFINED and not has_artifacts:
            raise ValueError("undefined variable requires build_mapping or code_mapping")
        return self

    def to_domain(self) -> MappingElement:
        return MappingElement(
            variable_name=self.variable_name,
            variable_state=self.variable_state,
            variable=self.variable.to_domain() if self.variable is not None else None,
            build_mapping=frozenset(SourceFile(p) for p in self.build_mapping),
            code_mapping=frozenset(c.to_domain() for c in self.code_mapping),
        )


class MappingDocument(BaseModel):
    """Top-level JSON document: ``{"entries": [...]}``."""

    entries: list[MappingElementModel] = Field(default_factory=list)
