"""Divergence detector: classifies mapping elements into divergence findings.

The detector pulls mapping elements from a source until it is exhausted
and classifies each one immediately against a fixed rule set:

  1. UNUSED           -> UnusedVariableFinding
  2. UNDEFINED        -> UndefinedVariableFinding
  3. USED_AND_DEFINED -> no finding

Classification is purely categorical -- no thresholds, scores or ranking.

Divergences spanning several mapping elements would need the complete
mapping, so findings are only emitted once the source is exhausted and the
multi-entry pass (``detect_multi_entry``) has run.  That pass does not
detect anything yet.
"""

from __future__ import annotations

from typing import Iterable

import structlog

from pssdiv.config.settings import DetectorConfig
from pssdiv.divergences.findings import (
    Finding,
    UndefinedVariableFinding,
    UnusedVariableFinding,
)
from pssdiv.errors import DetectorAlreadyRunError, UnknownVariableStateError
from pssdiv.mapping.types import MappingElement, VariableState, validate_entry

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Single-entry classification
# ---------------------------------------------------------------------------


def classify(entry: MappingElement) -> Finding | None:
    """Classify a single mapping element.

    Parameters
    ----------
    entry : MappingElement
        The element to investigate.

    Returns
    -------
    Finding | None
        The finding for an unused or undefined variable, None otherwise.

    Raises
    ------
    UnknownVariableStateError
        If the element's state is not a ``VariableState``.
    """
    state = entry.variable_state
    if state is VariableState.UNUSED:
        return UnusedVariableFinding.from_entry(entry)
    if state is VariableState.UNDEFINED:
        return UndefinedVariableFinding.from_entry(entry)
    if state is VariableState.USED_AND_DEFINED:
        return None
    raise UnknownVariableStateError(state)


# ---------------------------------------------------------------------------
# Driving loop
# ---------------------------------------------------------------------------


class DivergenceDetector:
    """Detect divergences over a complete problem/solution space mapping.

    Parameters
    ----------
    source : Iterable[MappingElement] | None
        Mapping elements to investigate. Iteration may block until the next
        element is available. None means no mapping stage is configured and
        yields zero findings.
    config : DetectorConfig | None
        Detector settings. Defaults to ``DetectorConfig()``.
    """

    def __init__(
        self,
        source: Iterable[MappingElement] | None,
        config: DetectorConfig | None = None,
    ) -> None:
        self.source = source
        self.config = config if config is not None else DetectorConfig()
        self.entries: list[MappingElement] = []
        self.results: list[Finding] = []
        self._has_run = False

    @property
    def result_name(self) -> str:
        return self.config.result_name

    def run(self) -> list[Finding]:
        """Consume the source and return all findings in encounter order.

        Raises
        ------
        DetectorAlreadyRunError
            If called more than once on the same detector.
        MalformedEntryError
            If entry validation is enabled and an element is malformed.
        UnknownVariableStateError
            If an element carries a state outside ``VariableState``.
        """
        if self._has_run:
            raise DetectorAlreadyRunError(
                f"{self.result_name} detector has already consumed its source"
            )
        self._has_run = True

        log = logger.bind(result=self.result_name)
        findings: list[Finding] = []

        if self.source is None:
            log.warning("no_mapping_source", detail="no divergence detection possible")
        else:
            for entry in self.source:
                log.debug("mapping_element_received", entry=str(entry))
                self.entries.append(entry)
                finding = self.detect_single_entry(entry)
                if finding is not None:
                    findings.append(finding)

            log.info("mapping_received", entry_count=len(self.entries))
            if self.entries:
                findings.extend(self.detect_multi_entry(self.entries))
            else:
                log.warning("mapping_empty", detail="no divergence detection possible")

        # Emit only after both passes completed
        self.results = findings
        log.info("divergences_detected", finding_count=len(findings))
        return list(findings)

    def detect_single_entry(self, entry: MappingElement) -> Finding | None:
        """Investigate one mapping element in isolation."""
        if self.config.validate_entries:
            validate_entry(entry)
        return classify(entry)

    def detect_multi_entry(self, entries: list[MappingElement]) -> list[Finding]:
        """Investigate combinations of mapping elements.

        No cross-entry divergences are defined yet; returns an empty list.
        """
        return []


def detect_divergences(
    source: Iterable[MappingElement] | None,
    config: DetectorConfig | None = None,
) -> list[Finding]:
    """Run a fresh :class:`DivergenceDetector` over *source*."""
    return DivergenceDetector(source, config).run()
