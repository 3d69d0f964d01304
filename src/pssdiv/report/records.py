"""Exported finding records and the CSV report writer.

Only three strings per finding cross the reporting boundary: the finding
type and the two symptom descriptions.  The CSV report has one header row
(:data:`HEADER`) followed by one row per finding.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import structlog

from pssdiv.divergences.findings import HEADER, Finding

logger = structlog.get_logger()


@dataclass(frozen=True)
class FindingRecord:
    """The exported form of a finding."""

    type: str
    problem_space_symptom: str
    solution_space_symptom: str

    @classmethod
    def from_finding(cls, finding: Finding) -> "FindingRecord":
        return cls(*finding.to_row())

    def as_row(self) -> list[str]:
        return [self.type, self.problem_space_symptom, self.solution_space_symptom]


def write_csv(findings: Iterable[Finding], path: str | Path) -> int:
    """Write *findings* as a CSV report to *path*.

    Returns
    -------
    int
        Number of finding rows written (the header is not counted).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for finding in findings:
            writer.writerow(FindingRecord.from_finding(finding).as_row())
            count += 1
    logger.info("csv_report_written", path=str(path), row_count=count)
    return count
