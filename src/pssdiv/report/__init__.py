"""Reporting for divergence findings.

Public API:
  - FindingRecord: the three-string exported form of a finding
  - write_csv: CSV report with one row per finding
  - FindingJournal, JournalRow: SQLite journal of findings across runs
"""

from pssdiv.report.journal import FindingJournal, JournalRow
from pssdiv.report.records import FindingRecord, write_csv

__all__ = [
    "FindingJournal",
    "FindingRecord",
    "JournalRow",
    "write_csv",
]
