"""Finding journal for keeping divergence results across analysis runs.

Every detector run is logged under a run id together with all of its
findings.  The journal supports querying by finding type and run id; both
filters combine with AND logic.

Storage uses SQLite with WAL mode.  The involved variables and source
files are stored as JSON arrays so later runs can be compared per
variable.

Schema:
    findings(
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT NOT NULL,
        created_at TEXT NOT NULL,              -- ISO 8601 UTC
        finding_type TEXT NOT NULL,
        problem_space_symptom TEXT NOT NULL,
        solution_space_symptom TEXT NOT NULL,
        variables TEXT DEFAULT '[]',           -- JSON array of names
        source_files TEXT DEFAULT '[]'         -- JSON array of paths
    )
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

import structlog

from pssdiv.divergences.findings import Finding

logger = structlog.get_logger()


@dataclass
class JournalRow:
    """A single finding as stored in the journal.

    Parameters
    ----------
    run_id : str
        Identifier of the detector run that produced the finding.
    created_at : str
        ISO 8601 UTC timestamp of the run.
    finding_type : str
        Finding kind, e.g. "UnusedVariableFinding".
    problem_space_symptom : str
        Report text for the variability model side.
    solution_space_symptom : str
        Report text for the artifact side.
    variables : list[str]
        Names of the involved variables.
    source_files : list[str]
        Paths of the involved source files.
    id : int | None
        Auto-assigned by the database on insert.
    """

    run_id: str
    created_at: str
    finding_type: str
    problem_space_symptom: str
    solution_space_symptom: str
    variables: list[str] = field(default_factory=list)
    source_files: list[str] = field(default_factory=list)
    id: int | None = None


class FindingJournal:
    """SQLite-backed journal of detector findings.

    Parameters
    ----------
    db_path : str | Path
        Path to the SQLite database file. Created if it doesn't exist.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()
        logger.debug("finding_journal_opened", db_path=str(self.db_path))

    def _create_tables(self) -> None:
        """Create the findings table and indexes if they don't exist."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS findings (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                run_id TEXT NOT NULL,
                created_at TEXT NOT NULL,
                finding_type TEXT NOT NULL,
                problem_space_symptom TEXT NOT NULL,
                solution_space_symptom TEXT NOT NULL,
                variables TEXT DEFAULT '[]',
                source_files TEXT DEFAULT '[]'
            )
        """)
        self.conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_findings_run
            ON findings(run_id)
        """)
        self.conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_findings_type
            ON findings(finding_type)
        """)
        self.conn.commit()

    def log_findings(self, findings: Iterable[Finding], run_id: str | None = None) -> str:
        """Insert all findings of one detector run.

        Parameters
        ----------
        findings : Iterable[Finding]
            Findings emitted by the detector.
        run_id : str | None
            Identifier for the run. A random one is generated if omitted.

        Returns
        -------
        str
            The run id the findings were stored under.
        """
        run_id = run_id or uuid.uuid4().hex
        created_at = datetime.now(timezone.utc).isoformat()
        rows = [
            (
                run_id,
                created_at,
                f.type,
                f.problem_space_symptom,
                f.solution_space_symptom,
                json.dumps(f.involved_variable_names),
                json.dumps(f.involved_source_file_paths),
            )
            for f in findings
        ]
        self.conn.executemany(
            """
            INSERT INTO findings
            (run_id, created_at, finding_type, problem_space_symptom,
             solution_space_symptom, variables, source_files)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            rows,
        )
        self.conn.commit()
        logger.info("findings_journaled", run_id=run_id, finding_count=len(rows))
        return run_id

    def query(
        self,
        finding_type: str | None = None,
        run_id: str | None = None,
        limit: int = 100,
    ) -> list[JournalRow]:
        """Query journaled findings with optional filters.

        All filters combine with AND logic. Results are ordered by insertion
        (oldest first).

        Parameters
        ----------
        finding_type : str | None
            Only findings of this kind.
        run_id : str | None
            Only findings from this run.
        limit : int
            Maximum number of rows to return.
        """
        conditions: list[str] = []
        params: list = []

        if finding_type is not None:
            conditions.append("finding_type = ?")
            params.append(finding_type)
        if run_id is not None:
            conditions.append("run_id = ?")
            params.append(run_id)

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.append(limit)
        cursor = self.conn.execute(
            f"""
            SELECT id, run_id, created_at, finding_type, problem_space_symptom,
                   solution_space_symptom, variables, source_files
            FROM findings
            {where}
            ORDER BY id ASC
            LIMIT ?
            """,
            params,
        )
        return [self._row_to_record(row) for row in cursor.fetchall()]

    def count(self) -> int:
        """Return the total number of journaled findings."""
        cursor = self.conn.execute("SELECT COUNT(*) FROM findings")
        return cursor.fetchone()[0]

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()
        logger.debug("finding_journal_closed", db_path=str(self.db_path))

    @staticmethod
    def _row_to_record(row: tuple) -> JournalRow:
        return JournalRow(
            id=row[0],
            run_id=row[1],
            created_at=row[2],
            finding_type=row[3],
            problem_space_symptom=row[4],
            solution_space_symptom=row[5],
            variables=json.loads(row[6]) if row[6] else [],
            source_files=json.loads(row[7]) if row[7] else [],
        )
