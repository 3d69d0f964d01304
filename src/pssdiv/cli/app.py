"""pssdiv CLI -- run divergence detection over a problem/solution space mapping.

Commands:
    detect   -- Classify a mapping file and report the divergences found
    history  -- Query findings stored in a finding journal
    header   -- Print the report header row
"""

from __future__ import annotations

import dataclasses
import sqlite3
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from pssdiv.cli.formatters import (
    format_findings_table,
    format_history_table,
    format_summary_panel,
)
from pssdiv.config.settings import DetectorConfig
from pssdiv.divergences.detector import DivergenceDetector
from pssdiv.divergences.findings import HEADER
from pssdiv.errors import DivergenceError
from pssdiv.logs import configure_logging
from pssdiv.mapping.loader import iter_mapping_file

app = typer.Typer(
    name="pssdiv",
    help="Problem/solution space divergence detector",
    rich_markup_mode="rich",
)
console = Console()


def _fail(title: str, exc: Exception) -> None:
    console.print(
        Panel(
            f"[red]{type(exc).__name__}:[/red] {escape(str(exc))}",
            title=title,
            border_style="red",
        )
    )
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# detect
# ---------------------------------------------------------------------------


@app.command()
def detect(
    mapping_file: Path = typer.Argument(
        help="Mapping file (JSON document or JSON Lines)"
    ),
    csv_path: Optional[Path] = typer.Option(
        None, "--csv", help="Write the findings as a CSV report to this path"
    ),
    journal_path: Optional[Path] = typer.Option(
        None, "--journal", help="Record the findings in this SQLite finding journal"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Reject mapping elements that violate their invariants"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines"),
) -> None:
    """Classify a mapping file and report unused and undefined variables."""
    try:
        config = DetectorConfig.from_env()
    except DivergenceError as exc:
        _fail("Configuration", exc)

    if strict:
        config = dataclasses.replace(config, validate_entries=True)
    if verbose:
        config = dataclasses.replace(config, log_level="DEBUG")
    configure_logging(config.log_level, json=json_logs)

    if not mapping_file.exists():
        console.print(
            Panel(
                f"[red]Mapping file not found:[/red] {mapping_file}",
                title="Detect",
                border_style="red",
            )
        )
        raise typer.Exit(1)

    detector = DivergenceDetector(iter_mapping_file(mapping_file), config)
    try:
        findings = detector.run()
    except DivergenceError as exc:
        _fail("Detect", exc)

    if findings:
        console.print(format_findings_table(findings))
    console.print(format_summary_panel(findings, len(detector.entries)))

    if csv_path is not None:
        from pssdiv.report.records import write_csv

        try:
            rows = write_csv(findings, csv_path)
        except OSError as exc:
            _fail("CSV Report", exc)
        console.print(f"[dim]{rows} row(s) written to {csv_path}[/dim]")

    if journal_path is not None:
        from pssdiv.report.journal import FindingJournal

        try:
            journal = FindingJournal(journal_path)
            try:
                run_id = journal.log_findings(findings)
            finally:
                journal.close()
        except (OSError, sqlite3.Error) as exc:
            _fail("Journal", exc)
        console.print(f"[dim]Findings journaled as run {run_id}[/dim]")


# ---------------------------------------------------------------------------
# history
# ---------------------------------------------------------------------------


@app.command()
def history(
    journal_path: Path = typer.Option(
        ..., "--journal", help="Path to the SQLite finding journal"
    ),
    finding_type: Optional[str] = typer.Option(
        None, "--type", help="Filter by finding type, e.g. UndefinedVariableFinding"
    ),
    run_id: Optional[str] = typer.Option(None, "--run-id", help="Filter by run id"),
    limit: int = typer.Option(20, help="Maximum number of results to display"),
) -> None:
    """Query findings recorded in a finding journal."""
    from pssdiv.report.journal import FindingJournal

    if not journal_path.exists():
        console.print(
            Panel(
                f"[red]Journal not found:[/red] {journal_path}",
                title="History",
                border_style="red",
            )
        )
        raise typer.Exit(1)

    try:
        journal = FindingJournal(journal_path)
        try:
            rows = journal.query(finding_type=finding_type, run_id=run_id, limit=limit)
        finally:
            journal.close()
    except sqlite3.Error as exc:
        _fail("History", exc)

    if not rows:
        console.print(
            Panel(
                "[dim]No findings recorded matching the given filters.[/dim]",
                title="History",
                border_style="dim",
            )
        )
        return

    console.print(format_history_table(rows))
    console.print(f"\n[dim]{len(rows)} result(s) shown[/dim]")


# ---------------------------------------------------------------------------
# header
# ---------------------------------------------------------------------------


@app.command()
def header() -> None:
    """Print the report header row."""
    console.print(", ".join(HEADER), markup=False, highlight=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
