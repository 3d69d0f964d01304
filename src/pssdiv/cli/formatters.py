"""Rich output formatters for the pssdiv CLI.

Each function accepts plain data and returns a Rich renderable (Table,
Panel, etc.).  The caller is responsible for printing via
``console.print()``.  This separation keeps the formatters testable
without capturing stdout.
"""

from __future__ import annotations

from collections import Counter

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pssdiv.divergences.findings import FINDING_TYPES, HEADER, Finding

_TYPE_STYLES = {
    "UnusedVariableFinding": "yellow",
    "UndefinedVariableFinding": "red",
}


def format_findings_table(findings: list[Finding]) -> Table:
    """Render findings as a Rich Table with the report header columns.

    Parameters
    ----------
    findings : list[Finding]
        Findings emitted by ``DivergenceDetector.run()``.
    """
    table = Table(title="Problem/Solution Space Divergences", show_lines=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column(HEADER[0], style="bold")
    table.add_column(HEADER[1])
    table.add_column(HEADER[2])

    for index, finding in enumerate(findings, start=1):
        finding_type, problem, solution = finding.to_row()
        style = _TYPE_STYLES.get(finding_type, "white")
        table.add_row(
            str(index),
            f"[{style}]{finding_type}[/{style}]",
            Text(problem),
            Text(solution),
        )

    return table


def format_summary_panel(findings: list[Finding], entry_count: int) -> Panel:
    """Render per-type finding counts as a Rich Panel.

    Parameters
    ----------
    findings : list[Finding]
        Findings emitted by the detector.
    entry_count : int
        Number of mapping elements the detector received.
    """
    counts = Counter(f.type for f in findings)
    lines: list[str] = []
    lines.append(f"  Mapping elements:  {entry_count}")
    for kind in FINDING_TYPES:
        name = kind.__name__
        lines.append(f"  {name}:  {counts.get(name, 0)}")
    lines.append("")

    if findings:
        lines.append(f"[bold red]{len(findings)} divergence(s) detected[/bold red]")
    elif entry_count == 0:
        lines.append("[yellow]Mapping is empty -- no divergence detection possible[/yellow]")
    else:
        lines.append("[bold green]CONSISTENT -- No divergences detected[/bold green]")

    return Panel("\n".join(lines), title="Divergence Summary", border_style="blue")


def format_history_table(rows: list) -> Table:
    """Render journaled findings as a Rich Table.

    Parameters
    ----------
    rows : list[JournalRow]
        Rows from ``FindingJournal.query()``.
    """
    table = Table(title="Finding Journal", show_lines=True)
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Run", style="cyan")
    table.add_column("Date", style="cyan")
    table.add_column("Type", style="bold")
    table.add_column("Variables", style="magenta")
    table.add_column("Solution Space Symptom", max_width=60)

    for row in rows:
        table.add_row(
            str(row.id or ""),
            row.run_id[:8],
            row.created_at[:10] if row.created_at else "",
            row.finding_type,
            ", ".join(row.variables),
            Text(row.solution_space_symptom),
        )

    return table
