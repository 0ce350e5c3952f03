"""Run summaries.

Aggregates a :class:`RenderReport` into counts and ordered path lists and
renders them for the CLI.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from rich.panel import Panel
from rich.table import Table

from appgen.scaffolder.models import OutcomeKind, RenderMode, RenderReport
from appgen.utils import console, format_path_list

CREATED_LIST_LIMIT = 10


class RunSummary(BaseModel):
    """Counts and ordered paths for one synchronization pass."""

    created_count: int = Field(default=0)
    updated_count: int = Field(default=0)
    skipped_count: int = Field(default=0)
    created_paths: list[str] = Field(default_factory=list)
    updated_paths: list[str] = Field(default_factory=list)
    skipped_paths: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.created_count + self.updated_count + self.skipped_count


def summarize(report: RenderReport) -> RunSummary:
    """Aggregate *report*; path lists keep artifact order."""
    created: list[str] = []
    updated: list[str] = []
    skipped: list[str] = []
    for outcome in report.outcomes:
        if outcome.kind == OutcomeKind.CREATED:
            created.append(outcome.path)
        elif outcome.kind == OutcomeKind.UPDATED:
            updated.append(outcome.path)
        else:
            skipped.append(outcome.path)
    return RunSummary(
        created_count=len(created),
        updated_count=len(updated),
        skipped_count=len(skipped),
        created_paths=created,
        updated_paths=updated,
        skipped_paths=skipped,
    )


def next_steps(report: RenderReport) -> list[str]:
    """Suggested shell steps after a run."""
    steps = [f"cd {report.root}", "npm install"]
    if report.mode == RenderMode.INCREMENTAL:
        steps.append("cp -n .env.example .env  # if you have no .env yet")
    steps.append("npm run dev")
    return steps


def print_report(report: RenderReport) -> None:
    """Pretty-print the outcome of a run."""
    summary = summarize(report)

    heading = "Dry run" if report.dry_run else "Render complete"
    console.print(
        Panel(
            f"[bold]{heading}[/bold]\n"
            f"Root: {report.root}\n"
            f"Mode: {report.mode.value}\n"
            f"Artifacts: {summary.total}",
            title="appgen",
            border_style="yellow" if report.dry_run else "green",
        )
    )

    table = Table(title="Outcomes", show_header=True, header_style="bold cyan")
    table.add_column("Outcome", no_wrap=True)
    table.add_column("Count", justify="right")
    table.add_row("[green]created[/green]", str(summary.created_count))
    table.add_row("[yellow]updated[/yellow]", str(summary.updated_count))
    table.add_row("[dim]skipped[/dim]", str(summary.skipped_count))
    console.print(table)

    if summary.created_paths:
        console.print("\n[bold]Files created:[/bold]")
        for path in format_path_list(summary.created_paths, CREATED_LIST_LIMIT):
            console.print(f"  [green]+ {path}[/green]")

    if summary.updated_paths:
        console.print("\n[bold]Files updated:[/bold]")
        for path in summary.updated_paths:
            console.print(f"  [yellow]~ {path}[/yellow]")

    if summary.skipped_paths:
        console.print("\n[bold]Unchanged:[/bold]")
        for path in summary.skipped_paths:
            console.print(f"  [dim]= {path}[/dim]")

    if not report.dry_run:
        console.print("\n[bold]Next steps:[/bold]")
        for index, step in enumerate(next_steps(report), start=1):
            console.print(f"  {index}. {step}")
    console.print()
