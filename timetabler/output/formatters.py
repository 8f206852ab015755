"""
Console formatters for schedules.

- Weekly grid: periods as rows, timetable days as columns
- Occurrence list: one row per dated meeting
- Report summary: status panel for a generate request
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from timetabler.calendarization import AbstractAssignment
from timetabler.data.models import ClassOccurrence, Timetable

from .schema import GenerationOutput, OutputStatus


# =============================================================================
# Constants
# =============================================================================

DAY_ABBREV = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

STATUS_COLORS = {
    OutputStatus.SUCCESS: "green",
    OutputStatus.CONFLICT: "yellow",
    OutputStatus.NOT_FOUND: "red",
    OutputStatus.ERROR: "red",
}


# =============================================================================
# Weekly Grid
# =============================================================================

class WeeklyGridFormatter:
    """Formats a weekly pattern as a day x period grid."""

    def __init__(self, class_labels: Optional[dict[int, str]] = None, width: int | None = None):
        """
        Initialize grid formatter.

        Args:
            class_labels: Optional mapping of class_id to a display label
            width: Console width (None = auto-detect)
        """
        self.class_labels = class_labels or {}
        self.width = width

    def build_table(self, timetable: Timetable, assignments: list[AbstractAssignment]) -> Table:
        days = timetable.sorted_days()
        periods = timetable.sorted_periods()

        table = Table(title="Weekly Schedule", show_header=True, header_style="bold cyan")
        table.add_column("Period", style="dim")
        for day in days:
            table.add_column(DAY_ABBREV[day.weekday], justify="center")

        # A meeting covers `length` periods from its start
        cells: dict[tuple[int, int], list[str]] = {}
        period_index = {p.id: i for i, p in enumerate(periods)}
        for assignment in assignments:
            start = period_index.get(assignment.start_period_id)
            if start is None:
                continue
            label = self.class_labels.get(assignment.class_id, f"Class {assignment.class_id}")
            for k in range(assignment.length):
                if start + k < len(periods):
                    cells.setdefault((assignment.day_id, start + k), []).append(label)

        for i, period in enumerate(periods):
            row = [str(period)]
            for day in days:
                labels = cells.get((day.id, i))
                row.append("\n".join(labels) if labels else "-")
            table.add_row(*row)

        return table

    def print(self, timetable: Timetable, assignments: list[AbstractAssignment], console: Console | None = None) -> None:
        console = console or Console(width=self.width)
        console.print(self.build_table(timetable, assignments))


# =============================================================================
# Occurrence List
# =============================================================================

def build_occurrence_table(
    timetable: Timetable,
    occurrences: list[ClassOccurrence],
    class_labels: Optional[dict[int, str]] = None,
) -> Table:
    """Table of dated occurrences, sorted by date then start time."""
    class_labels = class_labels or {}
    periods = {p.id: p for p in timetable.periods}

    table = Table(title="Class Occurrences", show_header=True, header_style="bold cyan")
    table.add_column("Date")
    table.add_column("Day")
    table.add_column("Start")
    table.add_column("Periods", justify="right")
    table.add_column("Class")

    def sort_key(o: ClassOccurrence):
        period = periods.get(o.start_period_id)
        return (o.date, period.start_minutes if period else 0, o.class_id)

    for occurrence in sorted(occurrences, key=sort_key):
        period = periods.get(occurrence.start_period_id)
        table.add_row(
            occurrence.date.isoformat(),
            DAY_ABBREV[occurrence.date.weekday()],
            period.start if period else str(occurrence.start_period_id),
            str(occurrence.length),
            class_labels.get(occurrence.class_id, f"Class {occurrence.class_id}"),
        )

    return table


# =============================================================================
# Report Summary
# =============================================================================

def print_summary(output: GenerationOutput, console: Console) -> None:
    """Print the outcome of a generate request."""
    color = STATUS_COLORS.get(output.status, "red")
    console.print(Panel(
        Text(output.status.value.upper(), style=f"bold {color}"),
        title="Schedule Generation",
        subtitle=f"Finished in {output.solve_time_seconds:.2f}s",
    ))
    console.print(output.message)

    table = Table(title="Summary", show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Timetable", str(output.timetable_id))
    table.add_row("Requirements", str(output.requirements))
    table.add_row("Restarts", str(output.attempts))
    table.add_row("Weekly meetings", str(len(output.assignments)))
    table.add_row("Dated occurrences", str(len(output.occurrences)))

    console.print(table)
