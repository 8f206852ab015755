"""
Command-line interface for the class scheduler.

Usage:
    python -m timetabler generate store.json --timetable 1
    python -m timetabler validate store.json
    python -m timetabler view store.json --timetable 1 --dates
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .calendarization import weekly_pattern
from .data.loader import load_store
from .data.models import PlacementStrategy, ScheduleStore, SchedulerConfig
from .data.repository import JsonScheduleStore
from .errors import DataValidationError, PersistenceError
from .output.formatters import WeeklyGridFormatter, build_occurrence_table, print_summary
from .output.schema import OutputStatus, create_generation_output
from .service import SchedulingService, handle_generate

# Create Typer app
app = typer.Typer(
    name="timetabler",
    help="Weekly class scheduler: place recurring class meetings and project them onto dates.",
    add_completion=False,
)

# Rich console for pretty output
console = Console()

EXIT_CODES = {
    OutputStatus.SUCCESS: 0,
    OutputStatus.CONFLICT: 1,
    OutputStatus.NOT_FOUND: 2,
    OutputStatus.ERROR: 3,
}


# =============================================================================
# Helper Functions
# =============================================================================

def configure_logging(level: str) -> None:
    """Send library logs through rich at the given level."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def open_repository(store_file: Path) -> JsonScheduleStore:
    """Open a store file or exit with an error."""
    if not store_file.exists():
        console.print(f"[red]Error:[/red] Store file not found: {store_file}")
        raise typer.Exit(code=EXIT_CODES[OutputStatus.ERROR])

    try:
        return JsonScheduleStore.open(store_file)
    except (PersistenceError, DataValidationError) as e:
        console.print(f"[red]Error loading store:[/red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_CODES[OutputStatus.ERROR])


def class_labels(store: ScheduleStore) -> dict[int, str]:
    """Display label of every class: course code and teacher."""
    labels: dict[int, str] = {}
    for cls in store.classes:
        course = store.get_course(cls.course_id)
        teacher = store.get_teacher(cls.teacher_id) if cls.teacher_id is not None else None
        label = course.code or course.name if course else f"Class {cls.id}"
        if teacher:
            label = f"{label} ({teacher.name})"
        labels[cls.id] = label
    return labels


# =============================================================================
# Commands
# =============================================================================

@app.command()
def generate(
    store_file: Path = typer.Argument(
        ...,
        help="Path to the store JSON file",
    ),
    timetable_id: int = typer.Option(
        ...,
        "--timetable", "-t",
        help="ID of the timetable to schedule",
    ),
    max_attempts: Optional[int] = typer.Option(
        None,
        "--max-attempts", "-m",
        help="Document restarts before giving up (default from store config)",
        min=1,
        max=10000,
    ),
    strategy: Optional[PlacementStrategy] = typer.Option(
        None,
        "--strategy", "-s",
        help="Slot placement strategy (default from store config)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Path to write the JSON report",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Do not write occurrences back to the store",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """
    Generate the schedule of a timetable.

    Places every class of the timetable in the weekly grid, projects the
    weekly pattern onto the timetable's dates and replaces the stored
    occurrences of those classes.

    Exit codes: 0 success, 1 conflict, 2 timetable not found, 3 error.

    Example:
        python -m timetabler generate store.json --timetable 1
    """
    repository = open_repository(store_file)
    store = repository.store

    overrides: dict = {}
    if max_attempts is not None:
        overrides["max_attempts"] = max_attempts
    if strategy is not None:
        overrides["strategy"] = strategy
    if verbose:
        overrides["log_level"] = "DEBUG"
    config = SchedulerConfig.model_validate({**store.config.model_dump(), **overrides})
    configure_logging(config.log_level)

    if dry_run:
        repository.path = None

    service = SchedulingService(repository, config)
    try:
        report = handle_generate(service, timetable_id)
    except PersistenceError as e:
        console.print(f"[red]Error saving store:[/red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_CODES[OutputStatus.ERROR])

    timetable = store.get_timetable(timetable_id)
    result = create_generation_output(report, timetable)

    console.print()
    print_summary(result, console)

    if timetable is not None and report.assignments:
        WeeklyGridFormatter(class_labels(store)).print(timetable, report.assignments, console)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w") as f:
            f.write(result.to_json())
        console.print(f"\n[green]Report saved to:[/green] {output}")

    if report.is_success and not dry_run and report.occurrences:
        console.print(f"[green]Store updated:[/green] {store_file}")

    raise typer.Exit(code=EXIT_CODES[result.status])


@app.command()
def validate(
    store_file: Path = typer.Argument(
        ...,
        help="Path to the store JSON file to validate",
    ),
) -> None:
    """
    Validate a store file.

    Checks for:
    - Valid JSON structure
    - Schema compliance and unique IDs
    - Reference integrity (timetables, courses)
    - Classes the scheduler will skip or cannot fit

    Example:
        python -m timetabler validate store.json
    """
    console.print(f"\n[bold]Validating:[/bold] {store_file}\n")

    if not store_file.exists():
        console.print(f"[red]Error:[/red] File not found: {store_file}")
        raise typer.Exit(code=1)

    try:
        store = load_store(store_file)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    except DataValidationError as e:
        console.print("[red]Schema validation failed:[/red]")
        for line in str(e).split("\n"):
            console.print(f"   {escape(line)}")
        raise typer.Exit(code=1)

    console.print("[green]Schema validation passed[/green]")

    warnings = []
    teacher_ids = {t.id for t in store.teachers}
    for cls in store.classes:
        timetable = store.get_timetable(cls.timetable_id)
        if not cls.period_preferences:
            warnings.append(f"Class {cls.id} has no period preferences and will be skipped")
        if cls.teacher_id is not None and cls.teacher_id not in teacher_ids:
            warnings.append(f"Class {cls.id} references unknown teacher {cls.teacher_id}")
        if cls.frequency <= 0 or cls.length <= 0:
            warnings.append(f"Class {cls.id} has frequency {cls.frequency} and length {cls.length}")
        if timetable is not None:
            if cls.length > timetable.num_periods:
                warnings.append(
                    f"Class {cls.id} needs {cls.length} consecutive periods "
                    f"but timetable {timetable.id} has {timetable.num_periods}"
                )
            if cls.frequency * cls.length > timetable.num_days * timetable.num_periods:
                warnings.append(f"Class {cls.id} needs more periods than timetable {timetable.id} has")

    if warnings:
        console.print("[yellow]Warnings found:[/yellow]")
        for w in warnings:
            console.print(f"   - {escape(w)}")

    table = Table(title="Summary", show_header=False, box=None)
    table.add_column("Entity", style="cyan")
    table.add_column("Count", style="white")
    for name, count in store.summary().items():
        table.add_row(name.capitalize(), str(count))
    console.print(table)

    console.print("\n[green]Validation complete.[/green]\n")


@app.command()
def view(
    store_file: Path = typer.Argument(
        ...,
        help="Path to the store JSON file",
    ),
    timetable_id: int = typer.Option(
        ...,
        "--timetable", "-t",
        help="ID of the timetable to show",
    ),
    class_id: Optional[int] = typer.Option(
        None,
        "--class", "-C",
        help="Only show this class",
    ),
    dates: bool = typer.Option(
        False,
        "--dates", "-d",
        help="List dated occurrences instead of the weekly grid",
    ),
) -> None:
    """
    View the stored schedule of a timetable.

    Example:
        python -m timetabler view store.json --timetable 1 --class 3
    """
    repository = open_repository(store_file)
    store = repository.store

    timetable = store.get_timetable(timetable_id)
    if timetable is None:
        console.print(f"[red]Error:[/red] Timetable {timetable_id} not found")
        raise typer.Exit(code=EXIT_CODES[OutputStatus.NOT_FOUND])

    class_ids = [c.id for c in store.get_timetable_classes(timetable_id)]
    if class_id is not None:
        if class_id not in class_ids:
            console.print(f"[red]Error:[/red] Class {class_id} is not part of timetable {timetable_id}")
            raise typer.Exit(code=EXIT_CODES[OutputStatus.NOT_FOUND])
        class_ids = [class_id]

    occurrences = repository.list_occurrences(class_ids)
    if not occurrences:
        console.print(f"[yellow]No occurrences stored for timetable {timetable_id}[/yellow]")
        return

    console.print(Panel(f"[bold]{timetable}[/bold]", title="Timetable"))

    labels = class_labels(store)
    if dates:
        console.print(build_occurrence_table(timetable, occurrences, labels))
    else:
        WeeklyGridFormatter(labels).print(timetable, weekly_pattern(timetable, occurrences), console)


# =============================================================================
# Main Entry Point
# =============================================================================

def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
