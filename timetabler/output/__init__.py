"""Report schema and console formatting."""

from .schema import (
    OutputStatus,
    AssignmentOutput,
    OccurrenceOutput,
    GenerationOutput,
    create_generation_output,
    report_to_json,
)
from .formatters import (
    WeeklyGridFormatter,
    build_occurrence_table,
    print_summary,
)

__all__ = [
    # Schema
    "OutputStatus",
    "AssignmentOutput",
    "OccurrenceOutput",
    "GenerationOutput",
    "create_generation_output",
    "report_to_json",
    # Formatters
    "WeeklyGridFormatter",
    "build_occurrence_table",
    "print_summary",
]
