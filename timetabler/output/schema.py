"""
Output schema for scheduling runs.

This module defines the JSON-serializable report of a generate request:
the outcome, the weekly pattern found and the dated occurrences stored.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from timetabler.calendarization import AbstractAssignment
from timetabler.data.models import ClassOccurrence, Timetable
from timetabler.service import GenerationOutcome, GenerationReport


# =============================================================================
# Enums
# =============================================================================

class OutputStatus(str, Enum):
    """Run status for output."""
    SUCCESS = "success"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    ERROR = "error"


# =============================================================================
# Assignments and Occurrences
# =============================================================================

class AssignmentOutput(BaseModel):
    """A weekly meeting in the output."""
    class_id: int = Field(alias="classId")
    day_id: int = Field(alias="dayId")
    start_period_id: int = Field(alias="startPeriodId")
    length: int

    # Optional enriched data
    day_name: Optional[str] = Field(default=None, alias="dayName")
    start_time: Optional[str] = Field(default=None, alias="startTime")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_assignment(
        cls,
        assignment: AbstractAssignment,
        timetable: Optional[Timetable] = None,
    ) -> AssignmentOutput:
        """Create from an AbstractAssignment."""
        day = timetable.get_day(assignment.day_id) if timetable else None
        period = timetable.get_period(assignment.start_period_id) if timetable else None
        return cls(
            classId=assignment.class_id,
            dayId=assignment.day_id,
            startPeriodId=assignment.start_period_id,
            length=assignment.length,
            dayName=day.name if day else None,
            startTime=period.start if period else None,
        )


class OccurrenceOutput(BaseModel):
    """A dated class meeting in the output."""
    class_id: int = Field(alias="classId")
    date: datetime.date
    start_period_id: int = Field(alias="startPeriodId")
    length: int

    model_config = {"populate_by_name": True}

    @classmethod
    def from_occurrence(cls, occurrence: ClassOccurrence) -> OccurrenceOutput:
        return cls(
            classId=occurrence.class_id,
            date=occurrence.date,
            startPeriodId=occurrence.start_period_id,
            length=occurrence.length,
        )


# =============================================================================
# Complete Output
# =============================================================================

class GenerationOutput(BaseModel):
    """Complete output of a generate request."""
    status: OutputStatus
    message: str
    timetable_id: int = Field(alias="timetableId")
    attempts: int = 0
    requirements: int = 0
    solve_time_seconds: float = Field(default=0.0, alias="solveTimeSeconds")
    assignments: list[AssignmentOutput] = Field(default_factory=list)
    occurrences: list[OccurrenceOutput] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(by_alias=True, indent=indent)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# Conversion Functions
# =============================================================================

def _outcome_to_output(outcome: GenerationOutcome) -> OutputStatus:
    """Convert GenerationOutcome to OutputStatus."""
    mapping = {
        GenerationOutcome.SUCCESS: OutputStatus.SUCCESS,
        GenerationOutcome.CONFLICT: OutputStatus.CONFLICT,
        GenerationOutcome.NOT_FOUND: OutputStatus.NOT_FOUND,
        GenerationOutcome.ERROR: OutputStatus.ERROR,
    }
    return mapping.get(outcome, OutputStatus.ERROR)


def create_generation_output(
    report: GenerationReport,
    timetable: Optional[Timetable] = None,
) -> GenerationOutput:
    """
    Create a GenerationOutput from a GenerationReport.

    Args:
        report: The service report
        timetable: Optional timetable used to add day names and start times

    Returns:
        GenerationOutput ready to serialize
    """
    assignments = [
        AssignmentOutput.from_assignment(a, timetable)
        for a in report.assignments
    ]
    occurrences = [
        OccurrenceOutput.from_occurrence(o)
        for o in sorted(report.occurrences, key=lambda o: (o.date, o.class_id))
    ]

    return GenerationOutput(
        status=_outcome_to_output(report.outcome),
        message=report.message,
        timetableId=report.timetable_id,
        attempts=report.attempts,
        requirements=report.requirements,
        solveTimeSeconds=report.solve_time_ms / 1000.0,
        assignments=assignments,
        occurrences=occurrences,
    )


def report_to_json(
    report: GenerationReport,
    timetable: Optional[Timetable] = None,
    indent: int = 2,
) -> str:
    """Convert a GenerationReport directly to JSON string."""
    return create_generation_output(report, timetable).to_json(indent=indent)
