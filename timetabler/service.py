"""
Scheduling service: one full run for a timetable.

    load records -> build entities and document -> orchestrate
        -> map slots to ids -> calendarize -> replace stored occurrences

Runs for the same timetable must not overlap; callers serialize them.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .calendarization import AbstractAssignment, project
from .data.models import ClassOccurrence, SchedulerConfig
from .data.repository import ScheduleRepository
from .engine.entities import build_entity_pool
from .engine.grid import TimetableGrid
from .engine.orchestrator import OrchestrationResult, Orchestrator
from .engine.requirements import RequirementDocumentBuilder
from .errors import PersistenceError, TimetableNotFoundError

logger = logging.getLogger(__name__)


class GenerationOutcome(str, Enum):
    """Result of a generate request."""
    SUCCESS = "success"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class GenerationReport:
    """What a scheduling run did."""
    outcome: GenerationOutcome
    timetable_id: int
    message: str
    attempts: int = 0
    requirements: int = 0
    assignments: list[AbstractAssignment] = field(default_factory=list)
    occurrences: list[ClassOccurrence] = field(default_factory=list)
    solve_time_ms: int = 0

    @property
    def is_success(self) -> bool:
        return self.outcome == GenerationOutcome.SUCCESS


class SchedulingService:
    """
    Generates and stores the schedule of a timetable.

    Usage:
        service = SchedulingService(JsonScheduleStore.open("store.json"))
        report = service.generate(1)
    """

    def __init__(self, repository: ScheduleRepository, config: Optional[SchedulerConfig] = None):
        self.repository = repository
        self.config = config or SchedulerConfig()

    def generate(self, timetable_id: int) -> GenerationReport:
        """
        Schedule every class of a timetable.

        Returns:
            A SUCCESS report (occurrences stored) or a CONFLICT report
            (nothing stored)

        Raises:
            TimetableNotFoundError: If the timetable does not exist
            PersistenceError: If records cannot be read or written
        """
        started = time.perf_counter()
        logger.info("Starting schedule generation for timetable ID: %s", timetable_id)

        timetable = self.repository.get_timetable(timetable_id)
        if timetable is None:
            raise TimetableNotFoundError(timetable_id)

        classes = self.repository.list_classes(timetable_id)
        teachers = self.repository.list_teachers()

        grid = TimetableGrid.from_timetable(timetable)
        course_codes: dict[int, str] = {}
        for cls in classes:
            course = self.repository.get_course(cls.course_id)
            if course is not None:
                course_codes[cls.course_id] = course.code or course.name

        entities = build_entity_pool(teachers, classes, grid.num_days, grid.num_periods, course_codes)
        document = RequirementDocumentBuilder(grid).build(classes, entities)
        if not document:
            logger.info("No requirements to schedule for timetable ID: %s", timetable_id)
            if classes:
                self.repository.replace_occurrences([cls.id for cls in classes], [])
            return GenerationReport(
                outcome=GenerationOutcome.SUCCESS,
                timetable_id=timetable_id,
                message=f"Nothing to schedule for timetable ID {timetable_id}.",
                solve_time_ms=_elapsed_ms(started),
            )

        orchestrator = Orchestrator(
            document,
            entities,
            grid.num_days,
            grid.num_periods,
            max_attempts=self.config.max_attempts,
            strategy=self.config.strategy,
        )
        result = orchestrator.run()

        if not result.success:
            return GenerationReport(
                outcome=GenerationOutcome.CONFLICT,
                timetable_id=timetable_id,
                message=(
                    f"Schedule generation failed to find a complete solution for timetable ID "
                    f"{timetable_id} within {self.config.max_attempts} attempts. "
                    f"Constraints may be too tight."
                ),
                attempts=result.attempts,
                requirements=len(document),
                solve_time_ms=_elapsed_ms(started),
            )

        assignments = to_abstract_assignments(result, grid)
        occurrences = project(timetable, assignments)
        self.repository.replace_occurrences([cls.id for cls in classes], occurrences)

        logger.info(
            "Finished schedule generation for timetable ID: %s. %d weekly meetings, %d dated occurrences.",
            timetable_id, len(assignments), len(occurrences),
        )
        return GenerationReport(
            outcome=GenerationOutcome.SUCCESS,
            timetable_id=timetable_id,
            message=f"Schedule generation completed for timetable ID {timetable_id}.",
            attempts=result.attempts,
            requirements=len(document),
            assignments=assignments,
            occurrences=occurrences,
            solve_time_ms=_elapsed_ms(started),
        )


def to_abstract_assignments(result: OrchestrationResult, grid: TimetableGrid) -> list[AbstractAssignment]:
    """Translate assigned (day index, period index) slots to timetable ids."""
    assignments: list[AbstractAssignment] = []
    for line in result.document:
        for day_index, period_index in line.assigned_slots:
            assignments.append(AbstractAssignment(
                class_id=line.class_id,
                day_id=grid.day_id(day_index),
                start_period_id=grid.period_id(period_index),
                length=line.length,
            ))
    return assignments


def handle_generate(service: SchedulingService, timetable_id: int) -> GenerationReport:
    """
    Run a generate request and map failures to outcomes.

    Persistence errors are not mapped: they propagate to the caller.
    """
    try:
        return service.generate(timetable_id)
    except TimetableNotFoundError as e:
        return GenerationReport(
            outcome=GenerationOutcome.NOT_FOUND,
            timetable_id=timetable_id,
            message=str(e),
        )
    except PersistenceError:
        raise
    except Exception:
        logger.exception("Internal error during scheduling of timetable ID %s", timetable_id)
        return GenerationReport(
            outcome=GenerationOutcome.ERROR,
            timetable_id=timetable_id,
            message="An internal error occurred during schedule generation.",
        )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
