"""
Requirement lines and the document builder.

A requirement line is one class's whole weekly need: place `frequency`
meetings of `length` consecutive periods, with every listed resource
free for the whole span, only where the class prefers to meet. The
document is the ordered list of lines handed to the orchestrator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ..data.models import SchoolClass, Timetable
from .entities import ClassResource, EntityPool, ResourceId, TeacherResource
from .grid import TimetableGrid
from .matrix import BUSY, FREE, AvailabilityMatrix

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class RequirementLine:
    """One class's recurring scheduling need."""
    class_id: int
    resource_ids: tuple[ResourceId, ...]
    frequency: int
    length: int
    preference: AvailabilityMatrix = field(repr=False)
    working: AvailabilityMatrix = field(repr=False)
    assigned_slots: list[tuple[int, int]] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        class_id: int,
        resource_ids: Iterable[ResourceId],
        frequency: int,
        length: int,
        num_days: int,
        num_periods: int,
    ) -> "RequirementLine":
        """Create a line with nothing preferred yet."""
        return cls(
            class_id=class_id,
            resource_ids=tuple(dict.fromkeys(resource_ids)),
            frequency=frequency,
            length=length,
            preference=AvailabilityMatrix(num_days, num_periods, fill=BUSY),
            working=AvailabilityMatrix(num_days, num_periods),
        )

    def prefer(self, day_index: int, start_period_index: int) -> None:
        """Mark a full meeting starting at (day, period) as preferred."""
        for k in range(self.length):
            self.preference.set(day_index, start_period_index + k, FREE)

    def clear_assignments(self) -> None:
        self.assigned_slots = []

    @property
    def label(self) -> str:
        resources = ",".join(str(r) for r in self.resource_ids)
        return f"S=[{resources}] (q={self.frequency}, len={self.length})"

    def __str__(self) -> str:
        return f"Class {self.class_id} {self.label}"


class RequirementDocumentBuilder:
    """
    Turns class records into requirement lines.

    Usage:
        builder = RequirementDocumentBuilder(TimetableGrid.from_timetable(timetable))
        document = builder.build(classes, entity_pool)
    """

    def __init__(self, grid: TimetableGrid):
        self.grid = grid

    def build(self, classes: Iterable[SchoolClass], entities: EntityPool) -> list[RequirementLine]:
        """Build one line per schedulable class, in input order."""
        document: list[RequirementLine] = []
        for cls in classes:
            line = self.build_line(cls, entities)
            if line is not None:
                document.append(line)
        return document

    def build_line(self, cls: SchoolClass, entities: EntityPool) -> RequirementLine | None:
        """Build the line of one class, or None when the class cannot be scheduled."""
        if not cls.period_preferences:
            logger.warning(
                "Class %s has no period preferences. Skipping requirement creation for this class.",
                cls.id,
            )
            return None

        resource_ids: list[ResourceId] = []

        if cls.teacher_id is None:
            logger.info("Class %s has no teacher assigned.", cls.id)
        elif TeacherResource(cls.teacher_id) in entities:
            resource_ids.append(TeacherResource(cls.teacher_id))
        else:
            logger.warning(
                "Teacher ID %s for class %s not found among scheduling entities. "
                "Scheduling the class without its teacher.",
                cls.teacher_id, cls.id,
            )

        class_resource = ClassResource(cls.id)
        if class_resource not in entities:
            logger.error(
                "Scheduling entity for class %s not found. Skipping requirement creation for this class.",
                cls.id,
            )
            return None
        resource_ids.append(class_resource)

        if cls.frequency <= 0 or cls.length <= 0 or not resource_ids:
            logger.warning(
                "Skipping class %s: frequency %s, length %s, %d resources.",
                cls.id, cls.frequency, cls.length, len(resource_ids),
            )
            return None

        line = RequirementLine.create(
            class_id=cls.id,
            resource_ids=resource_ids,
            frequency=cls.frequency,
            length=cls.length,
            num_days=self.grid.num_days,
            num_periods=self.grid.num_periods,
        )
        self._apply_preferences(cls, line)
        return line

    def _apply_preferences(self, cls: SchoolClass, line: RequirementLine) -> None:
        for preference in cls.period_preferences:
            day_index = self.grid.day_index(preference.day_id)
            period_index = self.grid.period_index(preference.start_period_id)
            if day_index is None or period_index is None:
                logger.warning(
                    "Class %s: preference for day %s, period %s is outside the timetable. Skipping it.",
                    cls.id, preference.day_id, preference.start_period_id,
                )
                continue
            line.prefer(day_index, period_index)


def build_document(
    classes: Iterable[SchoolClass],
    entities: EntityPool,
    timetable: Timetable,
) -> list[RequirementLine]:
    """Build the requirement document of a timetable's classes."""
    return RequirementDocumentBuilder(TimetableGrid.from_timetable(timetable)).build(classes, entities)
