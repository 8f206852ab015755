"""
Scheduling entities: the resources that cannot be double-booked.

Every teacher is a resource, and so is every class being scheduled
(so that two meetings of the same class never overlap). Resource ids
are tagged by kind, so teacher 7 and class 7 are distinct resources.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from ..data.models import SchoolClass, Teacher
from .matrix import AvailabilityMatrix


@dataclass(frozen=True)
class TeacherResource:
    """Resource id of a teacher."""
    teacher_id: int

    def __str__(self) -> str:
        return f"T{self.teacher_id}"


@dataclass(frozen=True)
class ClassResource:
    """Resource id of a class scheduled as its own resource."""
    class_id: int

    def __str__(self) -> str:
        return f"C{self.class_id}"


ResourceId = Union[TeacherResource, ClassResource]


@dataclass
class SchedulingEntity:
    """A resource and the grid of periods it is already committed to."""
    resource_id: ResourceId
    display_name: str
    availability: AvailabilityMatrix = field(repr=False)

    def reset(self, num_days: int, num_periods: int) -> None:
        """Forget every commitment by replacing the matrix."""
        self.availability = AvailabilityMatrix(num_days, num_periods)


EntityPool = dict[ResourceId, SchedulingEntity]


def build_entity_pool(
    teachers: Iterable[Teacher],
    classes: Iterable[SchoolClass],
    num_days: int,
    num_periods: int,
    course_codes: Optional[dict[int, str]] = None,
) -> EntityPool:
    """
    Create a fresh entity for every teacher and every class to schedule.

    Args:
        teachers: All known teachers
        classes: The classes of this run
        num_days: Rows of each availability matrix
        num_periods: Columns of each availability matrix
        course_codes: Optional mapping of course_id to code, used in display names

    Returns:
        Entities keyed by resource id
    """
    course_codes = course_codes or {}
    pool: EntityPool = {}

    for teacher in teachers:
        resource = TeacherResource(teacher.id)
        pool[resource] = SchedulingEntity(
            resource_id=resource,
            display_name=teacher.name,
            availability=AvailabilityMatrix(num_days, num_periods),
        )

    for cls in classes:
        resource = ClassResource(cls.id)
        code = course_codes.get(cls.course_id, str(cls.course_id))
        pool[resource] = SchedulingEntity(
            resource_id=resource,
            display_name=f"Class {cls.id} ({code})",
            availability=AvailabilityMatrix(num_days, num_periods),
        )

    return pool


def reset_pool(pool: EntityPool, num_days: int, num_periods: int) -> None:
    """Give every entity an empty availability matrix."""
    for entity in pool.values():
        entity.reset(num_days, num_periods)
