"""
Projection of a weekly schedule onto calendar dates.

The engine produces a weekly pattern: class X meets on day D at period P
every week. Calendarization repeats that pattern on every date between
the timetable's start and end dates whose weekday is one of the
timetable's days.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .data.models import ClassOccurrence, Timetable


@dataclass(frozen=True)
class AbstractAssignment:
    """A weekly recurring meeting, independent of any date."""
    class_id: int
    day_id: int
    start_period_id: int
    length: int = 1


def project(timetable: Timetable, assignments: list[AbstractAssignment]) -> list[ClassOccurrence]:
    """
    Generate dated occurrences from a weekly pattern.

    Args:
        timetable: Timetable with the date range and day definitions
        assignments: The weekly pattern

    Returns:
        One occurrence per assignment per matching date, ordered by date
        and then by assignment order. Empty when the range is inverted
        or there is nothing to project.
    """
    occurrences: list[ClassOccurrence] = []

    if timetable.start_date > timetable.end_date or not assignments:
        return occurrences

    weekday_to_day_id = {day.weekday: day.id for day in timetable.days}

    by_day_id: dict[int, list[AbstractAssignment]] = {}
    for assignment in assignments:
        if assignment.day_id not in by_day_id:
            by_day_id[assignment.day_id] = []
        by_day_id[assignment.day_id].append(assignment)

    current = timetable.start_date
    while current <= timetable.end_date:
        day_id = weekday_to_day_id.get(current.weekday())
        if day_id is not None:
            for assignment in by_day_id.get(day_id, []):
                occurrences.append(ClassOccurrence(
                    class_id=assignment.class_id,
                    date=current,
                    start_period_id=assignment.start_period_id,
                    length=assignment.length,
                ))
        current += timedelta(days=1)

    return occurrences


def weekly_pattern(timetable: Timetable, occurrences: list[ClassOccurrence]) -> list[AbstractAssignment]:
    """
    Recover the weekly pattern behind a set of dated occurrences.

    Occurrences on dates whose weekday the timetable does not declare
    are ignored. The result is ordered by first appearance.
    """
    weekday_to_day_id = {day.weekday: day.id for day in timetable.days}
    seen: dict[AbstractAssignment, None] = {}
    for occurrence in sorted(occurrences, key=lambda o: o.date):
        day_id = weekday_to_day_id.get(occurrence.date.weekday())
        if day_id is None:
            continue
        seen.setdefault(AbstractAssignment(
            class_id=occurrence.class_id,
            day_id=day_id,
            start_period_id=occurrence.start_period_id,
            length=occurrence.length,
        ), None)
    return list(seen)
