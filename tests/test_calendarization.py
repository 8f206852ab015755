"""Tests for projecting a weekly pattern onto dates."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from timetabler.calendarization import AbstractAssignment, project, weekly_pattern
from timetabler.data.models import ClassOccurrence, Day, Period, Timetable


def make_timetable(start: date, end: date, days: list[tuple[int, str]]) -> Timetable:
    return Timetable(
        id=1,
        start_date=start,
        end_date=end,
        days=[Day(id=day_id, name=name) for day_id, name in days],
        periods=[Period(id=10, start="08:00", end="09:00"), Period(id=11, start="09:00", end="10:00")],
    )


@pytest.fixture
def two_weeks() -> Timetable:
    """Monday 2024-10-28 to Friday 2024-11-08, Mondays (1) and Wednesdays (2)."""
    return make_timetable(date(2024, 10, 28), date(2024, 11, 8), [(1, "Monday"), (2, "Wednesday")])


class TestProject:
    """Tests for project()."""

    def test_two_weeks_of_mondays_and_wednesdays(self, two_weeks):
        assignments = [
            AbstractAssignment(class_id=5, day_id=1, start_period_id=10),
            AbstractAssignment(class_id=5, day_id=2, start_period_id=11),
        ]

        occurrences = project(two_weeks, assignments)

        assert [(o.date, o.start_period_id) for o in occurrences] == [
            (date(2024, 10, 28), 10),
            (date(2024, 10, 30), 11),
            (date(2024, 11, 4), 10),
            (date(2024, 11, 6), 11),
        ]
        assert all(o.class_id == 5 for o in occurrences)

    def test_one_occurrence_per_matching_date(self, two_weeks):
        assignment = AbstractAssignment(class_id=1, day_id=2, start_period_id=10, length=2)

        occurrences = project(two_weeks, [assignment])

        matching = [
            two_weeks.start_date + timedelta(days=n)
            for n in range((two_weeks.end_date - two_weeks.start_date).days + 1)
            if (two_weeks.start_date + timedelta(days=n)).weekday() == 2
        ]
        assert [o.date for o in occurrences] == matching
        assert all(o.length == 2 for o in occurrences)

    def test_same_day_keeps_assignment_order(self, two_weeks):
        assignments = [
            AbstractAssignment(class_id=2, day_id=1, start_period_id=11),
            AbstractAssignment(class_id=1, day_id=1, start_period_id=10),
        ]

        occurrences = project(two_weeks, assignments)

        assert [o.class_id for o in occurrences[:2]] == [2, 1]
        assert occurrences[0].date == occurrences[1].date

    def test_single_day_range(self):
        timetable = make_timetable(date(2024, 10, 30), date(2024, 10, 30), [(2, "Wednesday")])
        occurrences = project(timetable, [AbstractAssignment(class_id=1, day_id=2, start_period_id=10)])
        assert occurrences == [ClassOccurrence(class_id=1, date=date(2024, 10, 30), start_period_id=10)]

    def test_inverted_range_is_empty(self):
        timetable = make_timetable(date(2024, 11, 8), date(2024, 10, 28), [(1, "Monday")])
        assert project(timetable, [AbstractAssignment(class_id=1, day_id=1, start_period_id=10)]) == []

    def test_no_assignments(self, two_weeks):
        assert project(two_weeks, []) == []

    def test_undeclared_day_id_never_matches(self, two_weeks):
        assert project(two_weeks, [AbstractAssignment(class_id=1, day_id=99, start_period_id=10)]) == []

    def test_dates_outside_declared_weekdays_skipped(self, two_weeks):
        occurrences = project(two_weeks, [AbstractAssignment(class_id=1, day_id=1, start_period_id=10)])
        assert {o.date.weekday() for o in occurrences} == {0}

    def test_projection_is_repeatable(self, two_weeks):
        assignments = [AbstractAssignment(class_id=1, day_id=1, start_period_id=10)]
        assert project(two_weeks, assignments) == project(two_weeks, assignments)


class TestWeeklyPattern:
    """Tests for weekly_pattern()."""

    def test_recovers_projected_pattern(self, two_weeks):
        assignments = [
            AbstractAssignment(class_id=1, day_id=1, start_period_id=10),
            AbstractAssignment(class_id=2, day_id=2, start_period_id=11, length=2),
        ]
        assert weekly_pattern(two_weeks, project(two_weeks, assignments)) == assignments

    def test_ignores_undeclared_weekdays(self, two_weeks):
        friday = ClassOccurrence(class_id=1, date=date(2024, 11, 1), start_period_id=10)
        assert weekly_pattern(two_weeks, [friday]) == []

    def test_empty(self, two_weeks):
        assert weekly_pattern(two_weeks, []) == []
