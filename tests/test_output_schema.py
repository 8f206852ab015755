"""Tests for the JSON report of a generate request."""

from __future__ import annotations

import json
from datetime import date

import pytest

from timetabler.calendarization import AbstractAssignment
from timetabler.data.models import ClassOccurrence
from timetabler.output.schema import (
    AssignmentOutput,
    GenerationOutput,
    OutputStatus,
    create_generation_output,
    report_to_json,
)
from timetabler.service import GenerationOutcome, GenerationReport


@pytest.fixture
def success_report() -> GenerationReport:
    return GenerationReport(
        outcome=GenerationOutcome.SUCCESS,
        timetable_id=1,
        message="Schedule generation completed for timetable ID 1.",
        attempts=2,
        requirements=1,
        assignments=[AbstractAssignment(class_id=1, day_id=2, start_period_id=11)],
        occurrences=[
            ClassOccurrence(class_id=1, date=date(2024, 11, 6), start_period_id=11),
            ClassOccurrence(class_id=1, date=date(2024, 10, 30), start_period_id=11),
        ],
        solve_time_ms=1500,
    )


class TestAssignmentOutput:
    """Tests for AssignmentOutput."""

    def test_enriched_from_timetable(self, store):
        output = AssignmentOutput.from_assignment(
            AbstractAssignment(class_id=1, day_id=2, start_period_id=11),
            store.get_timetable(1),
        )
        assert output.day_name == "Wednesday"
        assert output.start_time == "09:00"

    def test_without_timetable(self):
        output = AssignmentOutput.from_assignment(AbstractAssignment(class_id=1, day_id=2, start_period_id=11))
        assert output.day_name is None
        assert output.start_time is None


class TestGenerationOutput:
    """Tests for creating and serializing the report."""

    def test_status_mapping(self, success_report):
        for outcome, status in [
            (GenerationOutcome.SUCCESS, OutputStatus.SUCCESS),
            (GenerationOutcome.CONFLICT, OutputStatus.CONFLICT),
            (GenerationOutcome.NOT_FOUND, OutputStatus.NOT_FOUND),
            (GenerationOutcome.ERROR, OutputStatus.ERROR),
        ]:
            success_report.outcome = outcome
            assert create_generation_output(success_report).status == status

    def test_occurrences_sorted_by_date(self, success_report):
        output = create_generation_output(success_report)
        assert [o.date for o in output.occurrences] == [date(2024, 10, 30), date(2024, 11, 6)]

    def test_solve_time_in_seconds(self, success_report):
        assert create_generation_output(success_report).solve_time_seconds == 1.5

    def test_json_uses_camel_case(self, success_report, store):
        data = json.loads(report_to_json(success_report, store.get_timetable(1)))

        assert data["status"] == "success"
        assert data["timetableId"] == 1
        assert data["solveTimeSeconds"] == 1.5
        assert data["assignments"][0] == {
            "classId": 1,
            "dayId": 2,
            "startPeriodId": 11,
            "length": 1,
            "dayName": "Wednesday",
            "startTime": "09:00",
        }
        assert data["occurrences"][0] == {
            "classId": 1,
            "date": "2024-10-30",
            "startPeriodId": 11,
            "length": 1,
        }

    def test_round_trip_through_aliases(self, success_report):
        output = create_generation_output(success_report)
        assert GenerationOutput.model_validate(output.to_dict()) == output

    def test_failure_has_no_schedule(self):
        report = GenerationReport(
            outcome=GenerationOutcome.NOT_FOUND,
            timetable_id=9,
            message="Timetable with ID 9 not found.",
        )
        output = create_generation_output(report)
        assert output.status == OutputStatus.NOT_FOUND
        assert output.assignments == []
        assert output.occurrences == []
