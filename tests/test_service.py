"""Tests for the scheduling service and request handling."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from timetabler.calendarization import AbstractAssignment
from timetabler.data.models import ClassOccurrence, SchedulerConfig
from timetabler.data.repository import JsonScheduleStore
from timetabler.errors import PersistenceError, TimetableNotFoundError
from timetabler.service import GenerationOutcome, SchedulingService, handle_generate


class FailingRepository(JsonScheduleStore):
    """Repository whose reads blow up."""

    def list_teachers(self):
        raise RuntimeError("connection reset")


class ReadOnlyRepository(JsonScheduleStore):
    """Repository whose writes fail."""

    def replace_occurrences(self, class_ids, occurrences):
        raise PersistenceError("disk full")


class TestGenerate:
    """Tests for SchedulingService.generate."""

    def test_success_stores_occurrences(self, store):
        repository = JsonScheduleStore(store)
        report = SchedulingService(repository).generate(1)

        assert report.outcome == GenerationOutcome.SUCCESS
        assert report.is_success
        assert report.attempts == 0
        assert report.requirements == 2
        assert report.assignments == [
            AbstractAssignment(class_id=1, day_id=1, start_period_id=10),
            AbstractAssignment(class_id=1, day_id=2, start_period_id=10),
            AbstractAssignment(class_id=2, day_id=1, start_period_id=11, length=2),
        ]
        stored = repository.list_occurrences()
        assert len(stored) == 6
        assert sorted(stored, key=lambda o: (o.date, o.class_id)) == [
            ClassOccurrence(class_id=1, date=date(2024, 10, 28), start_period_id=10),
            ClassOccurrence(class_id=2, date=date(2024, 10, 28), start_period_id=11, length=2),
            ClassOccurrence(class_id=1, date=date(2024, 10, 30), start_period_id=10),
            ClassOccurrence(class_id=1, date=date(2024, 11, 4), start_period_id=10),
            ClassOccurrence(class_id=2, date=date(2024, 11, 4), start_period_id=11, length=2),
            ClassOccurrence(class_id=1, date=date(2024, 11, 6), start_period_id=10),
        ]

    def test_success_replaces_previous_run(self, store):
        store.occurrences = [ClassOccurrence(class_id=1, date=date(2024, 10, 21), start_period_id=12)]
        repository = JsonScheduleStore(store)

        SchedulingService(repository).generate(1)

        assert date(2024, 10, 21) not in {o.date for o in repository.list_occurrences()}
        assert len(repository.list_occurrences()) == 6

    def test_rerun_gives_same_occurrences(self, store):
        repository = JsonScheduleStore(store)
        service = SchedulingService(repository)

        first = service.generate(1).occurrences
        second = service.generate(1).occurrences

        assert first == second
        assert len(repository.list_occurrences()) == 6

    def test_conflict_stores_nothing(self, conflict_store):
        existing = ClassOccurrence(class_id=1, date=date(2024, 10, 21), start_period_id=10)
        conflict_store.occurrences = [existing]
        repository = JsonScheduleStore(conflict_store)

        report = SchedulingService(repository, conflict_store.config).generate(1)

        assert report.outcome == GenerationOutcome.CONFLICT
        assert report.attempts == 5
        assert "within 5 attempts" in report.message
        assert report.occurrences == []
        assert repository.list_occurrences() == [existing]

    def test_unknown_timetable(self, store):
        with pytest.raises(TimetableNotFoundError, match="Timetable with ID 7 not found."):
            SchedulingService(JsonScheduleStore(store)).generate(7)

    def test_nothing_to_schedule(self, store, caplog):
        for cls in store.classes:
            cls.period_preferences = []
        repository = JsonScheduleStore(store)

        with caplog.at_level(logging.WARNING):
            report = SchedulingService(repository).generate(1)

        assert report.outcome == GenerationOutcome.SUCCESS
        assert report.requirements == 0
        assert repository.list_occurrences() == []
        assert "has no period preferences" in caplog.text

    def test_nothing_to_schedule_clears_stale_occurrences(self, store):
        for cls in store.classes:
            cls.period_preferences = []
        store.occurrences = [ClassOccurrence(class_id=1, date=date(2024, 10, 28), start_period_id=10)]
        repository = JsonScheduleStore(store)

        report = SchedulingService(repository).generate(1)

        assert report.outcome == GenerationOutcome.SUCCESS
        assert report.occurrences == []
        assert repository.list_occurrences([1, 2]) == []

    def test_best_score_strategy(self, store):
        config = SchedulerConfig(strategy="best_score")
        report = SchedulingService(JsonScheduleStore(store), config).generate(1)

        assert report.is_success
        class_one_days = {a.day_id for a in report.assignments if a.class_id == 1}
        assert class_one_days == {1, 2}

    def test_persistence_error_propagates(self, store):
        with pytest.raises(PersistenceError, match="disk full"):
            SchedulingService(ReadOnlyRepository(store)).generate(1)


class TestHandleGenerate:
    """Tests for mapping failures to outcomes."""

    def test_not_found(self, store):
        report = handle_generate(SchedulingService(JsonScheduleStore(store)), 7)
        assert report.outcome == GenerationOutcome.NOT_FOUND
        assert report.message == "Timetable with ID 7 not found."

    def test_unexpected_error(self, store, caplog):
        with caplog.at_level(logging.ERROR):
            report = handle_generate(SchedulingService(FailingRepository(store)), 1)

        assert report.outcome == GenerationOutcome.ERROR
        assert report.message == "An internal error occurred during schedule generation."
        assert "connection reset" in caplog.text

    def test_persistence_error_not_mapped(self, store):
        with pytest.raises(PersistenceError):
            handle_generate(SchedulingService(ReadOnlyRepository(store)), 1)

    def test_success_passthrough(self, store):
        report = handle_generate(SchedulingService(JsonScheduleStore(store)), 1)
        assert report.outcome == GenerationOutcome.SUCCESS
