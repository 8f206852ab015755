"""Shared fixtures: a small two-day timetable with two classes."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from timetabler.data.loader import parse_store
from timetabler.data.models import ScheduleStore


def make_store_data() -> dict:
    """
    Timetable 1 runs Monday 2024-10-28 to Friday 2024-11-08 on Mondays
    and Wednesdays, with three one-hour periods from 08:00.

    Class 1 meets twice a week for one period, class 2 once for two.
    Both are taught by Ada.
    """
    return {
        "timetables": [
            {
                "id": 1,
                "name": "Autumn term",
                "startDate": "2024-10-28",
                "endDate": "2024-11-08",
                "days": [
                    {"id": 1, "name": "Monday"},
                    {"id": 2, "name": "Wednesday"},
                ],
                "periods": [
                    {"id": 10, "start": "08:00", "end": "09:00"},
                    {"id": 11, "start": "09:00", "end": "10:00"},
                    {"id": 12, "start": "10:00", "end": "11:00"},
                ],
            },
        ],
        "teachers": [
            {"id": 1, "name": "Ada"},
            {"id": 2, "name": "Grace"},
        ],
        "courses": [
            {"id": 1, "name": "Mathematics", "code": "MAT"},
            {"id": 2, "name": "Physics", "code": "PHY"},
        ],
        "classes": [
            {
                "id": 1,
                "timetableId": 1,
                "courseId": 1,
                "teacherId": 1,
                "frequency": 2,
                "length": 1,
                "periodPreferences": [
                    {"dayId": 1, "startPeriodId": 10},
                    {"dayId": 2, "startPeriodId": 10},
                ],
            },
            {
                "id": 2,
                "timetableId": 1,
                "courseId": 2,
                "teacherId": 1,
                "frequency": 1,
                "length": 2,
                "periodPreferences": [
                    {"dayId": 1, "startPeriodId": 10},
                    {"dayId": 1, "startPeriodId": 11},
                    {"dayId": 2, "startPeriodId": 11},
                ],
            },
        ],
    }


def make_conflict_data() -> dict:
    """Two classes of the same teacher that both only accept Monday 08:00."""
    data = make_store_data()
    data["config"] = {"maxAttempts": 5}
    for cls in data["classes"]:
        cls["frequency"] = 1
        cls["length"] = 1
        cls["periodPreferences"] = [{"dayId": 1, "startPeriodId": 10}]
    return data


def write_store(data: dict, path: Path) -> Path:
    with open(path, "w") as f:
        json.dump(data, f)
    return path


@pytest.fixture
def store_data() -> dict:
    return make_store_data()


@pytest.fixture
def store(store_data) -> ScheduleStore:
    return parse_store(store_data)


@pytest.fixture
def store_file(store_data, tmp_path) -> Path:
    return write_store(store_data, tmp_path / "store.json")


@pytest.fixture
def conflict_file(tmp_path) -> Path:
    return write_store(make_conflict_data(), tmp_path / "conflict.json")


@pytest.fixture
def conflict_store() -> ScheduleStore:
    return parse_store(make_conflict_data())
