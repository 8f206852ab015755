"""
Pydantic models for the timetabler data model.

Records mirror what the persistence layer stores for a timetable:
days, periods, teachers, courses, classes with their period preferences,
and the dated class occurrences produced by a scheduling run.

Time conventions:
- Period boundaries are 'HH:MM' strings (24h clock)
- Day records carry an English weekday name ('Monday' .. 'Sunday')
- Dates are ISO dates ('2024-10-28')
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# Constants and Enums
# =============================================================================

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
WEEKDAY_INDEX = {name.lower(): i for i, name in enumerate(WEEKDAY_NAMES)}


class PlacementStrategy(str, Enum):
    """How a slot is picked among the valid candidates of one occurrence."""
    FIRST_FIT = "first_fit"
    BEST_SCORE = "best_score"


# =============================================================================
# Helper Functions
# =============================================================================

def time_to_minutes(time_str: str) -> int:
    """Convert HH:MM format to minutes from midnight."""
    h, m = map(int, time_str.split(":"))
    return h * 60 + m


def weekday_index(name: str) -> int:
    """Get the canonical weekday index (0=Monday) for a day name."""
    try:
        return WEEKDAY_INDEX[name.strip().lower()]
    except KeyError:
        raise ValueError(f"'{name}' is not a weekday name") from None


# =============================================================================
# Timetable Structure
# =============================================================================

class Day(BaseModel):
    """A teaching day declared by a timetable."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(description="Unique identifier")
    name: str = Field(description="Weekday name (e.g., 'Monday')")

    @field_validator("name")
    @classmethod
    def validate_weekday_name(cls, value: str) -> str:
        weekday_index(value)
        return value

    @property
    def weekday(self) -> int:
        """Weekday index, 0=Monday through 6=Sunday."""
        return weekday_index(self.name)

    def __str__(self) -> str:
        return self.name


class Period(BaseModel):
    """A period of the school day, shared by every day of the timetable."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(description="Unique identifier")
    start: str = Field(pattern=r"^\d{2}:\d{2}$", description="Start time (HH:MM)")
    end: str = Field(pattern=r"^\d{2}:\d{2}$", description="End time (HH:MM)")

    @model_validator(mode="after")
    def validate_time_range(self) -> "Period":
        """Ensure start time is before end time."""
        if self.start_minutes >= self.end_minutes:
            raise ValueError(
                f"start ({self.start}) must be before end ({self.end})"
            )
        return self

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end)

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


class Timetable(BaseModel):
    """A weekly grid of days and periods active between two dates."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(description="Unique identifier")
    name: str = Field(default="", max_length=100, description="Display name")
    start_date: datetime.date = Field(description="First calendar date (inclusive)")
    end_date: datetime.date = Field(description="Last calendar date (inclusive)")
    days: list[Day] = Field(default_factory=list, description="Declared teaching days")
    periods: list[Period] = Field(default_factory=list, description="Periods of each day")

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "Timetable":
        """Day ids and period ids must be unique within the timetable."""
        errors: list[str] = []
        day_ids = [d.id for d in self.days]
        if len(day_ids) != len(set(day_ids)):
            errors.append("duplicate day id")
        weekdays = [d.weekday for d in self.days]
        if len(weekdays) != len(set(weekdays)):
            errors.append("weekday declared more than once")
        period_ids = [p.id for p in self.periods]
        if len(period_ids) != len(set(period_ids)):
            errors.append("duplicate period id")
        if errors:
            raise ValueError(f"Timetable {self.id}: " + ", ".join(errors))
        return self

    @property
    def num_days(self) -> int:
        return len(self.days)

    @property
    def num_periods(self) -> int:
        return len(self.periods)

    def sorted_days(self) -> list[Day]:
        """Days in canonical weekday order (stored order is not meaningful)."""
        return sorted(self.days, key=lambda d: d.weekday)

    def sorted_periods(self) -> list[Period]:
        """Periods in chronological order."""
        return sorted(self.periods, key=lambda p: (p.start_minutes, p.id))

    def get_day(self, day_id: int) -> Optional[Day]:
        return next((d for d in self.days if d.id == day_id), None)

    def get_period(self, period_id: int) -> Optional[Period]:
        return next((p for p in self.periods if p.id == period_id), None)

    def __str__(self) -> str:
        return f"{self.name or 'Timetable'} ({self.start_date} to {self.end_date})"


# =============================================================================
# Academic Entities
# =============================================================================

class Teacher(BaseModel):
    """Teacher entity."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(description="Unique identifier")
    name: str = Field(min_length=1, description="Full name")

    def __str__(self) -> str:
        return self.name


class Course(BaseModel):
    """Course taught by one or more classes."""
    model_config = ConfigDict(extra="forbid")

    id: int = Field(description="Unique identifier")
    name: str = Field(min_length=1, description="Course name")
    code: str = Field(default="", max_length=20, description="Short code")

    def __str__(self) -> str:
        return f"{self.name} ({self.code or self.id})"


class PeriodPreference(BaseModel):
    """A day and starting period a class would like to meet at."""
    model_config = ConfigDict(extra="forbid")

    day_id: int = Field(description="Timetable day ID")
    start_period_id: int = Field(description="Timetable period ID of the first period")


class SchoolClass(BaseModel):
    """
    A course section that meets every week.
    Named 'SchoolClass' to avoid collision with Python's 'class' keyword.
    """
    model_config = ConfigDict(extra="forbid")

    id: int = Field(description="Unique identifier")
    timetable_id: int = Field(description="Timetable this class belongs to")
    course_id: int = Field(description="Course ID")
    teacher_id: Optional[int] = Field(default=None, description="Teacher ID")
    frequency: int = Field(default=1, description="Meetings per week")
    length: int = Field(default=1, description="Consecutive periods per meeting")
    period_preferences: list[PeriodPreference] = Field(
        default_factory=list,
        description="Preferred day/starting period pairs",
    )

    def __str__(self) -> str:
        return f"Class {self.id}"


class ClassOccurrence(BaseModel):
    """A single dated meeting of a class."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    class_id: int = Field(description="Class ID")
    date: datetime.date = Field(description="Calendar date of the meeting")
    start_period_id: int = Field(description="Timetable period ID of the first period")
    length: int = Field(default=1, ge=1, description="Consecutive periods")

    def __str__(self) -> str:
        return f"Class {self.class_id} on {self.date.isoformat()} @ period {self.start_period_id}"


# =============================================================================
# Configuration Models
# =============================================================================

class SchedulerConfig(BaseModel):
    """Scheduling run configuration."""
    model_config = ConfigDict(extra="forbid")

    max_attempts: int = Field(default=100, ge=1, le=10000, description="Document restarts before giving up")
    strategy: PlacementStrategy = Field(default=PlacementStrategy.FIRST_FIT, description="Slot placement strategy")
    log_level: str = Field(default="WARNING", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{value}'")
        return level


# =============================================================================
# Persisted World
# =============================================================================

class ScheduleStore(BaseModel):
    """
    Every persisted record the scheduler reads or writes.
    This is the content of a store file.
    """
    model_config = ConfigDict(extra="forbid")

    config: SchedulerConfig = Field(default_factory=SchedulerConfig, description="Run configuration")
    timetables: list[Timetable] = Field(default_factory=list)
    teachers: list[Teacher] = Field(default_factory=list)
    courses: list[Course] = Field(default_factory=list)
    classes: list[SchoolClass] = Field(default_factory=list)
    occurrences: list[ClassOccurrence] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_no_duplicate_ids(self) -> "ScheduleStore":
        """Ensure no duplicate IDs within each entity type."""
        errors: list[str] = []

        def check_duplicates(items: list, entity_name: str) -> None:
            seen: set[int] = set()
            for item in items:
                if item.id in seen:
                    errors.append(f"Duplicate {entity_name} ID: {item.id}")
                seen.add(item.id)

        check_duplicates(self.timetables, "timetable")
        check_duplicates(self.teachers, "teacher")
        check_duplicates(self.courses, "course")
        check_duplicates(self.classes, "class")

        if errors:
            raise ValueError("Duplicate ID validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

        return self

    @model_validator(mode="after")
    def validate_references(self) -> "ScheduleStore":
        """
        Validate class references to timetables and courses.

        Teacher references are not checked here: a class whose teacher
        is gone is still scheduled, without the teacher constraint.
        """
        errors: list[str] = []
        timetable_ids = {t.id for t in self.timetables}
        course_ids = {c.id for c in self.courses}
        class_ids = {c.id for c in self.classes}

        for cls in self.classes:
            if cls.timetable_id not in timetable_ids:
                errors.append(f"Class {cls.id}: unknown timetable_id {cls.timetable_id}")
            if cls.course_id not in course_ids:
                errors.append(f"Class {cls.id}: unknown course_id {cls.course_id}")

        for occurrence in self.occurrences:
            if occurrence.class_id not in class_ids:
                errors.append(f"Occurrence on {occurrence.date}: unknown class_id {occurrence.class_id}")

        if errors:
            raise ValueError("Reference validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

        return self

    # -------------------------------------------------------------------------
    # Lookup Methods
    # -------------------------------------------------------------------------

    def get_timetable(self, timetable_id: int) -> Optional[Timetable]:
        return next((t for t in self.timetables if t.id == timetable_id), None)

    def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def get_course(self, course_id: int) -> Optional[Course]:
        return next((c for c in self.courses if c.id == course_id), None)

    def get_class(self, class_id: int) -> Optional[SchoolClass]:
        return next((c for c in self.classes if c.id == class_id), None)

    def get_timetable_classes(self, timetable_id: int) -> list[SchoolClass]:
        """Get all classes of a timetable."""
        return [c for c in self.classes if c.timetable_id == timetable_id]

    def summary(self) -> dict[str, Any]:
        """Get a summary of the stored data."""
        return {
            "timetables": len(self.timetables),
            "teachers": len(self.teachers),
            "courses": len(self.courses),
            "classes": len(self.classes),
            "occurrences": len(self.occurrences),
        }
