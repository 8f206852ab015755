"""Exceptions raised by the scheduler."""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for scheduler errors."""
    pass


class TimetableNotFoundError(SchedulerError):
    """Raised when a scheduling run names a timetable that does not exist."""

    def __init__(self, timetable_id: int):
        self.timetable_id = timetable_id
        super().__init__(f"Timetable with ID {timetable_id} not found.")


class PersistenceError(SchedulerError):
    """Raised when stored records cannot be read or written."""
    pass


class DataValidationError(SchedulerError):
    """Raised when stored records fail validation."""
    pass
