"""
Persistence collaborators for the scheduling service.

The service only talks to a ScheduleRepository. JsonScheduleStore keeps
every record of a ScheduleStore in memory and, when it has a path,
writes the whole store back to disk whenever occurrences are replaced.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Optional, Protocol, Union

from ..errors import PersistenceError
from .loader import load_store, save_store
from .models import ClassOccurrence, Course, ScheduleStore, SchoolClass, Teacher, Timetable


class ScheduleRepository(Protocol):
    """Reads the records a scheduling run needs and stores its result."""

    def get_timetable(self, timetable_id: int) -> Optional[Timetable]:
        ...

    def list_classes(self, timetable_id: int) -> list[SchoolClass]:
        ...

    def list_teachers(self) -> list[Teacher]:
        ...

    def get_course(self, course_id: int) -> Optional[Course]:
        ...

    def list_occurrences(self, class_ids: Optional[Iterable[int]] = None) -> list[ClassOccurrence]:
        ...

    def replace_occurrences(self, class_ids: Iterable[int], occurrences: list[ClassOccurrence]) -> None:
        ...


class JsonScheduleStore:
    """
    ScheduleRepository backed by a store JSON file.

    Usage:
        repository = JsonScheduleStore.open("store.json")
        service = SchedulingService(repository)

    Without a path (e.g. JsonScheduleStore(store)) the repository is
    purely in memory.
    """

    def __init__(self, store: ScheduleStore, path: Optional[Union[str, Path]] = None):
        self.store = store
        self.path = Path(path) if path is not None else None

    @classmethod
    def open(cls, path: Union[str, Path]) -> "JsonScheduleStore":
        """
        Open a store file.

        Raises:
            PersistenceError: If the file cannot be read or is not valid JSON
            DataValidationError: If the records fail validation
        """
        try:
            store = load_store(path)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read store {path}: {e}") from e
        return cls(store, path)

    def save(self) -> None:
        """Write the store back to its file."""
        if self.path is None:
            return
        try:
            save_store(self.store, self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write store {self.path}: {e}") from e

    # -------------------------------------------------------------------------
    # ScheduleRepository
    # -------------------------------------------------------------------------

    def get_timetable(self, timetable_id: int) -> Optional[Timetable]:
        return self.store.get_timetable(timetable_id)

    def list_classes(self, timetable_id: int) -> list[SchoolClass]:
        return self.store.get_timetable_classes(timetable_id)

    def list_teachers(self) -> list[Teacher]:
        return list(self.store.teachers)

    def get_course(self, course_id: int) -> Optional[Course]:
        return self.store.get_course(course_id)

    def list_occurrences(self, class_ids: Optional[Iterable[int]] = None) -> list[ClassOccurrence]:
        if class_ids is None:
            return list(self.store.occurrences)
        wanted = set(class_ids)
        return [o for o in self.store.occurrences if o.class_id in wanted]

    def replace_occurrences(self, class_ids: Iterable[int], occurrences: list[ClassOccurrence]) -> None:
        """Drop every stored occurrence of the given classes, then add the new ones."""
        replaced = set(class_ids)
        previous = self.store.occurrences
        kept = [o for o in previous if o.class_id not in replaced]
        self.store.occurrences = kept + list(occurrences)
        try:
            self.save()
        except PersistenceError:
            self.store.occurrences = previous
            raise
