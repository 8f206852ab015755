"""
Mapping between grid indices and timetable record ids.

The engine works on 0-based (day index, period index) pairs. Day
indices follow canonical weekday order and period indices follow
chronological order, whatever order the records were stored in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..data.models import Timetable


@dataclass(frozen=True)
class TimetableGrid:
    """Index <-> id lookups for one timetable."""
    day_ids: tuple[int, ...]
    period_ids: tuple[int, ...]

    @classmethod
    def from_timetable(cls, timetable: Timetable) -> "TimetableGrid":
        return cls(
            day_ids=tuple(d.id for d in timetable.sorted_days()),
            period_ids=tuple(p.id for p in timetable.sorted_periods()),
        )

    @property
    def num_days(self) -> int:
        return len(self.day_ids)

    @property
    def num_periods(self) -> int:
        return len(self.period_ids)

    def day_index(self, day_id: int) -> Optional[int]:
        """Index of a day id, or None when the timetable has no such day."""
        try:
            return self.day_ids.index(day_id)
        except ValueError:
            return None

    def period_index(self, period_id: int) -> Optional[int]:
        """Index of a period id, or None when the timetable has no such period."""
        try:
            return self.period_ids.index(period_id)
        except ValueError:
            return None

    def day_id(self, day_index: int) -> int:
        return self.day_ids[day_index]

    def period_id(self, period_index: int) -> int:
        return self.period_ids[period_index]
