"""
Slot assignment for a single requirement line.

Each occurrence is placed in two passes:

1. Working matrix: a cell is open when every required resource is free
   at that period and the class prefers it. Only the starting period is
   looked at here.
2. Scan: open cells are visited day by day, period by period. A cell is
   a candidate when the whole span of `length` periods fits in the day
   and every required resource is free over it.

With FIRST_FIT the first candidate is taken. With BEST_SCORE every
candidate is scored and the best one is taken (ties go to the earliest).
"""

from __future__ import annotations

import logging
from typing import Optional

from ..data.models import PlacementStrategy
from .entities import EntityPool
from .matrix import BUSY, FREE, AvailabilityMatrix
from .requirements import RequirementLine

logger = logging.getLogger(__name__)


# =============================================================================
# Scoring Weights
# =============================================================================

BASE_SCORE = 100.0
NEW_DAY_BONUS = 50.0
ADJACENT_BONUS = 10.0
GAP_PENALTY = 25.0


# =============================================================================
# Entry Point
# =============================================================================

def attempt(
    line: RequirementLine,
    entities: EntityPool,
    num_days: int,
    num_periods: int,
    strategy: PlacementStrategy = PlacementStrategy.FIRST_FIT,
) -> bool:
    """
    Place every occurrence of a requirement line.

    Resources are marked busy as each occurrence is placed. Occurrences
    placed before a failure are left in place.

    Args:
        line: The requirement line to schedule
        entities: All scheduling entities of the run
        num_days: Days in the grid
        num_periods: Periods per day
        strategy: How to choose among valid slots

    Returns:
        True if all `frequency` occurrences were placed
    """
    line.working = AvailabilityMatrix(num_days, num_periods)

    for i in range(line.frequency):
        populate_working_matrix(line, entities, num_days, num_periods)
        logger.debug("Working matrix for %s, occurrence %d:\n%s", line.label, i + 1, line.working)
        if place_occurrence(line, entities, num_days, num_periods, strategy):
            continue
        logger.info(
            "Failed to schedule occurrence %d/%d for requirement %s.",
            i + 1, line.frequency, line.label,
        )
        return False

    return True


# =============================================================================
# Passes
# =============================================================================

def populate_working_matrix(
    line: RequirementLine,
    entities: EntityPool,
    num_days: int,
    num_periods: int,
) -> None:
    """Mark each cell open (0) when all resources are free there and it is preferred."""
    for day in range(num_days):
        for period in range(num_periods):
            blocked = any(
                _resource_busy(line, entities, resource_id, day, period)
                for resource_id in line.resource_ids
            )
            if blocked:
                line.working.set(day, period, BUSY)
            else:
                line.working.set(day, period, line.preference.get(day, period))


def place_occurrence(
    line: RequirementLine,
    entities: EntityPool,
    num_days: int,
    num_periods: int,
    strategy: PlacementStrategy = PlacementStrategy.FIRST_FIT,
) -> bool:
    """Pick one slot for the next occurrence and commit it."""
    best: Optional[tuple[int, int]] = None
    best_score = float("-inf")

    for day in range(num_days):
        for period in range(num_periods):
            if line.working.get(day, period) != FREE:
                continue
            if not span_is_free(line, entities, day, period, num_periods):
                continue
            if strategy == PlacementStrategy.FIRST_FIT:
                best = (day, period)
                break
            score = score_candidate(line, entities, day, period)
            if score > best_score:
                best_score = score
                best = (day, period)
        if best is not None and strategy == PlacementStrategy.FIRST_FIT:
            break

    if best is None:
        return False

    commit(line, entities, *best)
    return True


def span_is_free(
    line: RequirementLine,
    entities: EntityPool,
    day: int,
    start_period: int,
    num_periods: int,
) -> bool:
    """True when `length` periods fit from start_period and no resource is busy over them."""
    if num_periods - start_period < line.length:
        return False
    for k in range(line.length):
        for resource_id in line.resource_ids:
            entity = entities.get(resource_id)
            if entity is None:
                logger.error("Required entity %s not found during span validation.", resource_id)
                return False
            if entity.availability.get(day, start_period + k) == BUSY:
                return False
    return True


def commit(line: RequirementLine, entities: EntityPool, day: int, start_period: int) -> None:
    """Mark the span busy on every resource and record the slot."""
    for k in range(line.length):
        for resource_id in line.resource_ids:
            entity = entities.get(resource_id)
            if entity is not None:
                entity.availability.set(day, start_period + k, BUSY)
    line.assigned_slots.append((day, start_period))


def score_candidate(line: RequirementLine, entities: EntityPool, day: int, start_period: int) -> float:
    """
    Score a valid slot.

    Spreading a multi-meeting class over different days is rewarded,
    as is sitting right next to a resource's existing commitments.
    Leaving a single free period between two commitments is penalised.
    Cells outside the grid count as busy.
    """
    score = BASE_SCORE

    if line.frequency > 1 and all(assigned_day != day for assigned_day, _ in line.assigned_slots):
        score += NEW_DAY_BONUS

    end_period = start_period + line.length - 1
    for resource_id in line.resource_ids:
        entity = entities.get(resource_id)
        if entity is None:
            continue
        matrix = entity.availability

        if matrix.get(day, start_period - 1) == BUSY:
            score += ADJACENT_BONUS
        if matrix.get(day, end_period + 1) == BUSY:
            score += ADJACENT_BONUS

        if matrix.get(day, start_period - 1) == FREE and matrix.get(day, start_period - 2) == BUSY:
            score -= GAP_PENALTY
        if matrix.get(day, end_period + 1) == FREE and matrix.get(day, end_period + 2) == BUSY:
            score -= GAP_PENALTY

    return score


def _resource_busy(line: RequirementLine, entities: EntityPool, resource_id, day: int, period: int) -> bool:
    entity = entities.get(resource_id)
    if entity is None:
        logger.error(
            "Required entity %s not found while building the working matrix for %s. "
            "Treating slot [%d,%d] as unavailable.",
            resource_id, line.label, day, period,
        )
        return True
    return entity.availability.get(day, period) == BUSY
