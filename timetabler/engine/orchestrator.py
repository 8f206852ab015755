"""
Document-level retry loop.

The orchestrator walks the requirement document from the front. When a
line cannot be placed it is moved to the front of the document, every
resource and every line is reset, and the walk starts over. The run
fails once the number of restarts reaches the attempt ceiling.

State machine:

    SCHEDULING --success--> ADVANCED --end of document--> COMPLETED
    SCHEDULING --failure--> REQUEUED --ceiling reached--> EXHAUSTED

ADVANCED and REQUEUED go back to SCHEDULING on the next step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..data.models import PlacementStrategy
from .algorithm import attempt
from .entities import EntityPool, reset_pool
from .requirements import RequirementLine

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 100

Placer = Callable[[RequirementLine, EntityPool, int, int, PlacementStrategy], bool]


class OrchestratorState(str, Enum):
    """Orchestrator state after a step."""
    SCHEDULING = "scheduling"
    ADVANCED = "advanced"
    REQUEUED = "requeued"
    EXHAUSTED = "exhausted"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (OrchestratorState.EXHAUSTED, OrchestratorState.COMPLETED)


@dataclass
class OrchestrationResult:
    """Outcome of a full run."""
    success: bool
    attempts: int
    document: list[RequirementLine]

    @property
    def assigned_count(self) -> int:
        return sum(len(line.assigned_slots) for line in self.document)


class Orchestrator:
    """
    Drives a requirement document through the slot-assignment algorithm.

    Usage:
        orchestrator = Orchestrator(document, entities, num_days, num_periods)
        result = orchestrator.run()
    """

    def __init__(
        self,
        document: list[RequirementLine],
        entities: EntityPool,
        num_days: int,
        num_periods: int,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        strategy: PlacementStrategy = PlacementStrategy.FIRST_FIT,
        placer: Optional[Placer] = None,
    ):
        self.document = list(document)
        self.entities = entities
        self.num_days = num_days
        self.num_periods = num_periods
        self.max_attempts = max_attempts
        self.strategy = strategy
        self.placer: Placer = placer or attempt

        self.position = 0
        self.attempts = 0
        self.state = OrchestratorState.SCHEDULING

        self._restart()

    @property
    def current(self) -> Optional[RequirementLine]:
        """The line the next step will schedule."""
        if self.position < len(self.document):
            return self.document[self.position]
        return None

    def step(self) -> OrchestratorState:
        """Advance by one transition and return the new state."""
        if self.state.is_terminal:
            return self.state

        line = self.current
        if line is None:
            self.state = OrchestratorState.COMPLETED
            return self.state

        if self.placer(line, self.entities, self.num_days, self.num_periods, self.strategy):
            logger.info(
                "Scheduled requirement %s: %d occurrences.",
                line.label, len(line.assigned_slots),
            )
            self.position += 1
            if self.position >= len(self.document):
                self.state = OrchestratorState.COMPLETED
            else:
                self.state = OrchestratorState.ADVANCED
            return self.state

        self.attempts += 1
        logger.info(
            "Scheduling failed for requirement %s (attempt %d/%d). Moving it to the front.",
            line.label, self.attempts, self.max_attempts,
        )
        self._requeue(line)

        if self.attempts >= self.max_attempts:
            logger.warning(
                "Scheduling failed after %d attempts. Could not schedule all requirements.",
                self.max_attempts,
            )
            self.state = OrchestratorState.EXHAUSTED
        else:
            self.state = OrchestratorState.REQUEUED
        return self.state

    def run(self) -> OrchestrationResult:
        """Step until the document is consumed or the attempts run out."""
        while not self.step().is_terminal:
            pass
        return OrchestrationResult(
            success=self.state == OrchestratorState.COMPLETED,
            attempts=self.attempts,
            document=list(self.document),
        )

    def _requeue(self, line: RequirementLine) -> None:
        self.document.remove(line)
        self.document.insert(0, line)
        self._restart()

    def _restart(self) -> None:
        """Start a pass over the document from a clean slate."""
        reset_pool(self.entities, self.num_days, self.num_periods)
        for line in self.document:
            line.clear_assignments()
        self.position = 0
