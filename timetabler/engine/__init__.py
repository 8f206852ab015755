"""Scheduling engine: matrices, requirement lines, slot assignment and the retry loop."""

from .algorithm import attempt, score_candidate, span_is_free
from .entities import (
    ClassResource,
    EntityPool,
    ResourceId,
    SchedulingEntity,
    TeacherResource,
    build_entity_pool,
    reset_pool,
)
from .grid import TimetableGrid
from .matrix import BUSY, FREE, AvailabilityMatrix
from .orchestrator import (
    DEFAULT_MAX_ATTEMPTS,
    OrchestrationResult,
    Orchestrator,
    OrchestratorState,
)
from .requirements import RequirementDocumentBuilder, RequirementLine, build_document

__all__ = [
    # Matrix
    "AvailabilityMatrix",
    "FREE",
    "BUSY",
    # Grid
    "TimetableGrid",
    # Entities
    "TeacherResource",
    "ClassResource",
    "ResourceId",
    "SchedulingEntity",
    "EntityPool",
    "build_entity_pool",
    "reset_pool",
    # Requirements
    "RequirementLine",
    "RequirementDocumentBuilder",
    "build_document",
    # Algorithm
    "attempt",
    "span_is_free",
    "score_candidate",
    # Orchestrator
    "Orchestrator",
    "OrchestratorState",
    "OrchestrationResult",
    "DEFAULT_MAX_ATTEMPTS",
]
