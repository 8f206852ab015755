"""Timetabler - weekly class scheduling with calendar projection."""

from .calendarization import AbstractAssignment, project
from .engine import Orchestrator, RequirementLine, attempt
from .service import GenerationOutcome, GenerationReport, SchedulingService, handle_generate
from .cli import app as cli_app

__all__ = [
    # Engine
    "attempt",
    "RequirementLine",
    "Orchestrator",
    # Calendarization
    "AbstractAssignment",
    "project",
    # Service
    "SchedulingService",
    "GenerationOutcome",
    "GenerationReport",
    "handle_generate",
    # CLI
    "cli_app",
]
