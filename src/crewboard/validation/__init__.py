"""Conflict detection for crew schedules."""

from crewboard.validation.conflicts import (
    Conflict,
    ConflictConfig,
    ConflictDetector,
    ConflictResult,
    ConflictSeverity,
    ConflictType,
    JobConflictInfo,
)

__all__ = [
    "Conflict",
    "ConflictConfig",
    "ConflictDetector",
    "ConflictResult",
    "ConflictSeverity",
    "ConflictType",
    "JobConflictInfo",
]
