"""Calendar layout: job block positioning and the schedule board."""

from crewboard.scheduling.board import ScheduleBoard
from crewboard.scheduling.positioning import (
    LayoutConfig,
    Position,
    PositioningEngine,
)

__all__ = [
    "ScheduleBoard",
    "LayoutConfig",
    "Position",
    "PositioningEngine",
]
