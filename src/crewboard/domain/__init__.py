"""Domain models, week window and commit channel for the crew calendar."""

from crewboard.domain.models import (
    DEFAULT_CREW_COLOR,
    Assignment,
    Crew,
    JobStatus,
)
from crewboard.domain.store import (
    CommitOutcome,
    InMemoryAssignmentStore,
    UnknownJobError,
)
from crewboard.domain.week import (
    WeekWindow,
    day_offset,
    days_between,
    intervals_overlap,
    span_days,
    to_local_naive,
    week_start,
    work_window,
)

__all__ = [
    # Models
    "Assignment",
    "Crew",
    "JobStatus",
    "DEFAULT_CREW_COLOR",
    # Week window
    "WeekWindow",
    "week_start",
    "days_between",
    "day_offset",
    "span_days",
    "intervals_overlap",
    "to_local_naive",
    "work_window",
    # Commit channel
    "CommitOutcome",
    "InMemoryAssignmentStore",
    "UnknownJobError",
]
