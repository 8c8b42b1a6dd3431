"""Domain models for the crew scheduling calendar.

This module contains the records the calendar engine reads: crews and the
job assignments (job blocks) scheduled onto them. Both are supplied by an
external data layer; the engine only derives layout and conflict data from
them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

DEFAULT_CREW_COLOR = "#6B7280"


class JobStatus(Enum):
    """Lifecycle status of a job as shown on the calendar."""

    QUOTE = "quote"
    APPROVED = "approved"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    INVOICED = "invoiced"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Crew:
    """A team resource that jobs are assigned to.

    Attributes:
        id: Unique identifier for the crew.
        name: Display name (e.g. "Alpha Crew").
        color: Hex color used for the crew's lane and blocks.
        capacity: Number of crew members available.
        is_active: Inactive crews are kept for history but not laid out.
    """

    id: str
    name: str
    color: str = DEFAULT_CREW_COLOR
    capacity: int = 1
    is_active: bool = True

    @property
    def weekly_capacity_hours(self) -> float:
        """Labor hours the crew can absorb in a 40-hour week."""
        return self.capacity * 40.0


@dataclass(frozen=True)
class Assignment:
    """A crew's scheduled commitment to a job over a time range.

    Start and end are naive local datetimes and are either both set or both
    None. Records that break that rule are still accepted so that a bad row
    from upstream can be shown instead of failing the whole board; use
    is_scheduled / is_malformed to tell the cases apart.

    Attributes:
        id: Assignment identifier.
        job_id: Identifier of the job being scheduled.
        crew_id: Crew the job is assigned to (None when unassigned).
        start: Scheduled start instant.
        end: Scheduled end instant (exclusive).
        priority: Job priority from 0 (lowest) to 10 (highest).
        status: Job lifecycle status.
        completion_percentage: Progress from 0 to 100.
        color: Display color of the block.
        job_number: Human-facing job number (e.g. "J-2025-0042").
        title: Short job title.
        customer_name: Customer shown on the block.
        estimated_hours: Estimated labor hours, used for crew utilization.
    """

    id: str
    job_id: str
    crew_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    priority: int = 5
    status: JobStatus = JobStatus.SCHEDULED
    completion_percentage: int = 0
    color: str = DEFAULT_CREW_COLOR
    job_number: str = ""
    title: str = ""
    customer_name: str = ""
    estimated_hours: Optional[float] = None

    @property
    def label(self) -> str:
        """Name used in messages: the job number, falling back to the job id."""
        return self.job_number or self.job_id

    @property
    def is_assigned(self) -> bool:
        return self.crew_id is not None

    @property
    def has_dates(self) -> bool:
        return self.start is not None or self.end is not None

    @property
    def is_scheduled(self) -> bool:
        """True when the record has a usable, well-ordered time range."""
        return (
            self.start is not None
            and self.end is not None
            and self.start < self.end
        )

    @property
    def is_malformed(self) -> bool:
        """True when dates are present but unusable (one missing or end <= start)."""
        return self.has_dates and not self.is_scheduled

    @property
    def duration_hours(self) -> float:
        """Scheduled duration in hours (0 when not scheduled)."""
        if not self.is_scheduled:
            return 0.0
        return (self.end - self.start).total_seconds() / 3600.0

    @property
    def workload_hours(self) -> float:
        """Estimated hours if known, otherwise the scheduled duration."""
        if self.estimated_hours is not None:
            return self.estimated_hours
        return self.duration_hours
