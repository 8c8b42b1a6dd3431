"""Scheduling conflict detection for crew assignments.

Two assignments conflict when they share a crew and their time ranges
collide. Every unordered pair is reported at most once, whatever the order
of the input feed.

Conflict types:
- full-overlap: one time range contains the other (error)
- partial-overlap: the time ranges intersect without containment (error)
- same-day-double: no time intersection, but both jobs book the crew on
  the same calendar day (error)
- back-to-back: one job ends within the configured buffer of the other's
  start (warning)
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional, Sequence

from crewboard.domain.models import Assignment
from crewboard.domain.week import SECONDS_PER_DAY, to_local_naive

logger = logging.getLogger(__name__)


class ConflictType(Enum):
    """Types of scheduling conflicts."""

    FULL_OVERLAP = "full-overlap"
    PARTIAL_OVERLAP = "partial-overlap"
    SAME_DAY_DOUBLE = "same-day-double"
    BACK_TO_BACK = "back-to-back"


class ConflictSeverity(Enum):
    """Conflict severity levels."""

    ERROR = "error"
    WARNING = "warning"


SEVERITY_BY_TYPE = {
    ConflictType.FULL_OVERLAP: ConflictSeverity.ERROR,
    ConflictType.PARTIAL_OVERLAP: ConflictSeverity.ERROR,
    ConflictType.SAME_DAY_DOUBLE: ConflictSeverity.ERROR,
    ConflictType.BACK_TO_BACK: ConflictSeverity.WARNING,
}


@dataclass(frozen=True)
class ConflictConfig:
    """Configuration for conflict classification.

    Attributes:
        back_to_back_buffer: Largest gap between one job's end and the next
            job's start that is still flagged as back-to-back. Zero flags only
            jobs that touch exactly.
        flag_same_day: Report non-overlapping jobs that share a calendar day
            as same-day double bookings.
    """

    back_to_back_buffer: timedelta = timedelta(0)
    flag_same_day: bool = True

    def __post_init__(self):
        if self.back_to_back_buffer < timedelta(0):
            raise ValueError("back_to_back_buffer cannot be negative")


@dataclass(frozen=True)
class Conflict:
    """A detected conflict between two assignments on the same crew.

    first is always the assignment that starts earlier.
    """

    conflict_type: ConflictType
    severity: ConflictSeverity
    first: Assignment
    second: Assignment
    crew_id: str
    overlap_days: int
    message: str
    overlap_start: Optional[datetime] = None
    overlap_end: Optional[datetime] = None

    @property
    def assignment_ids(self) -> frozenset[str]:
        return frozenset((self.first.id, self.second.id))

    def involves(self, assignment_id: str) -> bool:
        return assignment_id in self.assignment_ids

    def __str__(self) -> str:
        return f"[{self.severity.value}:{self.conflict_type.value}] {self.message}"


@dataclass
class JobConflictInfo:
    """Conflicts touching a single assignment, for badges on a job block."""

    assignment_id: str
    conflicts: list[Conflict] = field(default_factory=list)

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicts)

    @property
    def conflict_count(self) -> int:
        return len(self.conflicts)

    @property
    def highest_severity(self) -> Optional[ConflictSeverity]:
        if not self.conflicts:
            return None
        if any(c.severity is ConflictSeverity.ERROR for c in self.conflicts):
            return ConflictSeverity.ERROR
        return ConflictSeverity.WARNING


@dataclass
class ConflictResult:
    """Result of running conflict detection over an assignment feed."""

    conflicts: list[Conflict] = field(default_factory=list)

    def add_conflict(self, conflict: Conflict) -> None:
        self.conflicts.append(conflict)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def total_conflicts(self) -> int:
        return len(self.conflicts)

    @property
    def error_count(self) -> int:
        return sum(1 for c in self.conflicts if c.severity is ConflictSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for c in self.conflicts if c.severity is ConflictSeverity.WARNING)

    def by_crew(self) -> dict[str, list[Conflict]]:
        """Conflicts grouped by crew id, in detection order."""
        grouped: dict[str, list[Conflict]] = {}
        for conflict in self.conflicts:
            grouped.setdefault(conflict.crew_id, []).append(conflict)
        return grouped

    def for_assignment(self, assignment_id: str) -> JobConflictInfo:
        return JobConflictInfo(
            assignment_id=assignment_id,
            conflicts=[c for c in self.conflicts if c.involves(assignment_id)],
        )

    def has_conflict(self, assignment_id: str) -> bool:
        return any(c.involves(assignment_id) for c in self.conflicts)

    def highest_severity(self, assignment_id: str) -> Optional[ConflictSeverity]:
        return self.for_assignment(assignment_id).highest_severity

    def summary(self) -> dict:
        return {
            "totalConflicts": self.total_conflicts,
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
        }


class ConflictDetector:
    """Finds conflicts between assignments sharing a crew.

    Each crew's scheduled assignments are sorted by start and every
    unordered pair is compared once. The pairwise check is quadratic in the
    number of jobs a crew has in view, which stays in the tens for a week.

    Example:
        >>> detector = ConflictDetector()
        >>> result = detector.detect(feed)
        >>> for crew_id, conflicts in result.by_crew().items():
        ...     print(crew_id, [str(c) for c in conflicts])
    """

    def __init__(self, config: Optional[ConflictConfig] = None):
        self.config = config or ConflictConfig()

    def detect(self, assignments: Iterable[Assignment]) -> ConflictResult:
        """Detect conflicts across a feed that may mix several crews.

        Unassigned, undated and malformed assignments are skipped.
        """
        by_crew: dict[str, list[Assignment]] = {}
        for assignment in assignments:
            if assignment.crew_id is None or not assignment.is_scheduled:
                continue
            by_crew.setdefault(assignment.crew_id, []).append(assignment)

        result = ConflictResult()
        for crew_id in sorted(by_crew):
            for conflict in self.detect_for_crew(crew_id, by_crew[crew_id]):
                result.add_conflict(conflict)

        if result.has_conflicts:
            logger.debug(
                "Detected %d conflicts (%d errors, %d warnings)",
                result.total_conflicts,
                result.error_count,
                result.warning_count,
            )
        return result

    def detect_for_crew(
        self,
        crew_id: str,
        assignments: Sequence[Assignment],
    ) -> list[Conflict]:
        """Detect conflicts among the assignments of a single crew."""
        crew_jobs = sorted(
            (a for a in assignments if a.is_scheduled),
            key=lambda a: (to_local_naive(a.start), to_local_naive(a.end), a.id),
        )

        conflicts = []
        seen: set[frozenset[str]] = set()
        for i, first in enumerate(crew_jobs):
            for second in crew_jobs[i + 1 :]:
                pair = frozenset((first.id, second.id))
                if first.id == second.id or pair in seen:
                    continue
                conflict = self.check_pair(crew_id, first, second)
                if conflict is not None:
                    seen.add(pair)
                    conflicts.append(conflict)
        return conflicts

    def check_pair(
        self,
        crew_id: str,
        first: Assignment,
        second: Assignment,
    ) -> Optional[Conflict]:
        """Classify a pair of same-crew assignments.

        Args:
            crew_id: Crew both assignments belong to.
            first: Assignment starting no later than second.
            second: The other assignment.

        Returns:
            The conflict, or None when the pair does not collide.
        """
        start1, end1 = to_local_naive(first.start), to_local_naive(first.end)
        start2, end2 = to_local_naive(second.start), to_local_naive(second.end)
        if (start2, end2) < (start1, end1):
            first, second = second, first
            start1, end1, start2, end2 = start2, end2, start1, end1

        overlap_start = max(start1, start2)
        overlap_end = min(end1, end2)

        if overlap_start < overlap_end:
            if (start1 <= start2 and end1 >= end2) or (start2 <= start1 and end2 >= end1):
                conflict_type = ConflictType.FULL_OVERLAP
            else:
                conflict_type = ConflictType.PARTIAL_OVERLAP
            overlap_days = math.ceil(
                (overlap_end - overlap_start).total_seconds() / SECONDS_PER_DAY
            )
            return self._build(
                conflict_type,
                crew_id,
                first,
                second,
                overlap_days,
                overlap_start,
                overlap_end,
            )

        gap = start2 - end1
        if gap <= self.config.back_to_back_buffer:
            return self._build(ConflictType.BACK_TO_BACK, crew_id, first, second, 0)

        if self.config.flag_same_day and _share_calendar_day(start1, end1, start2, end2):
            return self._build(ConflictType.SAME_DAY_DOUBLE, crew_id, first, second, 0)

        return None

    def _build(
        self,
        conflict_type: ConflictType,
        crew_id: str,
        first: Assignment,
        second: Assignment,
        overlap_days: int,
        overlap_start: Optional[datetime] = None,
        overlap_end: Optional[datetime] = None,
    ) -> Conflict:
        return Conflict(
            conflict_type=conflict_type,
            severity=SEVERITY_BY_TYPE[conflict_type],
            first=first,
            second=second,
            crew_id=crew_id,
            overlap_days=overlap_days,
            message=conflict_message(conflict_type, first, second, overlap_days),
            overlap_start=overlap_start,
            overlap_end=overlap_end,
        )


def _covered_days(start: datetime, end: datetime) -> set[date]:
    # end is exclusive: a job ending at midnight does not occupy that day
    last = (end - timedelta(microseconds=1)).date()
    days = set()
    current = start.date()
    while current <= last:
        days.add(current)
        current += timedelta(days=1)
    return days


def _share_calendar_day(
    start1: datetime,
    end1: datetime,
    start2: datetime,
    end2: datetime,
) -> bool:
    return bool(_covered_days(start1, end1) & _covered_days(start2, end2))


def conflict_message(
    conflict_type: ConflictType,
    first: Assignment,
    second: Assignment,
    overlap_days: int,
) -> str:
    """Human-readable description of a conflict."""
    a, b = first.label, second.label
    if conflict_type is ConflictType.FULL_OVERLAP:
        return f"Job {a} completely overlaps with Job {b}"
    if conflict_type is ConflictType.PARTIAL_OVERLAP:
        plural = "s" if overlap_days != 1 else ""
        return f"Job {a} overlaps with Job {b} by {overlap_days} day{plural}"
    if conflict_type is ConflictType.SAME_DAY_DOUBLE:
        return f"Jobs {a} and {b} are both scheduled on the same day"
    return f"Jobs {a} and {b} are scheduled back-to-back (no gap)"
