"""In-memory commit channel for drag/drop reassignment.

The calendar engine never writes assignments itself; it calls a commit
operation supplied by the data layer. This store is the reference commit
channel used by the CLI and tests: it relocates a job onto a crew and the
default 08:00-17:00 work window of the target day.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional

from crewboard.domain.models import Assignment, Crew, DEFAULT_CREW_COLOR
from crewboard.domain.week import work_window

logger = logging.getLogger(__name__)


class UnknownJobError(KeyError):
    """Raised when a commit names a job the store does not hold."""


@dataclass(frozen=True)
class CommitOutcome:
    """Result of a successful commit."""

    job_id: str
    previous: Assignment
    updated: Assignment

    @property
    def crew_changed(self) -> bool:
        return self.previous.crew_id != self.updated.crew_id


class InMemoryAssignmentStore:
    """Holds the assignment feed and applies drop commits to it.

    Example:
        >>> store = InMemoryAssignmentStore(assignments, crews)
        >>> coordinator = DragDropCoordinator(commit=store.commit)
    """

    def __init__(
        self,
        assignments: Iterable[Assignment],
        crews: Optional[Iterable[Crew]] = None,
    ):
        self._assignments: list[Assignment] = list(assignments)
        self._crews: dict[str, Crew] = {c.id: c for c in (crews or [])}
        self.commit_count = 0

    @property
    def assignments(self) -> list[Assignment]:
        """Snapshot of the current feed."""
        return list(self._assignments)

    def get_by_job(self, job_id: str) -> Assignment:
        return self._assignments[self._index_of(job_id)]

    def commit(self, job_id: str, crew_id: str, target_date: date) -> CommitOutcome:
        """Move a job onto a crew for the work window of target_date.

        Args:
            job_id: Job being relocated.
            crew_id: Destination crew.
            target_date: Calendar day the job was dropped on.

        Returns:
            CommitOutcome with the assignment before and after the move.

        Raises:
            UnknownJobError: If no assignment exists for job_id.
        """
        index = self._index_of(job_id)
        previous = self._assignments[index]
        start, end = work_window(target_date)

        crew = self._crews.get(crew_id)
        color = crew.color if crew else (previous.color or DEFAULT_CREW_COLOR)

        updated = replace(previous, crew_id=crew_id, start=start, end=end, color=color)
        self._assignments[index] = updated
        self.commit_count += 1

        logger.info(
            "Moved job %s from crew %s to crew %s on %s",
            job_id,
            previous.crew_id,
            crew_id,
            target_date.isoformat(),
        )
        return CommitOutcome(job_id=job_id, previous=previous, updated=updated)

    def _index_of(self, job_id: str) -> int:
        for i, assignment in enumerate(self._assignments):
            if assignment.job_id == job_id:
                return i
        raise UnknownJobError(job_id)
