"""Drag/drop coordination for reassigning jobs between crews and days.

The coordinator is a small state machine, independent of any UI toolkit:

    IDLE --start_drag--> DRAGGING --drop/cancel--> IDLE

While dragging, drag_enter / drag_leave move the highlighted drop target.
A drop hands (job_id, crew_id, date) to an externally supplied commit
operation and returns to IDLE straight away, without waiting for the
commit to finish. Reporting commit failures and refreshing the board is
the caller's job.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Optional, Union

from crewboard.domain.models import Assignment
from crewboard.domain.week import to_local_naive

logger = logging.getLogger(__name__)

JOB_BLOCK_PAYLOAD = "job-block"

CommitFn = Callable[[str, str, date], Any]


class DragPhase(Enum):
    """States of the drag/drop state machine."""

    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DropTarget:
    """A crew/day cell of the calendar grid."""

    crew_id: str
    date: date


@dataclass(frozen=True)
class DragPayload:
    """Data transferred with a job block drag.

    Mirrors what the UI puts on its drag data transfer, so a drop can tell
    job block drags apart from unrelated drags elsewhere on the page.
    """

    job_id: str
    assignment_id: Optional[str] = None
    source_crew_id: Optional[str] = None
    estimated_hours: Optional[float] = None
    type: str = JOB_BLOCK_PAYLOAD

    @classmethod
    def for_assignment(
        cls,
        assignment: Assignment,
        source_crew_id: Optional[str],
    ) -> "DragPayload":
        return cls(
            job_id=assignment.job_id,
            assignment_id=assignment.id,
            source_crew_id=source_crew_id,
            estimated_hours=assignment.estimated_hours,
        )

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "jobId": self.job_id,
            "assignmentId": self.assignment_id,
            "sourceCrewId": self.source_crew_id,
            "estimatedHours": self.estimated_hours,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def parse(cls, raw: Union["DragPayload", dict, str, bytes, None]) -> Optional["DragPayload"]:
        """Parse transferred drag data.

        Returns:
            The payload, or None if raw does not describe a job block drag.
            Never raises.
        """
        if isinstance(raw, DragPayload):
            return raw if raw.type == JOB_BLOCK_PAYLOAD else None
        if isinstance(raw, (str, bytes)):
            if not raw:
                return None
            try:
                raw = json.loads(raw)
            except ValueError:
                return None
        if not isinstance(raw, dict):
            return None
        if raw.get("type") != JOB_BLOCK_PAYLOAD:
            return None
        job_id = raw.get("jobId")
        if not isinstance(job_id, str) or not job_id:
            return None
        hours = raw.get("estimatedHours")
        return cls(
            job_id=job_id,
            assignment_id=raw.get("assignmentId"),
            source_crew_id=raw.get("sourceCrewId"),
            estimated_hours=hours if isinstance(hours, (int, float)) else None,
        )


@dataclass
class DragSession:
    """State of one in-progress drag gesture."""

    dragged_assignment: Assignment
    origin_crew_id: Optional[str]
    payload: DragPayload
    drop_target: Optional[DropTarget] = None


@dataclass(frozen=True)
class DragState:
    """Read-only view of the coordinator, for highlighting."""

    is_dragging: bool
    dragged_assignment: Optional[Assignment] = None
    origin_crew_id: Optional[str] = None
    drop_target: Optional[DropTarget] = None


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return to_local_naive(value).date()
    return value


class DragDropCoordinator:
    """Tracks a drag gesture and commits the drop through a commit channel.

    One coordinator is owned by the board and passed to the components that
    start drags and the cells that accept drops; it holds at most one
    session at a time.

    Example:
        >>> coordinator = DragDropCoordinator(commit=store.commit)
        >>> payload = coordinator.start_drag(job, "alpha")
        >>> coordinator.drag_enter("beta", thursday)
        >>> coordinator.drop("beta", thursday, payload.to_json())
    """

    def __init__(self, commit: Optional[CommitFn] = None):
        self._commit = commit
        self._session: Optional[DragSession] = None

    @property
    def phase(self) -> DragPhase:
        return DragPhase.DRAGGING if self._session is not None else DragPhase.IDLE

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def state(self) -> DragState:
        if self._session is None:
            return DragState(is_dragging=False)
        return DragState(
            is_dragging=True,
            dragged_assignment=self._session.dragged_assignment,
            origin_crew_id=self._session.origin_crew_id,
            drop_target=self._session.drop_target,
        )

    def set_commit(self, commit: Optional[CommitFn]) -> None:
        self._commit = commit

    def start_drag(
        self,
        assignment: Assignment,
        origin_crew_id: Optional[str] = None,
    ) -> DragPayload:
        """Begin dragging a job block.

        A drag started while another is active replaces it.

        Returns:
            The payload to attach to the UI's drag data transfer.
        """
        if self._session is not None:
            logger.debug(
                "Drag of %s superseded by drag of %s",
                self._session.dragged_assignment.id,
                assignment.id,
            )
        payload = DragPayload.for_assignment(assignment, origin_crew_id)
        self._session = DragSession(
            dragged_assignment=assignment,
            origin_crew_id=origin_crew_id,
            payload=payload,
        )
        return payload

    def drag_enter(self, crew_id: str, target_date: Union[date, datetime]) -> None:
        """Highlight the cell under the pointer. Ignored when idle."""
        if self._session is None:
            return
        self._session.drop_target = DropTarget(crew_id, _as_date(target_date))

    def drag_leave(self, crew_id: str, target_date: Union[date, datetime]) -> None:
        """Clear the highlight when the pointer leaves the highlighted cell.

        Leave events for any other cell are ignored. Moving between nested
        elements, or entering the next cell before leaving the previous one,
        therefore does not make the highlight flicker.
        """
        if self._session is None or self._session.drop_target is None:
            return
        if self._session.drop_target == DropTarget(crew_id, _as_date(target_date)):
            self._session.drop_target = None

    def is_drop_target(self, crew_id: str, target_date: Union[date, datetime]) -> bool:
        if self._session is None or self._session.drop_target is None:
            return False
        return self._session.drop_target == DropTarget(crew_id, _as_date(target_date))

    def cancel(self) -> None:
        """Abort the drag without committing (escape, or drop outside the grid)."""
        if self._session is not None:
            logger.debug("Drag of %s cancelled", self._session.dragged_assignment.id)
        self._session = None

    def drop(
        self,
        crew_id: str,
        target_date: Union[date, datetime],
        payload: Union[DragPayload, dict, str, bytes, None] = None,
    ) -> Any:
        """Drop onto a crew/day cell and commit the move.

        The transferred payload defaults to the one created by start_drag.
        Payloads that do not describe a job block drag are ignored, and so is
        a drop with no drag in progress. The coordinator returns to IDLE
        whatever happens, before the commit's outcome is known.

        Args:
            crew_id: Crew of the target cell.
            target_date: Day of the target cell.
            payload: Drag data transferred by the UI, if any.

        Returns:
            Whatever the commit operation returned (possibly an awaitable
            for the caller to await), or None if nothing was committed.

        Raises:
            Any exception raised by the commit operation itself.
        """
        session = self._session
        try:
            if session is None:
                logger.debug("Drop on %s/%s with no active drag ignored", crew_id, target_date)
                return None

            data = session.payload if payload is None else DragPayload.parse(payload)
            if data is None:
                logger.debug("Ignoring drop with a foreign payload on %s", crew_id)
                return None

            if self._commit is None:
                logger.warning("Drop of job %s has no commit channel configured", data.job_id)
                return None

            day = _as_date(target_date)
            self._session = None
            return self._commit(data.job_id, crew_id, day)
        finally:
            self._session = None
