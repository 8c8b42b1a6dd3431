"""Schedule board: the composition root of the crew calendar.

The board owns the visible week, the layout and conflict configuration and
the drag/drop coordinator, and exposes what a calendar view renders:
positions of job blocks, conflict results, drag state and the week header.
"""

import logging
from datetime import date, datetime
from typing import Iterable, Optional

from crewboard.domain.models import Assignment, Crew
from crewboard.domain.week import WeekWindow
from crewboard.interaction.drag_drop import CommitFn, DragDropCoordinator, DragState
from crewboard.interaction.keyboard import KeyboardShortcuts
from crewboard.scheduling.positioning import LayoutConfig, Position, PositioningEngine
from crewboard.validation.conflicts import ConflictConfig, ConflictDetector, ConflictResult

logger = logging.getLogger(__name__)

UNASSIGNED_LANE = None


class ScheduleBoard:
    """Weekly crew-by-day board over an externally supplied assignment feed.

    The feed is expected to be filtered already (status, priority, search);
    the board never filters by business criteria. Positions are cached per
    (crew, week) and the cache is dropped whenever the feed or the week
    changes, so cached and fresh results are always identical.

    Example:
        >>> board = ScheduleBoard(crews, feed, commit=store.commit)
        >>> board.position("asg-1")
        Position(left=140, width=280, top=0, z_index=2, scheduled=True)
        >>> board.conflict_result.error_count
        1
    """

    def __init__(
        self,
        crews: Iterable[Crew],
        assignments: Iterable[Assignment],
        week: Optional[WeekWindow] = None,
        layout: Optional[LayoutConfig] = None,
        conflict_config: Optional[ConflictConfig] = None,
        commit: Optional[CommitFn] = None,
    ):
        self.crews: list[Crew] = list(crews)
        self.week = week or WeekWindow.current()
        self.layout = layout or LayoutConfig()
        self.conflict_config = conflict_config or ConflictConfig()

        self.engine = PositioningEngine(self.layout)
        self.detector = ConflictDetector(self.conflict_config)
        self.drag = DragDropCoordinator(commit=commit)

        self._assignments: list[Assignment] = []
        self._lane_cache: dict[tuple[Optional[str], datetime], dict[str, Position]] = {}
        self._conflicts: Optional[ConflictResult] = None
        self.set_assignments(assignments)

    # Feed

    @property
    def assignments(self) -> list[Assignment]:
        return list(self._assignments)

    def set_assignments(self, assignments: Iterable[Assignment]) -> None:
        """Replace the assignment feed (e.g. after a commit or a filter change)."""
        self._assignments = list(assignments)
        self._by_id = {a.id: a for a in self._assignments}
        self._invalidate()

    def get_assignment(self, assignment_id: str) -> Assignment:
        return self._by_id[assignment_id]

    def lane(self, crew_id: Optional[str]) -> list[Assignment]:
        """Assignments of one crew, in feed order (None for the unassigned lane)."""
        return [a for a in self._assignments if a.crew_id == crew_id]

    @property
    def unassigned(self) -> list[Assignment]:
        """Jobs without a crew or without dates, shown outside the grid."""
        return [a for a in self._assignments if a.crew_id is None or not a.is_scheduled]

    @property
    def active_crews(self) -> list[Crew]:
        return [c for c in self.crews if c.is_active]

    def get_crew(self, crew_id: str) -> Optional[Crew]:
        for crew in self.crews:
            if crew.id == crew_id:
                return crew
        return None

    def crew_utilization(self, crew_id: str) -> int:
        """Percent of the crew's weekly labor capacity taken by its jobs (0-100)."""
        crew = self.get_crew(crew_id)
        if crew is None or crew.capacity <= 0:
            return 0
        total_hours = sum(a.workload_hours for a in self.lane(crew_id))
        return min(100, round(total_hours / crew.weekly_capacity_hours * 100))

    # Positions

    def lane_positions(self, crew_id: Optional[str]) -> dict[str, Position]:
        key = (crew_id, self.week.start)
        positions = self._lane_cache.get(key)
        if positions is None:
            lane = self.lane(crew_id)
            if crew_id is UNASSIGNED_LANE:
                positions = {a.id: self.engine.unscheduled_position() for a in lane}
            else:
                positions = self.engine.position_lane(lane, self.week)
            self._lane_cache[key] = positions
        return positions

    def position(self, assignment_id: str) -> Position:
        """Position of one job block.

        Raises:
            KeyError: If the assignment is not in the feed.
        """
        assignment = self._by_id[assignment_id]
        return self.lane_positions(assignment.crew_id)[assignment_id]

    def positions(self) -> dict[str, Position]:
        """Positions of every block in the feed."""
        result: dict[str, Position] = {}
        for crew_id in dict.fromkeys(a.crew_id for a in self._assignments):
            result.update(self.lane_positions(crew_id))
        return result

    def lane_height(self, crew_id: str) -> float:
        return self.engine.lane_height(self.lane_positions(crew_id))

    # Conflicts

    @property
    def conflict_result(self) -> ConflictResult:
        if self._conflicts is None:
            self._conflicts = self.detector.detect(self._assignments)
        return self._conflicts

    # Drag state

    @property
    def drag_state(self) -> DragState:
        return self.drag.state

    # Week navigation

    @property
    def week_view(self) -> dict:
        """Header data for the visible week."""
        return {
            "start": self.week.start,
            "end": self.week.end,
            "dates": list(self.week.dates),
            "rangeLabel": self.week.range_label,
            "isCurrentWeek": self.week.contains_today(),
        }

    def go_to_week(self, anchor: date) -> WeekWindow:
        return self._set_week(WeekWindow.for_date(anchor))

    def next_week(self) -> WeekWindow:
        return self._set_week(self.week.next())

    def previous_week(self) -> WeekWindow:
        return self._set_week(self.week.previous())

    def go_to_today(self) -> WeekWindow:
        return self._set_week(WeekWindow.current())

    def keyboard_shortcuts(self) -> KeyboardShortcuts:
        return KeyboardShortcuts(
            on_previous_week=self.previous_week,
            on_next_week=self.next_week,
            on_today=self.go_to_today,
            on_escape=self.drag.cancel,
        )

    def _set_week(self, week: WeekWindow) -> WeekWindow:
        if week != self.week:
            logger.debug("Board week changed to %s", week.range_label)
            self.week = week
            self._invalidate()
        return self.week

    def _invalidate(self) -> None:
        self._lane_cache.clear()
        self._conflicts = None
