"""Job block positioning for the weekly crew calendar.

Each crew owns one horizontal lane with seven day columns. A job block is
placed in its lane by:
- left: the day column its start falls on, clamped into the visible week
- width: the number of day columns its time range spans
- top: a stacking row, so that blocks overlapping in time never share a row
- z-index: derived from priority, so urgent work renders above the rest

Undated, unassigned and malformed assignments get a fixed sentinel
position outside the dated grid.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from crewboard.domain.models import Assignment
from crewboard.domain.week import (
    DAYS_PER_WEEK,
    WeekWindow,
    day_offset,
    intervals_overlap,
    span_days,
    to_local_naive,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    """Pixel geometry of the calendar grid.

    Attributes:
        column_width: Width of a single day column.
        block_height: Height of one job block.
        stack_gap: Vertical gap between stacked blocks.
        min_block_width: Smallest width a block is drawn at, for legibility.
    """

    column_width: float = 140
    block_height: float = 100
    stack_gap: float = 8
    min_block_width: float = 60

    @property
    def row_height(self) -> float:
        """Distance between the tops of two consecutive stacking rows."""
        return self.block_height + self.stack_gap


@dataclass(frozen=True)
class Position:
    """On-grid rectangle of a job block.

    Attributes:
        left: Offset from the left edge of the crew lane.
        width: Block width (spans several columns for multi-day jobs).
        top: Offset from the top of the lane (stacking).
        z_index: Layering order; higher draws on top.
        scheduled: False for the sentinel given to undated blocks.
    """

    left: float
    width: float
    top: float
    z_index: int
    scheduled: bool = True

    def as_dict(self) -> dict:
        return {
            "left": self.left,
            "width": self.width,
            "top": self.top,
            "zIndex": self.z_index,
        }


class PositioningEngine:
    """Computes job block positions for one week of the crew calendar.

    Positioning is a pure function of the assignment, the week window and
    the assignments sharing its crew, so results are deterministic and can
    be recomputed on every render.

    Example:
        >>> engine = PositioningEngine()
        >>> lane = [a for a in feed if a.crew_id == "alpha"]
        >>> engine.get_position(lane[0], week, lane)
        Position(left=140, width=280, top=0, z_index=2, scheduled=True)
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def unscheduled_position(self) -> Position:
        """Sentinel position for blocks without a usable time range."""
        return Position(
            left=0,
            width=self.config.min_block_width,
            top=0,
            z_index=1,
            scheduled=False,
        )

    def calculate_left(self, start: datetime, week: WeekWindow) -> float:
        """Left offset from the start day, clamped into the visible week.

        Jobs that started before the week stay visible in the first column
        as in-progress work; jobs starting after it pin to the last column.
        """
        offset = day_offset(to_local_naive(start), week.start)
        clamped = max(0, min(DAYS_PER_WEEK - 1, offset))
        return clamped * self.config.column_width

    def calculate_width(self, start: datetime, end: datetime) -> float:
        """Width from the number of day columns the job spans."""
        days = span_days(to_local_naive(start), to_local_naive(end))
        return max(days * self.config.column_width, self.config.min_block_width)

    def check_overlap(self, first: Assignment, second: Assignment) -> bool:
        """Check if two blocks overlap in time (end instants are exclusive)."""
        if not first.is_scheduled or not second.is_scheduled:
            return False
        return intervals_overlap(
            to_local_naive(first.start),
            to_local_naive(first.end),
            to_local_naive(second.start),
            to_local_naive(second.end),
        )

    def stack_rows(self, crew_assignments: Sequence[Assignment]) -> dict[str, int]:
        """Assign a stacking row to every scheduled block of one crew lane.

        Blocks are taken earliest start first, ties kept in input order. A
        block's row is the number of earlier blocks it overlaps. If one of
        those blocks already holds that row, the block goes one below the
        deepest of them instead, so two overlapping blocks never share a row.
        It does not try to minimise the number of rows.

        Args:
            crew_assignments: Assignments sharing one crew, in feed order.

        Returns:
            Dict mapping assignment id to row index. Undated and malformed
            assignments are left out.
        """
        ordered = sorted(
            (
                (to_local_naive(a.start), index, a)
                for index, a in enumerate(crew_assignments)
                if a.is_scheduled
            ),
            key=lambda item: (item[0], item[1]),
        )

        rows: dict[str, int] = {}
        placed: list[Assignment] = []
        for _, _, assignment in ordered:
            if assignment.id in rows:
                continue
            taken = [rows[e.id] for e in placed if self.check_overlap(assignment, e)]
            row = len(taken)
            if row in taken:
                row = max(taken) + 1
            rows[assignment.id] = row
            placed.append(assignment)
        return rows

    def stack_index(
        self,
        assignment: Assignment,
        crew_assignments: Sequence[Assignment],
    ) -> int:
        """Stacking row of one block within its crew lane."""
        if not assignment.is_scheduled:
            return 0
        lane = list(crew_assignments)
        if all(a.id != assignment.id for a in lane):
            lane.append(assignment)
        return self.stack_rows(lane).get(assignment.id, 0)

    def calculate_top(
        self,
        assignment: Assignment,
        crew_assignments: Sequence[Assignment],
    ) -> float:
        """Top offset from the block's stacking row."""
        return self.stack_index(assignment, crew_assignments) * self.config.row_height

    @staticmethod
    def calculate_z_index(priority: int) -> int:
        """Layering order proportional to priority (never below 1)."""
        return max(1, priority // 2)

    def get_position(
        self,
        assignment: Assignment,
        week: WeekWindow,
        crew_assignments: Sequence[Assignment],
    ) -> Position:
        """Calculate the complete position of a job block.

        Args:
            assignment: The block to place.
            week: Visible week window.
            crew_assignments: Assignments sharing the block's crew.

        Returns:
            Position of the block, or the sentinel position when the block
            has no usable time range.
        """
        if not assignment.is_scheduled:
            self._warn_if_malformed(assignment)
            return self.unscheduled_position()

        return Position(
            left=self.calculate_left(assignment.start, week),
            width=self.calculate_width(assignment.start, assignment.end),
            top=self.calculate_top(assignment, crew_assignments),
            z_index=self.calculate_z_index(assignment.priority),
        )

    def position_lane(
        self,
        crew_assignments: Sequence[Assignment],
        week: WeekWindow,
    ) -> dict[str, Position]:
        """Positions for every block of one crew lane, computed in one pass."""
        rows = self.stack_rows(crew_assignments)
        positions: dict[str, Position] = {}
        for assignment in crew_assignments:
            if not assignment.is_scheduled:
                self._warn_if_malformed(assignment)
                positions[assignment.id] = self.unscheduled_position()
                continue
            positions[assignment.id] = Position(
                left=self.calculate_left(assignment.start, week),
                width=self.calculate_width(assignment.start, assignment.end),
                top=rows[assignment.id] * self.config.row_height,
                z_index=self.calculate_z_index(assignment.priority),
            )
        return positions

    def lane_height(self, positions: dict[str, Position]) -> float:
        """Height needed to show every stacked row of a lane."""
        tops = [p.top for p in positions.values() if p.scheduled]
        if not tops:
            return self.config.block_height
        return max(tops) + self.config.block_height

    @staticmethod
    def _warn_if_malformed(assignment: Assignment) -> None:
        if assignment.is_malformed:
            logger.warning(
                "Assignment %s (job %s) has an invalid time range %s - %s; "
                "showing it as unscheduled",
                assignment.id,
                assignment.job_id,
                assignment.start,
                assignment.end,
            )
