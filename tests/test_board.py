"""Tests for the schedule board composition."""

from datetime import date, datetime

import pytest

from crewboard.domain.models import Assignment, Crew
from crewboard.domain.store import InMemoryAssignmentStore
from crewboard.domain.week import WeekWindow
from crewboard.interaction.keyboard import KeyEvent
from crewboard.scheduling.board import ScheduleBoard
from crewboard.scheduling.positioning import LayoutConfig, Position
from crewboard.validation.conflicts import ConflictType


def make_assignment(id, start=None, end=None, crew_id="alpha", priority=5, **kwargs):
    """Helper to create test assignments."""
    return Assignment(
        id=id,
        job_id=f"job-{id}",
        crew_id=crew_id,
        start=start,
        end=end,
        priority=priority,
        job_number=id,
        **kwargs,
    )


@pytest.fixture
def crews():
    return [
        Crew(id="alpha", name="Alpha Crew", color="#3B82F6", capacity=1),
        Crew(id="beta", name="Beta Crew", color="#10B981", capacity=2),
        Crew(id="old", name="Retired Crew", is_active=False),
    ]


@pytest.fixture
def feed():
    return [
        make_assignment("J1", datetime(2025, 1, 20, 8), datetime(2025, 1, 21, 17), priority=8),
        make_assignment("J2", datetime(2025, 1, 21, 9), datetime(2025, 1, 21, 15)),
        make_assignment("J3", datetime(2025, 1, 22, 8), datetime(2025, 1, 22, 17), crew_id="beta"),
        make_assignment("U1", crew_id=None),
        make_assignment("M1", datetime(2025, 1, 23, 9), None, crew_id="beta"),
    ]


@pytest.fixture
def week():
    return WeekWindow.for_date(date(2025, 1, 22))


@pytest.fixture
def board(crews, feed, week):
    return ScheduleBoard(crews, feed, week=week)


class TestPositions:
    """Tests for block positions exposed by the board."""

    def test_lane_positions(self, board):
        assert board.position("J1") == Position(left=140, width=280, top=0, z_index=4)
        assert board.position("J2") == Position(left=280, width=140, top=108, z_index=2)
        assert board.position("J3").top == 0

    def test_unassigned_and_malformed_get_sentinel(self, board):
        assert not board.position("U1").scheduled
        assert not board.position("M1").scheduled

    def test_unknown_assignment_raises(self, board):
        with pytest.raises(KeyError):
            board.position("nope")

    def test_positions_cover_feed(self, board, feed):
        assert set(board.positions()) == {a.id for a in feed}

    def test_cached_results_match_fresh(self, board):
        first = board.positions()
        board.set_assignments(board.assignments)
        assert board.positions() == first

    def test_feed_change_invalidates_cache(self, board):
        assert board.position("J2").top == 108

        moved = make_assignment("J2", datetime(2025, 1, 24, 9), datetime(2025, 1, 24, 15))
        board.set_assignments([a if a.id != "J2" else moved for a in board.assignments])

        assert board.position("J2") == Position(left=5 * 140, width=140, top=0, z_index=2)

    def test_custom_layout(self, crews, feed, week):
        board = ScheduleBoard(crews, feed, week=week, layout=LayoutConfig(column_width=100))
        assert board.position("J1").left == 100

    def test_lane_height(self, board):
        assert board.lane_height("alpha") == 108 + 100
        assert board.lane_height("beta") == 100


class TestFeedViews:
    """Tests for lanes, the unassigned list and utilization."""

    def test_unassigned_lists_crewless_and_undated(self, board):
        assert [a.id for a in board.unassigned] == ["U1", "M1"]

    def test_active_crews(self, board):
        assert [c.id for c in board.active_crews] == ["alpha", "beta"]

    def test_get_crew(self, board):
        assert board.get_crew("beta").name == "Beta Crew"
        assert board.get_crew("zulu") is None

    def test_utilization_from_estimated_hours(self, crews, week):
        board = ScheduleBoard(
            crews,
            [make_assignment("E", datetime(2025, 1, 22, 8), datetime(2025, 1, 22, 17), estimated_hours=10)],
            week=week,
        )
        assert board.crew_utilization("alpha") == 25

    def test_utilization_capped(self, crews, week):
        board = ScheduleBoard(
            crews,
            [make_assignment("E", datetime(2025, 1, 20, 8), datetime(2025, 1, 24, 17), estimated_hours=55)],
            week=week,
        )
        assert board.crew_utilization("alpha") == 100

    def test_utilization_of_unknown_crew(self, board):
        assert board.crew_utilization("zulu") == 0


class TestConflicts:
    """Tests for conflict results on the board."""

    def test_conflicts_computed_for_feed(self, board):
        result = board.conflict_result

        assert result.total_conflicts == 1
        assert result.conflicts[0].conflict_type is ConflictType.FULL_OVERLAP
        assert result.has_conflict("J1")
        assert not result.has_conflict("J3")

    def test_conflicts_refresh_with_feed(self, board):
        board.set_assignments([a for a in board.assignments if a.id != "J2"])
        assert not board.conflict_result.has_conflicts


class TestNavigation:
    """Tests for week navigation on the board."""

    def test_next_and_previous(self, board):
        assert board.next_week().start == datetime(2025, 1, 26)
        assert board.previous_week().start == datetime(2025, 1, 19)

    def test_go_to_week(self, board):
        assert board.go_to_week(date(2025, 3, 5)).start == datetime(2025, 3, 2)

    def test_go_to_today(self, board):
        assert board.go_to_today() == WeekWindow.current()

    def test_week_change_relayouts(self, board):
        board.next_week()
        # J1 started before the visible week
        assert board.position("J1").left == 0

    def test_week_view(self, board):
        view = board.week_view

        assert view["start"] == datetime(2025, 1, 19)
        assert view["end"] == datetime(2025, 1, 25, 23, 59, 59, 999999)
        assert len(view["dates"]) == 7
        assert view["rangeLabel"] == "Jan 19 - 25, 2025"
        assert isinstance(view["isCurrentWeek"], bool)

    def test_keyboard_drives_navigation(self, board):
        shortcuts = board.keyboard_shortcuts()

        assert shortcuts.handle(KeyEvent("ArrowRight"))
        assert board.week.start == datetime(2025, 1, 26)
        assert shortcuts.handle(KeyEvent("ArrowLeft"))
        assert board.week.start == datetime(2025, 1, 19)

    def test_escape_cancels_drag(self, board):
        board.drag.start_drag(board.get_assignment("J3"), "beta")
        board.keyboard_shortcuts().handle(KeyEvent("Escape", in_input_field=True))

        assert not board.drag_state.is_dragging


class TestDropFlow:
    """Drag/drop through the board into an in-memory store."""

    def test_drop_reassigns_and_refreshes(self, crews, feed, week):
        store = InMemoryAssignmentStore(feed, crews)
        board = ScheduleBoard(crews, store.assignments, week=week, commit=store.commit)

        board.drag.start_drag(board.get_assignment("J2"), "alpha")
        board.drag.drag_enter("beta", date(2025, 1, 24))
        assert board.drag_state.drop_target.crew_id == "beta"

        outcome = board.drag.drop("beta", date(2025, 1, 24))
        board.set_assignments(store.assignments)

        assert outcome.crew_changed
        moved = board.get_assignment("J2")
        assert moved.crew_id == "beta"
        assert moved.start == datetime(2025, 1, 24, 8)
        assert moved.end == datetime(2025, 1, 24, 17)
        assert moved.color == "#10B981"
        assert board.position("J2").left == 5 * 140
        assert not board.conflict_result.has_conflicts
        assert not board.drag_state.is_dragging
