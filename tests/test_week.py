"""Tests for the week window and shared date helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from crewboard.domain.week import (
    WeekWindow,
    day_offset,
    days_between,
    intervals_overlap,
    span_days,
    week_start,
    work_window,
)


@pytest.fixture
def wednesday():
    """Mid-week anchor: Wednesday 2025-01-22, 14:30."""
    return datetime(2025, 1, 22, 14, 30)


class TestWeekStart:
    """Tests for truncating to the week boundary."""

    def test_wednesday_truncates_to_preceding_sunday(self, wednesday):
        assert week_start(wednesday) == datetime(2025, 1, 19, 0, 0)

    def test_sunday_is_its_own_week_start(self):
        assert week_start(datetime(2025, 1, 19, 23, 59)) == datetime(2025, 1, 19)

    def test_saturday_belongs_to_week_started_six_days_earlier(self):
        assert week_start(date(2025, 1, 25)) == datetime(2025, 1, 19)

    def test_plain_date_accepted(self):
        assert week_start(date(2025, 1, 22)) == datetime(2025, 1, 19)

    def test_aware_datetime_converted_to_local(self):
        # Midday UTC on a Wednesday is still Wednesday in any local zone
        aware = datetime(2025, 1, 22, 12, 0, tzinfo=timezone.utc)
        assert week_start(aware) == datetime(2025, 1, 19)


class TestWeekWindow:
    """Tests for WeekWindow."""

    def test_scenario_anchor_on_wednesday(self, wednesday):
        """A window anchored mid-week starts at the preceding boundary."""
        window = WeekWindow.for_date(wednesday)

        assert window.start == datetime(2025, 1, 19, 0, 0)
        assert len(window.dates) == 7
        assert (window.dates[-1] - window.dates[0]).days == 6

    def test_dates_are_contiguous_and_ordered(self, wednesday):
        window = WeekWindow.for_date(wednesday)
        dates = window.dates

        assert dates[0] == date(2025, 1, 19)
        for earlier, later in zip(dates, dates[1:]):
            assert later - earlier == timedelta(days=1)
        assert len(set(dates)) == 7

    def test_end_is_last_instant_of_saturday(self, wednesday):
        window = WeekWindow.for_date(wednesday)
        assert window.end == datetime(2025, 1, 25, 23, 59, 59, 999999)

    @pytest.mark.parametrize("weeks", [-53, -5, -1, 0, 1, 2, 10, 52, 260])
    def test_shift_round_trip(self, wednesday, weeks):
        window = WeekWindow.for_date(wednesday)
        assert window.shift(weeks).shift(-weeks) == window

    def test_shift_is_pure(self, wednesday):
        window = WeekWindow.for_date(wednesday)
        shifted = window.shift(1)

        assert window.start == datetime(2025, 1, 19)
        assert shifted.start == datetime(2025, 1, 26)

    def test_shift_across_year_boundary(self):
        window = WeekWindow.for_date(date(2024, 12, 31))
        assert window.start == datetime(2024, 12, 29)
        assert window.next().start == datetime(2025, 1, 5)
        assert window.previous().start == datetime(2024, 12, 22)

    def test_contains_today(self, wednesday):
        window = WeekWindow.for_date(wednesday)

        assert window.contains_today(now=wednesday)
        assert window.contains_today(now=datetime(2025, 1, 19, 0, 0))
        assert window.contains_today(now=datetime(2025, 1, 25, 23, 59))
        assert not window.contains_today(now=datetime(2025, 1, 26, 0, 0))
        assert not window.contains_today(now=datetime(2025, 1, 18, 23, 59))

    def test_current_uses_now(self, wednesday):
        assert WeekWindow.current(now=wednesday) == WeekWindow.for_date(wednesday)

    def test_range_label_same_month(self, wednesday):
        assert WeekWindow.for_date(wednesday).range_label == "Jan 19 - 25, 2025"

    def test_range_label_across_months(self):
        assert WeekWindow.for_date(date(2025, 1, 28)).range_label == "Jan 26 - Feb 1, 2025"

    def test_range_label_across_years(self):
        assert WeekWindow.for_date(date(2025, 1, 1)).range_label == "Dec 29 - Jan 4, 2025"

    def test_start_must_be_week_boundary(self):
        with pytest.raises(ValueError):
            WeekWindow(start=datetime(2025, 1, 22))
        with pytest.raises(ValueError):
            WeekWindow(start=datetime(2025, 1, 19, 8, 0))

    def test_aware_start_normalized(self):
        aware = datetime(2025, 1, 19).astimezone()
        window = WeekWindow(start=aware)

        assert window.start == datetime(2025, 1, 19)
        assert window.start.tzinfo is None
        assert window == WeekWindow.for_date(date(2025, 1, 22))

    def test_column_for(self, wednesday):
        window = WeekWindow.for_date(wednesday)

        assert window.column_for(date(2025, 1, 19)) == 0
        assert window.column_for(datetime(2025, 1, 23, 9, 0)) == 4
        assert window.column_for(date(2025, 1, 26)) is None
        assert window.column_for(date(2025, 1, 18)) is None


class TestDateHelpers:
    """Tests for day arithmetic used by layout and conflicts."""

    def test_days_between_fractional(self):
        assert days_between(datetime(2025, 1, 19), datetime(2025, 1, 20, 12)) == 1.5

    def test_day_offset_floors(self):
        start = datetime(2025, 1, 19)
        assert day_offset(datetime(2025, 1, 20, 23, 59), start) == 1
        assert day_offset(datetime(2025, 1, 18, 8, 0), start) == -1

    def test_span_days_minimum_one(self):
        assert span_days(datetime(2025, 1, 20, 8), datetime(2025, 1, 20, 9)) == 1
        assert span_days(datetime(2025, 1, 20, 8), datetime(2025, 1, 21, 17)) == 2

    def test_intervals_overlap_is_half_open(self):
        a = (datetime(2025, 1, 22, 8), datetime(2025, 1, 22, 12))
        touching = (datetime(2025, 1, 22, 12), datetime(2025, 1, 22, 17))
        crossing = (datetime(2025, 1, 22, 11), datetime(2025, 1, 22, 17))

        assert not intervals_overlap(*a, *touching)
        assert not intervals_overlap(*touching, *a)
        assert intervals_overlap(*a, *crossing)
        assert intervals_overlap(*crossing, *a)

    def test_work_window(self):
        start, end = work_window(date(2025, 1, 23))
        assert start == datetime(2025, 1, 23, 8, 0)
        assert end == datetime(2025, 1, 23, 17, 0)
