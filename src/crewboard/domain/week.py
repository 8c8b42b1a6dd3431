"""Week window and shared date utilities for the crew calendar.

The calendar always shows one week of seven day columns. Weeks start on
Sunday at local midnight; all instants are handled as naive local wall-clock
datetimes.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

DAYS_PER_WEEK = 7
SECONDS_PER_DAY = 24 * 60 * 60

# Python weekday() numbering (Monday=0); the calendar grid starts on Sunday.
FIRST_WEEKDAY = 6

WORK_DAY_START = time(8, 0)
WORK_DAY_END = time(17, 0)

DateLike = Union[date, datetime]


def to_local_naive(value: datetime) -> datetime:
    """Convert a timezone-aware datetime to naive local wall time.

    Naive datetimes are assumed to already be local and returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return to_local_naive(value)
    return datetime.combine(value, time.min)


def week_start(value: DateLike) -> datetime:
    """Truncate a date or datetime to the start of its week (Sunday 00:00)."""
    moment = _as_datetime(value)
    days_back = (moment.weekday() - FIRST_WEEKDAY) % DAYS_PER_WEEK
    start_day = moment.date() - timedelta(days=days_back)
    return datetime.combine(start_day, time.min)


def days_between(start: datetime, end: datetime) -> float:
    """Fractional number of days from start to end (negative if end < start)."""
    return (end - start).total_seconds() / SECONDS_PER_DAY


def day_offset(moment: datetime, start_of_week: datetime) -> int:
    """Whole days from the week start to moment, rounded down."""
    return math.floor(days_between(start_of_week, moment))


def span_days(start: datetime, end: datetime) -> int:
    """Number of day columns an interval covers (at least one)."""
    return max(1, math.ceil(days_between(start, end)))


def intervals_overlap(
    start1: datetime,
    end1: datetime,
    start2: datetime,
    end2: datetime,
) -> bool:
    """Half-open overlap test: touching intervals do not overlap."""
    return start1 < end2 and start2 < end1


def work_window(day: DateLike) -> tuple[datetime, datetime]:
    """Default business work window (08:00-17:00 local) for a calendar day."""
    if isinstance(day, datetime):
        day = to_local_naive(day).date()
    return datetime.combine(day, WORK_DAY_START), datetime.combine(day, WORK_DAY_END)


def _format_month_day(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}"


@dataclass(frozen=True)
class WeekWindow:
    """The seven-day visible period of the crew calendar.

    Windows are immutable: navigation returns a new window rather than
    changing this one.

    Attributes:
        start: Local midnight on the Sunday that opens the week. An aware
            datetime is converted to naive local time.

    Example:
        >>> window = WeekWindow.for_date(date(2025, 1, 22))
        >>> window.start
        datetime.datetime(2025, 1, 19, 0, 0)
        >>> window.range_label
        'Jan 19 - 25, 2025'
    """

    start: datetime

    def __post_init__(self):
        # Aware datetimes are stored as naive local wall time
        object.__setattr__(self, "start", to_local_naive(self.start))
        if self.start != week_start(self.start):
            raise ValueError(
                f"Week window must start on a week boundary, got {self.start!r}"
            )

    @classmethod
    def for_date(cls, anchor: DateLike) -> "WeekWindow":
        """Create the window containing anchor."""
        return cls(start=week_start(anchor))

    @classmethod
    def current(cls, now: Optional[datetime] = None) -> "WeekWindow":
        """Create the window containing the current moment."""
        return cls.for_date(now or datetime.now())

    @property
    def end(self) -> datetime:
        """Last instant of the final day of the week."""
        return self.start + timedelta(days=DAYS_PER_WEEK) - timedelta(microseconds=1)

    @property
    def dates(self) -> tuple[date, ...]:
        """The seven calendar dates of the week, in order."""
        first = self.start.date()
        return tuple(first + timedelta(days=i) for i in range(DAYS_PER_WEEK))

    @property
    def range_label(self) -> str:
        """Header label such as 'Jan 19 - 25, 2025' or 'Jan 26 - Feb 1, 2025'."""
        first, last = self.dates[0], self.dates[-1]
        if first.month == last.month:
            return f"{_format_month_day(first)} - {last.day}, {last.year}"
        return f"{_format_month_day(first)} - {_format_month_day(last)}, {last.year}"

    def shift(self, weeks: int) -> "WeekWindow":
        """Return a new window offset by the given number of weeks."""
        return WeekWindow(start=self.start + timedelta(days=weeks * DAYS_PER_WEEK))

    def next(self) -> "WeekWindow":
        return self.shift(1)

    def previous(self) -> "WeekWindow":
        return self.shift(-1)

    def contains(self, moment: DateLike) -> bool:
        """Check whether a date or instant falls inside [start, end]."""
        value = _as_datetime(moment)
        return self.start <= value <= self.end

    def contains_today(self, now: Optional[datetime] = None) -> bool:
        """Check whether the current moment falls inside this week."""
        return self.contains(now or datetime.now())

    def column_for(self, day: DateLike) -> Optional[int]:
        """Column index (0-6) of a date in this week, or None if outside."""
        if isinstance(day, datetime):
            day = to_local_naive(day).date()
        offset = (day - self.start.date()).days
        if 0 <= offset < DAYS_PER_WEEK:
            return offset
        return None
