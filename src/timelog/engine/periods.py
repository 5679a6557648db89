"""Period resolver: maps symbolic period names to inclusive date windows."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import StrEnum

from dateutil.relativedelta import relativedelta

from timelog.engine.errors import InvalidPeriodError


class Period(StrEnum):
    """Calendar-relative period selectors."""

    TODAY = "Today"
    THIS_WEEK = "This week"
    THIS_MONTH = "This month"
    THIS_YEAR = "This year"
    SEVEN_DAYS = "7 days"
    THIRTY_DAYS = "30 days"
    TWELVE_WEEKS = "12 weeks"
    SIX_MONTHS = "6 months"
    ONE_YEAR = "1 year"
    FIVE_YEARS = "5 years"
    ALL = "All"


_BY_KEY = {p.value.lower(): p for p in Period}


@dataclass(frozen=True)
class TimeWindow:
    """An inclusive range of calendar days."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Window start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def key(self) -> str:
        return f"{self.start.isoformat()}:{self.end.isoformat()}"


def parse_period(name: str | Period) -> Period:
    """Look up a period by its display name, ignoring case and outer whitespace."""
    if isinstance(name, Period):
        return name
    if isinstance(name, str):
        period = _BY_KEY.get(name.strip().lower())
        if period is not None:
            return period
    raise InvalidPeriodError(name)


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _month_end(day: date) -> date:
    return day + relativedelta(day=31)


def resolve_period(name: str | Period, now: date | datetime) -> TimeWindow:
    """Resolve ``name`` to a window relative to ``now``.

    Weeks run Monday through Sunday.

    Raises:
        InvalidPeriodError: if ``name`` is not a recognized period.
    """
    period = parse_period(name)
    today = now.date() if isinstance(now, datetime) else now

    if period is Period.TODAY:
        return TimeWindow(today, today)
    if period is Period.THIS_WEEK:
        start = _week_start(today)
        return TimeWindow(start, start + timedelta(days=6))
    if period is Period.THIS_MONTH:
        return TimeWindow(today.replace(day=1), _month_end(today))
    if period is Period.THIS_YEAR:
        return TimeWindow(date(today.year, 1, 1), date(today.year, 12, 31))
    if period is Period.SEVEN_DAYS:
        return TimeWindow(today - timedelta(days=6), today)
    if period is Period.THIRTY_DAYS:
        return TimeWindow(today - timedelta(days=29), today)
    if period is Period.TWELVE_WEEKS:
        start = _week_start(today - timedelta(weeks=11))
        return TimeWindow(start, _week_start(today) + timedelta(days=6))
    if period is Period.SIX_MONTHS:
        start = (today - relativedelta(months=5)).replace(day=1)
        return TimeWindow(start, _month_end(today))
    if period is Period.ONE_YEAR:
        return TimeWindow(today - relativedelta(years=1) + timedelta(days=1), today)
    if period is Period.FIVE_YEARS:
        return TimeWindow(today - relativedelta(years=5) + timedelta(days=1), today)
    return TimeWindow(date.min, date.max)
