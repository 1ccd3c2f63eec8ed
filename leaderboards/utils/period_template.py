# leaderboards/utils/period_template.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

from leaderboards.constants import ALL_TIME_END, ALL_TIME_START
from leaderboards.database.models.leaderboard import LeaderboardTimeframe
from leaderboards.errors import InvalidStateError
from leaderboards.utils.dates import as_utc

_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class HasBoundaries(Protocol):
    start_date: datetime
    end_date: datetime


@dataclass(frozen=True, slots=True)
class PeriodTemplate:
    start_date: datetime
    end_date: datetime
    name: str


def _start_of_day(value: datetime) -> datetime:
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def _end_of_day(value: datetime) -> datetime:
    return datetime(value.year, value.month, value.day, 23, 59, 59, 999000, tzinfo=timezone.utc)


def _first_of_month(year: int, month: int) -> datetime:
    # month may overflow past 12
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1, tzinfo=timezone.utc)


def _last_instant_before(first_of_next: datetime) -> datetime:
    return _end_of_day(first_of_next - timedelta(days=1))


def _week_start_monday(value: datetime) -> datetime:
    # Monday = 0 ... Sunday = 6, so Sunday closes the week
    day = _start_of_day(value)
    return day - timedelta(days=day.weekday())


def build_period_template(timeframe: LeaderboardTimeframe | str, now: datetime) -> PeriodTemplate:
    """
    Canonical calendar slot containing `now`, computed in UTC.

    Pure: the same (timeframe, now) always yields the same boundaries.
    End boundaries are inclusive, at 23:59:59.999.
    """
    try:
        timeframe = LeaderboardTimeframe(timeframe)
    except ValueError as e:
        raise InvalidStateError(f"Unknown leaderboard timeframe: {timeframe!r}") from e

    now = as_utc(now)

    if timeframe is LeaderboardTimeframe.WEEKLY:
        start = _week_start_monday(now)
        end = _end_of_day(start + timedelta(days=6))
        return PeriodTemplate(
            start_date=start,
            end_date=end,
            name=f"Week of {_MONTH_NAMES[start.month - 1][:3]} {start.day}, {start.year}",
        )

    if timeframe is LeaderboardTimeframe.MONTHLY:
        start = _first_of_month(now.year, now.month)
        end = _last_instant_before(_first_of_month(now.year, now.month + 1))
        return PeriodTemplate(
            start_date=start,
            end_date=end,
            name=f"{_MONTH_NAMES[now.month - 1]} {now.year}",
        )

    if timeframe is LeaderboardTimeframe.QUARTERLY:
        quarter = (now.month - 1) // 3
        start = _first_of_month(now.year, quarter * 3 + 1)
        end = _last_instant_before(_first_of_month(now.year, quarter * 3 + 4))
        return PeriodTemplate(
            start_date=start,
            end_date=end,
            name=f"Q{quarter + 1} {now.year}",
        )

    if timeframe is LeaderboardTimeframe.YEARLY:
        return PeriodTemplate(
            start_date=datetime(now.year, 1, 1, tzinfo=timezone.utc),
            end_date=datetime(now.year, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc),
            name=str(now.year),
        )

    # ALL_TIME
    return PeriodTemplate(start_date=ALL_TIME_START, end_date=ALL_TIME_END, name="All Time")


def period_matches_template(period: HasBoundaries, template: PeriodTemplate) -> bool:
    return (
        as_utc(period.start_date) == as_utc(template.start_date)
        and as_utc(period.end_date) == as_utc(template.end_date)
    )


def period_has_expired(period: HasBoundaries, now: datetime) -> bool:
    return as_utc(period.end_date) < as_utc(now)
