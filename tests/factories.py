from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from leaderboards.database.models import (
    Leaderboard,
    LeaderboardEntry,
    LeaderboardPeriod,
    LeaderboardPrize,
    LeaderboardTimeframe,
    ParticipantType,
    PeriodStatus,
)
from leaderboards.database.session import Database


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


WEEK_START = utc(2024, 6, 10)
WEEK_END = utc(2024, 6, 16, 23, 59, 59, 999000)


async def make_leaderboard(
    db: Database,
    *,
    slug: str = "booking-boss",
    participant_type: ParticipantType = ParticipantType.STUDIO,
    timeframe: LeaderboardTimeframe = LeaderboardTimeframe.WEEKLY,
    higher_is_better: bool = True,
    prize_positions: Sequence[int] = (1, 2, 3),
    is_active: bool = True,
    auto_calculate: bool = True,
) -> str:
    async with db.session() as session:
        leaderboard = Leaderboard(
            name=slug.replace("-", " ").title(),
            slug=slug,
            participant_type=participant_type,
            timeframe=timeframe,
            higher_is_better=higher_is_better,
            metric_name="bookings",
            metric_unit="bookings",
            is_active=is_active,
            auto_calculate=auto_calculate,
        )
        leaderboard.prizes = [
            LeaderboardPrize(position=p, name=f"Prize #{p}", prize_type="CASH", prize_value=100.0 / p)
            for p in prize_positions
        ]
        session.add(leaderboard)
        await session.commit()
        return leaderboard.id


async def make_period(
    db: Database,
    leaderboard_id: str,
    *,
    start: datetime = WEEK_START,
    end: datetime = WEEK_END,
    status: PeriodStatus = PeriodStatus.ACTIVE,
    name: str = "Week of Jun 10, 2024",
    finalized_by: str | None = None,
) -> str:
    async with db.session() as session:
        period = LeaderboardPeriod(
            leaderboard_id=leaderboard_id,
            name=name,
            start_date=start,
            end_date=end,
            status=status,
            finalized_by=finalized_by,
        )
        session.add(period)
        await session.commit()
        return period.id


async def add_entries(
    db: Database,
    period_id: str,
    rows: Sequence[tuple[str, str, float]],
    participant_type: ParticipantType = ParticipantType.STUDIO,
) -> None:
    """rows: (entry_id, participant_id, score)"""
    async with db.session() as session:
        session.add_all(
            [
                LeaderboardEntry(
                    id=entry_id,
                    period_id=period_id,
                    participant_type=participant_type,
                    participant_id=participant_id,
                    score=score,
                )
                for entry_id, participant_id, score in rows
            ]
        )
        await session.commit()
