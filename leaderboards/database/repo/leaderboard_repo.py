from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from leaderboards.database.models import (
    Leaderboard,
    LeaderboardEntry,
    LeaderboardPeriod,
    PeriodStatus,
)
from leaderboards.utils.period_template import PeriodTemplate


# ------------------------
# Periods
# ------------------------

async def get_period_for_finalize(session: AsyncSession, period_id: str) -> LeaderboardPeriod | None:
    """
    Period + leaderboard + prizes (ordered by position), re-read from the database.
    Locks the period row where the backend supports FOR UPDATE.
    """
    q = (
        select(LeaderboardPeriod)
        .options(selectinload(LeaderboardPeriod.leaderboard).selectinload(Leaderboard.prizes))
        .where(LeaderboardPeriod.id == period_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    res = await session.execute(q)
    return res.scalar_one_or_none()


async def get_period(session: AsyncSession, period_id: str) -> LeaderboardPeriod | None:
    res = await session.execute(select(LeaderboardPeriod).where(LeaderboardPeriod.id == period_id))
    return res.scalar_one_or_none()


async def list_period_entries(session: AsyncSession, period_id: str) -> list[LeaderboardEntry]:
    res = await session.execute(
        select(LeaderboardEntry).where(LeaderboardEntry.period_id == period_id)
    )
    return list(res.scalars().all())


async def list_active_periods(session: AsyncSession, leaderboard_id: str) -> list[LeaderboardPeriod]:
    """Newest first."""
    res = await session.execute(
        select(LeaderboardPeriod)
        .where(
            LeaderboardPeriod.leaderboard_id == leaderboard_id,
            LeaderboardPeriod.status == PeriodStatus.ACTIVE,
        )
        .order_by(LeaderboardPeriod.start_date.desc())
    )
    return list(res.scalars().all())


async def find_period_for_template(
    session: AsyncSession,
    leaderboard_id: str,
    template: PeriodTemplate,
) -> LeaderboardPeriod | None:
    res = await session.execute(
        select(LeaderboardPeriod).where(
            LeaderboardPeriod.leaderboard_id == leaderboard_id,
            LeaderboardPeriod.start_date == template.start_date,
            LeaderboardPeriod.end_date == template.end_date,
        )
    )
    return res.scalar_one_or_none()


async def create_period(
    session: AsyncSession,
    leaderboard_id: str,
    template: PeriodTemplate,
) -> LeaderboardPeriod:
    period = LeaderboardPeriod(
        leaderboard_id=leaderboard_id,
        name=template.name,
        start_date=template.start_date,
        end_date=template.end_date,
        status=PeriodStatus.ACTIVE,
    )
    session.add(period)
    await session.flush()
    return period


def reactivate_period(period: LeaderboardPeriod) -> None:
    period.status = PeriodStatus.ACTIVE
    period.finalized_at = None
    period.finalized_by = None


async def archive_periods(
    session: AsyncSession,
    period_ids: list[str],
    *,
    now: datetime,
    finalized_by: str,
) -> int:
    if not period_ids:
        return 0

    res = await session.execute(
        update(LeaderboardPeriod)
        .where(LeaderboardPeriod.id.in_(period_ids))
        .values(status=PeriodStatus.ARCHIVED, finalized_at=now, finalized_by=finalized_by)
    )
    return int(res.rowcount or 0)


async def get_latest_finalized_period(
    session: AsyncSession,
    leaderboard_id: str,
    *,
    before: datetime,
) -> LeaderboardPeriod | None:
    """
    Newest non-ACTIVE period started before `before` that was actually ranked.
    Periods archived without a finalize have no ranks and are skipped.
    """
    ranked = (
        select(LeaderboardEntry.id)
        .where(
            LeaderboardEntry.period_id == LeaderboardPeriod.id,
            LeaderboardEntry.rank.is_not(None),
        )
        .exists()
    )
    res = await session.execute(
        select(LeaderboardPeriod)
        .where(
            LeaderboardPeriod.leaderboard_id == leaderboard_id,
            LeaderboardPeriod.status != PeriodStatus.ACTIVE,
            LeaderboardPeriod.start_date < before,
            ranked,
        )
        .order_by(LeaderboardPeriod.start_date.desc())
        .limit(1)
    )
    return res.scalar_one_or_none()


# ------------------------
# Leaderboards
# ------------------------

async def list_cyclable_leaderboards(
    session: AsyncSession,
    leaderboard_id: str | None = None,
) -> list[Leaderboard]:
    q = select(Leaderboard).where(
        Leaderboard.is_active.is_(True),
        Leaderboard.auto_calculate.is_(True),
    )
    if leaderboard_id:
        q = q.where(Leaderboard.id == leaderboard_id)

    res = await session.execute(q.order_by(Leaderboard.created_at.asc(), Leaderboard.id.asc()))
    return list(res.scalars().all())
