from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leaderboards.database.models import LeaderboardEntry, LeaderboardPeriod
from leaderboards.database.repo.leaderboard_repo import get_latest_finalized_period, list_period_entries
from leaderboards.utils.participant import Participant


async def upsert_entry_score(
    session: AsyncSession,
    *,
    period_id: str,
    participant: Participant,
    score: float,
) -> LeaderboardEntry:
    """
    One entry per (period, participant): updates the score in place or creates the row.
    """
    res = await session.execute(
        select(LeaderboardEntry).where(
            LeaderboardEntry.period_id == period_id,
            LeaderboardEntry.participant_type == participant.type,
            LeaderboardEntry.participant_id == participant.id,
        )
    )
    entry = res.scalar_one_or_none()

    if entry is None:
        entry = LeaderboardEntry(period_id=period_id, score=float(score))
        entry.participant = participant
        session.add(entry)
    else:
        entry.score = float(score)

    await session.flush()
    return entry


async def list_ranked_entries(session: AsyncSession, period_id: str) -> list[LeaderboardEntry]:
    """Ranked entries first (1..N), unranked ones after, in id order."""
    res = await session.execute(
        select(LeaderboardEntry)
        .where(LeaderboardEntry.period_id == period_id)
        .order_by(LeaderboardEntry.rank.asc().nulls_last(), LeaderboardEntry.id.asc())
    )
    return list(res.scalars().all())


async def carry_previous_ranks(session: AsyncSession, *, period: LeaderboardPeriod) -> int:
    """
    Copies each participant's rank from the leaderboard's latest ranked period
    (started before this one) into previous_rank. Returns how many entries changed.
    """
    previous = await get_latest_finalized_period(
        session,
        period.leaderboard_id,
        before=period.start_date,
    )
    if previous is None:
        return 0

    previous_ranks = {
        (e.participant_type, e.participant_id): e.rank
        for e in await list_period_entries(session, previous.id)
        if e.rank is not None
    }

    changed = 0
    for entry in await list_period_entries(session, period.id):
        rank = previous_ranks.get((entry.participant_type, entry.participant_id))
        if entry.previous_rank != rank:
            entry.previous_rank = rank
            changed += 1

    if changed:
        await session.flush()
    return changed
