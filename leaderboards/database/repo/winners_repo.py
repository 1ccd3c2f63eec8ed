from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from leaderboards.constants import PRIZE_STATUS_PENDING
from leaderboards.database.models import LeaderboardEntry, LeaderboardPrize, LeaderboardWinner
from leaderboards.utils.participant import Participant, participant_from_row


@dataclass(frozen=True, slots=True)
class WinnerRow:
    position: int
    prize_id: str
    prize_name: str
    participant: Participant
    final_score: float
    prize_status: str


async def replace_winners(
    session: AsyncSession,
    *,
    period_id: str,
    winners: Sequence[tuple[LeaderboardPrize, LeaderboardEntry]],
) -> int:
    """
    Drops every winner of the period and writes the new projection.
    Scores are copied, so later entry edits do not leak into winners.
    """
    await session.execute(delete(LeaderboardWinner).where(LeaderboardWinner.period_id == period_id))

    rows = [
        LeaderboardWinner(
            period_id=period_id,
            prize_id=prize.id,
            participant_type=entry.participant_type,
            participant_id=entry.participant_id,
            position=prize.position,
            final_score=float(entry.score),
            prize_status=PRIZE_STATUS_PENDING,
        )
        for prize, entry in winners
    ]

    session.add_all(rows)
    await session.flush()
    return len(rows)


async def get_winners(session: AsyncSession, period_id: str) -> list[WinnerRow]:
    q = (
        select(
            LeaderboardWinner.position,
            LeaderboardWinner.prize_id,
            LeaderboardPrize.name,
            LeaderboardWinner.participant_type,
            LeaderboardWinner.participant_id,
            LeaderboardWinner.final_score,
            LeaderboardWinner.prize_status,
        )
        .join(LeaderboardPrize, LeaderboardPrize.id == LeaderboardWinner.prize_id)
        .where(LeaderboardWinner.period_id == period_id)
        .order_by(LeaderboardWinner.position.asc())
    )
    res = await session.execute(q)

    out: list[WinnerRow] = []
    for position, prize_id, prize_name, p_type, p_id, final_score, prize_status in res.all():
        out.append(
            WinnerRow(
                position=int(position),
                prize_id=prize_id,
                prize_name=prize_name,
                participant=participant_from_row(p_type, p_id),
                final_score=float(final_score),
                prize_status=prize_status,
            )
        )
    return out
