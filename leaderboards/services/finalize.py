# leaderboards/services/finalize.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leaderboards.database.models import PeriodStatus
from leaderboards.database.repo.leaderboard_repo import get_period_for_finalize, list_period_entries
from leaderboards.database.repo.winners_repo import replace_winners
from leaderboards.database.tx import transactional
from leaderboards.errors import InvalidStateError, NotFoundError, StorageError
from leaderboards.utils.dates import utc_now
from leaderboards.utils.ranking import assign_ranks, select_winners, sort_entries

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FinalizeResult:
    period_id: str
    ranked_entries: int
    winners_created: int


def _terminal_status(status: PeriodStatus | str | None) -> PeriodStatus:
    if status is None:
        return PeriodStatus.COMPLETED
    try:
        value = PeriodStatus(status)
    except ValueError as e:
        raise InvalidStateError(f"Unknown period status: {status!r}") from e
    if not value.is_terminal:
        raise InvalidStateError(f"Finalize status must be terminal, got {value.value}")
    return value


class FinalizeService:
    @staticmethod
    async def finalize(
        session: AsyncSession,
        *,
        period_id: str,
        finalized_by: str,
        status: PeriodStatus | str | None = None,
        now: datetime | None = None,
    ) -> FinalizeResult:
        """
        Ranks every entry of the period, rebuilds its winners and closes it.

        Runs as one transaction (SAVEPOINT when the session already has one):
        either every rank, winner and the status change land, or none do.
        Safe to retry: unchanged scores give the same ranks and winners.

        Raises NotFoundError for an unknown period, InvalidStateError for a
        non-terminal status, StorageError when the database write fails.
        """
        final_status = _terminal_status(status)
        now = now or utc_now()

        try:
            async with transactional(session):
                # 1) Load period, polarity, prizes, entries
                period = await get_period_for_finalize(session, period_id)
                if period is None:
                    raise NotFoundError(f"Period {period_id} not found")

                leaderboard = period.leaderboard
                entries = await list_period_entries(session, period.id)

                # 2) Deterministic order, ranks 1..N
                sorted_entries = sort_entries(entries, leaderboard.higher_is_better)

                # 3) Rank write-back
                for entry, rank in assign_ranks(sorted_entries):
                    entry.rank = rank
                await session.flush()

                # 4 + 5) Winners are a pure projection of (sorted entries x prizes)
                winners = select_winners(sorted_entries, leaderboard.prizes)
                winners_created = await replace_winners(session, period_id=period.id, winners=winners)
                for prize, entry in winners:
                    log.debug(
                        "Period %s prize #%s -> %s:%s (score=%s)",
                        period.id,
                        prize.position,
                        entry.participant_type.value,
                        entry.participant_id,
                        entry.score,
                    )

                # 6) Close the period
                period.status = final_status
                period.finalized_at = now
                period.finalized_by = finalized_by
                await session.flush()
        except SQLAlchemyError as e:
            log.warning("Finalize of period %s rolled back: %s", period_id, e)
            raise StorageError(f"Finalize of period {period_id} failed") from e

        log.info(
            "Finalized period %s: entries=%s winners=%s status=%s by=%s",
            period_id,
            len(sorted_entries),
            winners_created,
            final_status.value,
            finalized_by,
        )
        return FinalizeResult(
            period_id=period_id,
            ranked_entries=len(sorted_entries),
            winners_created=winners_created,
        )
