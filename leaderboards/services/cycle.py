# leaderboards/services/cycle.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leaderboards.constants import (
    SYSTEM_AUTO_FINALIZE_TOKEN,
    get_manual_period_finalize_token,
    is_manual_keep_active_override,
)
from leaderboards.database.models import Leaderboard, LeaderboardPeriod, PeriodStatus
from leaderboards.database.repo.entries_repo import carry_previous_ranks
from leaderboards.database.repo.leaderboard_repo import (
    archive_periods,
    create_period,
    find_period_for_template,
    get_period,
    list_active_periods,
    list_cyclable_leaderboards,
    reactivate_period,
)
from leaderboards.errors import InvalidStateError, NotFoundError
from leaderboards.services.finalize import FinalizeService
from leaderboards.utils.dates import utc_now
from leaderboards.utils.period_template import PeriodTemplate, build_period_template, period_has_expired

log = logging.getLogger(__name__)


@dataclass(slots=True)
class AutoCycleResult:
    processed_leaderboards: int = 0
    finalized_periods: int = 0
    created_periods: int = 0
    reactivated_periods: int = 0
    archived_periods: int = 0
    carried_ranks: int = 0
    skipped_manual_overrides: int = 0


async def _open_template_period(
    session: AsyncSession,
    leaderboard: Leaderboard,
    template: PeriodTemplate,
    result: AutoCycleResult,
) -> LeaderboardPeriod:
    existing = await find_period_for_template(session, leaderboard.id, template)
    if existing is not None:
        if existing.status is not PeriodStatus.ACTIVE:
            reactivate_period(existing)
            await session.flush()
            result.reactivated_periods += 1
            log.info("Reactivated period %s (%s) of %s", existing.id, existing.name, leaderboard.slug)
        return existing

    try:
        async with session.begin_nested():
            period = await create_period(session, leaderboard.id, template)
    except IntegrityError:
        # another writer opened the same slot first
        raced = await find_period_for_template(session, leaderboard.id, template)
        if raced is None:
            raise
        return raced

    result.created_periods += 1
    log.info("Created period %s (%s) for %s", period.id, period.name, leaderboard.slug)
    return period


async def _cycle_leaderboard(
    session: AsyncSession,
    leaderboard: Leaderboard,
    now: datetime,
    result: AutoCycleResult,
) -> None:
    active_periods = await list_active_periods(session, leaderboard.id)
    latest = active_periods[0] if active_periods else None

    extra_ids = [p.id for p in active_periods[1:]]
    if extra_ids:
        result.archived_periods += await archive_periods(
            session,
            extra_ids,
            now=now,
            finalized_by=SYSTEM_AUTO_FINALIZE_TOKEN,
        )
        log.warning("Archived %s stray ACTIVE periods of %s", len(extra_ids), leaderboard.slug)

    current = latest
    if latest is not None and period_has_expired(latest, now):
        if is_manual_keep_active_override(latest.finalized_by):
            result.skipped_manual_overrides += 1
            log.info("Period %s of %s kept active by manual override", latest.id, leaderboard.slug)
        else:
            await FinalizeService.finalize(
                session,
                period_id=latest.id,
                finalized_by=SYSTEM_AUTO_FINALIZE_TOKEN,
                now=now,
            )
            result.finalized_periods += 1
            current = None

    if current is None:
        template = build_period_template(leaderboard.timeframe, now)
        current = await _open_template_period(session, leaderboard, template, result)

    if current.status is PeriodStatus.ACTIVE:
        result.carried_ranks += await carry_previous_ranks(session, period=current)


async def run_leaderboard_auto_cycle(
    session: AsyncSession,
    *,
    now: datetime | None = None,
    leaderboard_id: str | None = None,
) -> AutoCycleResult:
    """
    Rolls every active, auto-calculated leaderboard forward to the calendar slot of `now`:
    closes the expired ACTIVE period (unless manually kept open) and makes sure the
    current slot has an ACTIVE period.

    The caller owns the transaction (see run_in_transaction).
    """
    now = now or utc_now()
    result = AutoCycleResult()

    leaderboards = await list_cyclable_leaderboards(session, leaderboard_id)
    result.processed_leaderboards = len(leaderboards)

    for leaderboard in leaderboards:
        await _cycle_leaderboard(session, leaderboard, now, result)

    log.info("Leaderboard auto-cycle done: %s", result)
    return result


async def set_manual_override(
    session: AsyncSession,
    *,
    period_id: str,
    end_after_timeframe: bool,
) -> LeaderboardPeriod:
    """
    Marks an ACTIVE period so the auto-cycle either keeps it open past its end date
    (end_after_timeframe=False) or closes it normally at the end of its range.
    """
    period = await get_period(session, period_id)
    if period is None:
        raise NotFoundError(f"Period {period_id} not found")
    if period.status is not PeriodStatus.ACTIVE:
        raise InvalidStateError(f"Period {period_id} is {period.status.value}, expected ACTIVE")

    period.finalized_by = get_manual_period_finalize_token(end_after_timeframe)
    await session.flush()
    return period
