# leaderboards/constants.py
from __future__ import annotations

from datetime import datetime, timezone

# Actor stamped into Period.finalized_by by the scheduler
SYSTEM_AUTO_FINALIZE_TOKEN = "system:auto-finalize"

# Admin overrides stored in finalized_by of an ACTIVE period
MANUAL_OVERRIDE_KEEP_ACTIVE_TOKEN = "manual:keep-active"
MANUAL_OVERRIDE_END_AT_RANGE_TOKEN = "manual:end-at-range"

ALL_TIME_START = datetime(2020, 1, 1, tzinfo=timezone.utc)
ALL_TIME_END = datetime(2100, 1, 1, 23, 59, 59, 999000, tzinfo=timezone.utc)

PRIZE_STATUS_PENDING = "pending"


def is_manual_keep_active_override(finalized_by: str | None) -> bool:
    return finalized_by == MANUAL_OVERRIDE_KEEP_ACTIVE_TOKEN


def get_manual_period_finalize_token(end_after_timeframe: bool) -> str:
    return MANUAL_OVERRIDE_END_AT_RANGE_TOKEN if end_after_timeframe else MANUAL_OVERRIDE_KEEP_ACTIVE_TOKEN
