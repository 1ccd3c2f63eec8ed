from .leaderboard import Leaderboard, LeaderboardPrize, LeaderboardTimeframe
from .period import LeaderboardPeriod, PeriodStatus
from .entry import LeaderboardEntry
from .winner import LeaderboardWinner
from leaderboards.utils.participant import ParticipantType

__all__ = [
    "Leaderboard",
    "LeaderboardPrize",
    "LeaderboardTimeframe",
    "LeaderboardPeriod",
    "PeriodStatus",
    "LeaderboardEntry",
    "LeaderboardWinner",
    "ParticipantType",
]
