# leaderboards/errors.py
from __future__ import annotations


class LeaderboardError(Exception):
    """Base class for errors raised by the leaderboard engine."""


class NotFoundError(LeaderboardError):
    """A referenced leaderboard, period or entry does not exist."""


class InvalidStateError(LeaderboardError):
    """The request conflicts with the current state (e.g. non-terminal finalize status)."""


class StorageError(LeaderboardError):
    """
    The storage transaction failed and was rolled back.
    The original driver/ORM error is kept as __cause__; retrying is safe.
    """
