from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.attributes import flag_modified

from leaderboards.database.models import (
    Leaderboard,
    LeaderboardEntry,
    LeaderboardPrize,
    ParticipantType,
)
from leaderboards.database.repo.entries_repo import list_ranked_entries, upsert_entry_score
from leaderboards.errors import InvalidStateError
from leaderboards.utils.participant import Studio, Teacher, participant_from_row
from tests.factories import make_leaderboard, make_period


def test_participant_variant_round_trip():
    assert participant_from_row("STUDIO", "s1") == Studio("s1")
    assert participant_from_row(ParticipantType.TEACHER, "t1") == Teacher("t1")
    assert Studio("x") != Teacher("x")

    with pytest.raises(InvalidStateError):
        participant_from_row("CLIENT", "c1")


def test_entry_participant_property_sets_both_columns():
    entry = LeaderboardEntry(period_id="p1", score=1.0)
    entry.participant = Teacher("t9")

    assert entry.participant_type is ParticipantType.TEACHER
    assert entry.participant_id == "t9"
    assert entry.participant == Teacher("t9")


async def test_participant_type_is_fixed_after_creation(db):
    board_id = await make_leaderboard(db)

    async with db.session() as session:
        board = await session.get(Leaderboard, board_id)
        board.participant_type = ParticipantType.STUDIO  # same value is fine
        with pytest.raises(InvalidStateError):
            board.participant_type = ParticipantType.TEACHER


async def test_participant_type_is_fixed_after_expiry(db):
    board_id = await make_leaderboard(db)

    async with db.session() as session:
        board = await session.get(Leaderboard, board_id)
        session.expire(board, ["participant_type"])
        with pytest.raises(InvalidStateError):
            board.participant_type = ParticipantType.TEACHER
        await session.commit()

    async with db.session() as session:
        board = await session.get(Leaderboard, board_id)
        assert board.participant_type is ParticipantType.STUDIO


async def test_participant_type_change_is_rejected_at_flush(db):
    board_id = await make_leaderboard(db)

    async with db.session() as session:
        board = await session.get(Leaderboard, board_id)
        # write around the validator
        board.__dict__["participant_type"] = ParticipantType.TEACHER
        flag_modified(board, "participant_type")
        with pytest.raises(InvalidStateError):
            await session.commit()
        await session.rollback()

    async with db.session() as session:
        board = await session.get(Leaderboard, board_id)
        assert board.participant_type is ParticipantType.STUDIO


async def test_prize_positions_are_unique_per_leaderboard(db):
    board_id = await make_leaderboard(db, prize_positions=(1,))

    async with db.session() as session:
        session.add(LeaderboardPrize(leaderboard_id=board_id, position=1, name="dup", prize_type="CASH"))
        with pytest.raises(IntegrityError):
            await session.commit()


async def test_upsert_keeps_one_entry_per_participant(db):
    board_id = await make_leaderboard(db)
    period_id = await make_period(db, board_id)

    async with db.session() as session:
        first = await upsert_entry_score(session, period_id=period_id, participant=Studio("s1"), score=3)
        second = await upsert_entry_score(session, period_id=period_id, participant=Studio("s1"), score=7.5)
        await session.commit()

    assert first.id == second.id
    async with db.session() as session:
        entries = await list_ranked_entries(session, period_id)
    assert [(e.participant, e.score, e.rank) for e in entries] == [(Studio("s1"), 7.5, None)]
