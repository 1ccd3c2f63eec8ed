# leaderboards/utils/ranking.py
from __future__ import annotations

from functools import cmp_to_key
from typing import Protocol, Sequence, TypeVar


class Rankable(Protocol):
    id: str
    score: float


class PrizeSlot(Protocol):
    position: int


E = TypeVar("E", bound=Rankable)
P = TypeVar("P", bound=PrizeSlot)


def compare_entries(a: Rankable, b: Rankable, higher_is_better: bool) -> int:
    """
    Strict total order over entries of one period.

    Score first (descending when higher_is_better), then entry id.
    Equal scores never share a rank: the id decides who goes first.
    """
    if a.score != b.score:
        if higher_is_better:
            return -1 if a.score > b.score else 1
        return -1 if a.score < b.score else 1

    if a.id == b.id:
        return 0
    return -1 if a.id < b.id else 1


def sort_entries(entries: Sequence[E], higher_is_better: bool) -> list[E]:
    return sorted(entries, key=cmp_to_key(lambda a, b: compare_entries(a, b, higher_is_better)))


def assign_ranks(sorted_entries: Sequence[E]) -> list[tuple[E, int]]:
    # 1..N, no gaps, no ties
    return [(entry, i) for i, entry in enumerate(sorted_entries, start=1)]


def select_winners(sorted_entries: Sequence[E], prizes: Sequence[P]) -> list[tuple[P, E]]:
    """
    Maps each prize (ascending position) to the entry holding that rank.
    Prizes past the last entry get no winner.
    """
    out: list[tuple[P, E]] = []
    for prize in sorted(prizes, key=lambda p: p.position):
        if 1 <= prize.position <= len(sorted_entries):
            out.append((prize, sorted_entries[prize.position - 1]))
    return out
