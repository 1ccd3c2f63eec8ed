from __future__ import annotations

from dataclasses import dataclass

from leaderboards.utils.ranking import assign_ranks, compare_entries, select_winners, sort_entries


@dataclass
class _Entry:
    id: str
    score: float


@dataclass
class _Prize:
    position: int


def test_higher_is_better_sorts_larger_first():
    assert compare_entries(_Entry("a", 10), _Entry("b", 5), True) < 0
    assert compare_entries(_Entry("a", 5), _Entry("b", 10), True) > 0


def test_lower_is_better_sorts_smaller_first():
    assert compare_entries(_Entry("a", 5), _Entry("b", 10), False) < 0
    assert compare_entries(_Entry("a", 10), _Entry("b", 5), False) > 0


def test_equal_scores_break_on_id_regardless_of_polarity():
    for higher_is_better in (True, False):
        assert compare_entries(_Entry("a", 7), _Entry("b", 7), higher_is_better) < 0
        assert compare_entries(_Entry("b", 7), _Entry("a", 7), higher_is_better) > 0


def test_only_same_entry_compares_equal():
    assert compare_entries(_Entry("a", 7), _Entry("a", 7), True) == 0


def test_ties_get_adjacent_distinct_ranks():
    entries = [_Entry("c", 5), _Entry("b", 10), _Entry("a", 10)]

    ranked = assign_ranks(sort_entries(entries, True))

    assert [(e.id, r) for e, r in ranked] == [("a", 1), ("b", 2), ("c", 3)]


def test_sort_is_independent_of_input_order():
    entries = [_Entry("e1", 3), _Entry("e2", 1.5), _Entry("e3", 3), _Entry("e4", 0)]
    expected = [e.id for e in sort_entries(entries, False)]

    assert [e.id for e in sort_entries(list(reversed(entries)), False)] == expected
    assert expected == ["e4", "e2", "e1", "e3"]


def test_select_winners_skips_positions_without_entries():
    entries = sort_entries([_Entry("a", 1)], True)
    prizes = [_Prize(3), _Prize(1), _Prize(2)]

    winners = select_winners(entries, prizes)

    assert [(p.position, e.id) for p, e in winners] == [(1, "a")]


def test_select_winners_uses_prize_position_as_rank():
    entries = sort_entries([_Entry("a", 9), _Entry("b", 8), _Entry("c", 7)], True)

    winners = select_winners(entries, [_Prize(1), _Prize(3)])

    assert [(p.position, e.id) for p, e in winners] == [(1, "a"), (3, "c")]
