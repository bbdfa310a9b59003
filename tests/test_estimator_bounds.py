import copy
import random
from typing import List

from cabo import (
    Card,
    GameConfig,
    GameOver,
    canonical_deck,
    estimate_win_probability,
    new_game,
    reveal,
    view_for,
    with_multi_swap,
)


def _cfg() -> GameConfig:
    return GameConfig(ui_samples=100, bot_samples=100, history_samples=0, seed=5)


def _determined_state(hand_values: List[List[int]]):
    # Every card is either in a hand known to player 0 or face-up in the discard
    state = new_game(_cfg())
    pool = canonical_deck()

    def take(v: int) -> Card:
        for i, c in enumerate(pool):
            if c.value == v:
                return pool.pop(i)
        raise AssertionError(f"no {v} left")

    for p, values in zip(state.players, hand_values):
        p.hand = [take(v) for v in values]
    state.deck = []
    state.discard = list(pool)
    for p in state.players:
        for c, card in enumerate(p.hand):
            reveal(state.players, 0, p.id, c, card)
    return state


def test_probability_is_within_unit_interval():
    state = new_game(_cfg())
    for pid in range(4):
        p = estimate_win_probability(state, pid, 200, random.Random(pid))
        assert 0.0 <= p <= 1.0


def test_empty_pool_unique_minimum_is_certain_win():
    state = _determined_state([[0, 0, 1, 1], [2, 2, 2, 2], [3, 3, 3, 3], [4, 4, 4, 4]])
    assert view_for(state, 0).unknown_pool() == []
    assert estimate_win_probability(state, 0, 200) == 1.0


def test_empty_pool_not_minimum_is_certain_loss():
    state = _determined_state([[13, 13, 12, 12], [0, 0, 1, 1], [2, 2, 2, 2], [3, 3, 3, 3]])
    assert estimate_win_probability(state, 0, 200) == 0.0


def test_empty_pool_tie_counts_as_win():
    state = _determined_state([[1, 1, 1, 1], [2, 2, 0, 0], [5, 5, 5, 5], [6, 6, 6, 6]])
    assert estimate_win_probability(state, 0, 200) == 1.0


def test_round_over_returns_zero():
    state = new_game(_cfg())
    state.phase = GameOver()
    assert estimate_win_probability(state, 0, 200) == 0.0


def test_estimate_never_mutates_live_state():
    state = new_game(_cfg())
    hands = [list(p.hand) for p in state.players]
    rows = [copy.deepcopy(p.knowledge.rows) for p in state.players]
    discard = list(state.discard)
    deck = list(state.deck)
    for pid in range(4):
        estimate_win_probability(state, pid, 100)
    assert [list(p.hand) for p in state.players] == hands
    assert [p.knowledge.rows for p in state.players] == rows
    assert state.discard == discard
    assert state.deck == deck


def test_multi_swap_view_is_detached():
    state = new_game(_cfg())
    me = state.players[0]
    deck = canonical_deck()
    me.hand = [deck[20], deck[21], deck[36], deck[8]]  # 5, 5, 9, 2
    for c, card in enumerate(me.hand):
        reveal(state.players, 0, 0, c, card)
    drawn = deck[4]  # 1
    view = view_for(state, 0)
    probe = with_multi_swap(view, drawn, (0, 1), [me.hand[0], me.hand[1]])
    assert probe.hand_lens[0] == 3
    assert probe.rows[0][:3] == (deck[36], deck[8], drawn)
    assert probe.rows[0][3] is None
    assert {20, 21} <= probe.discard_idents
    # Original view and live state untouched
    assert view.hand_lens[0] == 4
    assert len(me.hand) == 4
    assert me.knowledge.get(0, 0) == deck[20]
    p = estimate_win_probability(probe, 0, 100)
    assert 0.0 <= p <= 1.0
