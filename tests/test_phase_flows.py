import pytest

from cabo import (
    AbilitySwap,
    CANONICAL_VALUES,
    Card,
    GameConfig,
    Playing,
    PostDrawAction,
    SwappingFromDiscard,
    apply_human_action,
    new_game,
)


def _card(value: int, nth: int = 0) -> Card:
    idents = [i for i, v in enumerate(CANONICAL_VALUES) if v == value]
    return Card(value, idents[nth])


def _state(seed: int = 1):
    return new_game(GameConfig(ui_samples=50, bot_samples=50, history_samples=0, seed=seed))


def test_discard_draw_is_placed_face_up_and_public():
    state = _state()
    top = state.discard[-1]
    old = state.players[0].hand[2]
    assert apply_human_action(state, "draw_from_discard")
    assert isinstance(state.phase, SwappingFromDiscard)
    # Taking from the discard commits to a swap
    assert not apply_human_action(state, "discard_drawn")
    assert apply_human_action(state, "select_slot", target=0, slot=2)
    placed = state.players[0].hand[2]
    assert placed.value == top.value and placed.face_up
    for p in state.players:
        assert p.knowledge.get(0, 2) == placed
    assert state.discard[-1] == old
    assert state.current_idx == 1


def test_actions_in_the_wrong_phase_are_rejected():
    state = _state()
    assert not apply_human_action(state, "choose_swap")
    assert not apply_human_action(state, "confirm_multi_swap")
    assert not apply_human_action(state, "select_slot", target=0, slot=0)
    assert isinstance(state.phase, Playing)
    assert state.message
    assert apply_human_action(state, "draw_from_deck")
    assert isinstance(state.phase, PostDrawAction)
    assert not apply_human_action(state, "draw_from_deck")
    assert not apply_human_action(state, "declare_round_end")
    assert state.logs[-1].startswith("T1 REJECTED: ")


def test_drawn_card_without_ability_cannot_use_one():
    state = _state()
    state.deck.append(_card(3, 3))
    apply_human_action(state, "draw_from_deck")
    assert not apply_human_action(state, "choose_ability")
    assert isinstance(state.phase, PostDrawAction)


def test_swap_from_deck_can_still_discard():
    state = _state()
    state.deck.append(_card(6, 2))
    apply_human_action(state, "draw_from_deck")
    assert apply_human_action(state, "choose_swap")
    assert apply_human_action(state, "discard_drawn")
    assert state.discard[-1] == _card(6, 2)
    assert state.current_idx == 1


def test_swap_ability_moves_knowledge_with_the_cards():
    state = _state(seed=8)
    state.deck.append(_card(12, 3))
    me, opp = state.players[0], state.players[3]
    mine = me.hand[0]
    theirs = opp.hand[1]
    assert apply_human_action(state, "draw_from_deck")
    assert apply_human_action(state, "choose_ability")
    assert isinstance(state.phase, AbilitySwap) and state.phase.own_slot is None
    assert not apply_human_action(state, "select_slot", target=3, slot=1)
    assert apply_human_action(state, "select_slot", target=0, slot=0)
    assert state.phase == AbilitySwap(own_slot=0)
    assert apply_human_action(state, "select_slot", target=3, slot=1)

    assert me.hand[0] == theirs and opp.hand[1] == mine
    # The actor never saw the incoming card; it carries the old belief along
    assert me.knowledge.get(0, 0) is None
    assert me.knowledge.get(3, 1) == mine
    assert opp.knowledge.get(3, 1) == mine
    assert state.discard[-1] == _card(12, 3)
    assert state.current_idx == 1


def test_empty_deck_skips_the_turn():
    state = _state()
    hand = list(state.players[0].hand)
    state.deck = []
    assert apply_human_action(state, "draw_from_deck")
    assert state.players[0].hand == hand
    assert state.current_idx == 1
    assert any(ev.kind == "turn_skipped" for ev in state.events)


def test_empty_discard_cannot_be_drawn():
    state = _state()
    state.discard = []
    assert not apply_human_action(state, "draw_from_discard")
    assert isinstance(state.phase, Playing)


def test_human_actions_refused_on_bot_turn():
    state = _state()
    state.current_idx = 2
    assert not apply_human_action(state, "draw_from_deck")
    assert "not your turn" in state.message


def test_unknown_action_raises():
    state = _state()
    with pytest.raises(ValueError):
        apply_human_action(state, "flip_table")
