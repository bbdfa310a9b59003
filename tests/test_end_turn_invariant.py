from cabo import (
    AbilityPeekSelf,
    CANONICAL_VALUES,
    DECK_SIZE,
    Card,
    GameConfig,
    Playing,
    apply_human_action,
    new_game,
    run_bots,
    step,
)


def _card(value: int, nth: int = 0) -> Card:
    idents = [i for i, v in enumerate(CANONICAL_VALUES) if v == value]
    return Card(value, idents[nth])


def _total_cards(state) -> int:
    held = 1 if state.drawn is not None else 0
    return len(state.deck) + len(state.discard) + sum(len(p.hand) for p in state.players) + held


def test_finished_turn_leaves_no_drawn_card():
    state = new_game(GameConfig(ui_samples=50, bot_samples=50, history_samples=0, seed=2))
    state.deck.append(_card(7, 1))
    assert apply_human_action(state, "draw_from_deck")
    assert apply_human_action(state, "choose_ability")
    assert isinstance(state.phase, AbilityPeekSelf)
    assert apply_human_action(state, "select_slot", target=0, slot=3)
    assert state.drawn is None
    assert isinstance(state.phase, Playing)
    assert state.message == ""
    assert state.players[0].knowledge.get(0, 3) == state.players[0].hand[3]
    assert state.turn_number == 2


def test_bot_turns_keep_card_count_and_end_clean():
    players = [("AI", "B0"), ("AI", "B1"), ("AI", "B2"), ("AI", "B3")]
    cfg = GameConfig(players=players, ui_samples=30, bot_samples=30, history_samples=0, seed=21, cabo_threshold=0.0)
    state = new_game(cfg)
    assert _total_cards(state) == DECK_SIZE
    while step(state):
        assert state.drawn is None
        assert state.phase.kind in ("playing", "game_over")
        assert _total_cards(state) == DECK_SIZE
        assert all(1 <= len(p.hand) <= 4 for p in state.players)
    assert state.is_over


def test_run_bots_stops_at_round_end():
    players = [("AI", "B0"), ("AI", "B1"), ("AI", "B2"), ("AI", "B3")]
    cfg = GameConfig(players=players, ui_samples=30, bot_samples=30, history_samples=0, seed=4, cabo_threshold=0.0)
    state = new_game(cfg)
    # The first bot calls immediately, the other three get one turn each
    assert run_bots(state) == 4
    assert state.is_over
    assert state.round_result is not None and state.round_result.caller == 0
    assert run_bots(state) == 0
