from .types import (
    ABILITY_LABELS,
    Card,
    Ability,
    PlayerKind,
    Phase,
    Playing,
    PostDrawAction,
    SwappingFromDeck,
    SwappingFromDiscard,
    MultiSwapSelection,
    AbilityPeekSelf,
    AbilityPeekOpponent,
    AbilitySwap,
    GameOver,
    GameEvent,
    MultiSwapEval,
    ExplainInfo,
    NUM_PLAYERS,
    HAND_SIZE,
    HUMAN_ID,
    ability_for,
)
from .deck import CANONICAL_VALUES, DECK_SIZE, EXPECTED_UNKNOWN_VALUE, UnknownPool, build_deck, canonical_deck
from .knowledge import Knowledge, reveal, broadcast
from .state import GameConfig, Player, GameState, RoundResult
from .estimator import EstimatorView, view_for, with_multi_swap, estimate_win_probability
from .ai import bot_take_turn, evaluate_multi_swaps
from .core import (
    HUMAN_ACTIONS,
    new_game,
    next_round,
    apply_human_action,
    draw_from_deck,
    draw_from_discard,
    choose_swap,
    choose_multi_swap,
    cancel_multi_swap,
    confirm_multi_swap,
    choose_ability,
    discard_drawn_card,
    declare_round_end,
    select_slot,
    end_player_turn,
    advance_turn,
    finish_round_and_score,
    is_game_over,
    step,
    run_bots,
    win_probability,
    to_json,
)

__all__ = [
    "ABILITY_LABELS",
    "Card",
    "Ability",
    "PlayerKind",
    "Phase",
    "Playing",
    "PostDrawAction",
    "SwappingFromDeck",
    "SwappingFromDiscard",
    "MultiSwapSelection",
    "AbilityPeekSelf",
    "AbilityPeekOpponent",
    "AbilitySwap",
    "GameOver",
    "GameEvent",
    "MultiSwapEval",
    "ExplainInfo",
    "NUM_PLAYERS",
    "HAND_SIZE",
    "HUMAN_ID",
    "ability_for",
    "CANONICAL_VALUES",
    "DECK_SIZE",
    "EXPECTED_UNKNOWN_VALUE",
    "UnknownPool",
    "build_deck",
    "canonical_deck",
    "Knowledge",
    "reveal",
    "broadcast",
    "GameConfig",
    "Player",
    "GameState",
    "RoundResult",
    "EstimatorView",
    "view_for",
    "with_multi_swap",
    "estimate_win_probability",
    "bot_take_turn",
    "evaluate_multi_swaps",
    "HUMAN_ACTIONS",
    "new_game",
    "next_round",
    "apply_human_action",
    "draw_from_deck",
    "draw_from_discard",
    "choose_swap",
    "choose_multi_swap",
    "cancel_multi_swap",
    "confirm_multi_swap",
    "choose_ability",
    "discard_drawn_card",
    "declare_round_end",
    "select_slot",
    "end_player_turn",
    "advance_turn",
    "finish_round_and_score",
    "is_game_over",
    "step",
    "run_bots",
    "win_probability",
    "to_json",
]
