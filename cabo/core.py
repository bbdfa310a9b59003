from __future__ import annotations

from typing import Any, Dict, List, Optional
import random

from .types import (
    ABILITY_LABELS,
    HAND_SIZE,
    HUMAN_ID,
    NUM_PLAYERS,
    AbilitySwap,
    AbilityPeekOpponent,
    AbilityPeekSelf,
    Card,
    GameOver,
    MultiSwapSelection,
    Phase,
    Playing,
    PostDrawAction,
    SwappingFromDeck,
    SwappingFromDiscard,
    phase_for_ability,
)
from .deck import UnknownPool, build_deck
from .knowledge import reveal
from .state import (
    GameConfig,
    GameState,
    Player,
    RoundResult,
    _append_log,
    _emit,
    _player,
    _reject,
    _top_discard,
)
from .estimator import estimate_win_probability, view_for
from .actions import (
    discard_drawn,
    draw_from_deck as _draw_from_deck,
    draw_from_discard as _draw_from_discard,
    multi_swap,
    peek,
    record_round_end_call,
    swap_drawn_into_slot,
    swap_with_opponent,
)
from .ai import bot_take_turn


HUMAN_ACTIONS = (
    "draw_from_deck",
    "draw_from_discard",
    "choose_swap",
    "choose_multi_swap",
    "choose_ability",
    "select_slot",
    "confirm_multi_swap",
    "cancel_multi_swap",
    "discard_drawn",
    "declare_round_end",
)


# --- Round setup ---

def _record_history(state: GameState) -> None:
    samples = state.cfg.history_samples
    if samples <= 0 or state.is_over:
        return
    state.win_history.append(
        [estimate_win_probability(state, i, samples, state.rng) for i in range(len(state.players))]
    )


def _deal_round(cfg: GameConfig, rng: random.Random, totals: List[int], round_number: int) -> GameState:
    assert len(cfg.players) == NUM_PLAYERS, f"Exactly {NUM_PLAYERS} players are required"
    players = [Player(id=i, name=name, kind=kind) for i, (kind, name) in enumerate(cfg.players)]
    state = GameState(
        cfg=cfg,
        players=players,
        deck=build_deck(rng),
        discard=[],
        rng=rng,
        total_scores=list(totals),
        round_number=round_number,
    )
    for _ in range(HAND_SIZE):
        for p in players:
            p.hand.append(state.deck.pop())
    state.discard.append(state.deck.pop())
    # Everyone secretly looks at their first two cards
    for p in players:
        reveal(players, p.id, p.id, 0, p.hand[0])
        reveal(players, p.id, p.id, 1, p.hand[1])
    _emit(state, "round_started", None, f"round {round_number} started", round=round_number)
    _record_history(state)
    return state


def new_game(cfg: Optional[GameConfig] = None) -> GameState:
    cfg = cfg or GameConfig()
    rng = random.Random(cfg.seed)
    return _deal_round(cfg, rng, [0] * NUM_PLAYERS, 1)


def next_round(state: GameState) -> GameState:
    """New round state replacing ``state``; running totals carry over."""
    return _deal_round(state.cfg, state.rng, state.total_scores, state.round_number + 1)


# --- Turn lifecycle ---

def finish_round_and_score(state: GameState) -> RoundResult:
    if state.round_result is not None:
        return state.round_result
    raw = [p.hand_points() for p in state.players]
    min_score = min(raw)
    winners = [i for i, s in enumerate(raw) if s == min_score]
    penalties = [0] * len(raw)
    caller = state.cabo_called_by
    if caller is not None and caller not in winners:
        penalties[caller] = state.cfg.cabo_fail_penalty
        _append_log(state, f"T{state.turn_number} PENALTY: {state.players[caller].name} +{penalties[caller]}")
    result = RoundResult(raw=raw, penalties=penalties, winners=winners, caller=caller)
    for i, s in enumerate(result.round_scores):
        state.total_scores[i] += s
    state.round_result = result
    state.phase = GameOver()
    state.drawn = None
    names = ", ".join(state.players[i].name for i in winners)
    _emit(
        state,
        "round_ended",
        None,
        f"lowest: {names}; scores {result.round_scores}",
        raw=list(raw),
        penalties=list(penalties),
        winners=list(winners),
        totals=list(state.total_scores),
    )
    return result


def advance_turn(state: GameState) -> None:
    n = len(state.players)
    if state.cabo_called_by is not None and state.current_idx == state.last_turn_player:
        finish_round_and_score(state)
        return
    state.current_idx = (state.current_idx + 1) % n
    if state.current_idx == state.cabo_called_by:
        finish_round_and_score(state)
        return
    state.turn_number += 1
    state.phase = Playing()
    _record_history(state)


def end_player_turn(state: GameState) -> None:
    if state.drawn is not None:
        discard_drawn(state, state.current_idx, "turn ended holding")
    state.phase = Playing()
    state.message = ""
    advance_turn(state)


def is_game_over(state: GameState) -> bool:
    return any(t >= state.cfg.score_limit for t in state.total_scores)


# --- Human action handlers: each returns False when rejected ---

def _guard(state: GameState, *phases: type) -> Optional[str]:
    if state.is_over:
        return "The round is over."
    if _player(state).is_bot:
        return "It is not your turn."
    if phases and not isinstance(state.phase, phases):
        return f"Not allowed during {state.phase.kind}."
    return None


def draw_from_deck(state: GameState) -> bool:
    err = _guard(state, Playing)
    if err:
        return _reject(state, err)
    pid = state.current_idx
    if _draw_from_deck(state, pid) is None:
        _emit(state, "turn_skipped", pid, "deck is empty, skipping turn")
        end_player_turn(state)
        return True
    state.phase = PostDrawAction()
    state.message = ""
    return True


def draw_from_discard(state: GameState) -> bool:
    err = _guard(state, Playing)
    if err:
        return _reject(state, err)
    if _draw_from_discard(state, state.current_idx) is None:
        return _reject(state, "The discard pile is empty.")
    state.phase = SwappingFromDiscard()
    state.message = "Pick a card to replace; the new card stays face-up."
    return True


def choose_swap(state: GameState) -> bool:
    err = _guard(state, PostDrawAction)
    if err:
        return _reject(state, err)
    state.phase = SwappingFromDeck()
    state.message = "Pick a card to replace, or discard the drawn card."
    return True


def choose_multi_swap(state: GameState) -> bool:
    err = _guard(state, PostDrawAction)
    if err:
        return _reject(state, err)
    state.phase = MultiSwapSelection()
    state.message = "Select all your cards of one value, then confirm."
    return True


def cancel_multi_swap(state: GameState) -> bool:
    err = _guard(state, MultiSwapSelection)
    if err:
        return _reject(state, err)
    state.phase = PostDrawAction()
    state.message = ""
    return True


def confirm_multi_swap(state: GameState) -> bool:
    err = _guard(state, MultiSwapSelection)
    if err:
        return _reject(state, err)
    assert isinstance(state.phase, MultiSwapSelection)
    selected = state.phase.selected
    if not selected:
        return _reject(state, "Select at least one card.")
    hand = _player(state).hand
    if len({hand[i].value for i in selected}) != 1:
        state.phase = MultiSwapSelection()
        return _reject(state, "Selected cards do not all share one value; selection cleared.")
    multi_swap(state, state.current_idx, selected)
    end_player_turn(state)
    return True


def choose_ability(state: GameState) -> bool:
    err = _guard(state, PostDrawAction)
    if err:
        return _reject(state, err)
    drawn = state.drawn
    assert drawn is not None
    if drawn.ability == "none":
        return _reject(state, f"{drawn.value} has no ability.")
    state.phase = phase_for_ability(drawn.ability)
    state.message = f"Ability: {ABILITY_LABELS[drawn.ability]}. Pick a card."
    _append_log(state, f"T{state.turn_number} [{_player(state).name}] ABILITY: chose {drawn.ability} of {drawn.value}")
    return True


def discard_drawn_card(state: GameState) -> bool:
    err = _guard(state, PostDrawAction, SwappingFromDeck)
    if err:
        return _reject(state, err)
    discard_drawn(state, state.current_idx)
    end_player_turn(state)
    return True


def declare_round_end(state: GameState) -> bool:
    err = _guard(state, Playing)
    if err:
        return _reject(state, err)
    if state.cabo_called_by is not None:
        return _reject(state, "Round end was already called.")
    record_round_end_call(state, state.current_idx)
    end_player_turn(state)
    return True


def _toggle_multi_swap(state: GameState, phase: MultiSwapSelection, slot: int) -> bool:
    hand = _player(state).hand
    if slot in phase.selected:
        state.phase = MultiSwapSelection(tuple(i for i in phase.selected if i != slot))
        return True
    if phase.selected and hand[phase.selected[0]].value != hand[slot].value:
        return _reject(state, "Only cards of the same value can be selected.")
    state.phase = MultiSwapSelection(phase.selected + (slot,))
    return True


def select_slot(state: GameState, target: int, slot: int) -> bool:
    """Click on ``target``'s ``slot``; meaning depends on the phase."""
    err = _guard(state)
    if err:
        return _reject(state, err)
    if not (0 <= target < len(state.players)) or not (0 <= slot < len(state.players[target].hand)):
        return _reject(state, "There is no card there.")
    actor = state.current_idx
    own = target == actor
    ph: Phase = state.phase
    if isinstance(ph, (SwappingFromDeck, SwappingFromDiscard)):
        if not own:
            return _reject(state, "Pick one of your own cards.")
        swap_drawn_into_slot(state, actor, slot, face_up=isinstance(ph, SwappingFromDiscard))
        end_player_turn(state)
        return True
    if isinstance(ph, MultiSwapSelection):
        if not own:
            return _reject(state, "Pick one of your own cards.")
        return _toggle_multi_swap(state, ph, slot)
    if isinstance(ph, AbilityPeekSelf):
        if not own:
            return _reject(state, "Pick one of your own cards.")
        peek(state, actor, actor, slot)
        end_player_turn(state)
        return True
    if isinstance(ph, AbilityPeekOpponent):
        if own:
            return _reject(state, "Pick an opponent's card.")
        peek(state, actor, target, slot)
        end_player_turn(state)
        return True
    if isinstance(ph, AbilitySwap):
        if ph.own_slot is None:
            if not own:
                return _reject(state, "First pick one of your own cards.")
            state.phase = AbilitySwap(own_slot=slot)
            state.message = "Now pick an opponent's card to swap with."
            return True
        if own:
            return _reject(state, "Now pick an opponent's card.")
        swap_with_opponent(state, actor, ph.own_slot, target, slot)
        end_player_turn(state)
        return True
    return _reject(state, f"Not allowed during {ph.kind}.")


def apply_human_action(
    state: GameState,
    action: str,
    *,
    target: Optional[int] = None,
    slot: Optional[int] = None,
) -> bool:
    if action == "draw_from_deck":
        return draw_from_deck(state)
    if action == "draw_from_discard":
        return draw_from_discard(state)
    if action == "choose_swap":
        return choose_swap(state)
    if action == "choose_multi_swap":
        return choose_multi_swap(state)
    if action == "choose_ability":
        return choose_ability(state)
    if action == "confirm_multi_swap":
        return confirm_multi_swap(state)
    if action == "cancel_multi_swap":
        return cancel_multi_swap(state)
    if action == "discard_drawn":
        return discard_drawn_card(state)
    if action == "declare_round_end":
        return declare_round_end(state)
    if action == "select_slot":
        if slot is None:
            return _reject(state, "select_slot needs a slot.")
        return select_slot(state, state.current_idx if target is None else target, slot)
    raise ValueError(f"Unknown action: {action}")


# --- Bot driving ---

def step(state: GameState) -> bool:
    """Play one bot turn if a bot is active. Returns False when a human must act."""
    if state.is_over:
        return False
    if not _player(state).is_bot:
        return False
    assert isinstance(state.phase, Playing), "Bot turn must start in playing phase"
    bot_take_turn(state)
    end_player_turn(state)
    return True


def run_bots(state: GameState, max_turns: int = 500) -> int:
    turns = 0
    while turns < max_turns and step(state):
        turns += 1
    return turns


def win_probability(state: GameState, player_id: int = HUMAN_ID, samples: Optional[int] = None) -> float:
    n = state.cfg.ui_samples if samples is None else samples
    return estimate_win_probability(state, player_id, n, state.rng)


# --- JSON snapshot (pure, no I/O) ---

def _card_view(state: GameState, viewer: int, target: int, slot: int) -> Dict[str, object]:
    card = state.players[target].hand[slot]
    belief = state.players[viewer].knowledge.get(target, slot)
    value: Optional[int] = None
    if state.is_over or card.face_up:
        value = card.value
    elif belief is not None:
        value = belief.value
    return {
        "slot": slot,
        "value": value,
        "known": belief is not None,
        "faceUp": bool(card.face_up),
    }


def _phase_obj(ph: Phase) -> Dict[str, object]:
    obj: Dict[str, object] = {"kind": ph.kind}
    if isinstance(ph, MultiSwapSelection):
        obj["selected"] = list(ph.selected)
    if isinstance(ph, AbilitySwap):
        obj["ownSlot"] = ph.own_slot
    return obj


def _card_obj(card: Optional[Card]) -> Optional[Dict[str, object]]:
    if card is None:
        return None
    return {"value": int(card.value), "ability": card.ability, "faceUp": bool(card.face_up)}


def to_json(state: GameState, viewer: int = HUMAN_ID) -> Dict[str, object]:
    players_obj: List[Dict[str, object]] = []
    for p in state.players:
        players_obj.append({
            "id": p.id,
            "name": p.name,
            "kind": p.kind,
            "totalScore": int(state.total_scores[p.id]),
            "hand": [_card_view(state, viewer, p.id, c) for c in range(len(p.hand))],
        })

    pool = UnknownPool(view_for(state, viewer).unknown_pool())
    pool_summary = {
        "remainingTotal": pool.remaining_total(),
        "valuesDist": {str(k): int(v) for k, v in pool.remaining_values_distribution().items()},
        "expectedValue": float(pool.expected_value_unseen()),
        "pLowCard": float(pool.p_value_le(state.cfg.take_discard_max)),
    }

    result_obj: Optional[Dict[str, object]] = None
    if state.round_result is not None:
        rr = state.round_result
        result_obj = {
            "raw": list(rr.raw),
            "penalties": list(rr.penalties),
            "roundScores": rr.round_scores,
            "winners": list(rr.winners),
            "caller": rr.caller,
        }

    explain_obj: Optional[Dict[str, object]] = None
    if state.explain is not None:
        explain_obj = {
            "candidates": [
                {
                    "value": ev.value,
                    "indices": list(ev.indices),
                    "before": float(ev.prob_before),
                    "after": float(ev.prob_after),
                }
                for ev in state.explain.candidates
            ],
            "reason": state.explain.pick_reason,
            "winProb": state.explain.win_prob,
        }

    holding = state.drawn is not None
    data: Dict[str, object] = {
        "schemaVersion": 1,
        "config": {
            "caboFailPenalty": int(state.cfg.cabo_fail_penalty),
            "scoreLimit": int(state.cfg.score_limit),
        },
        "viewer": viewer,
        "roundNumber": state.round_number,
        "turnNumber": state.turn_number,
        "currentPlayerId": state.current_idx,
        "phase": _phase_obj(state.phase),
        "players": players_obj,
        "deckCount": len(state.deck),
        "discardTop": _card_obj(_top_discard(state)),
        "discardCount": len(state.discard),
        "hasDrawn": holding,
        "drawn": _card_obj(state.drawn) if holding and viewer == state.current_idx else None,
        "caboCalledBy": state.cabo_called_by,
        "totalScores": list(state.total_scores),
        "roundResult": result_obj,
        "message": state.message,
        "lastReveal": dict(state.last_reveal) if state.last_reveal is not None and state.last_reveal.get("observer") == viewer else None,
        "unknownPool": pool_summary,
        "winHistory": [list(row) for row in state.win_history],
        "events": [
            {
                "id": ev.id,
                "kind": ev.kind,
                "playerId": ev.player_id,
                "turn": ev.turn,
                "message": ev.message,
                "payload": dict(ev.payload),
            }
            for ev in state.events
        ],
        "logs": list(state.logs),
    }
    if explain_obj is not None:
        data["explain"] = explain_obj
    return data
