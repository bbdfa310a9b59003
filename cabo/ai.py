from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .types import Card, ExplainInfo, MultiSwapEval
from .state import GameState, _emit, _top_discard
from .estimator import estimate_win_probability, view_for, with_multi_swap
from .actions import (
    discard_drawn,
    draw_from_deck,
    draw_from_discard,
    multi_swap,
    peek,
    record_round_end_call,
    swap_drawn_into_slot,
    swap_with_opponent,
)


def _opponents(state: GameState, pid: int) -> List[int]:
    return [i for i in range(len(state.players)) if i != pid]


def evaluate_multi_swaps(state: GameState, pid: int, drawn: Card) -> List[MultiSwapEval]:
    """Win probability before/after each possible multi-swap of ``drawn``.

    One candidate per value held at least twice, in order of first
    appearance in the hand. Probes run on detached views only.
    """
    hand = state.players[pid].hand
    groups: Dict[int, List[int]] = {}
    for i, card in enumerate(hand):
        groups.setdefault(card.value, []).append(i)
    pairs = [(v, idx) for v, idx in groups.items() if len(idx) > 1]
    if not pairs:
        return []
    samples = state.cfg.bot_samples
    base = view_for(state, pid)
    before = estimate_win_probability(base, pid, samples, state.rng)
    evals: List[MultiSwapEval] = []
    for value, indices in pairs:
        probe = with_multi_swap(base, drawn, indices, [hand[i] for i in indices])
        after = estimate_win_probability(probe, pid, samples, state.rng)
        evals.append(MultiSwapEval(value=value, indices=tuple(indices), prob_before=before, prob_after=after))
    return evals


def _peek_self(state: GameState, pid: int) -> bool:
    bot = state.players[pid]
    unknown = bot.knowledge.unknown_slots(pid, len(bot.hand))
    if not unknown:
        return False
    peek(state, pid, pid, unknown[0])
    return True


def _peek_opponent(state: GameState, pid: int) -> bool:
    bot = state.players[pid]
    opponents = _opponents(state, pid)
    state.rng.shuffle(opponents)
    for target in opponents:
        unknown = bot.knowledge.unknown_slots(target, len(state.players[target].hand))
        if unknown:
            peek(state, pid, target, unknown[0])
            return True
    return False


def _swap_ability(state: GameState, pid: int) -> bool:
    bot = state.players[pid]
    own_v, own_slot = bot.knowledge.highest_known(pid, len(bot.hand))
    if own_slot == -1 or own_v <= state.cfg.swap_ability_min:
        return False
    opponents = _opponents(state, pid)
    best: Optional[Tuple[int, int, int]] = None  # (value, target, slot)
    for target in opponents:
        v, slot = bot.knowledge.lowest_known(target, len(state.players[target].hand))
        if slot != -1 and (best is None or v < best[0]):
            best = (v, target, slot)
    if best is not None and own_v > best[0]:
        swap_with_opponent(state, pid, own_slot, best[1], best[2])
        return True
    # Trade the high card blind for an opponent's unknown slot
    state.rng.shuffle(opponents)
    for target in opponents:
        unknown = bot.knowledge.unknown_slots(target, len(state.players[target].hand))
        if unknown:
            swap_with_opponent(state, pid, own_slot, target, unknown[0])
            return True
    return False


def use_ability(state: GameState, pid: int, card: Card) -> bool:
    if card.ability == "peek_self":
        return _peek_self(state, pid)
    if card.ability == "peek_opponent":
        return _peek_opponent(state, pid)
    if card.ability == "swap":
        return _swap_ability(state, pid)
    return False


def _place_or_discard(state: GameState, pid: int, drawn: Card) -> str:
    bot = state.players[pid]
    max_v, max_slot = bot.knowledge.highest_known(pid, len(bot.hand))
    if drawn.value < max_v:
        swap_drawn_into_slot(state, pid, max_slot)
        return f"AI_PICK: swap drawn {drawn.value} for known {max_v}"
    unknown = bot.knowledge.unknown_slots(pid, len(bot.hand))
    if unknown and drawn.value <= state.cfg.speculative_max:
        swap_drawn_into_slot(state, pid, unknown[0])
        return f"AI_PICK: swap drawn {drawn.value} into unknown slot {unknown[0] + 1}"
    discard_drawn(state, pid)
    return f"AI_PICK: discard drawn {drawn.value}"


def bot_take_turn(state: GameState) -> ExplainInfo:
    """Play one full turn for the active bot (without advancing the turn)."""
    pid = state.current_idx
    bot = state.players[pid]
    assert bot.is_bot, "Active player is not a bot"
    cfg = state.cfg
    top = _top_discard(state)
    evals: List[MultiSwapEval] = []
    reason = ""

    max_v, max_slot = bot.knowledge.highest_known(pid, len(bot.hand))
    if top is not None and top.value <= cfg.take_discard_max and (max_slot == -1 or top.value < max_v):
        draw_from_discard(state, pid)
        slot = max_slot if max_slot != -1 else state.rng.randrange(len(bot.hand))
        swap_drawn_into_slot(state, pid, slot, face_up=True)
        reason = f"AI_PICK: take discard {top.value} into slot {slot + 1}"
    else:
        drawn = draw_from_deck(state, pid)
        if drawn is None:
            _emit(state, "turn_skipped", pid, "deck is empty, skipping turn")
            info = ExplainInfo(candidates=[], pick_reason="AI_PICK: skip (deck empty)")
            state.explain = info
            return info
        evals = evaluate_multi_swaps(state, pid, drawn)
        chosen: Optional[MultiSwapEval] = None
        for ev in evals:
            reason += f"AI_EVAL: multi-swap {len(ev.indices)} x {ev.value} -> {ev.prob_before:.3f} => {ev.prob_after:.3f}\n"
            if ev.gain > cfg.multi_swap_threshold:
                chosen = ev
                break
        if chosen is not None:
            multi_swap(state, pid, chosen.indices)
            reason += f"AI_PICK: multi-swap {len(chosen.indices)} x {chosen.value}"
        elif drawn.ability != "none" and use_ability(state, pid, drawn):
            discard_drawn(state, pid, "discarded used ability card")
            reason += f"AI_PICK: use ability {drawn.ability}"
        else:
            reason += _place_or_discard(state, pid, drawn)

    win_prob: Optional[float] = None
    if state.cabo_called_by is None:
        win_prob = estimate_win_probability(state, pid, cfg.bot_samples, state.rng)
        if win_prob >= cfg.cabo_threshold:
            record_round_end_call(state, pid, win_prob)
            reason += f"\nAI_PICK: call round end (p={win_prob:.3f})"
    info = ExplainInfo(candidates=evals, pick_reason=reason, win_prob=win_prob)
    state.explain = info
    return info
