from __future__ import annotations

from typing import List, Optional, Sequence

from .types import Card, HAND_SIZE
from .knowledge import broadcast, reveal
from .state import GameState, _emit


# Card-moving primitives. Callers validate phase and turn; these only assert
# the physical invariants and keep knowledge tables consistent.

def draw_from_deck(state: GameState, pid: int) -> Optional[Card]:
    assert state.drawn is None, "Already holding a drawn card"
    if not state.deck:
        return None
    card = state.deck.pop()
    state.drawn = card
    _emit(state, "card_drawn", pid, f"drew from deck ({card.value})", source="deck", value=card.value)
    return card


def draw_from_discard(state: GameState, pid: int) -> Optional[Card]:
    assert state.drawn is None, "Already holding a drawn card"
    if not state.discard:
        return None
    card = state.discard.pop()
    state.drawn = card
    _emit(state, "card_drawn", pid, f"took {card.value} from discard", source="discard", value=card.value)
    return card


def discard_drawn(state: GameState, pid: int, reason: str = "discarded drawn card") -> Optional[Card]:
    card = state.drawn
    if card is None:
        return None
    state.discard.append(card)
    state.drawn = None
    _emit(state, "card_discarded", pid, f"{reason} ({card.value})", value=card.value)
    return card


def swap_drawn_into_slot(state: GameState, pid: int, slot: int, face_up: bool = False) -> Card:
    # Face-up placements are public; otherwise only the actor learns the card
    card = state.drawn
    assert card is not None, "No drawn card to swap"
    hand = state.players[pid].hand
    assert 0 <= slot < len(hand), f"Invalid slot: {slot}"
    old = hand[slot]
    if face_up:
        card = card.turned_face_up()
    hand[slot] = card
    if face_up:
        broadcast(state.players, pid, slot, card)
    else:
        reveal(state.players, pid, pid, slot, card)
    state.discard.append(old)
    state.drawn = None
    _emit(
        state,
        "card_swapped",
        pid,
        f"placed {card.value} in slot {slot + 1}, discarded {old.value}" + (" (face-up)" if face_up else ""),
        slot=slot,
        value=card.value,
        replaced=old.value,
        face_up=face_up,
    )
    return old


def multi_swap(state: GameState, pid: int, indices: Sequence[int]) -> List[Card]:
    drawn = state.drawn
    assert drawn is not None, "No drawn card for multi-swap"
    p = state.players[pid]
    selected = set(indices)
    assert selected and all(0 <= i < len(p.hand) for i in selected), "Invalid multi-swap indices"
    values = {p.hand[i].value for i in selected}
    assert len(values) == 1, "Multi-swap cards must share one value"
    discarded: List[Card] = []
    new_hand: List[Card] = []
    new_row: List[Optional[Card]] = []
    for i, card in enumerate(p.hand):
        if i in selected:
            discarded.append(card)
        else:
            new_hand.append(card)
            new_row.append(p.knowledge.get(pid, i))
    new_hand.append(drawn)
    new_row.append(drawn)
    while len(new_row) < HAND_SIZE:
        new_row.append(None)
    p.hand = new_hand
    for slot, known in enumerate(new_row):
        reveal(state.players, pid, pid, slot, known)
    state.discard.extend(discarded)
    state.drawn = None
    value = discarded[0].value
    _emit(
        state,
        "card_swapped",
        pid,
        f"multi-swap: {len(discarded)} x {value} for drawn {drawn.value}",
        multi=True,
        count=len(discarded),
        value=drawn.value,
        replaced=value,
    )
    return discarded


def peek(state: GameState, actor: int, target: int, slot: int) -> Card:
    hand = state.players[target].hand
    assert 0 <= slot < len(hand), f"Invalid slot: {slot}"
    card = hand[slot]
    reveal(state.players, actor, target, slot, card)
    state.last_reveal = {"observer": actor, "target": target, "slot": slot, "value": card.value, "turn": state.turn_number}
    ability = "peek_self" if actor == target else "peek_opponent"
    whose = "own" if actor == target else f"{state.players[target].name}'s"
    _emit(
        state,
        "ability_used",
        actor,
        f"peeked at {whose} slot {slot + 1}",
        ability=ability,
        target=target,
        slot=slot,
        value=card.value,
    )
    return card


def swap_with_opponent(state: GameState, actor: int, own_slot: int, target: int, target_slot: int) -> None:
    # Actor beliefs travel with the cards; the target sees what it receives
    assert actor != target, "Cannot swap with yourself"
    me = state.players[actor]
    opp = state.players[target]
    assert 0 <= own_slot < len(me.hand), f"Invalid own slot: {own_slot}"
    assert 0 <= target_slot < len(opp.hand), f"Invalid target slot: {target_slot}"
    own_belief = me.knowledge.get(actor, own_slot)
    target_belief = me.knowledge.get(target, target_slot)
    me.hand[own_slot], opp.hand[target_slot] = opp.hand[target_slot], me.hand[own_slot]
    reveal(state.players, actor, actor, own_slot, target_belief)
    reveal(state.players, actor, target, target_slot, own_belief)
    reveal(state.players, target, target, target_slot, opp.hand[target_slot])
    _emit(
        state,
        "ability_used",
        actor,
        f"swapped own slot {own_slot + 1} with {opp.name}'s slot {target_slot + 1}",
        ability="swap",
        target=target,
        slot=target_slot,
        own_slot=own_slot,
        known_given=None if own_belief is None else own_belief.value,
        known_taken=None if target_belief is None else target_belief.value,
    )


def record_round_end_call(state: GameState, pid: int, win_prob: Optional[float] = None) -> None:
    assert state.cabo_called_by is None, "Round end already called"
    n = len(state.players)
    state.cabo_called_by = pid
    state.last_turn_player = (pid - 1 + n) % n
    msg = "called round end (Cabo!)"
    if win_prob is not None:
        msg += f" at win probability {win_prob * 100:.1f}%"
    _emit(state, "round_end_called", pid, msg, win_prob=win_prob)
