from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, Tuple

from .types import Card, HAND_SIZE, NUM_PLAYERS


class Knowledge:
    """One observer's belief about every slot of every hand.

    ``rows[p][c]`` is the card the observer thinks sits in slot ``c`` of
    player ``p``'s hand, or None when unknown. Entries may be stale: a card
    that moved without the observer seeing it keeps its old entry until some
    later reveal overwrites it.
    """

    def __init__(self) -> None:
        self.rows: List[List[Optional[Card]]] = [[None for _ in range(HAND_SIZE)] for _ in range(NUM_PLAYERS)]

    def get(self, target: int, slot: int) -> Optional[Card]:
        row = self.rows[target]
        if 0 <= slot < len(row):
            return row[slot]
        return None

    def set(self, target: int, slot: int, card: Optional[Card]) -> None:
        row = self.rows[target]
        while len(row) <= slot:
            row.append(None)
        row[slot] = card

    def known_slots(self, target: int, hand_len: int) -> List[int]:
        return [c for c in range(hand_len) if self.get(target, c) is not None]

    def unknown_slots(self, target: int, hand_len: int) -> List[int]:
        return [c for c in range(hand_len) if self.get(target, c) is None]

    def highest_known(self, target: int, hand_len: int) -> Tuple[int, int]:
        # (-1, -1) when nothing is known; ties keep the lowest slot
        best_v, best_slot = -1, -1
        for c in range(hand_len):
            card = self.get(target, c)
            if card is not None and card.value > best_v:
                best_v, best_slot = card.value, c
        return best_v, best_slot

    def lowest_known(self, target: int, hand_len: int) -> Tuple[int, int]:
        best_v, best_slot = 10 ** 9, -1
        for c in range(hand_len):
            card = self.get(target, c)
            if card is not None and card.value < best_v:
                best_v, best_slot = card.value, c
        return best_v, best_slot

    def as_tuple(self) -> Tuple[Tuple[Optional[Card], ...], ...]:
        return tuple(tuple(row) for row in self.rows)


class _HasKnowledge(Protocol):
    knowledge: Knowledge


def reveal(
    players: Sequence[_HasKnowledge],
    observer: int,
    target: int,
    slot: int,
    card: Optional[Card],
) -> None:
    # Only write path into a knowledge table; None forgets the slot
    assert 0 <= observer < len(players), f"Invalid observer: {observer}"
    assert 0 <= target < len(players), f"Invalid target: {target}"
    assert slot >= 0, f"Invalid slot: {slot}"
    players[observer].knowledge.set(target, slot, card)


def broadcast(players: Sequence[_HasKnowledge], target: int, slot: int, card: Card) -> None:
    # Face-up cards override everyone's private belief
    for observer in range(len(players)):
        reveal(players, observer, target, slot, card)
