from __future__ import annotations

from typing import Dict, Iterable, List, Optional
import random

from .types import Card


# Fallback points for an unknown slot once the unknown pool runs dry
EXPECTED_UNKNOWN_VALUE: float = 6.5


def _canonical_values() -> List[int]:
    values: List[int] = []
    for _ in range(2):
        values.append(0)
        values.append(13)
    for v in range(1, 13):
        for _ in range(4):
            values.append(v)
    return values


# Identity i of a card is its position in this table
CANONICAL_VALUES: List[int] = _canonical_values()
DECK_SIZE: int = len(CANONICAL_VALUES)


def canonical_deck() -> List[Card]:
    return [Card(value=v, ident=i) for i, v in enumerate(CANONICAL_VALUES)]


def build_deck(rng: Optional[random.Random] = None) -> List[Card]:
    # Last element is the top of the deck
    deck = canonical_deck()
    (rng or random.Random()).shuffle(deck)
    return deck


class UnknownPool:
    def __init__(self, cards: Optional[Iterable[Card]] = None) -> None:
        self.cards: List[Card] = canonical_deck() if cards is None else list(cards)

    def remaining_total(self) -> int:
        return len(self.cards)

    def remaining_values_distribution(self) -> Dict[int, int]:
        dd: Dict[int, int] = {v: 0 for v in range(0, 14)}
        for c in self.cards:
            dd[c.value] += 1
        return dd

    def expected_value_unseen(self) -> float:
        tot = len(self.cards)
        if tot <= 0:
            return EXPECTED_UNKNOWN_VALUE
        return sum(c.points for c in self.cards) / float(tot)

    def p_value_le(self, x: int) -> float:
        tot = len(self.cards)
        if tot <= 0:
            return 0.0
        return sum(1 for c in self.cards if c.value <= x) / float(tot)
