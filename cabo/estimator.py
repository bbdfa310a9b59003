from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence, Tuple, Union
import random

from .types import Card, HAND_SIZE
from .deck import EXPECTED_UNKNOWN_VALUE, canonical_deck
from .state import GameState


Row = Tuple[Optional[Card], ...]


@dataclass(frozen=True)
class EstimatorView:
    perspective: int
    hand_lens: Tuple[int, ...]
    rows: Tuple[Row, ...]  # perspective player's knowledge, one row per player
    discard_idents: FrozenSet[int]
    round_over: bool = False

    def known_idents(self) -> FrozenSet[int]:
        known = set(self.discard_idents)
        for p, n in enumerate(self.hand_lens):
            for c in range(n):
                card = _slot(self.rows[p], c)
                if card is not None:
                    known.add(card.ident)
        return frozenset(known)

    def unknown_pool(self) -> List[Card]:
        known = self.known_idents()
        return [c for c in canonical_deck() if c.ident not in known]


def _slot(row: Row, c: int) -> Optional[Card]:
    return row[c] if c < len(row) else None


def view_for(state: GameState, player_id: int) -> EstimatorView:
    k = state.players[player_id].knowledge
    return EstimatorView(
        perspective=player_id,
        hand_lens=tuple(len(p.hand) for p in state.players),
        rows=k.as_tuple(),
        discard_idents=frozenset(c.ident for c in state.discard),
        round_over=state.is_over,
    )


def with_multi_swap(
    view: EstimatorView,
    drawn: Card,
    indices: Sequence[int],
    discarded: Sequence[Card],
) -> EstimatorView:
    """View after the perspective player trades ``indices`` for ``drawn``.

    ``discarded`` are the physical cards leaving the hand; they land face-up
    on the discard pile. Remaining own slots keep their order and knowledge,
    and the drawn card is appended as known.
    """
    me = view.perspective
    own_len = view.hand_lens[me]
    row = view.rows[me]
    selected = set(indices)
    assert selected and all(0 <= i < own_len for i in selected), "Invalid multi-swap indices"
    assert len(discarded) == len(selected), "One discarded card per selected slot"
    new_row: List[Optional[Card]] = []
    for i in range(own_len):
        if i not in selected:
            new_row.append(_slot(row, i))
    new_row.append(drawn)
    new_len = len(new_row)
    while len(new_row) < HAND_SIZE:
        new_row.append(None)
    rows = list(view.rows)
    rows[me] = tuple(new_row)
    lens = list(view.hand_lens)
    lens[me] = new_len
    return EstimatorView(
        perspective=me,
        hand_lens=tuple(lens),
        rows=tuple(rows),
        discard_idents=view.discard_idents | frozenset(c.ident for c in discarded),
        round_over=view.round_over,
    )


def _simulate_scores(view: EstimatorView, pool: List[Card]) -> List[float]:
    cursor = 0
    scores: List[float] = []
    for p, n in enumerate(view.hand_lens):
        total = 0.0
        row = view.rows[p]
        for c in range(n):
            known = _slot(row, c)
            if known is not None:
                total += known.points
            elif cursor < len(pool):
                total += pool[cursor].points
                cursor += 1
            else:
                total += EXPECTED_UNKNOWN_VALUE
        scores.append(total)
    return scores


def estimate_from_view(view: EstimatorView, samples: int, rng: Optional[random.Random] = None) -> float:
    pool = view.unknown_pool()
    if not pool:
        # Every score is determined; a single trial settles it
        scores = _simulate_scores(view, [])
        return 1.0 if scores[view.perspective] <= min(scores) else 0.0
    if view.round_over or view.hand_lens[view.perspective] == 0 or samples <= 0:
        return 0.0
    r = rng or random.Random()
    wins = 0
    for _ in range(samples):
        shuffled = list(pool)
        r.shuffle(shuffled)
        scores = _simulate_scores(view, shuffled)
        if scores[view.perspective] <= min(scores):
            wins += 1
    return wins / float(samples)


def estimate_win_probability(
    source: Union[GameState, EstimatorView],
    player_id: int,
    samples: int,
    rng: Optional[random.Random] = None,
) -> float:
    """Monte-Carlo probability that ``player_id`` holds the lowest hand.

    Unknown slots are filled from the cards ``player_id`` cannot place (the
    canonical deck minus discards and everything in their knowledge table);
    ties count as wins. Never mutates ``source``.
    """
    if isinstance(source, EstimatorView):
        view = source
        assert view.perspective == player_id, "View belongs to another player"
    else:
        view = view_for(source, player_id)
    return estimate_from_view(view, samples, rng)
