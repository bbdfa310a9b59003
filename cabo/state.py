from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import random

from .types import (
    Card,
    EventKind,
    ExplainInfo,
    GameEvent,
    Phase,
    Playing,
    PlayerKind,
)
from .knowledge import Knowledge


@dataclass
class GameConfig:
    players: List[Tuple[PlayerKind, str]] = field(
        default_factory=lambda: [("H", "You"), ("AI", "Bot 1"), ("AI", "Bot 2"), ("AI", "Bot 3")]
    )
    ui_samples: int = 3000       # immediate player-facing estimate
    bot_samples: int = 3000      # bot multi-swap probes and round-end decision
    history_samples: int = 500   # per-turn probability history, 0 disables it
    cabo_threshold: float = 0.70
    multi_swap_threshold: float = 0.10
    take_discard_max: int = 4
    speculative_max: int = 4
    swap_ability_min: int = 6    # own known card must be strictly above this to trade it away
    cabo_fail_penalty: int = 10
    score_limit: int = 100
    seed: Optional[int] = None
    bot_delay: float = 1.5       # pacing only, used by drivers
    reveal_delay: float = 2.0


@dataclass
class Player:
    id: int
    name: str
    kind: PlayerKind
    hand: List[Card] = field(default_factory=list)
    knowledge: Knowledge = field(default_factory=Knowledge)

    @property
    def is_bot(self) -> bool:
        return self.kind == "AI"

    def hand_points(self) -> int:
        return sum(c.points for c in self.hand)


@dataclass
class RoundResult:
    raw: List[int]
    penalties: List[int]
    winners: List[int]
    caller: Optional[int]

    @property
    def round_scores(self) -> List[int]:
        return [r + p for r, p in zip(self.raw, self.penalties)]


@dataclass
class GameState:
    cfg: GameConfig
    players: List[Player]
    deck: List[Card]
    discard: List[Card]
    rng: random.Random
    current_idx: int = 0
    phase: Phase = field(default_factory=Playing)
    drawn: Optional[Card] = None
    cabo_called_by: Optional[int] = None
    last_turn_player: Optional[int] = None
    turn_number: int = 1
    round_number: int = 1
    total_scores: List[int] = field(default_factory=lambda: [0, 0, 0, 0])
    round_result: Optional[RoundResult] = None
    message: str = ""
    last_reveal: Optional[Dict[str, Any]] = None
    explain: Optional[ExplainInfo] = None
    logs: List[str] = field(default_factory=list)
    events: List[GameEvent] = field(default_factory=list)
    win_history: List[List[float]] = field(default_factory=list)
    _next_event_seq: int = 1

    @property
    def is_over(self) -> bool:
        return self.phase.kind == "game_over"


def _append_log(state: GameState, msg: str) -> None:
    state.logs.append(msg)


def _player_label(state: GameState, player_id: Optional[int]) -> str:
    if player_id is None:
        return "System"
    return state.players[player_id].name


def _emit(
    state: GameState,
    kind: EventKind,
    player_id: Optional[int],
    message: str,
    **payload: Any,
) -> GameEvent:
    ev = GameEvent(
        id=f"e{state._next_event_seq}",
        kind=kind,
        player_id=player_id,
        turn=state.turn_number,
        message=message,
        payload=dict(payload),
    )
    state._next_event_seq += 1
    state.events.append(ev)
    _append_log(state, f"T{state.turn_number} [{_player_label(state, player_id)}] {kind.upper()}: {message}")
    return ev


def _reject(state: GameState, msg: str) -> bool:
    state.message = msg
    _append_log(state, f"T{state.turn_number} REJECTED: {msg}")
    return False


def _top_discard(state: GameState) -> Optional[Card]:
    return state.discard[-1] if state.discard else None


def _player(state: GameState) -> Player:
    return state.players[state.current_idx]
