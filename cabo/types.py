from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, List, Literal, Optional, Tuple, TypeAlias, Union

NUM_PLAYERS: int = 4
HAND_SIZE: int = 4
HUMAN_ID: int = 0

Ability: TypeAlias = Literal["none", "peek_self", "peek_opponent", "swap"]
PlayerKind = Literal["H", "AI"]

# Value -> ability; everything not listed has none
ABILITY_BY_VALUE: Dict[int, Ability] = {
    7: "peek_self",
    8: "peek_self",
    9: "peek_opponent",
    10: "peek_opponent",
    11: "swap",
    12: "swap",
}

ABILITY_LABELS: Dict[str, str] = {
    "peek_self": "peek at own card",
    "peek_opponent": "peek at opponent card",
    "swap": "swap with opponent",
}

EventKind: TypeAlias = Literal[
    "round_started",
    "card_drawn",
    "card_swapped",
    "card_discarded",
    "ability_used",
    "round_end_called",
    "round_ended",
    "turn_skipped",
]


def ability_for(value: int) -> Ability:
    return ABILITY_BY_VALUE.get(value, "none")


@dataclass(frozen=True)
class Card:
    value: int  # 0..13
    ident: int  # index into the canonical card table
    face_up: bool = False

    @property
    def points(self) -> int:
        return self.value

    @property
    def ability(self) -> Ability:
        return ability_for(self.value)

    def turned_face_up(self) -> "Card":
        return replace(self, face_up=True)

    def __str__(self) -> str:
        return str(self.value)


# --- Phase variants: one per phase, carrying only that phase's data ---

@dataclass(frozen=True)
class Playing:
    kind: ClassVar[str] = "playing"


@dataclass(frozen=True)
class PostDrawAction:
    kind: ClassVar[str] = "post_draw_action"


@dataclass(frozen=True)
class SwappingFromDeck:
    kind: ClassVar[str] = "swapping_from_deck"


@dataclass(frozen=True)
class SwappingFromDiscard:
    kind: ClassVar[str] = "swapping_from_discard"


@dataclass(frozen=True)
class MultiSwapSelection:
    kind: ClassVar[str] = "multi_swap_selection"
    selected: Tuple[int, ...] = ()


@dataclass(frozen=True)
class AbilityPeekSelf:
    kind: ClassVar[str] = "ability_peek_self"


@dataclass(frozen=True)
class AbilityPeekOpponent:
    kind: ClassVar[str] = "ability_peek_opponent"


@dataclass(frozen=True)
class AbilitySwap:
    kind: ClassVar[str] = "ability_swap"
    own_slot: Optional[int] = None  # None until the actor picked their own card


@dataclass(frozen=True)
class GameOver:
    kind: ClassVar[str] = "game_over"


Phase = Union[
    Playing,
    PostDrawAction,
    SwappingFromDeck,
    SwappingFromDiscard,
    MultiSwapSelection,
    AbilityPeekSelf,
    AbilityPeekOpponent,
    AbilitySwap,
    GameOver,
]


def phase_for_ability(ability: Ability) -> Phase:
    if ability == "peek_self":
        return AbilityPeekSelf()
    if ability == "peek_opponent":
        return AbilityPeekOpponent()
    if ability == "swap":
        return AbilitySwap()
    raise ValueError(f"Card has no ability: {ability}")


# Published notification for log/chart/table collaborators
@dataclass
class GameEvent:
    id: str
    kind: EventKind
    player_id: Optional[int]  # None for system events
    turn: int
    message: str
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MultiSwapEval:
    value: int
    indices: Tuple[int, ...]
    prob_before: float
    prob_after: float

    @property
    def gain(self) -> float:
        return self.prob_after - self.prob_before


@dataclass
class ExplainInfo:
    candidates: List[MultiSwapEval]
    pick_reason: str
    win_prob: Optional[float] = None
