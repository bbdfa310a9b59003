from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


HumanAction = Literal[
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
]


class PlayerSpec(BaseModel):
    kind: Literal["H", "AI"]
    name: str = Field(..., min_length=1)


class NewGameReq(BaseModel):
    players: Optional[List[PlayerSpec]] = None
    uiSamples: int = Field(3000, ge=1, le=20000)
    botSamples: int = Field(3000, ge=1, le=20000)
    historySamples: int = Field(500, ge=0, le=20000)
    scoreLimit: int = Field(100, ge=1)
    seed: Optional[int] = None


class SessionReq(BaseModel):
    sessionId: str


class ActionReq(BaseModel):
    sessionId: str
    action: HumanAction
    target: Optional[int] = Field(None, ge=0, le=3)
    slot: Optional[int] = Field(None, ge=0, le=3)


class GetStateResp(BaseModel):
    state: Dict[str, Any]


class StateEnvelope(BaseModel):
    sessionId: str
    state: Dict[str, Any]


class ActionResp(BaseModel):
    accepted: bool
    message: str
    state: Dict[str, Any]


class StepResp(BaseModel):
    progressed: bool
    state: Dict[str, Any]


class WinProbResp(BaseModel):
    playerId: int
    samples: int
    probability: float
