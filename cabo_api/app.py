from __future__ import annotations

from typing import Dict, List, Literal, Optional, Tuple
import logging
import uuid

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from cabo_api.models import (
    NewGameReq,
    SessionReq,
    ActionReq,
    ActionResp,
    GetStateResp,
    StateEnvelope,
    StepResp,
    WinProbResp,
)

from cabo.core import (
    GameConfig,
    GameState,
    new_game,
    next_round,
    apply_human_action,
    step as engine_step,
    win_probability,
    to_json,
)

log = logging.getLogger(__name__)

# In-memory session store; lives as long as the process
SESSIONS: Dict[str, GameState] = {}

# Upper bound for on-demand estimates; each sample is one full deal simulation
MAX_SAMPLES = 20000


def _new_session_id() -> str:
    return uuid.uuid4().hex


def get_state(session_id: str) -> GameState:
    state = SESSIONS.get(session_id)
    if state is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return state


def save_state(session_id: str, state: GameState) -> None:
    SESSIONS[session_id] = state


def _config_from(req: NewGameReq) -> GameConfig:
    cfg = GameConfig(
        ui_samples=int(req.uiSamples),
        bot_samples=int(req.botSamples),
        history_samples=int(req.historySamples),
        score_limit=int(req.scoreLimit),
        seed=req.seed,
    )
    if req.players is not None:
        if len(req.players) != 4:
            raise HTTPException(status_code=422, detail="Exactly 4 players are required")
        players_cfg: List[Tuple[Literal["H", "AI"], str]] = [(p.kind, p.name) for p in req.players]
        cfg.players = players_cfg
    return cfg


app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> Dict[str, bool]:
    return {"ok": True}


@app.post("/new-game", response_model=StateEnvelope)
def new_game_endpoint(req: NewGameReq) -> StateEnvelope:
    try:
        state = new_game(_config_from(req))
        sid = _new_session_id()
        save_state(sid, state)
        return StateEnvelope(sessionId=sid, state=to_json(state))
    except HTTPException:
        raise
    except AssertionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.exception("new-game failed")
        raise HTTPException(status_code=500, detail=f"new-game failed: {e}")


@app.post("/next-round", response_model=GetStateResp)
def next_round_endpoint(req: SessionReq) -> GetStateResp:
    state = get_state(req.sessionId)
    if not state.is_over:
        raise HTTPException(status_code=409, detail="Round still in progress")
    try:
        state = next_round(state)
        save_state(req.sessionId, state)
        return GetStateResp(state=to_json(state))
    except AssertionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.exception("next-round failed")
        raise HTTPException(status_code=500, detail=f"next-round failed: {e}")


@app.get("/state/{sessionId}", response_model=GetStateResp)
def get_state_endpoint(sessionId: str, viewer: int = 0) -> GetStateResp:
    if not 0 <= viewer <= 3:
        raise HTTPException(status_code=422, detail="viewer must be 0..3")
    state = get_state(sessionId)
    return GetStateResp(state=to_json(state, viewer))


@app.post("/action", response_model=ActionResp)
def action_endpoint(req: ActionReq) -> ActionResp:
    try:
        state = get_state(req.sessionId)
        accepted = apply_human_action(state, req.action, target=req.target, slot=req.slot)
        save_state(req.sessionId, state)
        return ActionResp(accepted=accepted, message=state.message, state=to_json(state))
    except HTTPException:
        raise
    except (AssertionError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.exception("action %s failed", req.action)
        raise HTTPException(status_code=500, detail=f"action failed: {e}")


@app.post("/step", response_model=StepResp)
def step_endpoint(req: SessionReq) -> StepResp:
    # One bot turn per call; the client paces calls for display
    try:
        state = get_state(req.sessionId)
        progressed = engine_step(state)
        save_state(req.sessionId, state)
        return StepResp(progressed=progressed, state=to_json(state))
    except HTTPException:
        raise
    except AssertionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.exception("step failed")
        raise HTTPException(status_code=500, detail=f"step failed: {e}")


@app.get("/win-probability/{sessionId}", response_model=WinProbResp)
def win_probability_endpoint(sessionId: str, playerId: int = 0, samples: Optional[int] = None) -> WinProbResp:
    if not 0 <= playerId <= 3:
        raise HTTPException(status_code=422, detail="playerId must be 0..3")
    if samples is not None and not 1 <= samples <= MAX_SAMPLES:
        raise HTTPException(status_code=422, detail=f"samples must be 1..{MAX_SAMPLES}")
    state = get_state(sessionId)
    n = state.cfg.ui_samples if samples is None else samples
    return WinProbResp(playerId=playerId, samples=n, probability=win_probability(state, playerId, n))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cabo_api.app:app", host="0.0.0.0", port=8000, reload=True)
