from fastapi.testclient import TestClient

from cabo_api.app import app


client = TestClient(app)

FAST = {"uiSamples": 30, "botSamples": 30, "historySamples": 0, "seed": 7}


def _new_game(**extra):
    r = client.post("/new-game", json={**FAST, **extra})
    assert r.status_code == 200
    data = r.json()
    return data["sessionId"], data["state"]


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("ok") is True


def test_new_game_returns_viewer_snapshot():
    sid, state = _new_game()
    assert sid
    assert state["schemaVersion"] == 1
    assert len(state["players"]) == 4
    assert state["currentPlayerId"] == 0
    assert state["phase"]["kind"] == "playing"


def test_new_game_requires_four_players():
    r = client.post(
        "/new-game",
        json={**FAST, "players": [{"kind": "H", "name": "You"}, {"kind": "AI", "name": "Bot"}]},
    )
    assert r.status_code == 422


def test_action_then_bot_step():
    sid, _ = _new_game()
    r = client.post("/action", json={"sessionId": sid, "action": "draw_from_deck"})
    assert r.status_code == 200
    body = r.json()
    assert body["accepted"] is True
    assert body["state"]["hasDrawn"] is True
    r = client.post("/action", json={"sessionId": sid, "action": "discard_drawn"})
    assert r.json()["state"]["currentPlayerId"] == 1
    r = client.post("/step", json={"sessionId": sid})
    assert r.status_code == 200
    assert r.json()["progressed"] is True


def test_rejected_action_is_reported_not_raised():
    sid, _ = _new_game()
    r = client.post("/action", json={"sessionId": sid, "action": "confirm_multi_swap"})
    assert r.status_code == 200
    assert r.json()["accepted"] is False
    assert r.json()["message"]


def test_unknown_action_is_a_validation_error():
    sid, _ = _new_game()
    r = client.post("/action", json={"sessionId": sid, "action": "flip_table"})
    assert r.status_code == 422


def test_step_on_human_turn_does_not_progress():
    sid, _ = _new_game()
    r = client.post("/step", json={"sessionId": sid})
    assert r.status_code == 200
    assert r.json()["progressed"] is False


def test_win_probability_endpoint():
    sid, _ = _new_game()
    r = client.get(f"/win-probability/{sid}", params={"playerId": 2, "samples": 25})
    assert r.status_code == 200
    body = r.json()
    assert body["playerId"] == 2 and body["samples"] == 25
    assert 0.0 <= body["probability"] <= 1.0


def test_state_for_other_viewer():
    sid, _ = _new_game()
    r = client.get(f"/state/{sid}", params={"viewer": 3})
    assert r.status_code == 200
    assert r.json()["state"]["viewer"] == 3


def test_unknown_session_is_404():
    assert client.get("/state/nope").status_code == 404
    assert client.post("/step", json={"sessionId": "nope"}).status_code == 404


def test_next_round_only_after_round_end():
    sid, _ = _new_game()
    assert client.post("/next-round", json={"sessionId": sid}).status_code == 409


def test_win_probability_samples_are_capped():
    sid, _ = _new_game()
    r = client.get(f"/win-probability/{sid}", params={"samples": 10 ** 9})
    assert r.status_code == 422
    r = client.post("/new-game", json={**FAST, "uiSamples": 10 ** 9})
    assert r.status_code == 422
