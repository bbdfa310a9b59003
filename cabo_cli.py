from __future__ import annotations

from typing import List, Optional, Tuple
import time

from cabo import (
    ABILITY_LABELS,
    HUMAN_ID,
    GameConfig,
    GameState,
    PlayerKind,
    apply_human_action,
    is_game_over,
    new_game,
    next_round,
    step,
    win_probability,
    to_json,
)


PLAYERS: List[Tuple[PlayerKind, str]] = [
    ("H", "You"),
    ("AI", "Bot 1"),
    ("AI", "Bot 2"),
    ("AI", "Bot 3"),
]

UI_SAMPLES: int = 3000
BOT_SAMPLES: int = 3000
HISTORY_SAMPLES: int = 0  # no chart in the console
SCORE_LIMIT: int = 100
BOT_DELAY: float = 1.5
REVEAL_DELAY: float = 2.0


def drain_logs(state: GameState) -> None:
    for line in state.logs:
        print(line)
    state.logs.clear()


def print_table(state: GameState) -> None:
    data = to_json(state, HUMAN_ID)
    print()
    print(f"--- Round {data['roundNumber']} / Turn {data['turnNumber']} ---")
    for pobj in data["players"]:  # type: ignore[union-attr]
        cells: List[str] = []
        for cv in pobj["hand"]:
            v = cv["value"]
            mark = "*" if cv["faceUp"] else ""
            cells.append(" ?" if v is None else f"{v:>2}{mark}")
        turn = "<" if pobj["id"] == data["currentPlayerId"] else " "
        print(f"{turn} {pobj['name']:<8} [{' '.join(cells)}]  total={pobj['totalScore']}")
    top = data["discardTop"]
    print(f"Deck: {data['deckCount']}  Discard top: {top['value'] if top else '(empty)'}")
    if data["caboCalledBy"] is not None:
        print(f"Round end called by {state.players[int(data['caboCalledBy'])].name}")  # type: ignore[arg-type]


def ask_choice(prompt: str, allowed: List[str]) -> str:
    while True:
        s = input(f"{prompt} [{'/'.join(allowed)}]: ").strip().lower()
        if s in allowed:
            return s
        print("Invalid choice.")


def ask_int(prompt: str, lo: int, hi: int) -> int:
    while True:
        s = input(f"{prompt} ({lo}..{hi}): ").strip()
        try:
            v = int(s)
        except ValueError:
            print("Invalid number.")
            continue
        if lo <= v <= hi:
            return v
        print(f"Out of range; must be {lo}..{hi}.")


def ask_slot(state: GameState, target: int) -> int:
    n = len(state.players[target].hand)
    return ask_int(f"Slot of {state.players[target].name}", 1, n) - 1


def ask_opponent(state: GameState) -> int:
    return ask_int("Opponent", 1, len(state.players) - 1)


def _act(state: GameState, action: str, target: Optional[int] = None, slot: Optional[int] = None) -> bool:
    ok = apply_human_action(state, action, target=target, slot=slot)
    if not ok:
        print(state.message)
    drain_logs(state)
    return ok


def _show_reveal(state: GameState, turn: int) -> None:
    rv = state.last_reveal
    if rv is None or rv.get("observer") != HUMAN_ID or rv.get("turn") != turn:
        return
    target = state.players[int(rv["target"])].name
    print(f"You see {target}'s slot {int(rv['slot']) + 1}: {rv['value']}")
    time.sleep(state.cfg.reveal_delay)


def human_turn(state: GameState) -> None:
    me = HUMAN_ID
    print_table(state)
    p = win_probability(state, me)
    print(f"Your win probability: {p * 100:.1f}%")
    while not state.is_over and state.current_idx == me:
        kind = state.phase.kind
        if kind == "playing":
            allowed = ["deck", "discard"] + (["cabo"] if state.cabo_called_by is None else [])
            a = ask_choice("Draw from", allowed)
            action = {"deck": "draw_from_deck", "discard": "draw_from_discard", "cabo": "declare_round_end"}[a]
            _act(state, action)
        elif kind == "post_draw_action":
            assert state.drawn is not None
            print(f"You drew {state.drawn.value}.")
            allowed = ["swap", "multi", "discard"]
            if state.drawn.ability != "none":
                allowed.append("ability")
                print(f"Ability available: {ABILITY_LABELS[state.drawn.ability]}")
            a = ask_choice("Action", allowed)
            action = {
                "swap": "choose_swap",
                "multi": "choose_multi_swap",
                "discard": "discard_drawn",
                "ability": "choose_ability",
            }[a]
            _act(state, action)
        elif kind in ("swapping_from_deck", "swapping_from_discard"):
            if kind == "swapping_from_deck" and ask_choice("Swap or discard", ["swap", "discard"]) == "discard":
                _act(state, "discard_drawn")
                continue
            _act(state, "select_slot", target=me, slot=ask_slot(state, me))
        elif kind == "multi_swap_selection":
            a = ask_choice("Select a card, confirm or cancel", ["select", "confirm", "cancel"])
            if a == "select":
                _act(state, "select_slot", target=me, slot=ask_slot(state, me))
            else:
                _act(state, f"{a}_multi_swap")
        elif kind == "ability_peek_self":
            turn = state.turn_number
            _act(state, "select_slot", target=me, slot=ask_slot(state, me))
            _show_reveal(state, turn)
        elif kind == "ability_peek_opponent":
            target = ask_opponent(state)
            turn = state.turn_number
            _act(state, "select_slot", target=target, slot=ask_slot(state, target))
            _show_reveal(state, turn)
        elif kind == "ability_swap":
            if getattr(state.phase, "own_slot", None) is None:
                _act(state, "select_slot", target=me, slot=ask_slot(state, me))
            else:
                target = ask_opponent(state)
                _act(state, "select_slot", target=target, slot=ask_slot(state, target))
        else:
            break


def bot_turn(state: GameState) -> None:
    print(f"\n{state.players[state.current_idx].name} is thinking...")
    time.sleep(state.cfg.bot_delay)
    step(state)
    drain_logs(state)


def play_round(state: GameState) -> None:
    drain_logs(state)
    print("\n=== New Round ===")
    print("Everyone has looked at their first two cards.")
    while not state.is_over:
        if state.players[state.current_idx].is_bot:
            bot_turn(state)
        else:
            human_turn(state)
    print_table(state)
    rr = state.round_result
    assert rr is not None
    for i, p in enumerate(state.players):
        pen = f" (+{rr.penalties[i]})" if rr.penalties[i] else ""
        print(f"{p.name}: {rr.raw[i]}{pen} = {rr.round_scores[i]}  (total {state.total_scores[i]})")
    print("Lowest this round: " + ", ".join(state.players[i].name for i in rr.winners))


def main() -> None:
    print("CABO - one human against three bots")
    cfg = GameConfig(
        players=PLAYERS,
        ui_samples=UI_SAMPLES,
        bot_samples=BOT_SAMPLES,
        history_samples=HISTORY_SAMPLES,
        score_limit=SCORE_LIMIT,
        bot_delay=BOT_DELAY,
        reveal_delay=REVEAL_DELAY,
    )
    state = new_game(cfg)
    while True:
        play_round(state)
        if is_game_over(state):
            break
        if ask_choice("Next round?", ["y", "n"]) == "n":
            break
        state = next_round(state)
    print("\n=== Game Over ===")
    best_total = min(state.total_scores)
    winners = [p.name for p in state.players if state.total_scores[p.id] == best_total]
    for p in state.players:
        print(f"{p.name}: {state.total_scores[p.id]} pts")
    if len(winners) == 1:
        print(f"Winner: {winners[0]}")
    else:
        print("Winners (tie): " + ", ".join(winners))


if __name__ == "__main__":
    main()
