#!/usr/bin/env python3
"""
rounds.py — Round framework for the X-1C companion (manual confirmations)

Implements:
- phase sequence per round: prepare timed -> timed -> prepare resolution -> resolution
- timed phase: step through the generated prompts strictly in order
- alien base discovery signal (raised when the BaseDiscovered prompt is consumed)
- game end: the resolution report can finish the game with a GameResult
- public broadcast output + centrally recorded log

The resolution phase itself is played on the physical board; here we only
collect its outcome (new panic level, UFOs left, alien base destroyed?) to
carry into the next round or to end the game.

The engine functions (enter_*/next_prompt/previous_prompt/complete_*) are
IO-free apart from broadcast(), so the web layer drives the same engine.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional, Tuple

from board import ALIEN_SPACE, PANIC_LEVELS, PanicLevel, PanicReport, parse_panic_report
from prompts import BaseDiscovered
from state import GameResult, GameStateTD, Phase, clear_schedule, current_prompt, validate_state
from timed_phase import ConflictPolicy, generate_round_prompts

# The alien base is revealed during the timed phase of this round
ALIEN_BASE_ROUND = 5

# The board has room for at most this many UFOs
MAX_UFOS_LEFT = 18

# (alien base destroyed, panic reached alien space) -> result; missing keys mean play on
GAME_RESULTS: Dict[Tuple[bool, bool], GameResult] = {
    (True, False): "victory",
    (True, True): "pyrrhic_victory",
    (False, True): "defeat",
}

RESULT_LABELS: Dict[GameResult, str] = {
    "victory": "Victory",
    "pyrrhic_victory": "Pyrrhic victory",
    "defeat": "Defeat",
}


# -----------------------------
# Small infrastructure helpers
# -----------------------------
def broadcast(state: GameStateTD, msg: str, *, echo: bool = True) -> None:
    """Public, transparent message + stored centrally."""
    if echo:
        print(msg)
    state["public_log"].append(msg)


def confirm(prompt: str) -> None:
    """
    Confirmation gate.
    For now: prompt in terminal until the player confirms.
    """
    while True:
        ans = input(f"{prompt} [y]: ").strip().lower()
        if ans in ("y", "yes", ""):
            return
        print("Please confirm with 'y' (or just press Enter).")


def _require_phase(state: GameStateTD, expected: Phase, action: str) -> None:
    if state["phase"] != expected:
        raise RuntimeError(f"Cannot {action} during phase '{state['phase']}' (expected '{expected}')")


# -----------------------------
# Engine: phase transitions
# -----------------------------
def enter_timed_phase(
    state: GameStateTD,
    rng: random.Random,
    *,
    on_conflict: ConflictPolicy = "drop",
    echo: bool = True,
) -> None:
    """
    Generate this round's prompts and put the cursor on the first one.
    """
    _require_phase(state, "prepare_timed", "enter the timed phase")

    round_no = state["round_no"]
    prompts = generate_round_prompts(
        round_no,
        state["panic_level"],
        state["ufos_left"],
        round_no == ALIEN_BASE_ROUND,
        rng,
        on_conflict=on_conflict,
    )

    state["prompts"] = list(prompts)
    state["prompt_idx"] = 0
    state["latest_prompt_idx"] = 0
    state["phase"] = "timed"

    broadcast(state, f"\n[TIMED PHASE] Round {round_no}: {len(prompts)} prompt(s).", echo=echo)


def next_prompt(state: GameStateTD, *, echo: bool = True) -> bool:
    """
    Mark the prompt under the cursor as done and move forward.

    Returns False if there is nothing left to consume.
    Consuming a BaseDiscovered prompt raises the alien-base flag.
    """
    _require_phase(state, "timed", "advance a prompt")

    prompt = current_prompt(state)
    if prompt is None:
        return False

    if isinstance(prompt, BaseDiscovered):
        state["alien_base_discovered"] = True
        broadcast(state, f"[ALIEN BASE] {prompt.title}", echo=echo)

    state["prompt_idx"] += 1
    if state["prompt_idx"] > state["latest_prompt_idx"]:
        state["latest_prompt_idx"] = state["prompt_idx"]
    return True


def previous_prompt(state: GameStateTD) -> bool:
    """Step the cursor back one prompt. Returns False at the first prompt."""
    _require_phase(state, "timed", "go back a prompt")

    if state["prompt_idx"] == 0:
        return False
    state["prompt_idx"] -= 1
    return True


def complete_timed_phase(state: GameStateTD, *, echo: bool = True) -> None:
    _require_phase(state, "timed", "complete the timed phase")
    if current_prompt(state) is not None:
        remaining = len(state["prompts"]) - state["prompt_idx"]
        raise RuntimeError(f"Timed phase still has {remaining} prompt(s) to resolve")

    clear_schedule(state)
    state["phase"] = "prepare_resolution"
    broadcast(state, f"[TIMED PHASE] Round {state['round_no']} completed.", echo=echo)


def enter_resolution_phase(state: GameStateTD) -> None:
    _require_phase(state, "prepare_resolution", "enter the resolution phase")
    state["phase"] = "resolution"


def game_result(alien_base_destroyed: bool, panic: PanicReport) -> Optional[GameResult]:
    """Result of the game after a resolution report, or None if play goes on."""
    return GAME_RESULTS.get((bool(alien_base_destroyed), panic == ALIEN_SPACE))


def complete_resolution_phase(
    state: GameStateTD,
    panic_level: PanicReport,
    ufos_left: int,
    *,
    alien_base_destroyed: bool = False,
    echo: bool = True,
) -> Optional[GameResult]:
    """
    Record the resolution outcome.

    If the report ends the game (alien base destroyed, or panic pushed into
    alien space) the result is stored and the phase becomes "game_completed";
    the round record is left as it was. Otherwise the new panic level and
    UFO count carry into the next round and None is returned.
    """
    _require_phase(state, "resolution", "complete the resolution phase")
    panic = parse_panic_report(panic_level)
    if not 0 <= ufos_left <= MAX_UFOS_LEFT:
        raise ValueError(f"ufos_left must be between 0 and {MAX_UFOS_LEFT}, got {ufos_left}")
    if alien_base_destroyed and not state["alien_base_discovered"]:
        raise ValueError("The alien base cannot be destroyed before it has been discovered")

    result = game_result(alien_base_destroyed, panic)
    if result is not None:
        state["result"] = result
        state["phase"] = "game_completed"
        validate_state(state)
        broadcast(state, f"[GAME END] {RESULT_LABELS[result]} in round {state['round_no']}.", echo=echo)
        return result

    state["panic_level"] = panic  # type: ignore[typeddict-item]
    state["ufos_left"] = int(ufos_left)
    state["round_no"] += 1
    state["phase"] = "prepare_timed"
    validate_state(state)

    broadcast(
        state,
        f"[RESOLUTION] panic={panic}, ufos_left={ufos_left}. Next: round {state['round_no']}.",
        echo=echo,
    )
    return None


def reopen_resolution_phase(state: GameStateTD, *, echo: bool = True) -> None:
    """Take back a game-ending report and return to the resolution phase."""
    _require_phase(state, "game_completed", "reopen the resolution phase")
    state["result"] = None
    state["phase"] = "resolution"
    broadcast(state, f"[GAME END] Undone. Back to resolution in round {state['round_no']}.", echo=echo)


# -----------------------------
# Terminal runner
# -----------------------------
def ask_panic_level(default: PanicLevel) -> PanicReport:
    while True:
        s = input(
            f"Panic level after resolution ({'/'.join(PANIC_LEVELS)}/{ALIEN_SPACE}, default {default}): "
        ).strip()
        if s == "":
            return default
        try:
            return parse_panic_report(s)
        except ValueError as exc:
            print(exc)


def ask_ufos_left(default: int) -> int:
    while True:
        s = input(f"UFOs left on the board (0-{MAX_UFOS_LEFT}, default {default}): ").strip()
        if s == "":
            return default
        try:
            v = int(s)
        except ValueError:
            print("Please enter an integer (e.g., 0, 1, 2).")
            continue
        if not 0 <= v <= MAX_UFOS_LEFT:
            print(f"Please enter a number from 0 to {MAX_UFOS_LEFT}.")
            continue
        return v


def ask_alien_base_destroyed() -> bool:
    while True:
        ans = input("Alien base destroyed? [y/N]: ").strip().lower()
        if ans in ("n", "no", ""):
            return False
        if ans in ("y", "yes"):
            return True
        print("Please answer 'y' or 'n'.")


def run_timed_phase(state: GameStateTD, rng: random.Random, *, on_conflict: ConflictPolicy = "drop") -> None:
    enter_timed_phase(state, rng, on_conflict=on_conflict)

    total = len(state["prompts"])
    while True:
        prompt = current_prompt(state)
        if prompt is None:
            break
        broadcast(state, f"  ({state['prompt_idx'] + 1}/{total}) {prompt.title}")
        confirm("Done?")
        next_prompt(state)

    complete_timed_phase(state)


def run_resolution_phase(
    state: GameStateTD,
    *,
    ask_panic: Callable[[PanicLevel], PanicReport] = ask_panic_level,
    ask_ufos: Callable[[int], int] = ask_ufos_left,
    ask_destroyed: Callable[[], bool] = ask_alien_base_destroyed,
) -> Optional[GameResult]:
    enter_resolution_phase(state)
    broadcast(state, f"\n[RESOLUTION PHASE] Round {state['round_no']}: resolve on the board, then report.")
    panic = ask_panic(state["panic_level"])
    ufos = ask_ufos(state["ufos_left"])
    # Only a discovered base can be attacked
    destroyed = ask_destroyed() if state["alien_base_discovered"] else False
    return complete_resolution_phase(state, panic, ufos, alien_base_destroyed=destroyed)


def run_round(
    state: GameStateTD, rng: random.Random, *, on_conflict: ConflictPolicy = "drop"
) -> Optional[GameResult]:
    round_no = state["round_no"]
    broadcast(state, "\n==============================")
    broadcast(state, f"ROUND {round_no} — START (panic={state['panic_level']}, ufos_left={state['ufos_left']})")
    broadcast(state, "==============================")

    confirm("Enter timed phase?")
    run_timed_phase(state, rng, on_conflict=on_conflict)

    confirm("Enter resolution phase?")
    return run_resolution_phase(state)


def run_game(
    state: GameStateTD,
    *,
    max_rounds: Optional[int] = None,
    seed: Optional[int] = None,
    on_conflict: ConflictPolicy = "drop",
) -> Optional[GameResult]:
    """
    Play rounds until the game ends. max_rounds stops early (result is then None).
    """
    rng = random.Random(seed)

    broadcast(state, f"\nGAME START: seed={seed}, panic={state['panic_level']}")
    confirm("Game start confirmed. Begin?")

    result: Optional[GameResult] = None
    played = 0
    while result is None and (max_rounds is None or played < max_rounds):
        result = run_round(state, rng, on_conflict=on_conflict)
        played += 1

    broadcast(state, "\nGAME END" if result is not None else "\nGAME STOPPED")
    broadcast(
        state,
        f"Result: {RESULT_LABELS[result] if result is not None else 'none'}. "
        f"Final: round={state['round_no']}, panic={state['panic_level']}, "
        f"ufos_left={state['ufos_left']}, alien_base_discovered={state['alien_base_discovered']}",
    )
    return result


def preview_round(
    round_no: int,
    panic_level: PanicLevel,
    ufos_left: int,
    *,
    seed: Optional[int] = None,
    base_discovered: Optional[bool] = None,
    on_conflict: ConflictPolicy = "drop",
) -> List[str]:
    """
    Generate one round without interaction and return the prompt titles in order.
    """
    if base_discovered is None:
        base_discovered = round_no == ALIEN_BASE_ROUND
    rng = random.Random(seed)
    prompts = generate_round_prompts(
        round_no, panic_level, ufos_left, base_discovered, rng, on_conflict=on_conflict
    )
    return [p.title for p in prompts]
