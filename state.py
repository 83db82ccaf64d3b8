#!/usr/bin/env python3
"""
state.py — X-1C central game state

This module defines:
- the per-game record carried between rounds (round, panic, leftover UFOs, alien base)
- the current timed-phase schedule + cursor
- helpers for initialization and integrity checks

Prompt generation belongs in timed_phase.py.
Round orchestration belongs in rounds.py.
"""

from __future__ import annotations

from typing import List, Literal, Optional, TypedDict

from board import BASE_INCOME, PanicLevel
from prompts import Prompt


Phase = Literal["prepare_timed", "timed", "prepare_resolution", "resolution", "game_completed"]

# victory: base destroyed; pyrrhic_victory: base destroyed as panic left the track; defeat: panic left the track
GameResult = Literal["victory", "pyrrhic_victory", "defeat"]


class GameStateTD(TypedDict):
    round_no: int
    panic_level: PanicLevel
    ufos_left: int
    alien_base_discovered: bool

    phase: Phase
    # Set once the game has ended (phase == "game_completed")
    result: Optional[GameResult]

    # Timed-phase schedule for the current round (empty outside the timed phase)
    prompts: List[Prompt]
    # Index of the prompt currently shown; == len(prompts) once all are done
    prompt_idx: int
    # Furthest index reached (stepping back never lowers it)
    latest_prompt_idx: int

    # Public, centrally recorded log entries (transparency)
    public_log: List[str]


def new_game_state(
    *,
    round_no: int = 1,
    panic_level: PanicLevel = "yellow",
    ufos_left: int = 0,
    alien_base_discovered: bool = False,
) -> GameStateTD:
    """
    Fresh game record. Defaults match a new game: round 1, yellow panic, no UFOs left.
    """
    return {
        "round_no": int(round_no),
        "panic_level": panic_level,
        "ufos_left": int(ufos_left),
        "alien_base_discovered": bool(alien_base_discovered),
        "phase": "prepare_timed",
        "result": None,
        "prompts": [],
        "prompt_idx": 0,
        "latest_prompt_idx": 0,
        "public_log": [],
    }


def current_prompt(state: GameStateTD) -> Optional[Prompt]:
    """Prompt under the cursor, or None once the schedule is exhausted."""
    idx = state["prompt_idx"]
    if 0 <= idx < len(state["prompts"]):
        return state["prompts"][idx]
    return None


def clear_schedule(state: GameStateTD) -> None:
    """
    Drop the timed-phase schedule. Call when leaving the timed phase.
    """
    state["prompts"] = []
    state["prompt_idx"] = 0
    state["latest_prompt_idx"] = 0


def validate_state(state: GameStateTD) -> None:
    """
    Debug/integrity check:
    Ensures the record only holds values the scheduler accepts.
    """
    assert state["round_no"] >= 0, f"negative round: {state['round_no']}"
    assert state["ufos_left"] >= 0, f"negative ufos_left: {state['ufos_left']}"
    assert state["panic_level"] in BASE_INCOME, f"unknown panic level: {state['panic_level']}"
    assert 0 <= state["prompt_idx"] <= len(state["prompts"]), (
        f"cursor out of range: idx={state['prompt_idx']} len={len(state['prompts'])}"
    )
    assert state["prompt_idx"] <= state["latest_prompt_idx"], (
        f"cursor ahead of latest: idx={state['prompt_idx']} latest={state['latest_prompt_idx']}"
    )
    assert (state["result"] is not None) == (state["phase"] == "game_completed"), (
        f"result {state['result']!r} does not match phase {state['phase']!r}"
    )
