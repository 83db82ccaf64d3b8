#!/usr/bin/env python3
"""
web/engine_ui.py — Adapter between the web UI and the X-1C engine.

This module is the ONLY place that translates engine state into:
- prompt line text
- available actions (buttons)
- applying a UI action to the engine

The server must remain dumb.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, TypedDict

from rounds import RESULT_LABELS
from state import current_prompt


class UiActionTD(TypedDict, total=False):
    action_id: str
    label: str
    enabled: bool
    reason: str


class PhaseError(RuntimeError):
    """Action is not valid in the session's current phase."""


# Phase -> allowed actions
PHASE_ACTIONS: Dict[str, List[str]] = {
    "prepare_timed":      ["enter_timed_phase"],
    "timed":              ["next", "back"],
    "prepare_resolution": ["enter_resolution_phase"],
    "resolution":         ["complete_resolution"],
    "game_completed":     ["reopen_resolution"],
}

ACTION_LABELS: Dict[str, str] = {
    "enter_timed_phase": "Enter Timed Phase",
    "next": "Done",
    "back": "Back",
    "enter_resolution_phase": "Enter Resolution Phase",
    "complete_resolution": "Finish Round",
    "reopen_resolution": "Back",
}


def allowed_actions(state: Dict[str, Any]) -> List[str]:
    return PHASE_ACTIONS.get(str(state.get("phase", "")), [])


def compute_prompt(state: Dict[str, Any]) -> str:
    round_no = state.get("round_no", "?")
    phase = state.get("phase", "?")

    if phase == "prepare_timed":
        return f"Round {round_no} — Prepare for Timed Phase."
    if phase == "timed":
        prompt = current_prompt(state)  # type: ignore[arg-type]
        if prompt is None:
            return f"Round {round_no} — Completing Timed Phase."
        return prompt.title
    if phase == "prepare_resolution":
        return f"Round {round_no} — Prepare for Resolution Phase."
    if phase == "resolution":
        return f"Round {round_no} — Resolution phase: report panic level and UFOs left."
    if phase == "game_completed":
        result = state.get("result")
        return f"Round {round_no} — Game over: {RESULT_LABELS.get(result, result)}."

    return f"Round {round_no} — Phase {phase}."


def legal_actions(state: Dict[str, Any]) -> List[UiActionTD]:
    actions: List[UiActionTD] = []
    for action_id in allowed_actions(state):
        act: UiActionTD = {"action_id": action_id, "label": ACTION_LABELS[action_id], "enabled": True}
        if action_id == "back" and state.get("prompt_idx", 0) < 1:
            act["enabled"] = False
            act["reason"] = "Already at the first prompt."
        actions.append(act)
    return actions


# -------------------------------------------------------------------
# Applying actions
# -------------------------------------------------------------------
def _apply_complete_resolution(sess: Any, payload: Dict[str, Any]) -> None:
    sess.complete_resolution(
        payload["panic_level"],
        int(payload["ufos_left"]),
        alien_base_destroyed=bool(payload.get("alien_base_destroyed", False)),
    )


ACTION_DISPATCH: Dict[str, Callable[[Any, Dict[str, Any]], None]] = {
    "enter_timed_phase": lambda sess, payload: sess.enter_timed_phase(),
    "next": lambda sess, payload: sess.next(),
    "back": lambda sess, payload: sess.back(),
    "enter_resolution_phase": lambda sess, payload: sess.enter_resolution_phase(),
    "complete_resolution": _apply_complete_resolution,
    "reopen_resolution": lambda sess, payload: sess.reopen_resolution(),
}


def apply_action(sess: Any, action_id: str, payload: Optional[Dict[str, Any]] = None) -> None:
    """
    Single entry point for the web layer.

    Raises PhaseError if the action is not allowed in the current phase.
    """
    payload = payload or {}
    allowed = allowed_actions(sess.state)
    if action_id not in allowed:
        sess.add_log(f"Rejected action '{action_id}' in phase {sess.state['phase']}. Allowed: {', '.join(allowed)}")
        raise PhaseError(f"Action '{action_id}' not allowed in phase '{sess.state['phase']}'")

    ACTION_DISPATCH[action_id](sess, payload)
