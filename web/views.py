#!/usr/bin/env python3
"""
web/views.py — View-model builder for the web UI.

This module converts internal session/state into a JSON-friendly dict.
The web layer should not interpret engine state; it returns this view.

Contract expected by web/server.py:

build_public_view(sess) -> {
  "game_id": str,
  "ui": {
    "prompt": str,
    "actions": [ {action_id,label,enabled,reason?}, ... ],
    "board": {...},
    "schedule": {...},
    "log": [...]
  },
  "meta": {...}
}
"""

from __future__ import annotations
from typing import Any, Dict

from prompts import prompt_to_dict
from state import current_prompt
from . import engine_ui


def _schedule_view(state: Dict[str, Any]) -> Dict[str, Any]:
    prompts = state.get("prompts", [])
    idx = int(state.get("prompt_idx", 0))
    cur = current_prompt(state)  # type: ignore[arg-type]
    return {
        "index": idx,
        "latest_index": int(state.get("latest_prompt_idx", 0)),
        "total": len(prompts),
        "current": prompt_to_dict(cur) if cur is not None else None,
        # Only what the player has already reached; upcoming prompts stay hidden
        "done": [prompt_to_dict(p) for p in prompts[:idx]],
    }


def build_public_view(sess: Any) -> Dict[str, Any]:
    state = sess.state

    ui = {
        "prompt": engine_ui.compute_prompt(state),
        "actions": engine_ui.legal_actions(state),
        "board": {
            "round_no": state["round_no"],
            "phase": state["phase"],
            "panic_level": state["panic_level"],
            "ufos_left": state["ufos_left"],
            "alien_base_discovered": state["alien_base_discovered"],
            "result": state["result"],
        },
        "schedule": _schedule_view(state),
        "log": list(sess.log)[-200:],
    }

    return {"game_id": sess.game_id, "ui": ui, "meta": {"seed": sess.seed, "on_conflict": sess.on_conflict}}
