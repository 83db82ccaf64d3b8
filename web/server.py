#!/usr/bin/env python3
"""
web/server.py — FastAPI server for the X-1C companion.

Run:
  python -m web.server

LAN:
  uvicorn web.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Form, HTTPException

from board import parse_panic_report
from rounds import MAX_UFOS_LEFT
from timed_phase import CONFLICT_POLICIES
from .engine_ui import PhaseError, apply_action
from .game_manager import GameManager, GameSession
from .views import build_public_view

logger = logging.getLogger(__name__)

app = FastAPI(title="X-1C Companion")
gm = GameManager()


def _get_session(game_id: str) -> GameSession:
    sess = gm.get_game(game_id)
    if not sess:
        raise HTTPException(status_code=404, detail="Unknown game")
    return sess


def _act(game_id: str, action_id: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    sess = _get_session(game_id)
    try:
        apply_action(sess, action_id, payload)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except (PhaseError, RuntimeError) as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return build_public_view(sess)


# -----------------------------
# Games
# -----------------------------
@app.post("/create")
def create_game(seed: Optional[int] = Form(None), on_conflict: str = Form("drop")) -> Dict[str, Any]:
    if on_conflict not in CONFLICT_POLICIES:
        raise HTTPException(status_code=422, detail=f"Unknown conflict policy '{on_conflict}'")
    sess = gm.create_game(seed=seed, on_conflict=on_conflict)  # type: ignore[arg-type]
    return build_public_view(sess)


@app.get("/g/{game_id}")
def game_view(game_id: str) -> Dict[str, Any]:
    return build_public_view(_get_session(game_id))


# -----------------------------
# Actions
# -----------------------------
@app.post("/g/{game_id}/timed-phase")
def post_timed_phase(game_id: str) -> Dict[str, Any]:
    return _act(game_id, "enter_timed_phase")


@app.post("/g/{game_id}/next")
def post_next(game_id: str) -> Dict[str, Any]:
    return _act(game_id, "next")


@app.post("/g/{game_id}/back")
def post_back(game_id: str) -> Dict[str, Any]:
    return _act(game_id, "back")


@app.post("/g/{game_id}/resolution-phase")
def post_resolution_phase(game_id: str) -> Dict[str, Any]:
    return _act(game_id, "enter_resolution_phase")


@app.post("/g/{game_id}/resolution")
def post_resolution(
    game_id: str,
    panic_level: str = Form(...),
    ufos_left: int = Form(..., ge=0, le=MAX_UFOS_LEFT),
    alien_base_destroyed: bool = Form(False),
) -> Dict[str, Any]:
    try:
        panic = parse_panic_report(panic_level)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _act(
        game_id,
        "complete_resolution",
        {"panic_level": panic, "ufos_left": ufos_left, "alien_base_destroyed": alien_base_destroyed},
    )


@app.post("/g/{game_id}/reopen-resolution")
def post_reopen_resolution(game_id: str) -> Dict[str, Any]:
    return _act(game_id, "reopen_resolution")


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run("web.server:app", host="127.0.0.1", port=8000, reload=True)
