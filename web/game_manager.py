#!/usr/bin/env python3
"""
web/game_manager.py — In-memory game sessions for the web companion.

This is deliberately minimal:
- Creates games (each with its own seeded RNG)
- Looks games up by id
- Forwards phase actions to the rounds.py engine and keeps a session log
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging
import random
import secrets
import time

from rounds import (
    RESULT_LABELS,
    complete_resolution_phase,
    complete_timed_phase,
    enter_resolution_phase,
    enter_timed_phase,
    next_prompt,
    previous_prompt,
    reopen_resolution_phase,
)
from state import GameStateTD, new_game_state
from timed_phase import ConflictPolicy

logger = logging.getLogger(__name__)


def _now_ts() -> float:
    return time.time()


def _new_id(nbytes: int = 8) -> str:
    return secrets.token_hex(nbytes)


@dataclass
class GameSession:
    game_id: str
    seed: int
    rng: random.Random
    on_conflict: ConflictPolicy = "drop"
    created_ts: float = field(default_factory=_now_ts)

    state: GameStateTD = field(default_factory=new_game_state)
    log: List[str] = field(default_factory=list)

    def add_log(self, msg: str) -> None:
        self.log.append(f"{time.strftime('%H:%M:%S')} | {msg}")

    def enter_timed_phase(self) -> None:
        enter_timed_phase(self.state, self.rng, on_conflict=self.on_conflict, echo=False)
        self.add_log(f"Round {self.state['round_no']}: timed phase with {len(self.state['prompts'])} prompt(s).")

    def next(self) -> None:
        """
        Confirm the current prompt. Past the last prompt, confirm completes the timed phase.
        """
        if not next_prompt(self.state, echo=False):
            complete_timed_phase(self.state, echo=False)
            self.add_log(f"Round {self.state['round_no']}: timed phase completed.")

    def back(self) -> None:
        previous_prompt(self.state)

    def enter_resolution_phase(self) -> None:
        enter_resolution_phase(self.state)
        self.add_log(f"Round {self.state['round_no']}: resolution phase.")

    def complete_resolution(self, panic_level: str, ufos_left: int, *, alien_base_destroyed: bool = False) -> None:
        result = complete_resolution_phase(
            self.state, panic_level, ufos_left, alien_base_destroyed=alien_base_destroyed, echo=False  # type: ignore[arg-type]
        )
        if result is not None:
            self.add_log(f"Game over in round {self.state['round_no']}: {RESULT_LABELS[result]}.")
            logger.info("Game %s ended: %s", self.game_id, result)
            return
        self.add_log(f"Resolution recorded: panic={panic_level}, ufos_left={ufos_left}.")

    def reopen_resolution(self) -> None:
        reopen_resolution_phase(self.state, echo=False)
        self.add_log(f"Round {self.state['round_no']}: game end undone, back to resolution.")


class GameManager:
    """
    Simple in-memory store (sessions are lost on restart).
    """

    def __init__(self) -> None:
        self._games: Dict[str, GameSession] = {}

    def create_game(self, seed: Optional[int] = None, *, on_conflict: ConflictPolicy = "drop") -> GameSession:
        gid = _new_id(8)
        if seed is None:
            seed = secrets.randbits(32)
        session = GameSession(game_id=gid, seed=seed, rng=random.Random(seed), on_conflict=on_conflict)
        session.add_log(f"Game created. seed={seed}")
        self._games[gid] = session
        logger.info("Created game %s (seed=%s)", gid, seed)
        return session

    def get_game(self, game_id: str) -> Optional[GameSession]:
        return self._games.get(game_id)
