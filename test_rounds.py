"""test_rounds.py — Round engine: phase order, prompt cursor, alien base signal.

Run:  pytest test_rounds.py
"""
from __future__ import annotations

import random

import pytest

import rounds
from prompts import BaseDiscovered
from rounds import (
    ALIEN_BASE_ROUND,
    MAX_UFOS_LEFT,
    complete_resolution_phase,
    complete_timed_phase,
    enter_resolution_phase,
    enter_timed_phase,
    next_prompt,
    preview_round,
    previous_prompt,
    reopen_resolution_phase,
)
from state import current_prompt, new_game_state, validate_state


def _walk_timed_phase(state):
    while next_prompt(state, echo=False):
        pass
    complete_timed_phase(state, echo=False)


def test_new_game_defaults():
    state = new_game_state()
    assert state["round_no"] == 1
    assert state["panic_level"] == "yellow"
    assert state["ufos_left"] == 0
    assert state["alien_base_discovered"] is False
    assert state["phase"] == "prepare_timed"
    validate_state(state)


def test_full_round_cycle():
    state = new_game_state()
    rng = random.Random(1)

    enter_timed_phase(state, rng, echo=False)
    assert state["phase"] == "timed"
    assert len(state["prompts"]) == 7

    _walk_timed_phase(state)
    assert state["phase"] == "prepare_resolution"
    assert state["prompts"] == []

    enter_resolution_phase(state)
    complete_resolution_phase(state, "orange", 4, echo=False)
    assert state["round_no"] == 2
    assert state["panic_level"] == "orange"
    assert state["ufos_left"] == 4
    assert state["phase"] == "prepare_timed"


def test_cursor_back_and_forth():
    state = new_game_state(round_no=3)
    enter_timed_phase(state, random.Random(2), echo=False)

    assert previous_prompt(state) is False
    first = current_prompt(state)
    assert next_prompt(state, echo=False)
    assert next_prompt(state, echo=False)
    assert state["latest_prompt_idx"] == 2
    assert previous_prompt(state)
    assert previous_prompt(state)
    assert current_prompt(state) == first
    assert state["latest_prompt_idx"] == 2
    validate_state(state)


def test_alien_base_flag_raised_only_when_consumed():
    state = new_game_state(round_no=ALIEN_BASE_ROUND, ufos_left=6)
    enter_timed_phase(state, random.Random(3), echo=False)

    base_idx = next(i for i, p in enumerate(state["prompts"]) if isinstance(p, BaseDiscovered))
    for _ in range(base_idx):
        next_prompt(state, echo=False)
    assert state["alien_base_discovered"] is False

    next_prompt(state, echo=False)
    assert state["alien_base_discovered"] is True
    assert any("[ALIEN BASE]" in line for line in state["public_log"])


@pytest.mark.parametrize("round_no", [1, 4, 6])
def test_no_alien_base_outside_its_round(round_no):
    state = new_game_state(round_no=round_no)
    enter_timed_phase(state, random.Random(round_no), echo=False)
    assert not any(isinstance(p, BaseDiscovered) for p in state["prompts"])


def test_phase_order_is_enforced():
    state = new_game_state()
    with pytest.raises(RuntimeError):
        next_prompt(state)
    with pytest.raises(RuntimeError):
        enter_resolution_phase(state)

    enter_timed_phase(state, random.Random(0), echo=False)
    with pytest.raises(RuntimeError):
        enter_timed_phase(state, random.Random(0), echo=False)
    with pytest.raises(RuntimeError):
        complete_timed_phase(state, echo=False)


def test_resolution_rejects_bad_values():
    state = new_game_state()
    enter_timed_phase(state, random.Random(0), echo=False)
    _walk_timed_phase(state)
    enter_resolution_phase(state)

    with pytest.raises(ValueError):
        complete_resolution_phase(state, "blue", 0, echo=False)
    with pytest.raises(ValueError):
        complete_resolution_phase(state, "red", -1, echo=False)
    assert state["phase"] == "resolution"


def test_preview_is_reproducible():
    a = preview_round(5, "orange", 10, seed=8)
    b = preview_round(5, "orange", 10, seed=8)
    assert a == b
    assert len(a) == 13
    assert any(t.startswith("Alien base discovered") for t in a)


def _in_resolution(**kwargs):
    state = new_game_state(**kwargs)
    enter_timed_phase(state, random.Random(0), echo=False)
    _walk_timed_phase(state)
    enter_resolution_phase(state)
    return state


@pytest.mark.parametrize(
    "destroyed, panic, expected",
    [
        (True, "red", "victory"),
        (True, "alien", "pyrrhic_victory"),
        (False, "alien", "defeat"),
        (False, "red", None),
    ],
)
def test_resolution_outcome(destroyed, panic, expected):
    state = _in_resolution(round_no=6, panic_level="orange", ufos_left=2, alien_base_discovered=True)

    result = complete_resolution_phase(state, panic, 3, alien_base_destroyed=destroyed, echo=False)

    assert result == expected
    assert state["result"] == expected
    if expected is None:
        assert state["phase"] == "prepare_timed"
        assert state["round_no"] == 7
        assert state["panic_level"] == "red"
    else:
        assert state["phase"] == "game_completed"
        # The last round's record stays as it was
        assert state["round_no"] == 6
        assert state["panic_level"] == "orange"
        assert state["ufos_left"] == 2
    validate_state(state)


def test_game_end_can_be_taken_back():
    state = _in_resolution(alien_base_discovered=True)
    complete_resolution_phase(state, "Alien", 0, echo=False)
    assert state["phase"] == "game_completed"

    with pytest.raises(RuntimeError):
        enter_timed_phase(state, random.Random(0), echo=False)

    reopen_resolution_phase(state, echo=False)
    assert state["phase"] == "resolution"
    assert state["result"] is None

    complete_resolution_phase(state, "yellow", 1, echo=False)
    assert state["phase"] == "prepare_timed"
    assert state["round_no"] == 2


def test_undiscovered_base_cannot_be_destroyed():
    state = _in_resolution()
    with pytest.raises(ValueError):
        complete_resolution_phase(state, "red", 0, alien_base_destroyed=True, echo=False)
    assert state["phase"] == "resolution"


def test_ufos_left_is_capped():
    state = _in_resolution()
    with pytest.raises(ValueError):
        complete_resolution_phase(state, "red", MAX_UFOS_LEFT + 1, echo=False)
    complete_resolution_phase(state, "red", MAX_UFOS_LEFT, echo=False)
    assert state["ufos_left"] == MAX_UFOS_LEFT



def _fake_input(monkeypatch, answers):
    """Answer resolution questions from `answers`; confirm everything else."""
    answers = iter(answers)

    def fake_input(prompt: str = "") -> str:
        if prompt.startswith(("Panic level", "UFOs left", "Alien base destroyed")):
            return next(answers)
        return ""

    monkeypatch.setattr("builtins.input", fake_input)


def test_run_game_stops_after_max_rounds(monkeypatch, capsys):
    _fake_input(monkeypatch, ["red", "3"] + ["", ""] * 10)
    state = new_game_state()

    assert rounds.run_game(state, max_rounds=2, seed=5) is None

    assert state["round_no"] == 3
    assert state["panic_level"] == "red"
    assert state["ufos_left"] == 3
    out = capsys.readouterr().out
    assert "GAME STOPPED" in out
    assert "ROUND 2" in out


def test_run_game_ends_on_result(monkeypatch, capsys):
    # Round 1 plays on; round 2 pushes panic into alien space
    _fake_input(monkeypatch, ["orange", "2", "alien", "0"])
    state = new_game_state()

    assert rounds.run_game(state, seed=5) == "defeat"

    assert state["phase"] == "game_completed"
    assert state["round_no"] == 2
    out = capsys.readouterr().out
    assert "GAME END" in out
    assert "Result: Defeat" in out


def test_run_game_asks_about_base_once_discovered(monkeypatch):
    _fake_input(monkeypatch, ["red", "1", "y"])
    state = new_game_state(round_no=ALIEN_BASE_ROUND, ufos_left=4)

    assert rounds.run_game(state, seed=9) == "victory"
    assert state["alien_base_discovered"] is True
