#!/usr/bin/env python3
"""
timed_phase.py — Round prompt scheduler for the X-1C timed phase

Implements:
- income sampling (panic-based income with a weighted -1/0/+1 adjustment)
- canonical round composition (income, dice rolls, bonus UFOs, interceptors, research)
- constrained shuffle (bounded remove/reinsert moves that respect precedence.py)

Randomness
----------
Every random draw goes through the `rng` handle passed in by the caller, in a
fixed order: income -> continent shuffles -> bonus continent draws -> shifts.
Same seed + same inputs => same schedule.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Literal, Optional, Sequence, Tuple

from board import (
    ALL_CONTINENTS,
    BASE_INCOME,
    PanicLevel,
    random_continent,
    shuffled_continents,
)
from precedence import must_follow
from prompts import (
    AddUnitsToLocation,
    AssignInterceptors,
    BaseDiscovered,
    ChooseResearch,
    Prompt,
    RollLocation,
    SwapLocations,
    TakeIncome,
)

logger = logging.getLogger(__name__)


# -----------------------------
# Tunables
# -----------------------------
INCOME_OFFSETS: List[int] = [-1, 0, 1]
INCOME_WEIGHTS: List[float] = [0.30, 0.50, 0.20]

# Rounds below this roll only two UFO dice
FULL_ROLL_ROUND = 3

# (leftover UFOs strictly below, number of shifts); anything above the last step -> MAX_SHIFTS
SHIFT_STEPS: List[Tuple[int, int]] = [
    (1, 0),
    (2, 3),
    (4, 5),
    (6, 7),
    (9, 9),
    (13, 12),
]
MAX_SHIFTS = 15

ConflictPolicy = Literal["drop", "clamp"]


# -----------------------------
# Income
# -----------------------------
def sample_income(panic: PanicLevel, rng: random.Random) -> TakeIncome:
    """
    Base income for the panic level plus one weighted offset from INCOME_OFFSETS.
    Consumes exactly one rng draw.
    """
    assert INCOME_OFFSETS and len(INCOME_OFFSETS) == len(INCOME_WEIGHTS), "income table is malformed"
    offset = rng.choices(INCOME_OFFSETS, weights=INCOME_WEIGHTS, k=1)[0]
    return TakeIncome(BASE_INCOME[panic] + offset)


# -----------------------------
# Composition
# -----------------------------
def _bonus_add(count: int) -> Callable[[random.Random], Prompt]:
    def _make(rng: random.Random) -> Prompt:
        return AddUnitsToLocation(random_continent(rng), count)
    return _make


def _bonus_swap(rng: random.Random) -> Prompt:
    first, second = shuffled_continents(rng)[:2]
    return SwapLocations(first, second)


# (minimum round, prompt factory), checked in this order
BONUS_SCHEDULE: List[Tuple[int, Callable[[random.Random], Prompt]]] = [
    (2, _bonus_add(2)),
    (3, _bonus_swap),
    (4, _bonus_add(1)),
    (5, _bonus_add(1)),
    (6, _bonus_swap),
    (7, _bonus_add(2)),
    (8, _bonus_swap),
]


def compose_round(
    round_no: int,
    panic: PanicLevel,
    base_discovered: bool,
    rng: random.Random,
) -> List[Prompt]:
    """
    Build the canonical (not yet shuffled) prompt list for a round:

      1) TakeIncome
      2) RollLocation per rolled continent (2 before FULL_ROLL_ROUND, else 3), shuffled order
      3) bonus prompts unlocked by round thresholds, then BaseDiscovered if flagged
      4) AssignInterceptors per continent, canonical order
      5) ChooseResearch
    """
    prompts: List[Prompt] = [sample_income(panic, rng)]

    rolled = shuffled_continents(rng)
    if round_no < FULL_ROLL_ROUND:
        rolled = rolled[:2]
    prompts.extend(RollLocation(c) for c in rolled)

    for min_round, make in BONUS_SCHEDULE:
        if round_no >= min_round:
            prompts.append(make(rng))

    if base_discovered:
        prompts.append(BaseDiscovered(random_continent(rng)))

    prompts.extend(AssignInterceptors(c) for c in ALL_CONTINENTS)
    prompts.append(ChooseResearch())
    return prompts


# -----------------------------
# Constrained shuffle
# -----------------------------
def num_shifts_for(leftover_ufos: int) -> int:
    """Number of remove/reinsert moves for a given count of leftover UFOs."""
    for below, shifts in SHIFT_STEPS:
        if leftover_ufos < below:
            return shifts
    return MAX_SHIFTS


def insertion_window(prompts: Sequence[Prompt], prompt: Prompt) -> Tuple[int, int]:
    """
    Return (lower, upper) bounds, both inclusive, where `prompt` may be re-inserted.

    upper: index of the first prompt that must follow `prompt` (else len)
    lower: one past the last prompt that `prompt` must follow (else 0)
    """
    upper = len(prompts)
    for i, other in enumerate(prompts):
        if must_follow(other, prompt):
            upper = i
            break

    lower = 0
    for i in range(len(prompts) - 1, -1, -1):
        if must_follow(prompt, prompts[i]):
            lower = i + 1
            break

    return lower, upper


def _conflict_drop(prompt: Prompt, from_pos: int, lower: int, upper: int) -> Optional[int]:
    return None


def _conflict_clamp(prompt: Prompt, from_pos: int, lower: int, upper: int) -> Optional[int]:
    # Nearer bound to where the prompt came from; ties go to upper
    if abs(upper - from_pos) <= abs(lower - from_pos):
        return upper
    return lower


CONFLICT_POLICIES: Dict[str, Callable[[Prompt, int, int, int], Optional[int]]] = {
    "drop": _conflict_drop,
    "clamp": _conflict_clamp,
}


def shift_once(prompts: List[Prompt], rng: random.Random, *, on_conflict: ConflictPolicy = "drop") -> None:
    """
    Remove one random prompt and put it back somewhere inside its precedence window.

    If the window is empty (lower > upper) the conflict policy decides:
    - "drop":  the prompt is not re-inserted
    - "clamp": the prompt is re-inserted at the nearer bound
    """
    if not prompts:
        return

    from_pos = rng.randrange(len(prompts))
    prompt = prompts.pop(from_pos)
    lower, upper = insertion_window(prompts, prompt)

    if lower <= upper:
        prompts.insert(rng.randint(lower, upper), prompt)
        return

    to_pos = CONFLICT_POLICIES[on_conflict](prompt, from_pos, lower, upper)
    if to_pos is None:
        logger.warning(
            "Dropped %s from the schedule: precedence window is empty (lower=%d > upper=%d)",
            prompt.title, lower, upper,
        )
        return

    logger.warning(
        "Clamped %s to index %d: precedence window is empty (lower=%d > upper=%d)",
        prompt.title, to_pos, lower, upper,
    )
    prompts.insert(to_pos, prompt)


def shuffle_prompts(
    prompts: Sequence[Prompt],
    leftover_ufos: int,
    rng: random.Random,
    *,
    on_conflict: ConflictPolicy = "drop",
) -> List[Prompt]:
    """
    Apply num_shifts_for(leftover_ufos) constrained moves to a copy of `prompts`.
    """
    out = list(prompts)
    for _ in range(num_shifts_for(leftover_ufos)):
        shift_once(out, rng, on_conflict=on_conflict)
    return out


# -----------------------------
# Entry point
# -----------------------------
def generate_round_prompts(
    round_no: int,
    panic: PanicLevel,
    leftover_ufos: int,
    base_discovered: bool,
    rng: random.Random,
    *,
    on_conflict: ConflictPolicy = "drop",
) -> Tuple[Prompt, ...]:
    """
    Compose and shuffle the timed-phase prompts for one round.

    The result is consumed strictly in order by the caller, which must
    note when a BaseDiscovered prompt is consumed.
    """
    if round_no < 0:
        raise ValueError(f"round must be >= 0, got {round_no}")
    if leftover_ufos < 0:
        raise ValueError(f"leftover_ufos must be >= 0, got {leftover_ufos}")
    if panic not in BASE_INCOME:
        raise ValueError(f"Unknown panic level {panic!r}")
    if on_conflict not in CONFLICT_POLICIES:
        raise ValueError(f"Unknown conflict policy {on_conflict!r}. Use one of: {', '.join(CONFLICT_POLICIES)}")

    canonical = compose_round(round_no, panic, base_discovered, rng)
    logger.debug("Round %d canonical schedule: %s", round_no, [p.title for p in canonical])

    shuffled = shuffle_prompts(canonical, leftover_ufos, rng, on_conflict=on_conflict)
    logger.debug(
        "Round %d schedule after %d shift(s): %s",
        round_no, num_shifts_for(leftover_ufos), [p.title for p in shuffled],
    )
    return tuple(shuffled)
