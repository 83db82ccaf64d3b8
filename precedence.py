#!/usr/bin/env python3
"""
precedence.py — Pairwise ordering rules between timed-phase prompts

must_follow(a, b) answers: "is prompt `a` only valid once `b` has happened?"

Rules (exhaustive):
- AddUnitsToLocation(c, _)  after RollLocation(c)
- AssignInterceptors(c)     after RollLocation(c)
- SwapLocations(c1, c2)     after RollLocation(c1) and after RollLocation(c2)
- anything else: no dependency

The relation is strictly pairwise. Nothing here reasons about chains.

Design
------
- One rule function per prompt kind, dispatched by prompt class.
- Every kind in prompts.PROMPT_KINDS must have an entry; adding a new prompt
  kind without a rule fails at import time.
"""

from __future__ import annotations

from typing import Callable, Dict

from prompts import (
    PROMPT_KINDS,
    AddUnitsToLocation,
    AssignInterceptors,
    BaseDiscovered,
    ChooseResearch,
    Prompt,
    RollLocation,
    SwapLocations,
    TakeIncome,
)


# Handler signature: (prompt, other) -> must prompt come after other?
PrecedenceRuleFn = Callable[[Prompt, Prompt], bool]


# -------------------------------------------------------------------
# Rules
# -------------------------------------------------------------------
def _no_dependency(prompt: Prompt, other: Prompt) -> bool:
    return False


def _after_roll_of_same_continent(prompt: Prompt, other: Prompt) -> bool:
    # Can't add to (or intercept at) a location before its die was rolled
    return isinstance(other, RollLocation) and other.continent == prompt.continent  # type: ignore[union-attr]


def _swap_after_roll_of_either(prompt: Prompt, other: Prompt) -> bool:
    # Both dice involved in a swap must have been rolled
    assert isinstance(prompt, SwapLocations)
    return isinstance(other, RollLocation) and other.continent in (prompt.first, prompt.second)


PRECEDENCE_RULES: Dict[type, PrecedenceRuleFn] = {
    TakeIncome: _no_dependency,
    RollLocation: _no_dependency,
    AddUnitsToLocation: _after_roll_of_same_continent,
    SwapLocations: _swap_after_roll_of_either,
    ChooseResearch: _no_dependency,
    AssignInterceptors: _after_roll_of_same_continent,
    BaseDiscovered: _no_dependency,
}

assert set(PRECEDENCE_RULES) == set(PROMPT_KINDS), (
    f"precedence rules out of sync with prompt kinds: "
    f"missing={set(PROMPT_KINDS) - set(PRECEDENCE_RULES)}"
)


def must_follow(prompt: Prompt, other: Prompt) -> bool:
    """
    Return True iff `prompt` is only valid once `other` has already occurred.

    Single entry point used by the shuffle engine.
    """
    return PRECEDENCE_RULES[type(prompt)](prompt, other)
