#!/usr/bin/env python3
"""
board.py — World map + panic track definitions for X-1C

The world map has exactly three continents. Each continent carries one
UFO die during the timed phase; interceptors are assigned per continent.

Rules:
- ALL_CONTINENTS is the canonical order (America, Africa, Eurasia)
- Random continent draws are uniform over ALL_CONTINENTS
- Panic level sets the base income for the round (higher panic -> less income)
"""

from __future__ import annotations

import random
from typing import Dict, List, Literal


# -----------------------------
# Continents
# -----------------------------
Continent = Literal["america", "africa", "eurasia"]

ALL_CONTINENTS: List[Continent] = ["america", "africa", "eurasia"]

CONTINENT_NAMES: Dict[Continent, str] = {
    "america": "America",
    "africa": "Africa",
    "eurasia": "Eurasia",
}


# -----------------------------
# Panic track
# -----------------------------
PanicLevel = Literal["yellow", "orange", "red"]

PANIC_LEVELS: List[PanicLevel] = ["yellow", "orange", "red"]

# Base income per panic level
BASE_INCOME: Dict[PanicLevel, int] = {
    "yellow": 6,
    "orange": 5,
    "red": 4,
}


def random_continent(rng: random.Random) -> Continent:
    """Draw one continent uniformly at random (consumes one rng draw)."""
    return rng.choice(ALL_CONTINENTS)


def shuffled_continents(rng: random.Random) -> List[Continent]:
    """Return a fresh list of all continents in random order."""
    continents = list(ALL_CONTINENTS)
    rng.shuffle(continents)
    return continents


def continent_name(continent: Continent) -> str:
    return CONTINENT_NAMES[continent]


def parse_panic_level(value: str) -> PanicLevel:
    """
    Normalize user/form input to a PanicLevel.

    Raises ValueError for anything outside the panic track.
    """
    v = (value or "").strip().lower()
    if v not in BASE_INCOME:
        raise ValueError(f"Unknown panic level {value!r}. Use one of: {', '.join(PANIC_LEVELS)}")
    return v  # type: ignore[return-value]


def base_income(panic: PanicLevel) -> int:
    """Return the base income for a panic level."""
    return BASE_INCOME[panic]


# Past red the marker leaves the track: the aliens have taken the world
ALIEN_SPACE = "alien"

# What the player reports after resolution: a panic level, or ALIEN_SPACE
PanicReport = Literal["yellow", "orange", "red", "alien"]


def parse_panic_report(value: str) -> PanicReport:
    """
    Like parse_panic_level, but also accepts ALIEN_SPACE.
    """
    v = (value or "").strip().lower()
    if v == ALIEN_SPACE:
        return ALIEN_SPACE  # type: ignore[return-value]
    try:
        return parse_panic_level(v)
    except ValueError:
        raise ValueError(
            f"Unknown panic level {value!r}. Use one of: {', '.join(PANIC_LEVELS)}, {ALIEN_SPACE}"
        ) from None
