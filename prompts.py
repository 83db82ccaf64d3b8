#!/usr/bin/env python3
"""
prompts.py — Timed-phase prompt definitions (X-1C)

A prompt is one unit of required player action on the physical board.
The set of prompt kinds is closed:

- TakeIncome(amount)
- RollLocation(continent)
- AddUnitsToLocation(continent, count)
- SwapLocations(first, second)      first != second
- ChooseResearch
- AssignInterceptors(continent)
- BaseDiscovered(continent)

Prompts are immutable values. A fresh list is built every round; nothing
keeps prompt identity across rounds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from board import Continent, continent_name


@dataclass(frozen=True)
class TakeIncome:
    amount: int

    kind = "take_income"

    @property
    def title(self) -> str:
        return f"Take income: {self.amount}"


@dataclass(frozen=True)
class RollLocation:
    continent: Continent

    kind = "roll_location"

    @property
    def title(self) -> str:
        return f"Roll UFO location: {continent_name(self.continent)}"


@dataclass(frozen=True)
class AddUnitsToLocation:
    continent: Continent
    count: int

    kind = "add_units_to_location"

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"AddUnitsToLocation needs a positive count, got {self.count}")

    @property
    def title(self) -> str:
        return f"Add {self.count} UFO(s) to {continent_name(self.continent)}"


@dataclass(frozen=True)
class SwapLocations:
    first: Continent
    second: Continent

    kind = "swap_locations"

    def __post_init__(self) -> None:
        if self.first == self.second:
            raise ValueError(f"SwapLocations needs two different continents, got {self.first!r} twice")

    @property
    def title(self) -> str:
        return f"Swap UFO locations: {continent_name(self.first)} <-> {continent_name(self.second)}"


@dataclass(frozen=True)
class ChooseResearch:
    kind = "choose_research"

    @property
    def title(self) -> str:
        return "Choose research"


@dataclass(frozen=True)
class AssignInterceptors:
    continent: Continent

    kind = "assign_interceptors"

    @property
    def title(self) -> str:
        return f"Assign interceptors: {continent_name(self.continent)}"


@dataclass(frozen=True)
class BaseDiscovered:
    continent: Continent

    kind = "base_discovered"

    @property
    def title(self) -> str:
        return f"Alien base discovered: {continent_name(self.continent)}"


Prompt = Union[
    TakeIncome,
    RollLocation,
    AddUnitsToLocation,
    SwapLocations,
    ChooseResearch,
    AssignInterceptors,
    BaseDiscovered,
]

# Every prompt class, in declaration order
PROMPT_KINDS: Tuple[type, ...] = (
    TakeIncome,
    RollLocation,
    AddUnitsToLocation,
    SwapLocations,
    ChooseResearch,
    AssignInterceptors,
    BaseDiscovered,
)


def prompt_to_dict(prompt: Prompt) -> Dict[str, Any]:
    """
    JSON-friendly view of a prompt:
        {"kind": ..., "title": ..., <payload fields>}
    """
    out: Dict[str, Any] = {"kind": prompt.kind, "title": prompt.title}
    out.update(vars(prompt))
    return out
