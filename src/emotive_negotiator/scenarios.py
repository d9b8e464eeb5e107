"""Catalogs of hidden counterpart parameters and seeded selection among them."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence


@dataclass(frozen=True, slots=True)
class Scenario:
    """A named hidden counterpart: orientation in degrees and weights."""

    name: str
    theta: float
    w: tuple[float, ...]
    description: str = ""


def _scenario(name: str, theta: float, w: Sequence[float], description: str = "") -> Scenario:
    return Scenario(name=name, theta=float(theta), w=tuple(float(v) for v in w), description=description)


FOUR_ISSUE_SCENARIOS: tuple[Scenario, ...] = (
    _scenario("uniform x 90", 90, [1, 1, 1, 1]),
    _scenario("ascending x 90", 90, [-1, 0, 1, 2]),
    _scenario("descending x 90", 90, [2, 1, 0, -1]),
    _scenario("focus_1st x 90", 90, [3, 1, 0, -1]),
    _scenario("focus_4th x 90", 90, [-1, 0, 1, 3]),
    _scenario("contrast x 90", 90, [2, -1, 2, -1]),
    _scenario("mild_pos x 90", 90, [2, 1, 1, 0]),
    _scenario("mild_neg x 90", 90, [0, -1, 1, 2]),
    _scenario("balanced x 90", 90, [1, 2, -1, 1]),
    _scenario("spread x 90", 90, [3, -2, 1, 0]),
    _scenario("uniform x 45", 45, [1, 1, 1, 1]),
    _scenario("ascending x 45", 45, [-1, 0, 1, 2]),
    _scenario("descending x 45", 45, [2, 1, 0, -1]),
    _scenario("focus_2nd x 45", 45, [0, 3, 1, -1]),
    _scenario("focus_3rd x 45", 45, [-1, 1, 3, 0]),
    _scenario("contrast x 45", 45, [-1, 2, -1, 2]),
    _scenario("mild_pos x 45", 45, [1, 2, 1, 0]),
    _scenario("mild_neg x 45", 45, [0, 1, -1, 2]),
    _scenario("diagonal x 45", 45, [2, 0, 1, 2]),
    _scenario("mixed x 45", 45, [1, -2, 2, 1]),
    _scenario("uniform x 0", 0, [1, 1, 1, 1]),
    _scenario("ascending x 0", 0, [-1, 0, 1, 2]),
    _scenario("descending x 0", 0, [2, 1, 0, -1]),
    _scenario("focus_1st x 0", 0, [3, 0, -1, 1]),
    _scenario("focus_2nd x 0", 0, [1, 3, 0, -1]),
    _scenario("contrast x 0", 0, [2, -2, 1, -1]),
    _scenario("mild_pos x 0", 0, [2, 2, 0, 1]),
    _scenario("mild_neg x 0", 0, [-1, 1, 2, 0]),
    _scenario("spread x 0", 0, [1, -1, 2, 1]),
    _scenario("asymmetric x 0", 0, [0, 2, -1, 3]),
    _scenario("uniform x -45", -45, [1, 1, 1, 1]),
    _scenario("ascending x -45", -45, [-1, 0, 1, 2]),
    _scenario("descending x -45", -45, [2, 1, 0, -1]),
    _scenario("focus_3rd x -45", -45, [0, -1, 3, 1]),
    _scenario("focus_4th x -45", -45, [1, 0, -1, 3]),
    _scenario("contrast x -45", -45, [-1, 1, 2, -2]),
    _scenario("mild_pos x -45", -45, [1, 0, 2, 1]),
    _scenario("mild_neg x -45", -45, [0, 2, 1, -1]),
    _scenario("spread x -45", -45, [2, -1, 0, 2]),
    _scenario("asymmetric x -45", -45, [-1, 3, 1, 0]),
)

# Hard to identify from emotions alone; useful for stress tests.
HARD_FOUR_ISSUE_SCENARIOS: tuple[Scenario, ...] = (
    _scenario("extreme_neg_1st x 0", 0, [-4, 0, 0, 0]),
    _scenario("balanced_neg x 0", 0, [-2, -2, -2, -2]),
    _scenario("skewed_3rd x -15", -15, [-1, -1, 4, -1]),
    _scenario("triple_124 x 0", 0, [2, 2, -2, 2]),
    _scenario("extreme_neg_1st x -45", -45, [-4, 0, 0, 0]),
    _scenario("balanced_pos x 0", 0, [2, 2, 2, 2]),
    _scenario("diagonal_1 x 45", 45, [3, -1, -1, 3]),
    _scenario("diagonal_2 x 45", 45, [-1, 3, 3, -1]),
)

# Identifiable within a few offers; useful for smoke tests.
EASY_FOUR_ISSUE_SCENARIOS: tuple[Scenario, ...] = (
    _scenario("uniform x 90", 90, [1, 1, 1, 1]),
    _scenario("skewed_1st x 90", 90, [4, -1, -1, -1]),
    _scenario("ascending x 90", 90, [-2, -1, 1, 2]),
    _scenario("uniform x 75", 75, [1, 1, 1, 1]),
    _scenario("ascending x 75", 75, [-2, -1, 1, 2]),
    _scenario("skewed_1st x -45", -45, [4, -1, -1, -1]),
    _scenario("skewed_1st x -30", -30, [4, -1, -1, -1]),
    _scenario("uniform x -15", -15, [1, 1, 1, 1]),
)

THREE_ISSUE_SCENARIOS: tuple[Scenario, ...] = (
    _scenario("basic_1 x 0", 0, [4, -4, 0], "liked/liked, neutral/disliked, disliked/neutral"),
    _scenario("basic_2 x 45", 45, [-4, 4, -4], "liked/disliked, neutral/liked, disliked/disliked"),
    _scenario("basic_3 x -45", -45, [0, 0, 4], "liked/neutral, neutral/neutral, disliked/liked"),
    _scenario("likes_all x 90", 90, [4, 4, 4], "cooperative counterpart"),
    _scenario("dislikes_all x -45", -45, [-4, -4, -4], "competitive counterpart"),
    _scenario("inverse x 0", 0, [-4, 0, 4], "opposite tastes, trade-offs available"),
    _scenario("same_taste x 45", 45, [4, 0, -4], "shared tastes, win-win possible"),
    _scenario("partial_match x 0", 0, [4, -4, 4]),
    _scenario("indifferent x 0", 0, [0, 0, 0]),
)


class ScenarioCatalog:
    """Finite set of scenarios with reproducible random selection."""

    def __init__(self, scenarios: Iterable[Scenario], seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self.scenarios: tuple[Scenario, ...] = tuple(scenarios)
        if not self.scenarios:
            raise ValueError("Scenario catalog is empty")
        self.random = rng if rng is not None else random.Random(seed)

    def __len__(self) -> int:
        return len(self.scenarios)

    def names(self) -> Sequence[str]:
        return tuple(s.name for s in self.scenarios)

    def get(self, name: str) -> Scenario:
        for scenario in self.scenarios:
            if scenario.name == name:
                return scenario
        raise KeyError(f"Unknown scenario '{name}'")

    def choose(self) -> Scenario:
        return self.random.choice(self.scenarios)


def default_catalog(dimensions: int, seed: Optional[int] = None) -> ScenarioCatalog:
    """Built-in catalog for four- or three-issue domains."""

    if dimensions == 4:
        return ScenarioCatalog(FOUR_ISSUE_SCENARIOS, seed=seed)
    if dimensions == 3:
        return ScenarioCatalog(THREE_ISSUE_SCENARIOS, seed=seed)
    raise KeyError(f"No built-in scenarios for {dimensions} issues")


__all__ = [
    "Scenario",
    "ScenarioCatalog",
    "FOUR_ISSUE_SCENARIOS",
    "EASY_FOUR_ISSUE_SCENARIOS",
    "HARD_FOUR_ISSUE_SCENARIOS",
    "THREE_ISSUE_SCENARIOS",
    "default_catalog",
]
