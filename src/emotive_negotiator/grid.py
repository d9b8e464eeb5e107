"""Discretised hypothesis space over orientation angles and preference weights."""
from __future__ import annotations

import itertools
from dataclasses import dataclass

import numpy as np

from .config import GridSpec, InferenceConfig
from .errors import ResourceExhausted


def inclusive_range(spec: GridSpec, decimals: int = 6, append_upper: bool = True) -> np.ndarray:
    """Values ``minimum, minimum + step, ...`` up to ``maximum``.

    Every value is computed from its index rather than by repeated addition and
    rounded to ``decimals``, so drift never drops or perturbs the upper bound.
    When the step does not divide the span, ``maximum`` is appended as an extra
    point only if ``append_upper`` is set; otherwise the range stops at the
    last whole step.
    """

    spec.validate("grid")
    span = spec.maximum - spec.minimum
    count = int(np.floor(span / spec.step + 1e-9)) + 1
    values = np.round(spec.minimum + spec.step * np.arange(count), decimals)
    upper = round(spec.maximum, decimals)
    if np.isclose(values[-1], upper, rtol=0.0, atol=10.0**-decimals):
        values[-1] = upper
    elif append_upper:
        values = np.append(values, upper)
    values[0] = round(spec.minimum, decimals)
    return values


@dataclass(frozen=True, eq=False)
class ParameterGrid:
    """Cartesian product of a θ-grid and a D-dimensional w-grid.

    Hypothesis ``(ti, wi)`` has the dense flat index ``ti * n_w + wi``.
    ``w_grid`` rows follow lexicographic order over ``w_values``.
    """

    theta_degrees: np.ndarray
    theta_radians: np.ndarray
    w_values: np.ndarray
    w_grid: np.ndarray

    @classmethod
    def build(cls, config: InferenceConfig) -> "ParameterGrid":
        theta = inclusive_range(config.theta_grid, config.grid_decimals)
        w_values = inclusive_range(config.w_grid, config.grid_decimals, append_upper=False)
        size = len(theta) * len(w_values) ** config.dimensions
        if size > config.max_hypotheses:
            raise ResourceExhausted(f"{size} hypotheses exceed the budget of {config.max_hypotheses}")
        w_grid = np.array(list(itertools.product(w_values, repeat=config.dimensions)), dtype=float)
        grid = cls(
            theta_degrees=theta,
            theta_radians=np.deg2rad(theta),
            w_values=w_values,
            w_grid=w_grid.reshape(-1, config.dimensions),
        )
        for array in (grid.theta_degrees, grid.theta_radians, grid.w_values, grid.w_grid):
            array.setflags(write=False)
        return grid

    @property
    def n_theta(self) -> int:
        return len(self.theta_degrees)

    @property
    def n_w(self) -> int:
        return len(self.w_grid)

    @property
    def dimensions(self) -> int:
        return self.w_grid.shape[1]

    @property
    def size(self) -> int:
        return self.n_theta * self.n_w

    @property
    def shape(self) -> tuple[int, int]:
        return self.n_theta, self.n_w

    def index(self, theta_index: int, w_index: int) -> int:
        if not (0 <= theta_index < self.n_theta and 0 <= w_index < self.n_w):
            raise IndexError(f"Hypothesis ({theta_index}, {w_index}) is outside the grid")
        return theta_index * self.n_w + w_index

    def split(self, flat_index: int) -> tuple[int, int]:
        if not 0 <= flat_index < self.size:
            raise IndexError(f"Flat index {flat_index} is outside the grid")
        return divmod(flat_index, self.n_w)

    def hypothesis(self, flat_index: int) -> tuple[float, tuple[float, ...]]:
        """``(θ in degrees, w)`` for a flat index."""

        ti, wi = self.split(flat_index)
        return float(self.theta_degrees[ti]), tuple(float(v) for v in self.w_grid[wi])


__all__ = ["ParameterGrid", "inclusive_range"]
