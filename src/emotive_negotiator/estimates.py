"""Posterior summaries: marginals, posterior means and MAP estimates."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .grid import ParameterGrid


@dataclass(frozen=True, slots=True)
class ComponentMarginal:
    """Marginal distribution of one preference-weight component."""

    component: int
    values: tuple[float, ...]
    probabilities: tuple[float, ...]


@dataclass(frozen=True, slots=True)
class PosteriorSummary:
    """Point estimates and marginals of the current posterior.

    Angles are in degrees. MAP values are the argmax of the respective
    marginal, ties going to the first grid value.
    """

    theta_mean: float
    theta_map: float
    w_mean: tuple[float, ...]
    w_map: tuple[float, ...]
    theta_values: tuple[float, ...]
    theta_marginal: tuple[float, ...]
    w_marginals: tuple[ComponentMarginal, ...]
    entropy: float


class StatisticsExtractor:
    """Reduces a joint posterior over ``grid`` to marginals and estimates."""

    def __init__(self, grid: ParameterGrid) -> None:
        self.grid = grid

    def joint(self, probabilities: np.ndarray) -> np.ndarray:
        return np.asarray(probabilities, dtype=float).reshape(self.grid.shape)

    def marginal_theta(self, probabilities: np.ndarray) -> np.ndarray:
        return self.joint(probabilities).sum(axis=1)

    def marginal_w(self, probabilities: np.ndarray) -> np.ndarray:
        return self.joint(probabilities).sum(axis=0)

    def component_marginals(self, probabilities: np.ndarray) -> np.ndarray:
        """``(D, n_values)`` array: row ``d`` is the marginal of component ``d``.

        The w-grid is a full lexicographic product, so the w marginal reshapes
        into a D-dimensional tensor whose axis ``d`` indexes component ``d``.
        """

        dims = self.grid.dimensions
        n_values = len(self.grid.w_values)
        tensor = self.marginal_w(probabilities).reshape((n_values,) * dims)
        rows = []
        for d in range(dims):
            other_axes = tuple(axis for axis in range(dims) if axis != d)
            rows.append(tensor.sum(axis=other_axes))
        return np.vstack(rows)

    def summarise(self, probabilities: np.ndarray) -> PosteriorSummary:
        theta_marginal = self.marginal_theta(probabilities)
        components = self.component_marginals(probabilities)
        w_values = self.grid.w_values
        # argmax returns the first maximum, which is the tie-break rule
        theta_map = float(self.grid.theta_degrees[int(np.argmax(theta_marginal))])
        w_map = tuple(float(w_values[int(np.argmax(row))]) for row in components)
        probs = np.asarray(probabilities, dtype=float)
        mask = probs > 0
        return PosteriorSummary(
            theta_mean=float(np.dot(self.grid.theta_degrees, theta_marginal)),
            theta_map=theta_map,
            w_mean=tuple(float(v) for v in components @ w_values),
            w_map=w_map,
            theta_values=tuple(float(t) for t in self.grid.theta_degrees),
            theta_marginal=tuple(float(p) for p in theta_marginal),
            w_marginals=tuple(
                ComponentMarginal(
                    component=d,
                    values=tuple(float(v) for v in w_values),
                    probabilities=tuple(float(p) for p in row),
                )
                for d, row in enumerate(components)
            ),
            entropy=float(-np.sum(probs[mask] * np.log(probs[mask]))),
        )


__all__ = ["ComponentMarginal", "PosteriorSummary", "StatisticsExtractor"]
