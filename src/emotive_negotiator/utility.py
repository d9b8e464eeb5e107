"""Social-orientation utility and the per-hypothesis maximum-utility cache."""
from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .grid import ParameterGrid

logger = logging.getLogger(__name__)


def utility(
    offer: Sequence[int],
    w_other: Sequence[float],
    theta: float,
    w_self: Sequence[float],
    quantities: Sequence[int],
) -> float:
    """``cos θ · w_other·(Q − x) + sin θ · w_self·x`` with ``θ`` in radians."""

    x = np.asarray(offer, dtype=float)
    own = float(np.dot(np.asarray(w_other, dtype=float), np.asarray(quantities, dtype=float) - x))
    proposer = float(np.dot(np.asarray(w_self, dtype=float), x))
    return float(np.cos(theta) * own + np.sin(theta) * proposer)


def utility_table(
    offer: Sequence[int],
    grid: ParameterGrid,
    w_self: Sequence[float],
    quantities: Sequence[int],
) -> np.ndarray:
    """Utility of ``offer`` under every hypothesis, shaped ``(n_theta, n_w)``."""

    x = np.asarray(offer, dtype=float)
    own = grid.w_grid @ (np.asarray(quantities, dtype=float) - x)
    proposer = float(np.dot(np.asarray(w_self, dtype=float), x))
    cos_t = np.cos(grid.theta_radians)[:, None]
    sin_t = np.sin(grid.theta_radians)[:, None]
    return cos_t * own[None, :] + sin_t * proposer


def vertex_offer(
    theta: np.ndarray | float,
    w_other: np.ndarray,
    w_self: Sequence[float],
    quantities: Sequence[int],
) -> np.ndarray:
    """Utility-maximising offer(s) for the given hypotheses.

    Utility is affine in the offer, so the maximum over the box ``[0, Q]`` sits
    on a vertex: an issue is kept whole when its coefficient
    ``sin θ · w_self_i − cos θ · w_i`` is positive and conceded otherwise.
    ``theta`` broadcasts against the leading axes of ``w_other``.
    """

    theta = np.asarray(theta, dtype=float)[..., None]
    coef = np.sin(theta) * np.asarray(w_self, dtype=float) - np.cos(theta) * w_other
    return np.where(coef > 0, np.asarray(quantities, dtype=float), 0.0)


def vertex_max_utility(
    grid: ParameterGrid,
    w_self: Sequence[float],
    quantities: Sequence[int],
) -> np.ndarray:
    """Closed-form maximum utility per hypothesis, shaped ``(n_theta, n_w)``."""

    q = np.asarray(quantities, dtype=float)
    x = vertex_offer(grid.theta_radians[:, None], grid.w_grid[None, :, :], w_self, quantities)
    own = np.sum(grid.w_grid[None, :, :] * (q - x), axis=-1)
    proposer = x @ np.asarray(w_self, dtype=float)
    cos_t = np.cos(grid.theta_radians)[:, None]
    sin_t = np.sin(grid.theta_radians)[:, None]
    return cos_t * own + sin_t * proposer


def brute_force_max_utility(
    grid: ParameterGrid,
    offers: np.ndarray,
    w_self: Sequence[float],
    quantities: Sequence[int],
) -> np.ndarray:
    """Maximum utility per hypothesis by exhaustive search over ``offers``."""

    x = np.asarray(offers, dtype=float)
    own = (np.asarray(quantities, dtype=float) - x) @ grid.w_grid.T
    proposer = x @ np.asarray(w_self, dtype=float)
    table = np.empty(grid.shape, dtype=float)
    for ti, theta in enumerate(grid.theta_radians):
        values = np.cos(theta) * own + np.sin(theta) * proposer[:, None]
        table[ti] = values.max(axis=0)
    return table


def max_utility(theta: float, w_other: Sequence[float], w_self: Sequence[float], quantities: Sequence[int]) -> float:
    """Maximum utility of a single (θ in radians, w) pair."""

    best = vertex_offer(theta, np.asarray(w_other, dtype=float), w_self, quantities)
    return utility(best, w_other, theta, w_self, quantities)


class MaxUtilityCache:
    """``UMAX[ti][wi]`` for a fixed grid, proposer weights and quantities.

    The table is computed in full before it is published, and is read-only
    afterwards; a new grid or new weights means a new cache.
    """

    def __init__(
        self,
        grid: ParameterGrid,
        w_self: Sequence[float],
        quantities: Sequence[int],
        offers: np.ndarray | None = None,
    ) -> None:
        self.grid = grid
        self.w_self = tuple(float(w) for w in w_self)
        self.quantities = tuple(int(q) for q in quantities)
        if offers is None:
            table = vertex_max_utility(grid, self.w_self, self.quantities)
            method = "vertex"
        else:
            table = brute_force_max_utility(grid, offers, self.w_self, self.quantities)
            method = "brute-force"
        table.setflags(write=False)
        self._table = table
        logger.debug("Built %s max-utility cache over %d hypotheses", method, grid.size)

    @property
    def table(self) -> np.ndarray:
        return self._table

    def flat(self) -> np.ndarray:
        return self._table.reshape(-1)

    def __getitem__(self, key: tuple[int, int]) -> float:
        ti, wi = key
        return float(self._table[ti, wi])


__all__ = [
    "utility",
    "utility_table",
    "vertex_offer",
    "vertex_max_utility",
    "brute_force_max_utility",
    "max_utility",
    "MaxUtilityCache",
]
