"""Emotion generative model: utility to a bounded discrete emotion label.

Labels are integers: ``-1`` is anger, ``0`` neutral and ``1..emotion_max``
increasing joy. Two strategies are available and they are *not* numerically
equivalent:

``EmotionScheme.MAX_ANCHORED`` (default)
    The reaction is measured against the best utility the counterpart could
    have obtained, ``UMAX``. Utilities more than ``emotion_max`` below it make
    the counterpart angry, exactly ``emotion_max`` below is neutral, and every
    whole unit above that line adds a joy level.

``EmotionScheme.FIXED_SCALE``
    The proposer's share value plus the cosine-weighted counterpart share value
    is cut into ``emotion_max`` equal bins of a worst-case utility range.
    Needs no ``UMAX`` but composes utility differently.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from .config import EmotionScheme, EmotionSpec, GridSpec
from .errors import InvalidConfiguration
from .grid import ParameterGrid
from .utility import MaxUtilityCache, max_utility, utility, utility_table

ANGER = -1
NEUTRAL = 0

# Utilities are sums of small products; anything closer than this to a whole
# number is treated as that number before ceil/floor.
_SNAP_DECIMALS = 9


def emotion_name(label: int) -> str:
    if label == ANGER:
        return "ANGER"
    if label == NEUTRAL:
        return "NEUTRAL"
    return f"JOY {label}"


def max_anchored_emotion(
    value: np.ndarray | float,
    maximum: np.ndarray | float,
    emotion_max: int,
    epsilon: float,
) -> np.ndarray:
    delta = np.round(np.asarray(value, dtype=float) - (np.asarray(maximum, dtype=float) - emotion_max), _SNAP_DECIMALS)
    joy = np.minimum(emotion_max, np.ceil(delta))
    labels = np.where(delta < -epsilon, ANGER, np.where(np.abs(delta) <= epsilon, NEUTRAL, joy))
    return labels.astype(np.int64)


def fixed_scale_emotion(combined: np.ndarray | float, scale: float, emotion_max: int) -> np.ndarray:
    raw = np.floor(np.round(np.asarray(combined, dtype=float) / scale, _SNAP_DECIMALS))
    return np.clip(raw, ANGER, emotion_max).astype(np.int64)


def fixed_scale(w_grid: GridSpec, w_self: Sequence[float], quantities: Sequence[int], emotion_max: int) -> float:
    """Bin width of the fixed-scale scheme."""

    w_abs_max = max(abs(w_grid.minimum), abs(w_grid.maximum))
    self_abs_max = max(abs(float(w)) for w in w_self)
    return (w_abs_max + self_abs_max) * float(sum(quantities)) / emotion_max


class EmotionModel:
    """Predicts emotion labels for grid hypotheses and for the hidden truth."""

    def __init__(
        self,
        spec: EmotionSpec,
        grid: ParameterGrid,
        cache: MaxUtilityCache,
        w_self: Sequence[float],
        quantities: Sequence[int],
        w_grid_spec: GridSpec,
    ) -> None:
        self.spec = spec
        self.grid = grid
        self.cache = cache
        self.w_self = tuple(float(w) for w in w_self)
        self.quantities = tuple(int(q) for q in quantities)
        self.scale = fixed_scale(w_grid_spec, self.w_self, self.quantities, spec.emotion_max)
        if spec.scheme is EmotionScheme.FIXED_SCALE and self.scale <= 0:
            raise InvalidConfiguration("Fixed-scale emotion scheme needs a non-zero weight range")

    @property
    def scheme(self) -> EmotionScheme:
        return self.spec.scheme

    @property
    def labels(self) -> range:
        return range(ANGER, self.spec.emotion_max + 1)

    def predict(self, theta_index: int, w_index: int, offer: Sequence[int]) -> int:
        """Predicted emotion of hypothesis ``(theta_index, w_index)``."""

        theta = float(self.grid.theta_radians[theta_index])
        w_other = self.grid.w_grid[w_index]
        if self.scheme is EmotionScheme.MAX_ANCHORED:
            value = utility(offer, w_other, theta, self.w_self, self.quantities)
            return int(max_anchored_emotion(value, self.cache[theta_index, w_index], self.spec.emotion_max, self.spec.epsilon))
        return int(self._fixed_scale(offer, theta, w_other))

    def predict_all(self, offer: Sequence[int]) -> np.ndarray:
        """Predicted emotion of every hypothesis, flat in grid order."""

        if self.scheme is EmotionScheme.MAX_ANCHORED:
            table = utility_table(offer, self.grid, self.w_self, self.quantities)
            labels = max_anchored_emotion(table, self.cache.table, self.spec.emotion_max, self.spec.epsilon)
        else:
            x = np.asarray(offer, dtype=float)
            own = self.grid.w_grid @ (np.asarray(self.quantities, dtype=float) - x)
            combined = float(np.dot(self.w_self, x)) + np.cos(self.grid.theta_radians)[:, None] * own[None, :]
            labels = fixed_scale_emotion(combined, self.scale, self.spec.emotion_max)
        return labels.reshape(-1)

    def sample_true_emotion(self, offer: Sequence[int], true_theta: float, true_w: Sequence[float]) -> int:
        """Reaction of the hidden counterpart; ``true_theta`` is in degrees."""

        theta = float(np.deg2rad(true_theta))
        w_other = np.asarray(true_w, dtype=float)
        if self.scheme is EmotionScheme.MAX_ANCHORED:
            value = utility(offer, w_other, theta, self.w_self, self.quantities)
            best = max_utility(theta, w_other, self.w_self, self.quantities)
            return int(max_anchored_emotion(value, best, self.spec.emotion_max, self.spec.epsilon))
        return int(self._fixed_scale(offer, theta, w_other))

    def _fixed_scale(self, offer: Sequence[int], theta: float, w_other: np.ndarray) -> np.ndarray:
        x = np.asarray(offer, dtype=float)
        own = float(np.dot(w_other, np.asarray(self.quantities, dtype=float) - x))
        combined = float(np.dot(self.w_self, x)) + np.cos(theta) * own
        return fixed_scale_emotion(combined, self.scale, self.spec.emotion_max)


__all__ = [
    "ANGER",
    "NEUTRAL",
    "EmotionModel",
    "emotion_name",
    "fixed_scale",
    "fixed_scale_emotion",
    "max_anchored_emotion",
]
