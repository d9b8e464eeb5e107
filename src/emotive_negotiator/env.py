"""Gymnasium environment for probing a hidden counterpart with offers."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .config import InferenceConfig
from .engine import EmotionInferenceEngine, OfferResult
from .estimates import PosteriorSummary
from .scenarios import Scenario, ScenarioCatalog, default_catalog


@dataclass(slots=True)
class ProbeEnvConfig:
    """Configuration for :class:`EmotionProbeEnv`."""

    inference: InferenceConfig = field(default_factory=InferenceConfig)
    max_rounds: int = 20
    scenarios: Optional[tuple[Scenario, ...]] = None


class EmotionProbeEnv(gym.Env[np.ndarray, np.ndarray]):
    """Each step proposes one offer; the reward is the information gained.

    Observations concatenate the θ marginal with the per-component w
    marginals. The reward is the drop in the joint posterior's entropy (nats).
    """

    metadata = {"render_modes": []}

    def __init__(self, config: Optional[ProbeEnvConfig] = None) -> None:
        super().__init__()
        self.config = config or ProbeEnvConfig()
        self.engine = EmotionInferenceEngine(self.config.inference)
        quantities = np.asarray(self.engine.quantities, dtype=np.int64)
        self.action_space = spaces.MultiDiscrete(quantities + 1)
        grid = self.engine.grid
        obs_dim = grid.n_theta + grid.dimensions * len(grid.w_values)
        self.observation_space = spaces.Box(low=0.0, high=1.0, shape=(obs_dim,), dtype=np.float32)
        self._entropy = 0.0
        self._ready = False

    # ------------------------------------------------------------------
    # gym interface
    # ------------------------------------------------------------------
    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        scenario = (options or {}).get("scenario") or self._catalog(seed).choose()
        self.engine.reset_with_scenario(scenario)
        summary = self.engine.get_estimates()
        self._entropy = summary.entropy
        obs = self._observation(summary)
        self._ready = True
        return obs, {"scenario": scenario.name, "entropy": summary.entropy}

    def step(self, action: np.ndarray):  # type: ignore[override]
        if not self._ready:
            raise RuntimeError("Environment must be reset before stepping")
        offer = np.asarray(action, dtype=np.int64).reshape(-1)
        result: OfferResult = self.engine.apply_offer(offer)
        summary = result.summary
        reward = self._entropy - summary.entropy
        self._entropy = summary.entropy
        obs = self._observation(summary)
        truncated = result.round >= self.config.max_rounds
        if truncated:
            self._ready = False
        info = {
            "emotion": result.emotion,
            "round": result.round,
            "entropy": summary.entropy,
            "theta_mean": summary.theta_mean,
            "w_mean": summary.w_mean,
        }
        return obs, float(reward), False, truncated, info

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _catalog(self, seed: Optional[int]) -> ScenarioCatalog:
        rng = random.Random(seed if seed is not None else int(self.np_random.integers(2**31)))
        if self.config.scenarios is not None:
            return ScenarioCatalog(self.config.scenarios, rng=rng)
        catalog = default_catalog(self.engine.grid.dimensions)
        return ScenarioCatalog(catalog.scenarios, rng=rng)

    @staticmethod
    def _observation(summary: PosteriorSummary) -> np.ndarray:
        parts = [np.asarray(summary.theta_marginal, dtype=np.float32)]
        parts.extend(np.asarray(m.probabilities, dtype=np.float32) for m in summary.w_marginals)
        return np.clip(np.concatenate(parts), 0.0, 1.0)

    def estimates(self) -> PosteriorSummary:
        return self.engine.get_estimates()


__all__ = ["EmotionProbeEnv", "ProbeEnvConfig"]
