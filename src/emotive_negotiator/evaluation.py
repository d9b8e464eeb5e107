"""Rollout and evaluation utilities for the probing environment."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
from gymnasium import spaces

from .env import EmotionProbeEnv, ProbeEnvConfig
from .estimates import PosteriorSummary
from .engine import TrueParameters

Policy = Callable[[np.ndarray], np.ndarray]


@dataclass(slots=True)
class EpisodeOutcome:
    truth: TrueParameters
    estimates: PosteriorSummary
    rounds: int
    information_gain: float


@dataclass(slots=True)
class EstimationStats:
    theta_error: float
    w_error: float
    theta_map_hit_rate: float
    average_rounds: float
    average_entropy: float


def make_env(config: Optional[ProbeEnvConfig] = None) -> EmotionProbeEnv:
    """Factory for the default probing environment."""

    return EmotionProbeEnv(config=config)


def rollout(env: EmotionProbeEnv, policy: Policy, episodes: int = 10, seed: Optional[int] = None) -> List[EpisodeOutcome]:
    """Run ``episodes`` episodes, choosing offers with ``policy``."""

    outcomes: list[EpisodeOutcome] = []
    for episode in range(episodes):
        obs, _ = env.reset(seed=None if seed is None else seed + episode)
        gain = 0.0
        rounds = 0
        done = False
        while not done:
            obs, reward, terminated, truncated, _ = env.step(policy(obs))
            gain += reward
            rounds += 1
            done = terminated or truncated
        outcomes.append(
            EpisodeOutcome(
                truth=env.engine.true_parameters(),
                estimates=env.estimates(),
                rounds=rounds,
                information_gain=gain,
            )
        )
    return outcomes


def random_policy(action_space: spaces.MultiDiscrete) -> Policy:
    """Uniformly random offers from ``action_space``."""

    def act(_: np.ndarray) -> np.ndarray:
        return action_space.sample()

    return act


def sweep_policy(offers: np.ndarray, seed: Optional[int] = None) -> Policy:
    """Walk through ``offers`` in a seeded random order without repeats."""

    order = np.random.default_rng(seed).permutation(len(offers))
    position = 0

    def act(_: np.ndarray) -> np.ndarray:
        nonlocal position
        offer = offers[order[position % len(order)]]
        position += 1
        return offer

    return act


def summarise(outcomes: List[EpisodeOutcome]) -> EstimationStats:
    if not outcomes:
        return EstimationStats(0.0, 0.0, 0.0, 0.0, 0.0)
    theta_errors = [abs(o.estimates.theta_mean - o.truth.theta) for o in outcomes]
    w_errors = [
        float(np.linalg.norm(np.asarray(o.estimates.w_mean) - np.asarray(o.truth.w))) for o in outcomes
    ]
    hits = [1.0 if o.estimates.theta_map == o.truth.theta else 0.0 for o in outcomes]
    return EstimationStats(
        theta_error=float(np.mean(theta_errors)),
        w_error=float(np.mean(w_errors)),
        theta_map_hit_rate=float(np.mean(hits)),
        average_rounds=float(np.mean([o.rounds for o in outcomes])),
        average_entropy=float(np.mean([o.estimates.entropy for o in outcomes])),
    )


def evaluate_random(config: Optional[ProbeEnvConfig] = None, episodes: int = 10, seed: Optional[int] = None) -> EstimationStats:
    """Evaluate estimation quality under random probing offers."""

    env = make_env(config)
    env.action_space.seed(seed)
    return summarise(rollout(env, random_policy(env.action_space), episodes=episodes, seed=seed))


__all__ = [
    "EpisodeOutcome",
    "EstimationStats",
    "evaluate_random",
    "make_env",
    "random_policy",
    "rollout",
    "summarise",
    "sweep_policy",
]
