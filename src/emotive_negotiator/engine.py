"""Episode-level façade: simulate the hidden counterpart and track the posterior."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .config import InferenceConfig
from .domain import generate_offers, offer_count, validate_offer
from .emotion import EmotionModel
from .errors import InvalidConfiguration, ResourceExhausted
from .estimates import PosteriorSummary, StatisticsExtractor
from .grid import ParameterGrid
from .posterior import BayesianUpdateEngine, PosteriorStore
from .scenarios import Scenario
from .utility import MaxUtilityCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OfferResult:
    emotion: int
    round: int
    summary: PosteriorSummary


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    round: int
    offer: tuple[int, ...]
    emotion: int
    summary: PosteriorSummary


@dataclass(frozen=True, slots=True)
class TrueParameters:
    theta: float
    w: tuple[float, ...]
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class _Model:
    """Everything derived from one configuration, published as a unit."""

    config: InferenceConfig
    grid: ParameterGrid
    cache: MaxUtilityCache
    emotion: EmotionModel
    statistics: StatisticsExtractor
    store: PosteriorStore
    updater: BayesianUpdateEngine


class EmotionInferenceEngine:
    """Infers a counterpart's orientation and weights from its emotions.

    The caller injects the hidden truth through :meth:`reset` and then plays
    offers with :meth:`apply_offer`; each offer produces the counterpart's
    emotion and a Bayesian update of the grid posterior.
    """

    def __init__(self, config: Optional[InferenceConfig] = None) -> None:
        self._model = self._build(config or InferenceConfig())
        self._truth: Optional[TrueParameters] = None
        self._history: list[HistoryEntry] = []
        self.round = 0

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------
    @staticmethod
    def _build(config: InferenceConfig) -> _Model:
        count = offer_count(config.quantities)
        if count > config.max_offers:
            raise ResourceExhausted(f"{count} offers exceed the budget of {config.max_offers}")
        grid = ParameterGrid.build(config)
        cache = MaxUtilityCache(grid, config.w_self, config.quantities)
        emotion = EmotionModel(config.emotion, grid, cache, config.w_self, config.quantities, config.w_grid)
        logger.info(
            "Built hypothesis grid: %d angles x %d weight vectors over %d issues",
            grid.n_theta,
            grid.n_w,
            grid.dimensions,
        )
        store = PosteriorStore(grid.size, config.representation)
        return _Model(
            config=config,
            grid=grid,
            cache=cache,
            emotion=emotion,
            statistics=StatisticsExtractor(grid),
            store=store,
            updater=BayesianUpdateEngine(emotion, store, config.emotion),
        )

    # ------------------------------------------------------------------
    # accessors
    # ------------------------------------------------------------------
    @property
    def config(self) -> InferenceConfig:
        return self._model.config

    @property
    def store(self) -> PosteriorStore:
        return self._model.store

    @property
    def grid(self) -> ParameterGrid:
        return self._model.grid

    @property
    def cache(self) -> MaxUtilityCache:
        return self._model.cache

    @property
    def emotion_model(self) -> EmotionModel:
        return self._model.emotion

    @property
    def quantities(self) -> tuple[int, ...]:
        return self.config.quantities

    @property
    def w_self(self) -> tuple[float, ...]:
        return self.config.w_self

    def candidate_offers(self) -> np.ndarray:
        """Every feasible offer, in lexicographic order."""

        return generate_offers(self.quantities, self.config.max_offers)

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    def true_parameters(self) -> TrueParameters:
        if self._truth is None:
            raise RuntimeError("Engine must be reset with true parameters first")
        return self._truth

    # ------------------------------------------------------------------
    # episode control
    # ------------------------------------------------------------------
    def reset(self, true_theta: float, true_w: Sequence[float], name: Optional[str] = None) -> None:
        """Start a new episode against a counterpart with the given parameters."""

        truth = self._check_truth(true_theta, true_w, name)
        self._model = self._build(self.config)
        self._truth = truth
        self._history.clear()
        self.round = 0
        logger.info("Reset episode: theta=%s w=%s", truth.theta, list(truth.w))

    def reset_with_scenario(self, scenario: Scenario) -> None:
        self.reset(scenario.theta, scenario.w, name=scenario.name)

    def update_self_weights(self, w_self: Sequence[float]) -> None:
        """Replace the proposer's weights; rebuilds everything and resets the episode."""

        config = self.config.with_self_weights(w_self)
        self._model = self._build(config)
        self._history.clear()
        self.round = 0
        logger.info("Proposer weights changed to %s", list(config.w_self))

    def preview_emotion(self, offer: Sequence[int]) -> int:
        """Counterpart's reaction to ``offer`` without recording or updating."""

        truth = self.true_parameters()
        x = validate_offer(offer, self.quantities)
        return self._model.emotion.sample_true_emotion(x, truth.theta, truth.w)

    def apply_offer(self, offer: Sequence[int]) -> OfferResult:
        truth = self.true_parameters()
        x = validate_offer(offer, self.quantities)
        emotion = self._model.emotion.sample_true_emotion(x, truth.theta, truth.w)
        self._model.updater.update(emotion, x)
        self.round += 1
        summary = self.get_estimates()
        self._history.append(
            HistoryEntry(round=self.round, offer=tuple(int(v) for v in x), emotion=emotion, summary=summary)
        )
        logger.debug("Round %d: offer %s -> emotion %d", self.round, x.tolist(), emotion)
        return OfferResult(emotion=emotion, round=self.round, summary=summary)

    def get_estimates(self) -> PosteriorSummary:
        return self._model.statistics.summarise(self.store.probabilities)

    def posterior(self) -> np.ndarray:
        """Joint posterior shaped ``(n_theta, n_w)``."""

        return self.store.probabilities.reshape(self.grid.shape)

    def _check_truth(self, true_theta: float, true_w: Sequence[float], name: Optional[str]) -> TrueParameters:
        w = tuple(float(v) for v in true_w)
        if len(w) != self.config.dimensions:
            raise InvalidConfiguration(
                f"True weights have {len(w)} components but there are {self.config.dimensions} issues"
            )
        theta = float(true_theta)
        if not all(math.isfinite(v) for v in (theta, *w)):
            raise InvalidConfiguration("True parameters must be finite")
        if not -90.0 <= theta <= 90.0:
            raise InvalidConfiguration(f"True orientation {theta} is outside [-90, 90] degrees")
        return TrueParameters(theta=theta, w=w, name=name)


__all__ = ["EmotionInferenceEngine", "OfferResult", "HistoryEntry", "TrueParameters"]
