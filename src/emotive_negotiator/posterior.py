"""Joint posterior over the hypothesis grid and the Bayesian update step.

The default representation is the log domain. Each round multiplies most of
the grid by a mismatch likelihood around ``1e-10``; in the linear domain the
losing hypotheses reach exact zero after roughly thirty such rounds and can
never recover, and a degenerate normaliser falls back to the uniform
distribution. Adding log-likelihoods and normalising with ``logsumexp`` keeps
every hypothesis representable for arbitrarily long episodes while staying
mathematically identical to the linear update.
"""
from __future__ import annotations

import logging
import warnings
from typing import Sequence

import numpy as np
from scipy.special import logsumexp

from .config import EmotionSpec, Representation
from .emotion import EmotionModel
from .errors import LikelihoodCollapse

logger = logging.getLogger(__name__)


class PosteriorStore:
    """Dense probability table indexed by flat hypothesis id."""

    def __init__(self, size: int, representation: Representation = Representation.LOG) -> None:
        if size <= 0:
            raise ValueError("Posterior needs at least one hypothesis")
        self.size = size
        self.representation = Representation(representation)
        self.collapse_count = 0
        self._values = self._uniform()

    def _uniform(self) -> np.ndarray:
        if self.representation is Representation.LOG:
            values = np.full(self.size, -np.log(self.size))
        else:
            values = np.full(self.size, 1.0 / self.size)
        values.setflags(write=False)
        return values

    def reset(self) -> None:
        self._values = self._uniform()
        self.collapse_count = 0

    @property
    def values(self) -> np.ndarray:
        """Stored values: probabilities or log-probabilities."""

        return self._values

    @property
    def probabilities(self) -> np.ndarray:
        if self.representation is Representation.LOG:
            return np.exp(self._values)
        return self._values.copy()

    @property
    def log_probabilities(self) -> np.ndarray:
        if self.representation is Representation.LOG:
            return self._values.copy()
        with np.errstate(divide="ignore"):
            return np.log(self._values)

    def entropy(self) -> float:
        """Shannon entropy of the joint distribution in nats."""

        probs = self.probabilities
        mask = probs > 0
        return float(-np.sum(probs[mask] * np.log(probs[mask])))

    def apply_likelihood(self, likelihood: np.ndarray) -> bool:
        """Multiply by ``likelihood`` and renormalise.

        Returns ``True`` when the normaliser was degenerate and the uniform
        fallback was installed instead.
        """

        likelihood = np.asarray(likelihood, dtype=float)
        if likelihood.shape != (self.size,):
            raise ValueError(f"Likelihood has shape {likelihood.shape}, expected ({self.size},)")
        if self.representation is Representation.LOG:
            with np.errstate(divide="ignore"):
                updated = self._values + np.log(likelihood)
                norm = float(logsumexp(updated))
            collapsed = not np.isfinite(norm)
            if not collapsed:
                updated = updated - norm
        else:
            updated = self._values * likelihood
            norm = float(updated.sum())
            collapsed = not norm > 0.0
            if not collapsed:
                updated = updated / norm
        if collapsed:
            self.collapse_count += 1
            logger.warning(
                "Posterior normaliser degenerated in the %s domain; resetting to uniform",
                self.representation.value,
            )
            warnings.warn(
                f"{self.representation.value}-domain posterior collapsed; uniform fallback applied",
                LikelihoodCollapse,
                stacklevel=2,
            )
            updated = self._uniform()
        updated.setflags(write=False)
        self._values = updated
        return collapsed


class BayesianUpdateEngine:
    """Scores every hypothesis against an observed emotion and updates the store."""

    def __init__(self, model: EmotionModel, store: PosteriorStore, spec: EmotionSpec) -> None:
        if store.size != model.grid.size:
            raise ValueError("Posterior size does not match the hypothesis grid")
        self.model = model
        self.store = store
        self.match = spec.match_likelihood
        self.mismatch = spec.mismatch

    def likelihood(self, observed_emotion: int, offer: Sequence[int]) -> np.ndarray:
        predicted = self.model.predict_all(offer)
        return np.where(predicted == observed_emotion, self.match, self.mismatch)

    def update(self, observed_emotion: int, offer: Sequence[int]) -> bool:
        likelihood = self.likelihood(observed_emotion, offer)
        collapsed = self.store.apply_likelihood(likelihood)
        logger.debug(
            "Updated posterior with emotion %d for offer %s (%d matching hypotheses)",
            observed_emotion,
            list(offer),
            int(np.count_nonzero(likelihood == self.match)),
        )
        return collapsed


__all__ = ["PosteriorStore", "BayesianUpdateEngine"]
