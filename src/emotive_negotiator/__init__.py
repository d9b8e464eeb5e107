"""Bayesian inference of a negotiation counterpart's orientation and weights."""

from .config import EmotionScheme, EmotionSpec, GridSpec, InferenceConfig, Representation, load_config
from .domain import generate_offers, offer_count, validate_offer
from .emotion import EmotionModel, emotion_name
from .engine import EmotionInferenceEngine, HistoryEntry, OfferResult, TrueParameters
from .env import EmotionProbeEnv, ProbeEnvConfig
from .errors import (
    InvalidConfiguration,
    InvalidOffer,
    LikelihoodCollapse,
    NegotiationModelError,
    ResourceExhausted,
)
from .estimates import ComponentMarginal, PosteriorSummary, StatisticsExtractor
from .evaluation import EstimationStats, evaluate_random, make_env, rollout
from .grid import ParameterGrid
from .posterior import BayesianUpdateEngine, PosteriorStore
from .scenarios import Scenario, ScenarioCatalog, default_catalog
from .utility import MaxUtilityCache, utility

__all__ = [
    "EmotionScheme",
    "EmotionSpec",
    "GridSpec",
    "InferenceConfig",
    "Representation",
    "load_config",
    "generate_offers",
    "offer_count",
    "validate_offer",
    "EmotionModel",
    "emotion_name",
    "EmotionInferenceEngine",
    "HistoryEntry",
    "OfferResult",
    "TrueParameters",
    "EmotionProbeEnv",
    "ProbeEnvConfig",
    "InvalidConfiguration",
    "InvalidOffer",
    "LikelihoodCollapse",
    "NegotiationModelError",
    "ResourceExhausted",
    "ComponentMarginal",
    "PosteriorSummary",
    "StatisticsExtractor",
    "EstimationStats",
    "evaluate_random",
    "make_env",
    "rollout",
    "ParameterGrid",
    "BayesianUpdateEngine",
    "PosteriorStore",
    "Scenario",
    "ScenarioCatalog",
    "default_catalog",
    "MaxUtilityCache",
    "utility",
]
