"""Configuration data structures for the emotion-inference engine."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from .errors import InvalidConfiguration


def _number(data: Mapping[str, Any], key: str, default: float | None) -> float | None:
    value = data.get(key, default)
    if value is None and default is None:
        return None
    if isinstance(value, bool):
        raise InvalidConfiguration(f"{key} must be a number (got {value!r})")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"{key} must be a number (got {value!r})") from exc


def _integer(data: Mapping[str, Any], key: str, default: int) -> int:
    value = _number(data, key, default)
    if not float(value).is_integer():
        raise InvalidConfiguration(f"{key} must be a whole number (got {value!r})")
    return int(value)


def _vector(data: Mapping[str, Any], key: str, default: Sequence[Any], kind: type) -> tuple:
    value = data.get(key, default)
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidConfiguration(f"{key} must be a list of numbers (got {value!r})")
    try:
        return tuple(kind(v) for v in value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidConfiguration(f"{key} must be a list of numbers (got {value!r})") from exc


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise InvalidConfiguration(f"{key} must be a mapping (got {value!r})")
    return value


class EmotionScheme(str, Enum):
    """Strategies mapping a utility value to an emotion label."""

    MAX_ANCHORED = "max_anchored"
    FIXED_SCALE = "fixed_scale"


class Representation(str, Enum):
    """Numeric domain in which the posterior is stored."""

    LINEAR = "linear"
    LOG = "log"


@dataclass(frozen=True, slots=True)
class GridSpec:
    """Inclusive ``[minimum, maximum]`` range sampled every ``step``."""

    minimum: float
    maximum: float
    step: float

    def validate(self, label: str) -> None:
        if not all(math.isfinite(v) for v in (self.minimum, self.maximum, self.step)):
            raise InvalidConfiguration(f"{label} grid bounds must be finite")
        if self.step <= 0:
            raise InvalidConfiguration(f"{label} grid step must be positive (got {self.step})")
        if self.minimum > self.maximum:
            raise InvalidConfiguration(
                f"{label} grid minimum {self.minimum} exceeds maximum {self.maximum}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], default: "GridSpec") -> "GridSpec":
        return cls(
            minimum=_number(data, "min", default.minimum),
            maximum=_number(data, "max", default.maximum),
            step=_number(data, "step", default.step),
        )


DEFAULT_THETA_GRID = GridSpec(minimum=-90.0, maximum=90.0, step=5.0)
DEFAULT_W_GRID = GridSpec(minimum=-4.0, maximum=4.0, step=1.0)


@dataclass(frozen=True, slots=True)
class EmotionSpec:
    """Parameters of the emotion model and of the observation likelihood."""

    emotion_max: int = 7
    epsilon: float = 1e-3
    scheme: EmotionScheme = EmotionScheme.MAX_ANCHORED
    match_likelihood: float = 1 - 1e-9
    mismatch_likelihood: float | None = None

    @property
    def num_classes(self) -> int:
        # anger, neutral and ``emotion_max`` joy levels
        return self.emotion_max + 2

    @property
    def mismatch(self) -> float:
        if self.mismatch_likelihood is not None:
            return self.mismatch_likelihood
        return (1.0 - self.match_likelihood) / (self.num_classes - 1)

    def validate(self) -> None:
        if self.emotion_max < 1:
            raise InvalidConfiguration(f"emotion_max must be at least 1 (got {self.emotion_max})")
        if self.epsilon < 0:
            raise InvalidConfiguration(f"epsilon must be non-negative (got {self.epsilon})")
        if not 0.0 < self.match_likelihood <= 1.0:
            raise InvalidConfiguration(
                f"match_likelihood must lie in (0, 1] (got {self.match_likelihood})"
            )
        if not 0.0 <= self.mismatch <= 1.0:
            raise InvalidConfiguration(f"mismatch likelihood must lie in [0, 1] (got {self.mismatch})")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmotionSpec":
        try:
            scheme = EmotionScheme(data.get("scheme", EmotionScheme.MAX_ANCHORED.value))
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"Unknown emotion scheme {data.get('scheme')!r}") from exc
        return cls(
            emotion_max=_integer(data, "emotion_max", 7),
            epsilon=_number(data, "epsilon", 1e-3),
            scheme=scheme,
            match_likelihood=_number(data, "match_likelihood", 1 - 1e-9),
            mismatch_likelihood=_number(data, "mismatch_likelihood", None),
        )


@dataclass(frozen=True, slots=True)
class InferenceConfig:
    """Immutable configuration of one inference engine.

    ``quantities`` are the units available per issue and ``w_self`` the
    proposer's own weights. A change of ``w_self`` goes through
    :meth:`with_self_weights`, which returns a fresh validated instance.
    """

    quantities: tuple[int, ...] = (7, 5, 5, 5)
    w_self: tuple[float, ...] = (2.0, -1.0, 0.0, 1.0)
    theta_grid: GridSpec = DEFAULT_THETA_GRID
    w_grid: GridSpec = DEFAULT_W_GRID
    emotion: EmotionSpec = field(default_factory=EmotionSpec)
    representation: Representation = Representation.LOG
    grid_decimals: int = 6
    max_offers: int = 1_000_000
    max_hypotheses: int = 5_000_000

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantities", tuple(int(q) for q in self.quantities))
        object.__setattr__(self, "w_self", tuple(float(w) for w in self.w_self))
        self.validate()

    @property
    def dimensions(self) -> int:
        return len(self.quantities)

    def validate(self) -> None:
        if not self.quantities:
            raise InvalidConfiguration("At least one issue quantity is required")
        if any(q <= 0 for q in self.quantities):
            raise InvalidConfiguration(f"Issue quantities must be positive (got {list(self.quantities)})")
        if len(self.w_self) != len(self.quantities):
            raise InvalidConfiguration(
                f"w_self has {len(self.w_self)} components but there are {len(self.quantities)} issues"
            )
        if not all(math.isfinite(w) for w in self.w_self):
            raise InvalidConfiguration("w_self components must be finite")
        self.theta_grid.validate("theta")
        if self.theta_grid.minimum < -90.0 or self.theta_grid.maximum > 90.0:
            raise InvalidConfiguration("theta grid must stay within [-90, 90] degrees")
        self.w_grid.validate("w")
        self.emotion.validate()
        if self.grid_decimals < 0:
            raise InvalidConfiguration("grid_decimals must be non-negative")

    def with_self_weights(self, w_self: Sequence[float]) -> "InferenceConfig":
        return replace(self, w_self=tuple(float(w) for w in w_self))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InferenceConfig":
        defaults = cls()
        try:
            representation = Representation(data.get("representation", defaults.representation.value))
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"Unknown representation {data.get('representation')!r}") from exc
        return cls(
            quantities=_vector(data, "quantities", defaults.quantities, int),
            w_self=_vector(data, "w_self", defaults.w_self, float),
            theta_grid=GridSpec.from_dict(_section(data, "theta_grid"), DEFAULT_THETA_GRID),
            w_grid=GridSpec.from_dict(_section(data, "w_grid"), DEFAULT_W_GRID),
            emotion=EmotionSpec.from_dict(_section(data, "emotion")),
            representation=representation,
            grid_decimals=_integer(data, "grid_decimals", defaults.grid_decimals),
            max_offers=_integer(data, "max_offers", defaults.max_offers),
            max_hypotheses=_integer(data, "max_hypotheses", defaults.max_hypotheses),
        )


def load_config(path: str | Path | Mapping[str, Any]) -> InferenceConfig:
    """Load the inference configuration from YAML or dictionary."""

    if isinstance(path, Mapping):
        return InferenceConfig.from_dict(path)
    with Path(path).open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, Mapping):
        raise TypeError("Configuration file must contain a YAML mapping")
    return InferenceConfig.from_dict(data)


__all__ = [
    "EmotionScheme",
    "Representation",
    "GridSpec",
    "EmotionSpec",
    "InferenceConfig",
    "load_config",
]
