"""Exceptions raised by the inference core."""
from __future__ import annotations


class NegotiationModelError(Exception):
    """Base class for errors raised by the emotion-inference core."""


class InvalidConfiguration(NegotiationModelError, ValueError):
    """Quantities, weights, grid bounds or likelihoods are malformed."""


class InvalidOffer(NegotiationModelError, ValueError):
    """An offer has the wrong dimensionality or an out-of-range component."""


class ResourceExhausted(NegotiationModelError, RuntimeError):
    """The offer enumeration or hypothesis grid exceeds its size budget."""


class LikelihoodCollapse(RuntimeWarning):
    """The posterior normaliser degenerated and a uniform fallback was used."""


__all__ = [
    "NegotiationModelError",
    "InvalidConfiguration",
    "InvalidOffer",
    "ResourceExhausted",
    "LikelihoodCollapse",
]
