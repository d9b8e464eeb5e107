"""Offer enumeration over the multi-issue allocation domain."""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from negmas import Issue, make_issue
from negmas.outcomes import make_os

from .errors import InvalidConfiguration, InvalidOffer, ResourceExhausted


def build_issues(quantities: Sequence[int]) -> list[Issue]:
    """One integer issue ``0..Q_i`` per quantity, holding the proposer's share."""

    _check_quantities(quantities)
    return [make_issue(name=f"issue{i + 1}", values=int(q) + 1) for i, q in enumerate(quantities)]


def offer_count(quantities: Sequence[int]) -> int:
    """Size of the offer enumeration without materialising it."""

    _check_quantities(quantities)
    return math.prod(int(q) + 1 for q in quantities)


def generate_offers(quantities: Sequence[int], max_offers: int | None = None) -> np.ndarray:
    """Every feasible offer in lexicographic order, as an ``(N, D)`` int array.

    The last issue varies fastest, so the first row is all zeros and the last
    row equals ``quantities``.
    """

    count = offer_count(quantities)
    if max_offers is not None and count > max_offers:
        raise ResourceExhausted(f"{count} offers exceed the budget of {max_offers}")
    outcome_space = make_os(build_issues(quantities))
    offers = np.asarray(list(outcome_space.enumerate()), dtype=np.int64)
    return offers.reshape(count, len(quantities))


def validate_offer(offer: Sequence[int | float], quantities: Sequence[int]) -> np.ndarray:
    """Return ``offer`` as an int vector or raise :class:`InvalidOffer`."""

    try:
        values = np.asarray(offer, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidOffer(f"Offer {offer!r} is not numeric") from exc
    if values.ndim != 1 or values.shape[0] != len(quantities):
        raise InvalidOffer(f"Offer {offer!r} must have {len(quantities)} components")
    if not np.all(np.isfinite(values)) or not np.all(values == np.round(values)):
        raise InvalidOffer(f"Offer {values.tolist()} must contain whole units")
    upper = np.asarray(quantities, dtype=float)
    if np.any(values < 0) or np.any(values > upper):
        raise InvalidOffer(f"Offer {values.tolist()} is outside [0, {list(quantities)}]")
    return values.astype(np.int64)


def _check_quantities(quantities: Sequence[int]) -> None:
    if any(int(q) < 0 for q in quantities):
        raise InvalidConfiguration(f"Issue quantities must be non-negative (got {list(quantities)})")


__all__ = [
    "build_issues",
    "offer_count",
    "generate_offers",
    "validate_offer",
]
