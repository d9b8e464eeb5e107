from __future__ import annotations

import numpy as np
import pytest

from emotive_negotiator.domain import build_issues, generate_offers, offer_count, validate_offer
from emotive_negotiator.errors import InvalidConfiguration, InvalidOffer, ResourceExhausted


def test_offers_are_lexicographic():
    offers = generate_offers((2, 1))
    expected = [[0, 0], [0, 1], [1, 0], [1, 1], [2, 0], [2, 1]]
    assert offers.tolist() == expected


def test_default_domain_size_and_bounds():
    offers = generate_offers((7, 5, 5, 5))
    assert offers.shape == (1728, 4)
    assert offer_count((7, 5, 5, 5)) == 1728
    assert offers[0].tolist() == [0, 0, 0, 0]
    assert offers[-1].tolist() == [7, 5, 5, 5]
    assert len({tuple(row) for row in offers.tolist()}) == 1728


def test_issues_cover_each_quantity():
    issues = build_issues((3, 1))
    assert [issue.name for issue in issues] == ["issue1", "issue2"]
    assert [len(list(issue.all)) for issue in issues] == [4, 2]


def test_negative_quantity_rejected():
    with pytest.raises(InvalidConfiguration):
        generate_offers((3, -1))


def test_offer_budget_checked_before_enumeration():
    with pytest.raises(ResourceExhausted):
        generate_offers((7, 5, 5, 5), max_offers=100)


@pytest.mark.parametrize(
    "offer",
    [
        [8, 0, 0, 0],
        [0, 0, 0, -1],
        [1, 2, 3],
        [1.5, 0, 0, 0],
        [0, 0, 0, 0, 0],
        5,
        np.int64(1),
        [[1, 1, 1, 1]],
        ["a", 0, 0, 0],
        [[1, 2], [3]],
    ],
)
def test_invalid_offers_are_rejected(offer):
    with pytest.raises(InvalidOffer):
        validate_offer(offer, (7, 5, 5, 5))


def test_valid_offer_becomes_int_vector():
    offer = validate_offer([7.0, 0, 5, 2], (7, 5, 5, 5))
    assert offer.dtype == np.int64
    assert offer.tolist() == [7, 0, 5, 2]
