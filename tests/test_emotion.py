from __future__ import annotations

import pytest

from emotive_negotiator.config import EmotionScheme, EmotionSpec, GridSpec, InferenceConfig
from emotive_negotiator.domain import generate_offers
from emotive_negotiator.emotion import (
    EmotionModel,
    emotion_name,
    fixed_scale,
    fixed_scale_emotion,
    max_anchored_emotion,
)
from emotive_negotiator.errors import InvalidConfiguration
from emotive_negotiator.grid import ParameterGrid
from emotive_negotiator.utility import MaxUtilityCache


def build_model(scheme: EmotionScheme, config: InferenceConfig | None = None) -> EmotionModel:
    config = config or InferenceConfig(
        quantities=(3, 2, 2),
        w_self=(1.0, -1.0, 0.0),
        theta_grid=GridSpec(-90.0, 90.0, 15.0),
        w_grid=GridSpec(-2.0, 2.0, 1.0),
        emotion=EmotionSpec(scheme=scheme),
    )
    grid = ParameterGrid.build(config)
    cache = MaxUtilityCache(grid, config.w_self, config.quantities)
    return EmotionModel(config.emotion, grid, cache, config.w_self, config.quantities, config.w_grid)


@pytest.mark.parametrize(
    "value,expected",
    [
        (30.0, 7),  # the best achievable offer
        (23.0, 0),  # exactly on the minimum acceptable line
        (23.0005, 0),  # inside the neutral band
        (22.5, -1),
        (25.5, 3),
        (24.0, 1),
        (40.0, 7),
    ],
)
def test_max_anchored_thresholds(value, expected):
    assert int(max_anchored_emotion(value, 30.0, 7, 1e-3)) == expected


def test_max_anchored_snaps_float_noise():
    assert int(max_anchored_emotion(26.000000000001, 30.0, 7, 1e-3)) == 3


@pytest.mark.parametrize("combined,expected", [(-5.0, -1), (0.5, 0), (3.0, 1), (100.0, 7)])
def test_fixed_scale_bins(combined, expected):
    assert int(fixed_scale_emotion(combined, 2.0, 7)) == expected


def test_fixed_scale_width():
    width = fixed_scale(GridSpec(-4.0, 4.0, 1.0), (4.0, 0.0, -4.0), (7, 5, 6), 7)
    assert width == pytest.approx(8 * 18 / 7)


@pytest.mark.parametrize("scheme", list(EmotionScheme))
def test_predictions_stay_in_label_range(scheme):
    model = build_model(scheme)
    for offer in generate_offers(model.quantities):
        labels = model.predict_all(offer)
        assert labels.shape == (model.grid.size,)
        assert labels.min() >= -1
        assert labels.max() <= model.spec.emotion_max


@pytest.mark.parametrize("scheme", list(EmotionScheme))
def test_single_prediction_matches_vectorised(scheme):
    model = build_model(scheme)
    offer = [3, 0, 1]
    labels = model.predict_all(offer)
    for ti, wi in [(0, 0), (6, 62), (12, 124), (3, 40)]:
        assert model.predict(ti, wi, offer) == labels[model.grid.index(ti, wi)]


@pytest.mark.parametrize("scheme", list(EmotionScheme))
def test_true_emotion_matches_grid_hypothesis(scheme):
    model = build_model(scheme)
    ti, wi = 9, 87
    theta, w = model.grid.hypothesis(model.grid.index(ti, wi))
    for offer in generate_offers(model.quantities):
        assert model.sample_true_emotion(offer, theta, w) == model.predict(ti, wi, offer)


def test_schemes_are_not_equivalent():
    # Q=[7,5,5,5], wSelf=[2,-1,0,1], theta=0, w=[2,2,-2,2], offer [7,0,0,0]
    config = InferenceConfig(theta_grid=GridSpec(-90.0, 90.0, 45.0))
    anchored = build_model(EmotionScheme.MAX_ANCHORED, config)
    scaled = build_model(
        EmotionScheme.FIXED_SCALE,
        InferenceConfig(
            theta_grid=GridSpec(-90.0, 90.0, 45.0),
            emotion=EmotionSpec(scheme=EmotionScheme.FIXED_SCALE),
        ),
    )
    offer = [7, 0, 0, 0]
    # utility 10 against a best of 34
    assert anchored.sample_true_emotion(offer, 0.0, [2, 2, -2, 2]) == -1
    # (14 + 10) / ((4 + 2) * 22 / 7)
    assert scaled.sample_true_emotion(offer, 0.0, [2, 2, -2, 2]) == 1


def test_labels_and_names():
    model = build_model(EmotionScheme.MAX_ANCHORED)
    assert list(model.labels) == list(range(-1, 8))
    assert emotion_name(-1) == "ANGER"
    assert emotion_name(0) == "NEUTRAL"
    assert emotion_name(4) == "JOY 4"


def test_degenerate_fixed_scale_rejected():
    config = InferenceConfig(
        quantities=(2, 2),
        w_self=(0.0, 0.0),
        w_grid=GridSpec(0.0, 0.0, 1.0),
        emotion=EmotionSpec(scheme=EmotionScheme.FIXED_SCALE),
    )
    with pytest.raises(InvalidConfiguration):
        build_model(EmotionScheme.FIXED_SCALE, config)


def test_emotion_uses_true_parameters_not_grid():
    model = build_model(EmotionScheme.MAX_ANCHORED)
    # off-grid weights are still a valid counterpart
    label = model.sample_true_emotion([0, 0, 0], 10.0, [0.5, -1.5, 3.0])
    assert -1 <= label <= 7
    assert isinstance(label, int)
