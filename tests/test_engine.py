from __future__ import annotations

import logging
import warnings

import numpy as np
import pytest

from emotive_negotiator import (
    EmotionInferenceEngine,
    GridSpec,
    InferenceConfig,
    InvalidConfiguration,
    InvalidOffer,
    LikelihoodCollapse,
    Representation,
    ResourceExhausted,
)
from emotive_negotiator.scenarios import THREE_ISSUE_SCENARIOS


def small_config(**overrides) -> InferenceConfig:
    params = dict(
        quantities=(3, 2, 2),
        w_self=(1.0, -1.0, 0.0),
        theta_grid=GridSpec(-90.0, 90.0, 15.0),
        w_grid=GridSpec(-2.0, 2.0, 1.0),
    )
    params.update(overrides)
    return InferenceConfig(**params)


def test_offer_before_reset_is_rejected():
    engine = EmotionInferenceEngine(small_config())
    with pytest.raises(RuntimeError):
        engine.apply_offer([0, 0, 0])
    with pytest.raises(RuntimeError):
        engine.true_parameters()


def test_default_scenario_first_offer():
    engine = EmotionInferenceEngine()
    engine.reset(0.0, [2, 2, -2, 2])
    result = engine.apply_offer([7, 0, 0, 0])
    assert result.emotion == -1
    assert result.round == 1

    predicted = engine.emotion_model.predict_all([7, 0, 0, 0])
    spec = engine.config.emotion
    likelihood = np.where(predicted == -1, spec.match_likelihood, spec.mismatch)
    np.testing.assert_allclose(engine.store.probabilities, likelihood / likelihood.sum(), rtol=1e-9)
    assert engine.cache[engine.grid.n_theta // 2, 0] >= 0
    assert engine.posterior().shape == (37, 9**4)


def test_identical_sequences_give_identical_estimates():
    offers = [[3, 0, 1], [0, 2, 2], [1, 1, 1]]
    summaries = []
    for _ in range(2):
        engine = EmotionInferenceEngine(small_config())
        engine.reset(45.0, [1, 0, -2])
        summaries.append([engine.apply_offer(o).summary for o in offers])
    assert summaries[0] == summaries[1]


@pytest.mark.parametrize("offer", [[4, 0, 0], [0, 0], [1.5, 0, 0], [-1, 0, 0], 5, np.int64(1), [[1, 1, 1]]])
def test_invalid_offer_leaves_state_untouched(offer):
    engine = EmotionInferenceEngine(small_config())
    engine.reset(0.0, [1, 1, 1])
    engine.apply_offer([1, 1, 1])
    before = engine.store.probabilities
    with pytest.raises(InvalidOffer):
        engine.apply_offer(offer)
    assert engine.round == 1
    assert len(engine.history) == 1
    np.testing.assert_array_equal(engine.store.probabilities, before)


def test_true_hypothesis_stays_most_probable():
    engine = EmotionInferenceEngine(small_config())
    engine.reset(30.0, [2, -1, 0])
    for offer in engine.candidate_offers():
        engine.apply_offer(offer)
    posterior = engine.posterior()
    ti, wi = 8, 4 * 25 + 1 * 5 + 2
    assert engine.grid.hypothesis(engine.grid.index(ti, wi)) == (30.0, (2.0, -1.0, 0.0))
    assert posterior[ti, wi] == pytest.approx(posterior.max())
    assert engine.round == len(engine.candidate_offers())


def test_history_records_each_round():
    engine = EmotionInferenceEngine(small_config())
    engine.reset(-45.0, [0, 0, 2], name="probe")
    first = engine.apply_offer([3, 2, 2])
    second = engine.apply_offer([0, 0, 0])
    history = engine.history
    assert [h.round for h in history] == [1, 2]
    assert history[0].offer == (3, 2, 2)
    assert history[1].emotion == second.emotion
    assert history[0].summary == first.summary
    assert engine.true_parameters().name == "probe"


def test_preview_does_not_update():
    engine = EmotionInferenceEngine(small_config())
    engine.reset(60.0, [-1, 2, 0])
    before = engine.store.probabilities
    preview = engine.preview_emotion([2, 1, 0])
    assert engine.round == 0
    np.testing.assert_array_equal(engine.store.probabilities, before)
    assert engine.apply_offer([2, 1, 0]).emotion == preview


def test_reset_starts_a_fresh_episode():
    engine = EmotionInferenceEngine(small_config())
    engine.reset(0.0, [1, 1, 1])
    engine.apply_offer([3, 0, 0])
    engine.reset(90.0, [0, 0, 0])
    assert engine.round == 0
    assert engine.history == ()
    np.testing.assert_allclose(engine.store.probabilities, 1.0 / engine.grid.size)
    assert engine.true_parameters().theta == 90.0


def test_reset_with_scenario():
    config = small_config(w_grid=GridSpec(-4.0, 4.0, 4.0), theta_grid=GridSpec(-90.0, 90.0, 45.0))
    engine = EmotionInferenceEngine(config)
    scenario = THREE_ISSUE_SCENARIOS[0]
    engine.reset_with_scenario(scenario)
    truth = engine.true_parameters()
    assert (truth.theta, truth.w, truth.name) == (scenario.theta, scenario.w, scenario.name)


@pytest.mark.parametrize(
    "theta,w",
    [(120.0, [0, 0, 0]), (-91.0, [0, 0, 0]), (0.0, [1, 1]), (float("nan"), [0, 0, 0]), (0.0, [0, float("inf"), 0])],
)
def test_invalid_truth_is_rejected(theta, w):
    engine = EmotionInferenceEngine(small_config())
    with pytest.raises(InvalidConfiguration):
        engine.reset(theta, w)


def test_update_self_weights_rebuilds_and_keeps_truth():
    engine = EmotionInferenceEngine(small_config())
    engine.reset(15.0, [1, -2, 0])
    engine.apply_offer([1, 0, 2])
    old_cache = engine.cache
    engine.update_self_weights([0, 2, -1])
    assert engine.w_self == (0.0, 2.0, -1.0)
    assert engine.round == 0
    assert engine.history == ()
    assert engine.cache is not old_cache
    assert engine.true_parameters().w == (1.0, -2.0, 0.0)
    np.testing.assert_allclose(engine.store.probabilities, 1.0 / engine.grid.size)
    # the new proposer weights drive the emotion model
    assert engine.emotion_model.w_self == (0.0, 2.0, -1.0)


def test_update_self_weights_rejects_wrong_dimension():
    engine = EmotionInferenceEngine(small_config())
    engine.reset(0.0, [0, 0, 0])
    engine.apply_offer([1, 1, 1])
    with pytest.raises(InvalidConfiguration):
        engine.update_self_weights([1, 2])
    assert engine.w_self == (1.0, -1.0, 0.0)
    assert engine.round == 1


def test_offer_budget_exhausted():
    with pytest.raises(ResourceExhausted):
        EmotionInferenceEngine(small_config(max_offers=10))


def test_hypothesis_budget_exhausted():
    with pytest.raises(ResourceExhausted):
        EmotionInferenceEngine(small_config(max_hypotheses=100))


def test_linear_engine_matches_log_engine():
    offers = [[3, 0, 1], [0, 2, 2], [1, 1, 0], [2, 2, 2], [0, 0, 1]]
    engines = [
        EmotionInferenceEngine(small_config(representation=representation))
        for representation in (Representation.LINEAR, Representation.LOG)
    ]
    for engine in engines:
        engine.reset(-30.0, [2, 0, -1])
        for offer in offers:
            engine.apply_offer(offer)
    np.testing.assert_allclose(engines[0].posterior(), engines[1].posterior(), atol=1e-6)


def test_reset_is_logged(caplog):
    engine = EmotionInferenceEngine(small_config())
    with caplog.at_level(logging.INFO, logger="emotive_negotiator.engine"):
        engine.reset(0.0, [1, 0, 0])
    assert any("Reset episode" in record.getMessage() for record in caplog.records)


def test_long_episode_keeps_log_posterior_finite():
    offers = EmotionInferenceEngine(small_config()).candidate_offers()
    engines = {
        representation: EmotionInferenceEngine(small_config(representation=representation))
        for representation in (Representation.LOG, Representation.LINEAR)
    }
    with warnings.catch_warnings():
        warnings.simplefilter("error", LikelihoodCollapse)
        for engine in engines.values():
            # off-grid counterpart
            engine.reset(37.3, [1.3, -0.7, 2.2])
            for round_ in range(90):
                engine.apply_offer(offers[round_ % len(offers)])
    log_engine = engines[Representation.LOG]
    assert log_engine.round == 90
    assert np.all(np.isfinite(log_engine.store.log_probabilities))
    assert log_engine.store.probabilities.sum() == pytest.approx(1.0, abs=1e-9)
    assert log_engine.store.collapse_count == 0
    assert np.all(log_engine.store.probabilities >= 0)
    assert np.count_nonzero(engines[Representation.LINEAR].store.probabilities == 0.0) > 0


def test_rebuild_publishes_consistent_model():
    engine = EmotionInferenceEngine(small_config())
    engine.reset(0.0, [1, 0, 0])
    engine.update_self_weights([2, 0, -2])
    model = engine._model
    assert engine.store is model.store
    assert model.updater.store is model.store
    assert model.updater.model is model.emotion
    assert model.emotion.grid is engine.grid
    assert engine.config.w_self == model.emotion.w_self == (2.0, 0.0, -2.0)
    assert model.store.size == engine.grid.size
