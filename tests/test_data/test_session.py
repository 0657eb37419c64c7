"""Tests for interactive inference sessions and belief tables."""

import json

import numpy as np
import pytest

from hmm_inference.config import set_config, Settings
from hmm_inference.core import FILTERED, PREDICTED, SMOOTHED
from hmm_inference.data.presets import WEATHER_UMBRELLA
from hmm_inference.data.session import BeliefTable, InferenceSession, session_from
from hmm_inference.exceptions import InvalidEvidenceError, LabelError


@pytest.fixture
def session():
    return InferenceSession(WEATHER_UMBRELLA, display_horizon=4)


class TestInferenceSession:
    """Test suite for InferenceSession."""

    def test_observe_labels(self, session):
        session.extend(['umbrella', 'no_umbrella'])

        assert len(session) == 2
        assert session.evidence == [0, 1]
        assert session.evidence_labels == ['umbrella', 'no_umbrella']

    def test_unknown_label_is_rejected(self, session):
        session.observe('umbrella')
        with pytest.raises(LabelError):
            session.observe('snow')
        assert len(session) == 1

    def test_invalid_index_leaves_session_unchanged(self, session):
        with pytest.raises(InvalidEvidenceError):
            session.observe_index(2)
        assert len(session) == 0

    def test_beliefs_over_display_window(self, session):
        session.extend(['umbrella', 'umbrella'])
        table = session.beliefs()

        np.testing.assert_array_equal(table.times, [0, 1, 2, 3])
        assert table.regimes == [SMOOTHED, FILTERED, PREDICTED, PREDICTED]
        np.testing.assert_allclose(table.beliefs[0], [0.883, 0.117], atol=1e-3)
        np.testing.assert_allclose(table.beliefs[1], [0.883, 0.117], atol=1e-3)
        assert table.likelihood == pytest.approx(0.3515)
        assert table.observed == 2

    def test_window_grows_past_horizon(self, session):
        session.extend(['umbrella'] * 6)
        table = session.beliefs()

        assert table.beliefs.shape == (6, 2)
        assert table.regimes[-1] == FILTERED

    def test_explicit_range(self, session):
        session.observe('no_umbrella')
        table = session.beliefs(start=2, stop=3)

        np.testing.assert_array_equal(table.times, [2, 3])
        assert table.regimes == [PREDICTED, PREDICTED]

    def test_beliefs_match_engine(self, session):
        session.extend(['umbrella', 'no_umbrella', 'umbrella'])
        expected = session.engine.query([0, 1, 0], 0, 3)
        np.testing.assert_allclose(session.beliefs().beliefs, expected)

    def test_beliefs_need_evidence(self, session):
        with pytest.raises(InvalidEvidenceError):
            session.beliefs()

    def test_likelihood(self, session):
        assert session.likelihood() == 1.0
        assert session.likelihood(log=True) == 0.0

        session.extend(['umbrella', 'umbrella'])
        assert session.likelihood() == pytest.approx(0.3515)
        assert session.likelihood(log=True) == pytest.approx(np.log(0.3515))

    def test_reset(self, session):
        session.observe('umbrella')
        session.reset()
        assert len(session) == 0

    def test_display_horizon_from_settings(self):
        set_config(Settings(display_horizon=7, filter_cache_size=0))
        session = InferenceSession(WEATHER_UMBRELLA)

        assert session.display_horizon == 7
        assert session.engine.cache_size == 0

    def test_invalid_display_horizon(self):
        with pytest.raises(ValueError, match="display_horizon"):
            InferenceSession(WEATHER_UMBRELLA, display_horizon=0)

    def test_repr(self, session):
        session.observe('umbrella')
        assert repr(session) == "InferenceSession(weather_umbrella, observed=1)"


class TestBeliefTable:
    """Test suite for BeliefTable."""

    def test_to_frame(self, session):
        session.extend(['umbrella', 'no_umbrella'])
        frame = session.beliefs().to_frame()

        assert list(frame.columns) == ['rain', 'dry', 'regime']
        assert frame.index.name == 'time'
        assert list(frame['regime']) == [SMOOTHED, FILTERED, PREDICTED, PREDICTED]
        np.testing.assert_allclose(frame[['rain', 'dry']].sum(axis=1), 1.0)

    def test_most_likely_states(self):
        table = BeliefTable(
            times=np.arange(2),
            beliefs=np.array([[0.9, 0.1], [0.3, 0.7]]),
            regimes=[SMOOTHED, FILTERED],
            state_labels=['rain', 'dry'],
        )
        assert table.most_likely_states() == ['rain', 'dry']


class TestSessionFrom:
    """Test suite for session_from."""

    def test_from_preset_name(self):
        session = session_from('casino', display_horizon=3)
        assert session.states.names == ['fair', 'loaded']

    def test_from_spec(self):
        assert session_from(WEATHER_UMBRELLA).spec is WEATHER_UMBRELLA

    def test_from_file(self, tmp_path):
        path = tmp_path / "weather.json"
        path.write_text(json.dumps(WEATHER_UMBRELLA.to_dict()))

        session = session_from(str(path))
        session.observe('umbrella')
        assert session.beliefs(0, 0).regimes == [FILTERED]
