"""
Pytest configuration and shared fixtures for the hmm_inference test suite.
"""

import itertools
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for testing
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from hmm_inference.config import set_global_seed
from hmm_inference.config import settings as settings_module
from hmm_inference.core import HiddenMarkovModel, InferenceEngine


@pytest.fixture(scope="session")
def global_test_seed():
    """Set global random seed for all tests to ensure reproducibility."""
    seed = 42
    set_global_seed(seed)
    np.random.seed(seed)
    return seed


@pytest.fixture(autouse=True)
def isolated_global_config(monkeypatch):
    """Each test starts from the default settings, never from a stray config.toml."""
    monkeypatch.setattr(settings_module, "_GLOBAL_CONFIG", settings_module.Settings())
    yield


@pytest.fixture
def weather_model():
    """Rain/umbrella model: T=[[0.7,0.3],[0.3,0.7]], S=[[0.9,0.1],[0.2,0.8]], prior uniform."""
    return HiddenMarkovModel([[0.7], [0.3]], [[0.9], [0.2]], [0.5])


@pytest.fixture
def weather_engine(weather_model):
    return InferenceEngine(weather_model)


@pytest.fixture
def casino_model():
    """Fair/loaded die with six evidence symbols."""
    return HiddenMarkovModel([[0.95], [0.1]], [[1 / 6] * 5, [0.1] * 5], [0.5])


@pytest.fixture
def three_state_model():
    """Asymmetric three-state model with three evidence symbols."""
    return HiddenMarkovModel(
        [[0.6, 0.3], [0.1, 0.8], [0.25, 0.25]],
        [[0.5, 0.4], [0.1, 0.3], [0.7, 0.2]],
        [0.2, 0.5],
    )


@pytest.fixture
def three_state_engine(three_state_model):
    return InferenceEngine(three_state_model)


class BruteForce:
    """Reference answers by summing over every hidden state path."""

    @staticmethod
    def joint(model, path, evidence):
        """P(path, evidence) for a complete path."""
        T, S, pi = model.transition_matrix, model.sensor_matrix, model.prior
        p = pi[path[0]] * S[path[0], evidence[0]]
        for t in range(1, len(evidence)):
            p *= T[path[t - 1], path[t]] * S[path[t], evidence[t]]
        return p

    @classmethod
    def likelihood(cls, model, evidence):
        return sum(
            cls.joint(model, path, evidence)
            for path in itertools.product(range(model.n_states), repeat=len(evidence))
        )

    @classmethod
    def posterior(cls, model, evidence, t):
        """P(state_t | all evidence) for 0 <= t < len(evidence)."""
        weights = np.zeros(model.n_states)
        for path in itertools.product(range(model.n_states), repeat=len(evidence)):
            weights[path[t]] += cls.joint(model, path, evidence)
        return weights / weights.sum()


@pytest.fixture
def brute_force():
    """Path-enumeration helper for small models and short sequences."""
    return BruteForce


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "visual: marks tests that generate visual output"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark slow and integration tests."""
    for item in items:
        if "long_sequence" in item.nodeid or "large" in item.nodeid:
            item.add_marker(pytest.mark.slow)

        if "integration" in item.nodeid or "end_to_end" in item.nodeid:
            item.add_marker(pytest.mark.integration)
