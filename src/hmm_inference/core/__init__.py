"""Core inference engine for discrete hidden Markov models.

This module contains the fundamental components:
- Model validation and derivation of stochastic matrices
- Evidence validation and emission helpers
- Forward/backward recursions: likelihood, filtering, prediction, smoothing
- Unified range query over smoothed, filtered and predicted regimes
"""

from .model import (
    HiddenMarkovModel,
    complete_stochastic_rows,
    transition_rows_problem,
    sensor_rows_problem,
    prior_problem
)
from .observation_model import (
    validate_evidence_sequence,
    emission_columns,
    normalize_belief,
    rows_sum_to_one
)
from .inference import InferenceEngine, build_engine, SMOOTHED, FILTERED, PREDICTED

__all__ = [
    # Model store
    'HiddenMarkovModel',
    'complete_stochastic_rows',
    'transition_rows_problem',
    'sensor_rows_problem',
    'prior_problem',

    # Observation helpers
    'validate_evidence_sequence',
    'emission_columns',
    'normalize_belief',
    'rows_sum_to_one',

    # Inference
    'InferenceEngine',
    'build_engine',
    'SMOOTHED',
    'FILTERED',
    'PREDICTED'
]
