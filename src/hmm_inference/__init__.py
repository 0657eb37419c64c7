"""
hmm_inference - exact inference for discrete hidden Markov models.

Likelihood, filtering, prediction and smoothing over an evidence sequence,
plus a unified range query that combines them.
"""

__version__ = "0.1.0"

from .core import HiddenMarkovModel, InferenceEngine, build_engine
from .exceptions import (
    HMMInferenceError,
    ModelValidationError,
    InvalidTransitionModelError,
    InvalidSensorModelError,
    InvalidPriorError,
    QueryError,
    InvalidEvidenceError,
    ZeroProbabilityEvidenceError,
    InvalidFutureTimestampError,
    InvalidPastTimestampError,
    InvalidRangeError,
    LabelError,
    ModelSpecError
)

__all__ = [
    'HiddenMarkovModel',
    'InferenceEngine',
    'build_engine',
    'HMMInferenceError',
    'ModelValidationError',
    'InvalidTransitionModelError',
    'InvalidSensorModelError',
    'InvalidPriorError',
    'QueryError',
    'InvalidEvidenceError',
    'ZeroProbabilityEvidenceError',
    'InvalidFutureTimestampError',
    'InvalidPastTimestampError',
    'InvalidRangeError',
    'LabelError',
    'ModelSpecError'
]
