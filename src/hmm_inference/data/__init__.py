"""Labelled models, sampling and interactive sessions for hmm_inference.

Key Components
--------------
- Labels: human-readable state/evidence names mapped to indices
- Model specs: labelled partial rows, loaded from JSON or YAML model files
- Presets: bundled example models
- Sequence generation: sampling state paths and evidence from a model
- Sessions: append evidence and recompute beliefs over a display window

Examples
--------
>>> from hmm_inference.data import get_model_preset, InferenceSession
>>> session = InferenceSession(get_model_preset('weather'), display_horizon=5)
>>> session.observe('umbrella')
>>> print(session.beliefs().to_frame())
"""

from .labels import LabelSet
from .model_spec import ModelSpec, load_model_spec, save_model_spec
from .presets import (
    WEATHER_UMBRELLA,
    DISHONEST_CASINO,
    MODEL_PRESETS,
    get_model_preset,
    list_model_presets
)
from .sequence_generator import SampledSequence, sample_sequence, sample_sequences
from .session import BeliefTable, InferenceSession, session_from

__all__ = [
    'LabelSet',
    'ModelSpec',
    'load_model_spec',
    'save_model_spec',
    'WEATHER_UMBRELLA',
    'DISHONEST_CASINO',
    'MODEL_PRESETS',
    'get_model_preset',
    'list_model_presets',
    'SampledSequence',
    'sample_sequence',
    'sample_sequences',
    'BeliefTable',
    'InferenceSession',
    'session_from'
]
