"""Configuration management for hmm_inference.

Provides global settings, presets and random seed management for reproducible sampling.
"""

from .settings import get_config, set_config, Settings
from .random_state import set_global_seed, get_global_seed, environment_seed
from .defaults import DEFAULT_TOLERANCE, SETTINGS_PRESETS, DefaultConfig, validate_config

__all__ = [
    'get_config',
    'set_config',
    'set_global_seed',
    'get_global_seed',
    'environment_seed',
    'Settings',
    'DEFAULT_TOLERANCE',
    'SETTINGS_PRESETS',
    'DefaultConfig',
    'validate_config'
]
