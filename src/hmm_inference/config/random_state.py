"""Seeding for sampled sequences.

Nothing is seeded on import. The caller's global NumPy state is only reseeded
when a seed is given explicitly through ``Settings.random_seed`` or the
``HMM_INFERENCE_SEED`` environment variable (see ``settings._apply_seed``).
Inference itself is deterministic and never draws random numbers.
"""

import hashlib
import os
from typing import Optional

import numpy as np

SEED_ENV_VAR = 'HMM_INFERENCE_SEED'

_GLOBAL_SEED: Optional[int] = None


def set_global_seed(seed: int) -> None:
    """Reseed NumPy's global random state used by :mod:`~hmm_inference.data.sequence_generator`.

    Examples
    --------
    >>> set_global_seed(42)
    >>> # sample_sequence(model, 10) now returns the same draw on every run
    """
    global _GLOBAL_SEED

    _GLOBAL_SEED = int(seed)
    np.random.seed(_GLOBAL_SEED)


def get_global_seed() -> Optional[int]:
    """Seed applied by the last :func:`set_global_seed` call, or None."""
    return _GLOBAL_SEED


def seed_from_string(text: str) -> int:
    """Stable 31-bit seed derived from a string, e.g. a model or run name."""
    digest = hashlib.sha256(text.encode()).hexdigest()
    return int(digest[:8], 16) % (2**31 - 1)


def environment_seed() -> Optional[int]:
    """Seed from ``HMM_INFERENCE_SEED``; None when the variable is unset or blank.

    Non-integer values are hashed with :func:`seed_from_string`.
    """
    value = os.environ.get(SEED_ENV_VAR, '').strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return seed_from_string(value)


def resolve_seed(configured: Optional[int]) -> Optional[int]:
    """A configured seed wins over the environment; None means leave NumPy alone."""
    if configured is not None:
        return configured
    return environment_seed()
