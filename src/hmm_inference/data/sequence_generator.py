"""Sampling hidden state paths and evidence sequences from a model.

Draws use NumPy's global random state, so :func:`~hmm_inference.config.set_global_seed`
(or the ``seed`` argument) makes them reproducible.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..core.model import HiddenMarkovModel


@dataclass
class SampledSequence:
    """One draw from a hidden Markov model.

    Attributes
    ----------
    states : np.ndarray, shape (n_steps,)
        Hidden state indices
    evidence : np.ndarray, shape (n_steps,)
        Evidence symbol indices, one emitted per state
    """
    states: np.ndarray
    evidence: np.ndarray

    def __len__(self) -> int:
        return len(self.states)


def sample_sequence(model: HiddenMarkovModel,
                    n_steps: int,
                    seed: Optional[int] = None) -> SampledSequence:
    """Sample a state path from the prior and transition model, then emit evidence.

    Parameters
    ----------
    model : HiddenMarkovModel
    n_steps : int
        Sequence length, at least 1
    seed : Optional[int]
        Random seed for reproducibility

    Returns
    -------
    SampledSequence
    """
    if n_steps < 1:
        raise ValueError(f"n_steps must be at least 1, got {n_steps}")
    if seed is not None:
        np.random.seed(seed)

    T = model.transition_matrix
    S = model.sensor_matrix

    states = np.zeros(n_steps, dtype=int)
    evidence = np.zeros(n_steps, dtype=int)
    for t in range(n_steps):
        distribution = model.prior if t == 0 else T[states[t - 1]]
        states[t] = np.random.choice(model.n_states, p=distribution)
        evidence[t] = np.random.choice(model.n_evidence, p=S[states[t]])

    return SampledSequence(states=states, evidence=evidence)


def sample_sequences(model: HiddenMarkovModel,
                     n_sequences: int,
                     length_range: Tuple[int, int] = (5, 20),
                     seed: Optional[int] = None) -> List[SampledSequence]:
    """Sample several independent sequences with lengths drawn from ``length_range``.

    ``length_range`` is inclusive on both ends.
    """
    low, high = length_range
    if low < 1 or high < low:
        raise ValueError(f"Invalid length range {length_range}")
    if seed is not None:
        np.random.seed(seed)

    return [
        sample_sequence(model, int(np.random.randint(low, high + 1)))
        for _ in range(n_sequences)
    ]
