"""Sensor-side helpers shared by the inference recursions.

Evidence validation, per-step emission columns ``S[:, e_t]`` and row
renormalisation all live here so the forward and backward passes in
``inference.py`` only contain the recurrences themselves.
"""

import numbers
from typing import Sequence

import numpy as np

from ..exceptions import InvalidEvidenceError, ZeroProbabilityEvidenceError


def validate_evidence_sequence(evidence: Sequence[int], n_evidence: int) -> np.ndarray:
    """Check an evidence sequence and return it as an integer array.

    Parameters
    ----------
    evidence : Sequence[int]
        Observation indices e_0, ..., e_{T_len-1}
    n_evidence : int
        Size E of the evidence alphabet

    Returns
    -------
    np.ndarray, shape (T_len,), dtype int
        A fresh copy of the evidence indices

    Raises
    ------
    InvalidEvidenceError
        If any symbol is not an integer in [0, E)
    """
    raw = list(evidence)

    for position, symbol in enumerate(raw):
        if isinstance(symbol, (bool, np.bool_)):
            raise InvalidEvidenceError(
                f"Evidence symbol at position {position} is a boolean", evidence=raw
            )
        if isinstance(symbol, numbers.Integral):
            value = int(symbol)
        elif isinstance(symbol, numbers.Real) and float(symbol).is_integer():
            value = int(symbol)
        else:
            raise InvalidEvidenceError(
                f"Evidence symbol {symbol!r} at position {position} is not an integer index",
                evidence=raw,
            )
        if not 0 <= value < n_evidence:
            raise InvalidEvidenceError(
                f"Evidence symbol {value} at position {position} is outside [0, {n_evidence})",
                evidence=raw,
                hint="Evidence symbols index columns of the sensor model",
            )

    return np.array(raw, dtype=int).reshape(-1)


def emission_columns(sensor_matrix: np.ndarray, evidence: np.ndarray) -> np.ndarray:
    """Per-step emission probabilities P(e_t | state) for a validated sequence.

    Parameters
    ----------
    sensor_matrix : np.ndarray, shape (M, E)
    evidence : np.ndarray, shape (T_len,)

    Returns
    -------
    np.ndarray, shape (T_len, M)
        Row t is the sensor column S[:, e_t]
    """
    return sensor_matrix[:, evidence].T.copy()


def normalize_belief(weights: np.ndarray, time_index: int, evidence: Sequence[int]) -> np.ndarray:
    """Divide a non-negative weight vector by its sum.

    Raises
    ------
    ZeroProbabilityEvidenceError
        If all weights are zero, i.e. the evidence is impossible under the model
    """
    total = weights.sum()
    if not total > 0.0:
        raise ZeroProbabilityEvidenceError(
            f"Evidence has zero probability under the model at t={time_index}",
            evidence=evidence,
            hint="Check the sensor model: some state must be able to emit each observed symbol",
        )
    return weights / total


def rows_sum_to_one(matrix: np.ndarray, tolerance: float = 1e-9) -> bool:
    """Return True when every row of ``matrix`` sums to 1 within ``tolerance``."""
    matrix = np.atleast_2d(matrix)
    return bool(np.all(np.abs(matrix.sum(axis=1) - 1.0) <= tolerance))
