"""Validated, immutable storage for a discrete hidden Markov model.

Callers describe a model with *partial* rows: the first M-1 entries of each
transition row and of the prior, and the first E-1 entries of each sensor row.
The final entry of every row is derived as ``1 - sum(given)``. Validation is a
pure check over the raw input and runs before derivation; derivation happens
in exactly one place, :func:`complete_stochastic_rows`.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from ..config.defaults import DEFAULT_TOLERANCE
from ..exceptions import (
    InvalidPriorError,
    InvalidSensorModelError,
    InvalidTransitionModelError,
)
from .observation_model import rows_sum_to_one

logger = logging.getLogger(__name__)


def _row_problem(row: Sequence[float], expected_length: int, tolerance: float) -> Optional[str]:
    """Describe what is wrong with one partial row, or return None."""
    if len(row) != expected_length:
        return f"length {len(row)}, expected {expected_length}"

    values = np.asarray(row, dtype=float)
    if not np.all(np.isfinite(values)):
        return f"non-finite entries {list(row)}"
    if np.any(values < 0.0):
        return f"negative entries {list(row)}"

    total = float(values.sum())
    if total > 1.0 + tolerance:
        return f"entries sum to {total:.12g} > 1"
    return None


def transition_rows_problem(rows: Sequence[Sequence[float]],
                            tolerance: float = DEFAULT_TOLERANCE) -> Optional[str]:
    """Check raw transition rows; M is the number of rows and each needs M-1 entries."""
    n_states = len(rows)
    if n_states == 0:
        return "transition model has no rows"

    for i, row in enumerate(rows):
        problem = _row_problem(row, n_states - 1, tolerance)
        if problem is not None:
            return f"row {i}: {problem}"
    return None


def sensor_rows_problem(rows: Sequence[Sequence[float]],
                        n_states: int,
                        tolerance: float = DEFAULT_TOLERANCE) -> Optional[str]:
    """Check raw sensor rows; every row must match the first row's length."""
    if len(rows) != n_states:
        return f"{len(rows)} rows for {n_states} states"

    width = len(rows[0])
    for i, row in enumerate(rows):
        problem = _row_problem(row, width, tolerance)
        if problem is not None:
            return f"row {i}: {problem}"
    return None


def prior_problem(prior: Sequence[float],
                  n_states: int,
                  tolerance: float = DEFAULT_TOLERANCE) -> Optional[str]:
    """Check the raw prior, which needs M-1 entries."""
    return _row_problem(prior, n_states - 1, tolerance)


def complete_stochastic_rows(rows: Sequence[Sequence[float]]) -> np.ndarray:
    """Append ``1 - sum(row)`` to every partial row.

    The derived entry is clipped at zero so that rows accepted within the
    validation tolerance still materialise as proper distributions.

    Parameters
    ----------
    rows : Sequence[Sequence[float]], shape (n_rows, k)

    Returns
    -------
    np.ndarray, shape (n_rows, k + 1)
        Fresh array; the input is never aliased

    Examples
    --------
    >>> complete_stochastic_rows([[0.7], [0.3]])
    array([[0.7, 0.3],
           [0.3, 0.7]])
    """
    n_rows = len(rows)
    width = len(rows[0]) if n_rows else 0
    partial = np.array(rows, dtype=float).reshape(n_rows, width)

    last = np.clip(1.0 - partial.sum(axis=1, keepdims=True), 0.0, None)
    return np.hstack([partial, last])


class HiddenMarkovModel:
    """Transition model, sensor model and prior of a discrete HMM.

    Parameters
    ----------
    transition_rows : Sequence[Sequence[float]]
        M rows of M-1 entries; ``T[i][j] = P(state_{t+1}=j | state_t=i)``
    sensor_rows : Sequence[Sequence[float]]
        M rows of E-1 entries; ``S[i][k] = P(evidence=k | state=i)``
    prior_row : Sequence[float]
        M-1 entries of ``P(state_0)``
    tolerance : float, default=1e-9
        Slack allowed when checking that a partial row's mass is at most 1

    Raises
    ------
    InvalidTransitionModelError, InvalidSensorModelError, InvalidPriorError
        On the first violated constraint; no model is constructed

    Notes
    -----
    The completed matrices are stored as read-only arrays owned by the model,
    so they can be shared by concurrent queries without copying.
    """

    def __init__(self,
                 transition_rows: Sequence[Sequence[float]],
                 sensor_rows: Sequence[Sequence[float]],
                 prior_row: Sequence[float],
                 tolerance: float = DEFAULT_TOLERANCE):
        transition_rows = [list(row) for row in transition_rows]
        sensor_rows = [list(row) for row in sensor_rows]
        prior_row = list(prior_row)

        problem = transition_rows_problem(transition_rows, tolerance)
        if problem is not None:
            raise InvalidTransitionModelError(
                "Invalid transition model",
                expected="M rows of M-1 non-negative entries summing to at most 1",
                got=problem,
            )
        n_states = len(transition_rows)

        problem = sensor_rows_problem(sensor_rows, n_states, tolerance)
        if problem is not None:
            raise InvalidSensorModelError(
                "Invalid sensor model",
                expected=f"{n_states} rows of E-1 non-negative entries summing to at most 1",
                got=problem,
            )

        problem = prior_problem(prior_row, n_states, tolerance)
        if problem is not None:
            raise InvalidPriorError(
                "Invalid prior probability",
                expected=f"{n_states - 1} non-negative entries summing to at most 1",
                got=problem,
            )

        self._tolerance = float(tolerance)
        self._transition = self._freeze(complete_stochastic_rows(transition_rows))
        self._sensor = self._freeze(complete_stochastic_rows(sensor_rows))
        self._prior = self._freeze(complete_stochastic_rows([prior_row])[0])

        logger.debug("Constructed HMM with %d states and %d evidence symbols",
                     self.n_states, self.n_evidence)

    @staticmethod
    def _freeze(array: np.ndarray) -> np.ndarray:
        array.setflags(write=False)
        return array

    @classmethod
    def from_matrices(cls,
                      transition_matrix: Sequence[Sequence[float]],
                      sensor_matrix: Sequence[Sequence[float]],
                      prior: Sequence[float],
                      tolerance: float = DEFAULT_TOLERANCE) -> 'HiddenMarkovModel':
        """Construct from fully materialised stochastic matrices.

        Every row must already sum to 1 within ``tolerance``; the last column is
        then dropped and re-derived through the regular partial-row path.
        """
        checks = [
            (transition_matrix, InvalidTransitionModelError, "transition matrix"),
            (sensor_matrix, InvalidSensorModelError, "sensor matrix"),
            ([prior], InvalidPriorError, "prior"),
        ]
        for rows, error, name in checks:
            rows = [list(row) for row in rows]
            if not rows or any(len(row) == 0 for row in rows):
                raise error(f"Empty {name}")
            if any(len(row) != len(rows[0]) for row in rows):
                raise error(f"Ragged {name}", got=f"row lengths {[len(row) for row in rows]}")
            if not rows_sum_to_one(np.array(rows, dtype=float), tolerance):
                raise error(
                    f"Rows of the {name} do not sum to 1",
                    got=f"row sums {np.array(rows, dtype=float).sum(axis=1).tolist()}",
                )

        return cls(
            [list(row)[:-1] for row in transition_matrix],
            [list(row)[:-1] for row in sensor_matrix],
            list(prior)[:-1],
            tolerance=tolerance,
        )

    @property
    def transition_matrix(self) -> np.ndarray:
        """Read-only (M, M) transition matrix."""
        return self._transition

    @property
    def sensor_matrix(self) -> np.ndarray:
        """Read-only (M, E) sensor matrix."""
        return self._sensor

    @property
    def prior(self) -> np.ndarray:
        """Read-only (M,) prior distribution."""
        return self._prior

    @property
    def n_states(self) -> int:
        return self._transition.shape[0]

    @property
    def n_evidence(self) -> int:
        return self._sensor.shape[1]

    @property
    def tolerance(self) -> float:
        return self._tolerance

    def __repr__(self) -> str:
        return f"HiddenMarkovModel(n_states={self.n_states}, n_evidence={self.n_evidence})"
