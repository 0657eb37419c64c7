"""Exact inference over a discrete hidden Markov model.

Implements the forward and backward recursions and the queries built on them:
sequence likelihood, filtering, prediction, smoothing, and a unified range
query that picks the right recursion(s) for each part of a time range.

Notation: T is the (M, M) transition matrix, S the (M, E) sensor matrix, pi
the prior, e_0..e_{T_len-1} the evidence. The observed horizon is
[0, T_len-1]; times before T_len-1 are smoothed, T_len-1 itself is filtered,
and later times are predicted.
"""

import logging
from functools import lru_cache
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.special import logsumexp

from ..exceptions import (
    InvalidEvidenceError,
    InvalidFutureTimestampError,
    InvalidPastTimestampError,
    InvalidRangeError,
)
from .model import HiddenMarkovModel
from .observation_model import emission_columns, normalize_belief, validate_evidence_sequence

logger = logging.getLogger(__name__)

SMOOTHED = "smoothed"
FILTERED = "filtered"
PREDICTED = "predicted"


class InferenceEngine:
    """Stateless query interface over an immutable :class:`HiddenMarkovModel`.

    Every query validates its own preconditions, allocates fresh result arrays
    and leaves the model untouched, so one engine can serve concurrent readers.

    Parameters
    ----------
    model : HiddenMarkovModel
        Validated model
    cache_size : int, default=128
        Number of filtering results memoised per evidence sequence; 0 disables

    Examples
    --------
    >>> model = HiddenMarkovModel([[0.7], [0.3]], [[0.9], [0.2]], [0.5])
    >>> engine = InferenceEngine(model)
    >>> engine.filtering([0, 0]).round(3)
    array([[0.818, 0.182],
           [0.883, 0.117]])
    """

    def __init__(self, model: HiddenMarkovModel, cache_size: int = 128):
        if cache_size < 0:
            raise ValueError(f"cache_size must be non-negative, got {cache_size}")

        self.model = model
        self.cache_size = cache_size
        self._T = model.transition_matrix
        self._S = model.sensor_matrix
        self._pi = model.prior

        if cache_size > 0:
            self._filtered = lru_cache(maxsize=cache_size)(self._filter_sequence)
        else:
            self._filtered = self._filter_sequence

    @property
    def n_states(self) -> int:
        return self.model.n_states

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _evidence(self, evidence: Sequence[int]) -> np.ndarray:
        return validate_evidence_sequence(evidence, self.model.n_evidence)

    @staticmethod
    def _require_horizon(e: np.ndarray) -> int:
        """Index of the last observed step; empty evidence has no horizon."""
        if e.size == 0:
            raise InvalidEvidenceError(
                "Evidence sequence is empty",
                evidence=e.tolist(),
                hint="Observe at least one symbol before predicting or smoothing",
            )
        return e.size - 1

    @staticmethod
    def _check_past_timestamp(earliest: int, horizon: int) -> None:
        if earliest < 0 or earliest >= horizon:
            raise InvalidPastTimestampError(
                f"Invalid past time stamp {earliest} for evidence sequence length {horizon + 1}",
                expected=f"0 <= earliest <= {horizon - 1}",
                hint="Smoothing needs at least one observation after the earliest index",
            )

    # ------------------------------------------------------------------
    # Forward pass
    # ------------------------------------------------------------------

    def forward(self, evidence: Sequence[int]) -> np.ndarray:
        """Unnormalised forward messages.

        Parameters
        ----------
        evidence : Sequence[int]
            Observation indices e_0..e_{T_len-1}

        Returns
        -------
        np.ndarray, shape (T_len, M)
            ``L[t][s] = P(state_t = s, e_0..e_t)``

        Notes
        -----
        - Base case: L[0] = pi * S[:, e_0]
        - Recurrence: L[t] = (L[t-1] @ T) * S[:, e_t]

        No renormalisation is applied, so values underflow for long sequences.
        Use :meth:`filtering` for beliefs or :meth:`log_likelihood` for long
        sequences.
        """
        e = self._evidence(evidence)
        emissions = emission_columns(self._S, e)

        L = np.zeros((e.size, self.n_states))
        for t in range(e.size):
            if t == 0:
                L[t] = self._pi * emissions[t]
            else:
                L[t] = (L[t - 1] @ self._T) * emissions[t]
        return L

    def likelihood(self, evidence: Sequence[int]) -> np.ndarray:
        """Probability of every evidence prefix, ``P(e_0..e_t)`` for each t."""
        return self.forward(evidence).sum(axis=1)

    def log_likelihood(self, evidence: Sequence[int]) -> np.ndarray:
        """Log-space counterpart of :meth:`likelihood` that does not underflow.

        Runs the forward recursion on log probabilities with ``logsumexp``.
        Impossible prefixes give ``-inf``.
        """
        e = self._evidence(evidence)
        result = np.full(e.size, -np.inf)
        with np.errstate(divide="ignore"):
            log_T = np.log(self._T)
            log_emissions = np.log(emission_columns(self._S, e))
            log_alpha = np.log(self._pi)

            for t in range(e.size):
                if t > 0:
                    log_alpha = logsumexp(log_alpha[:, np.newaxis] + log_T, axis=0)
                log_alpha = log_alpha + log_emissions[t]
                result[t] = logsumexp(log_alpha)
        return result

    def filter_step(self, belief: Optional[np.ndarray], symbol: int) -> np.ndarray:
        """One incremental filtering update.

        Parameters
        ----------
        belief : np.ndarray, shape (M,), or None
            Filtered belief at t-1; None starts from the prior (t = 0)
        symbol : int
            Evidence observed at t

        Returns
        -------
        np.ndarray, shape (M,)
            Filtered belief at t
        """
        e = self._evidence([symbol])
        emission = self._S[:, e[0]]
        if belief is None:
            weights = self._pi * emission
        else:
            weights = (np.asarray(belief, dtype=float) @ self._T) * emission
        return normalize_belief(weights, 0 if belief is None else 1, e.tolist())

    def _filter_sequence(self, e: Tuple[int, ...]) -> np.ndarray:
        emissions = emission_columns(self._S, np.array(e, dtype=int))

        f = np.zeros((len(e), self.n_states))
        for t in range(len(e)):
            if t == 0:
                weights = self._pi * emissions[t]
            else:
                weights = (f[t - 1] @ self._T) * emissions[t]
            # renormalised per step, not once at the end
            f[t] = normalize_belief(weights, t, e)
        f.setflags(write=False)
        return f

    def filtering(self, evidence: Sequence[int]) -> np.ndarray:
        """Filtered beliefs ``f[t][s] = P(state_t = s | e_0..e_t)``.

        Returns
        -------
        np.ndarray, shape (T_len, M)
            Each row sums to 1

        Raises
        ------
        InvalidEvidenceError
            If a symbol is outside [0, E)
        ZeroProbabilityEvidenceError
            If the evidence is impossible under the model
        """
        e = self._evidence(evidence)
        return self._filtered(tuple(e.tolist())).copy()

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    def prediction(self, evidence: Sequence[int], target: int) -> np.ndarray:
        """Beliefs for every step after the horizon up to ``target``.

        Parameters
        ----------
        evidence : Sequence[int]
            Observed evidence; the horizon ends at T_len-1
        target : int
            Last future index to predict, must be > T_len-1

        Returns
        -------
        np.ndarray, shape (target - T_len + 1, M)
            Row i is the belief at time T_len + i

        Notes
        -----
        Seeded with the last filtered belief, then p <- p @ T with no sensor term.
        """
        e = self._evidence(evidence)
        horizon = self._require_horizon(e)
        if target <= horizon:
            raise InvalidFutureTimestampError(
                f"Future time stamp {target} is invalid for evidence sequence length {e.size}",
                expected=f"target > {horizon}",
            )

        lookahead = target - horizon
        p = np.zeros((lookahead, self.n_states))
        previous = self._filtered(tuple(e.tolist()))[horizon]
        for i in range(lookahead):
            p[i] = previous @ self._T
            previous = p[i]
        return p

    # ------------------------------------------------------------------
    # Backward pass and smoothing
    # ------------------------------------------------------------------

    def backward(self, evidence: Sequence[int], earliest: int) -> np.ndarray:
        """Backward messages ``b_t[s] = P(e_{t+1}..e_{T_len-1} | state_t = s)``.

        Parameters
        ----------
        evidence : Sequence[int]
        earliest : int
            First time of interest, 0 <= earliest <= T_len-2

        Returns
        -------
        np.ndarray, shape (T_len - 1 - earliest, M)
            Row ``t - earliest`` holds b_t, in increasing time order

        Notes
        -----
        Computed for t = T_len-2 down to ``earliest`` with
        b_t = T @ (S[:, e_{t+1}] * b_{t+1}) and b_{T_len-1} = 1.
        """
        e = self._evidence(evidence)
        horizon = self._require_horizon(e)
        self._check_past_timestamp(earliest, horizon)

        emissions = emission_columns(self._S, e)
        b = np.zeros((horizon - earliest, self.n_states))
        following = np.ones(self.n_states)
        for t in range(horizon - 1, earliest - 1, -1):
            b[t - earliest] = self._T @ (emissions[t + 1] * following)
            following = b[t - earliest]
        return b

    def smoothing(self, evidence: Sequence[int], earliest: int) -> np.ndarray:
        """Smoothed beliefs ``P(state_t | e_0..e_{T_len-1})`` for t in [earliest, T_len-2].

        Returns
        -------
        np.ndarray, shape (T_len - 1 - earliest, M)
            Each row sums to 1, in increasing time order
        """
        e = self._evidence(evidence)
        horizon = self._require_horizon(e)
        self._check_past_timestamp(earliest, horizon)

        f = self._filtered(tuple(e.tolist()))[earliest:horizon]
        b = self.backward(e, earliest)

        s = f * b
        for i in range(s.shape[0]):
            s[i] = normalize_belief(s[i], earliest + i, e.tolist())
        return s

    # ------------------------------------------------------------------
    # Unified range query
    # ------------------------------------------------------------------

    @staticmethod
    def regime(t: int, horizon_length: int) -> str:
        """Which recursion answers time ``t`` for evidence of ``horizon_length`` steps."""
        last = horizon_length - 1
        if t < last:
            return SMOOTHED
        if t == last:
            return FILTERED
        return PREDICTED

    def query(self, evidence: Sequence[int], start: int, stop: int) -> np.ndarray:
        """Beliefs for every time in the closed range [start, stop].

        Parameters
        ----------
        evidence : Sequence[int]
        start, stop : int
            Closed time range, 0 <= start <= stop

        Returns
        -------
        np.ndarray, shape (stop - start + 1, M)
            Row i is the belief at time start + i

        Notes
        -----
        - Range entirely after the horizon: prediction
        - Range entirely before the last observation: smoothing
        - Otherwise: smoothing up to T_len-2, filtering at T_len-1, and
          prediction after it, concatenated in time order
        """
        e = self._evidence(evidence)
        if start > stop:
            raise InvalidRangeError(
                f"Range start {start} is greater than range stop {stop}",
                expected="start <= stop",
            )
        horizon = self._require_horizon(e)
        if start < 0:
            raise InvalidPastTimestampError(
                f"Range start {start} is negative", expected="start >= 0"
            )

        if start > horizon:
            logger.debug("query [%d, %d]: prediction only", start, stop)
            return self.prediction(e, stop)[start - horizon - 1:]

        if stop < horizon:
            logger.debug("query [%d, %d]: smoothing only", start, stop)
            return self.smoothing(e, start)[:stop - start + 1]

        logger.debug("query [%d, %d]: straddles horizon %d", start, stop, horizon)
        parts = []
        if start < horizon:
            parts.append(self.smoothing(e, start))
        parts.append(self._filtered(tuple(e.tolist()))[horizon:horizon + 1].copy())
        if stop > horizon:
            parts.append(self.prediction(e, stop))
        return np.concatenate(parts, axis=0)


def build_engine(transition_rows: Sequence[Sequence[float]],
                 sensor_rows: Sequence[Sequence[float]],
                 prior_row: Sequence[float],
                 tolerance: Optional[float] = None,
                 cache_size: Optional[int] = None) -> InferenceEngine:
    """Validate partial rows and return a ready engine.

    ``None`` arguments fall back to the active settings (see
    :func:`hmm_inference.config.get_config`).
    """
    if tolerance is None or cache_size is None:
        from ..config.settings import get_config
        settings = get_config()
        if tolerance is None:
            tolerance = settings.probability_tolerance
        if cache_size is None:
            cache_size = settings.filter_cache_size

    model = HiddenMarkovModel(transition_rows, sensor_rows, prior_row, tolerance=tolerance)
    return InferenceEngine(model, cache_size=cache_size)
