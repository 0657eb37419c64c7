"""Exceptions raised by hmm_inference.

Every failure is local and synchronous and names a specific kind, so callers
can block exactly the action that triggered it.

- **ModelValidationError** and its subclasses are raised while constructing a
  model: a matrix has the wrong shape, a negative or non-finite entry, or a
  partial row whose mass exceeds 1.
- **QueryError** and its subclasses are raised by inference queries before any
  recursion runs: evidence outside the sensor alphabet, a prediction target
  inside the observed horizon, a smoothing index with no later evidence, or an
  inverted range.
- **LabelError** and **ModelSpecError** belong to the labelled layer that sits
  in front of the engine (sessions, model files, the CLI).

All exceptions inherit from **HMMInferenceError**; the validation families also
inherit from ``ValueError``.

Examples
--------
>>> from hmm_inference.exceptions import InvalidPriorError, HMMInferenceError
>>> try:
...     raise InvalidPriorError(
...         "Prior mass exceeds 1",
...         expected="sum(prior) <= 1",
...         got="sum(prior) = 1.2",
...         hint="Supply the first M-1 prior entries; the last one is derived",
...     )
... except HMMInferenceError as e:
...     print(e.message)
Prior mass exceeds 1
"""

from typing import Optional, Sequence


class HMMInferenceError(Exception):
    """Base exception for all hmm_inference errors.

    Parameters
    ----------
    message : str
        Description of what went wrong
    expected : str, optional
        What was expected
    got : str, optional
        What was actually received
    hint : str, optional
        Actionable suggestion for fixing the error
    """

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        got: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        self.message = message
        parts = [message]

        if expected is not None:
            parts.append(f"\nExpected: {expected}")

        if got is not None:
            parts.append(f"Got: {got}")

        if hint is not None:
            parts.append(f"\nHint: {hint}")

        super().__init__("\n".join(parts))


class ModelValidationError(HMMInferenceError, ValueError):
    """Raised when transition, sensor or prior input is rejected at construction."""


class InvalidTransitionModelError(ModelValidationError):
    """Transition rows have the wrong length, bad entries, or mass above 1."""


class InvalidSensorModelError(ModelValidationError):
    """Sensor rows are ragged, have bad entries, or mass above 1."""


class InvalidPriorError(ModelValidationError):
    """Prior has the wrong length, bad entries, or mass above 1."""


class QueryError(HMMInferenceError, ValueError):
    """Raised when a query's preconditions are violated."""


class InvalidEvidenceError(QueryError):
    """Evidence sequence contains a symbol outside ``[0, E)``.

    The offending sequence is kept on ``evidence``.
    """

    def __init__(self, message: str, evidence: Optional[Sequence] = None, **kwargs) -> None:
        self.evidence = None if evidence is None else list(evidence)
        if evidence is not None:
            message = f"{message} (evidence: {self.evidence})"
        super().__init__(message, **kwargs)


class ZeroProbabilityEvidenceError(InvalidEvidenceError):
    """Evidence sequence is impossible under the model, so beliefs cannot be normalised."""


class InvalidFutureTimestampError(QueryError):
    """Prediction target is not strictly after the observed horizon."""


class InvalidPastTimestampError(QueryError):
    """Smoothing index lies outside ``[0, T_len - 2]``."""


class InvalidRangeError(QueryError):
    """Range query with ``start > stop``."""


class LabelError(HMMInferenceError, ValueError):
    """Unknown, duplicate or empty state/evidence label."""


class ModelSpecError(HMMInferenceError, ValueError):
    """Model file or model dictionary is malformed."""
