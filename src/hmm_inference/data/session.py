"""Interactive inference session over a labelled model.

The session is the stateful caller the engine itself never is: it remembers the
evidence observed so far and, after every new observation, recomputes beliefs
over a fixed display window ``[0, display_horizon - 1]`` together with the
likelihood of everything observed.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..core.inference import InferenceEngine
from .labels import LabelSet
from .model_spec import ModelSpec

logger = logging.getLogger(__name__)


@dataclass
class BeliefTable:
    """Beliefs over a contiguous time window.

    Attributes
    ----------
    times : np.ndarray, shape (n_rows,)
        Time index of each row
    beliefs : np.ndarray, shape (n_rows, M)
        Probability of each state at each time
    regimes : List[str]
        'smoothed', 'filtered' or 'predicted' for each row
    state_labels : List[str]
        Column names
    likelihood : Optional[float]
        Probability of the evidence the beliefs are conditioned on
    observed : int
        Number of evidence symbols observed
    """
    times: np.ndarray
    beliefs: np.ndarray
    regimes: List[str]
    state_labels: List[str]
    likelihood: Optional[float] = None
    observed: int = 0

    def most_likely_states(self) -> List[str]:
        """Most probable state at each time, taken independently per row."""
        return [self.state_labels[i] for i in np.argmax(self.beliefs, axis=1)]

    def to_frame(self) -> pd.DataFrame:
        """Table indexed by time with one column per state plus a ``regime`` column."""
        frame = pd.DataFrame(self.beliefs, index=pd.Index(self.times, name="time"),
                             columns=self.state_labels)
        frame["regime"] = self.regimes
        return frame


class InferenceSession:
    """Append evidence labels one at a time and read back beliefs.

    Parameters
    ----------
    spec : ModelSpec
        Labelled model; validated and built on construction
    display_horizon : Optional[int]
        Number of time steps to report; defaults to the active settings
    engine : Optional[InferenceEngine]
        Pre-built engine for ``spec``; built from the settings when omitted

    Examples
    --------
    >>> from hmm_inference.data.presets import WEATHER_UMBRELLA
    >>> session = InferenceSession(WEATHER_UMBRELLA, display_horizon=4)
    >>> session.extend(['umbrella', 'umbrella'])
    >>> session.beliefs().regimes
    ['smoothed', 'filtered', 'predicted', 'predicted']
    """

    def __init__(self,
                 spec: ModelSpec,
                 display_horizon: Optional[int] = None,
                 engine: Optional[InferenceEngine] = None):
        from ..config.settings import get_config
        settings = get_config()

        if display_horizon is None:
            display_horizon = settings.display_horizon
        if display_horizon < 1:
            raise ValueError(f"display_horizon must be positive, got {display_horizon}")

        self.spec = spec
        self.states: LabelSet = spec.state_labels
        self.evidence_symbols: LabelSet = spec.evidence_labels
        self.display_horizon = display_horizon
        if engine is None:
            engine = InferenceEngine(spec.build(settings.probability_tolerance),
                                     cache_size=settings.filter_cache_size)
        self.engine = engine
        self._evidence: List[int] = []

    @property
    def evidence(self) -> List[int]:
        """Observed evidence as indices."""
        return list(self._evidence)

    @property
    def evidence_labels(self) -> List[str]:
        return self.evidence_symbols.decode(self._evidence)

    def __len__(self) -> int:
        return len(self._evidence)

    def observe(self, label: str) -> None:
        """Append one evidence symbol by name."""
        self.observe_index(self.evidence_symbols.index(label))

    def observe_index(self, index: int) -> None:
        """Append one evidence symbol by index; rejected symbols leave the session unchanged."""
        self.engine.filtering(self._evidence + [index])
        self._evidence.append(int(index))
        logger.debug("Observed %s, %d symbols so far",
                     self.evidence_symbols.name(int(index)), len(self._evidence))

    def extend(self, labels: Sequence[str]) -> None:
        for label in labels:
            self.observe(label)

    def reset(self) -> None:
        self._evidence = []

    def likelihood(self, log: bool = False) -> float:
        """Probability of all evidence observed so far (1.0 before any evidence)."""
        if not self._evidence:
            return 0.0 if log else 1.0
        if log:
            return float(self.engine.log_likelihood(self._evidence)[-1])
        return float(self.engine.likelihood(self._evidence)[-1])

    def beliefs(self, start: int = 0, stop: Optional[int] = None) -> BeliefTable:
        """Beliefs over ``[start, stop]``.

        ``stop`` defaults to the end of the display window, extended to the
        last observation when more evidence than the window holds has been seen.

        Raises
        ------
        InvalidEvidenceError
            If nothing has been observed yet
        """
        if stop is None:
            stop = max(self.display_horizon, len(self._evidence)) - 1

        beliefs = self.engine.query(self._evidence, start, stop)
        times = np.arange(start, stop + 1)
        regimes = [InferenceEngine.regime(int(t), len(self._evidence)) for t in times]
        return BeliefTable(
            times=times,
            beliefs=beliefs,
            regimes=regimes,
            state_labels=self.states.names,
            likelihood=self.likelihood(),
            observed=len(self._evidence),
        )

    def __repr__(self) -> str:
        name = self.spec.name or "model"
        return f"InferenceSession({name}, observed={len(self._evidence)})"


def session_from(model: Union[str, ModelSpec], display_horizon: Optional[int] = None) -> InferenceSession:
    """Open a session from a model spec, a preset name, or a model file path."""
    if isinstance(model, ModelSpec):
        return InferenceSession(model, display_horizon=display_horizon)

    from .presets import MODEL_PRESETS
    from .model_spec import load_model_spec
    spec = MODEL_PRESETS[model] if model in MODEL_PRESETS else load_model_spec(model)
    return InferenceSession(spec, display_horizon=display_horizon)
