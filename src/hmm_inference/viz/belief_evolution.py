"""Belief evolution plots.

Renders a :class:`~hmm_inference.data.session.BeliefTable` either as a
states x time heatmap or as one probability trajectory per state. The last
observed time step is marked so the smoothed, filtered and predicted parts
of the window are easy to tell apart.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from ..core.inference import FILTERED, PREDICTED, SMOOTHED
from ..data.session import BeliefTable

REGIME_COLORS = {
    SMOOTHED: "#4c72b0",
    FILTERED: "#55a868",
    PREDICTED: "#c44e52",
}


@dataclass
class BeliefPlotConfig:
    """Configuration for belief plots."""
    figure_size: Tuple[float, float] = (10, 4)
    dpi: int = 150
    font_size: int = 10
    line_width: float = 1.5
    colormap: str = 'viridis'
    annotate: bool = True
    shade_regimes: bool = True


def _new_axes(ax: Optional[plt.Axes], config: BeliefPlotConfig) -> Tuple[plt.Figure, plt.Axes]:
    if ax is not None:
        return ax.figure, ax
    fig, ax = plt.subplots(figsize=config.figure_size, dpi=config.dpi)
    return fig, ax


def _last_observed_column(table: BeliefTable) -> Optional[int]:
    """Column of the last observed time step inside the window, if any."""
    positions = np.flatnonzero(table.times == table.observed - 1)
    return int(positions[0]) if positions.size else None


def plot_belief_heatmap(table: BeliefTable,
                        ax: Optional[plt.Axes] = None,
                        config: Optional[BeliefPlotConfig] = None) -> plt.Figure:
    """Heatmap of state probabilities, states as rows and time as columns."""
    config = config or BeliefPlotConfig()
    fig, ax = _new_axes(ax, config)

    sns.heatmap(
        table.beliefs.T,
        ax=ax,
        vmin=0.0,
        vmax=1.0,
        cmap=config.colormap,
        annot=config.annotate and table.beliefs.size <= 200,
        fmt=".2f",
        xticklabels=[str(t) for t in table.times],
        yticklabels=table.state_labels,
        cbar_kws={'label': 'P(state)'},
    )

    column = _last_observed_column(table)
    if column is not None:
        ax.axvline(column + 1, color='white', linewidth=2)

    ax.set_xlabel('Time', fontsize=config.font_size)
    ax.set_ylabel('State', fontsize=config.font_size)
    ax.set_title(f'Beliefs after {table.observed} observation(s)', fontsize=config.font_size + 2)
    return fig


def plot_belief_trajectories(table: BeliefTable,
                             ax: Optional[plt.Axes] = None,
                             config: Optional[BeliefPlotConfig] = None) -> plt.Figure:
    """One line per state; background shaded by the regime of each time step."""
    config = config or BeliefPlotConfig()
    fig, ax = _new_axes(ax, config)

    if config.shade_regimes:
        for t, regime in zip(table.times, table.regimes):
            ax.axvspan(t - 0.5, t + 0.5, color=REGIME_COLORS[regime], alpha=0.08, linewidth=0)

    for i, label in enumerate(table.state_labels):
        ax.plot(table.times, table.beliefs[:, i], marker='o', linewidth=config.line_width, label=label)

    if table.observed > 0:
        ax.axvline(table.observed - 1, color='gray', linestyle='--', linewidth=1)

    ax.set_ylim(-0.02, 1.02)
    ax.set_xlabel('Time', fontsize=config.font_size)
    ax.set_ylabel('P(state)', fontsize=config.font_size)
    ax.set_title(f'Belief trajectories after {table.observed} observation(s)',
                 fontsize=config.font_size + 2)
    ax.legend(loc='best', fontsize=config.font_size - 1)
    ax.grid(True, alpha=0.3)
    return fig


def save_belief_figure(fig: plt.Figure, path: Union[str, Path], dpi: int = 150) -> Path:
    """Save *fig* to *path* (format from the suffix), creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi, bbox_inches='tight')
    return path
