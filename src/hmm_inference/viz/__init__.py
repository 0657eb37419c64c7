"""
Belief visualization for hmm_inference.

Heatmaps and per-state trajectories of smoothed, filtered and predicted beliefs.
"""

from .belief_evolution import (
    BeliefPlotConfig,
    REGIME_COLORS,
    plot_belief_heatmap,
    plot_belief_trajectories,
    save_belief_figure
)

__all__ = [
    'BeliefPlotConfig',
    'REGIME_COLORS',
    'plot_belief_heatmap',
    'plot_belief_trajectories',
    'save_belief_figure'
]
