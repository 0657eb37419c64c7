"""Default configuration parameters for interactive and batch inference."""

from dataclasses import dataclass
from typing import List

# Numeric tolerance for "row mass <= 1" and "row sums to 1" checks
DEFAULT_TOLERANCE = 1e-9
MAX_TOLERANCE = 1e-3

DEFAULT_CACHE_SIZE = 128
DEFAULT_DISPLAY_HORIZON = 10

# Above this horizon the pure-numpy recursions stay correct but get slow
MAX_RECOMMENDED_HORIZON = 100_000


@dataclass
class DefaultConfig:
    """Base configuration structure for an inference run."""

    probability_tolerance: float
    filter_cache_size: int
    display_horizon: int
    figure_dpi: int


DEFAULT_CONFIG = DefaultConfig(
    probability_tolerance=DEFAULT_TOLERANCE,
    filter_cache_size=DEFAULT_CACHE_SIZE,
    display_horizon=DEFAULT_DISPLAY_HORIZON,
    figure_dpi=150
)

# Appending one symbol at a time re-queries the same prefixes, so cache generously
INTERACTIVE_CONFIG = DefaultConfig(
    probability_tolerance=DEFAULT_TOLERANCE,
    filter_cache_size=1024,
    display_horizon=10,
    figure_dpi=100
)

# One-shot queries over long sequences
BATCH_CONFIG = DefaultConfig(
    probability_tolerance=DEFAULT_TOLERANCE,
    filter_cache_size=0,
    display_horizon=50,
    figure_dpi=300
)

SETTINGS_PRESETS = {
    "default": DEFAULT_CONFIG,
    "interactive": INTERACTIVE_CONFIG,
    "batch": BATCH_CONFIG,
}


def config_errors(config: DefaultConfig) -> List[str]:
    """Return the values no inference run can use (non-positive tolerance, horizon or DPI, negative cache)."""
    errors = []

    if config.probability_tolerance <= 0.0:
        errors.append(f"Probability tolerance {config.probability_tolerance} must be positive")

    if config.filter_cache_size < 0:
        errors.append(f"Filter cache size {config.filter_cache_size} is negative")

    if config.display_horizon <= 0:
        errors.append(f"Display horizon {config.display_horizon} must be positive")

    if config.figure_dpi <= 0:
        errors.append(f"Figure DPI {config.figure_dpi} must be positive")

    return errors


def validate_config(config: DefaultConfig) -> List[str]:
    """Validate configuration parameters and return list of warnings.

    Only usable-but-unusual values are reported here; see :func:`config_errors`
    for values that are rejected outright.
    """
    warnings = []

    if config.probability_tolerance > MAX_TOLERANCE:
        warnings.append(
            f"Probability tolerance {config.probability_tolerance} exceeds {MAX_TOLERANCE}"
        )

    if config.display_horizon > MAX_RECOMMENDED_HORIZON:
        warnings.append(f"Display horizon {config.display_horizon} may cause performance issues")

    return warnings
