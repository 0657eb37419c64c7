"""Main configuration settings with TOML loading support."""

import tomllib
import warnings
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Union

import tomli_w

from .defaults import (
    DEFAULT_CACHE_SIZE,
    DEFAULT_DISPLAY_HORIZON,
    DEFAULT_TOLERANCE,
    SETTINGS_PRESETS,
    DefaultConfig,
    config_errors,
    validate_config,
)
from .random_state import resolve_seed, set_global_seed

# TOML section -> fields stored in it
_SECTIONS = {
    'inference': ('probability_tolerance', 'filter_cache_size'),
    'session': ('display_horizon',),
    'visualization': ('output_dir', 'figure_dpi'),
    'advanced': ('random_seed', 'verbose'),
}


@dataclass
class Settings:
    """Main configuration settings for hmm_inference.

    Can be loaded from TOML files for user customization while providing
    sensible defaults for interactive and batch use.
    """

    # Inference parameters
    probability_tolerance: float = DEFAULT_TOLERANCE
    filter_cache_size: int = DEFAULT_CACHE_SIZE

    # Session parameters
    display_horizon: int = DEFAULT_DISPLAY_HORIZON

    # Visualization parameters
    output_dir: str = "output"
    figure_dpi: int = 150

    # Reproducibility
    random_seed: Optional[int] = None

    verbose: bool = False

    def __post_init__(self):
        """Validate settings after initialization.

        Raises
        ------
        ValueError
            If a value is unusable, e.g. a non-positive tolerance or horizon
        """
        config = DefaultConfig(
            probability_tolerance=self.probability_tolerance,
            filter_cache_size=self.filter_cache_size,
            display_horizon=self.display_horizon,
            figure_dpi=self.figure_dpi
        )
        errors = config_errors(config)
        if errors:
            raise ValueError(f"Invalid settings: {'; '.join(errors)}")

        problems = validate_config(config)
        if problems and self.verbose:
            for problem in problems:
                warnings.warn(f"Configuration warning: {problem}", UserWarning)

    @classmethod
    def from_preset(cls, preset: str) -> 'Settings':
        """Create settings from a preset configuration.

        Parameters
        ----------
        preset : str
            Preset name ('default', 'interactive', 'batch')

        Returns
        -------
        Settings
            Settings object with preset values
        """
        if preset not in SETTINGS_PRESETS:
            raise ValueError(f"Unknown preset '{preset}'. Available: {list(SETTINGS_PRESETS.keys())}")

        config = SETTINGS_PRESETS[preset]
        return cls(
            probability_tolerance=config.probability_tolerance,
            filter_cache_size=config.filter_cache_size,
            display_horizon=config.display_horizon,
            figure_dpi=config.figure_dpi
        )

    @classmethod
    def from_toml(cls, toml_path: Union[str, Path]) -> 'Settings':
        """Load settings from TOML file.

        Both sectioned files (``[inference]``, ``[session]``,
        ``[visualization]``, ``[advanced]``) and flat key/value files are
        accepted.

        Raises
        ------
        FileNotFoundError
            If TOML file doesn't exist
        """
        toml_path = Path(toml_path)
        if not toml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {toml_path}")

        with open(toml_path, 'rb') as f:
            config_data = tomllib.load(f)

        settings_data = {}
        for section in _SECTIONS:
            if section in config_data:
                settings_data.update(config_data[section])

        for key, value in config_data.items():
            if not isinstance(value, dict):
                settings_data[key] = value

        return cls(**settings_data)

    def to_toml(self, toml_path: Union[str, Path]) -> None:
        """Save settings to TOML file.

        ``random_seed`` is omitted when unset since TOML has no null value.
        """
        values = asdict(self)
        config_data = {}
        for section, keys in _SECTIONS.items():
            config_data[section] = {
                key: values[key] for key in keys if values[key] is not None
            }

        toml_path = Path(toml_path)
        with open(toml_path, 'wb') as f:
            tomli_w.dump(config_data, f)

    def update(self, **kwargs) -> 'Settings':
        """Create new Settings with updated values."""
        current_dict = asdict(self)
        current_dict.update(kwargs)
        return Settings(**current_dict)

    def ensure_output_dir(self) -> Path:
        """Create ``output_dir`` if needed and return it."""
        path = Path(self.output_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path


# Global configuration instance
_GLOBAL_CONFIG: Optional[Settings] = None


def get_config(config_path: Optional[Union[str, Path]] = None,
               preset: Optional[str] = None,
               reload: bool = False) -> Settings:
    """Get global configuration settings.

    Parameters
    ----------
    config_path : Optional[Union[str, Path]]
        Path to TOML configuration file. If None, looks for default locations.
    preset : Optional[str]
        Preset configuration name ('default', 'interactive', 'batch').
        Ignored if config_path is provided.
    reload : bool
        Force reload configuration even if already loaded

    Returns
    -------
    Settings
        Global configuration settings
    """
    global _GLOBAL_CONFIG

    if _GLOBAL_CONFIG is not None and not reload:
        return _GLOBAL_CONFIG

    if config_path is not None:
        _GLOBAL_CONFIG = Settings.from_toml(config_path)
    else:
        default_paths = [
            Path('config.toml'),
            Path('hmm_inference.toml'),
            Path.home() / '.hmm_inference.toml',
            Path.cwd() / 'config' / 'config.toml'
        ]

        config_loaded = False
        for path in default_paths:
            if path.exists():
                try:
                    _GLOBAL_CONFIG = Settings.from_toml(path)
                    config_loaded = True
                    break
                except (OSError, TypeError, ValueError) as e:
                    warnings.warn(f"Could not load config from {path}: {e}", UserWarning)
                    continue

        if not config_loaded:
            _GLOBAL_CONFIG = Settings.from_preset(preset or 'default')

    _apply_seed(_GLOBAL_CONFIG)

    return _GLOBAL_CONFIG


def set_config(settings: Settings) -> None:
    """Set global configuration settings.

    Parameters
    ----------
    settings : Settings
        Settings object to use as global configuration
    """
    global _GLOBAL_CONFIG
    _GLOBAL_CONFIG = settings
    _apply_seed(settings)


def _apply_seed(settings: Settings) -> None:
    """Reseed NumPy from ``random_seed`` or ``HMM_INFERENCE_SEED``; no-op when neither is set."""
    seed = resolve_seed(settings.random_seed)
    if seed is not None:
        set_global_seed(seed)
