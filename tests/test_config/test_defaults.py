"""Tests for configuration defaults functionality.

Tests the preset configurations, the hard checks that reject unusable values
and the validation function that warns about unusual ones.
"""

import pytest

from hmm_inference.config.defaults import (
    BATCH_CONFIG,
    DEFAULT_CACHE_SIZE,
    DEFAULT_CONFIG,
    DEFAULT_DISPLAY_HORIZON,
    DEFAULT_TOLERANCE,
    INTERACTIVE_CONFIG,
    MAX_RECOMMENDED_HORIZON,
    MAX_TOLERANCE,
    SETTINGS_PRESETS,
    DefaultConfig,
    config_errors,
    validate_config
)


class TestDefaultConfig:
    """Test suite for the DefaultConfig dataclass."""

    def test_default_config_creation(self):
        config = DefaultConfig(
            probability_tolerance=1e-8,
            filter_cache_size=16,
            display_horizon=5,
            figure_dpi=200
        )

        assert config.probability_tolerance == 1e-8
        assert config.filter_cache_size == 16
        assert config.display_horizon == 5
        assert config.figure_dpi == 200

    def test_default_constants(self):
        assert DEFAULT_CONFIG.probability_tolerance == DEFAULT_TOLERANCE == 1e-9
        assert DEFAULT_CONFIG.filter_cache_size == DEFAULT_CACHE_SIZE
        assert DEFAULT_CONFIG.display_horizon == DEFAULT_DISPLAY_HORIZON


class TestPresets:
    """Test suite for the bundled settings presets."""

    def test_presets_registered(self):
        assert set(SETTINGS_PRESETS) == {"default", "interactive", "batch"}
        assert SETTINGS_PRESETS["interactive"] is INTERACTIVE_CONFIG
        assert SETTINGS_PRESETS["batch"] is BATCH_CONFIG

    @pytest.mark.parametrize("name", sorted(SETTINGS_PRESETS))
    def test_presets_are_valid(self, name):
        assert validate_config(SETTINGS_PRESETS[name]) == []

    def test_interactive_caches_more_than_batch(self):
        assert INTERACTIVE_CONFIG.filter_cache_size > BATCH_CONFIG.filter_cache_size
        assert BATCH_CONFIG.filter_cache_size == 0


def _config(**overrides):
    values = dict(probability_tolerance=1e-9, filter_cache_size=8,
                  display_horizon=10, figure_dpi=150)
    values.update(overrides)
    return DefaultConfig(**values)


class TestConfigErrors:
    """Test suite for config_errors."""

    @pytest.mark.parametrize("name", ["default", "interactive", "batch"])
    def test_presets_are_usable(self, name):
        assert config_errors(SETTINGS_PRESETS[name]) == []

    @pytest.mark.parametrize("tolerance", [0.0, -0.5])
    def test_non_positive_tolerance(self, tolerance):
        errors = config_errors(_config(probability_tolerance=tolerance))
        assert len(errors) == 1
        assert "tolerance" in errors[0]

    def test_negative_cache_size(self):
        assert any("cache" in e for e in config_errors(_config(filter_cache_size=-1)))
        assert config_errors(_config(filter_cache_size=0)) == []

    def test_non_positive_horizon(self):
        assert any("must be positive" in e for e in config_errors(_config(display_horizon=0)))

    def test_figure_dpi(self):
        assert any("DPI" in e for e in config_errors(_config(figure_dpi=0)))

    def test_multiple_problems(self):
        errors = config_errors(_config(filter_cache_size=-1, display_horizon=-1, figure_dpi=-1))
        assert len(errors) == 3


class TestValidateConfig:
    """Test suite for validate_config."""

    def test_valid_config(self):
        assert validate_config(_config()) == []

    def test_large_tolerance(self):
        warnings = validate_config(_config(probability_tolerance=MAX_TOLERANCE * 10))
        assert len(warnings) == 1
        assert "tolerance" in warnings[0]

    def test_large_display_horizon(self):
        assert any("performance" in w for w in
                   validate_config(_config(display_horizon=MAX_RECOMMENDED_HORIZON + 1)))

    def test_hard_errors_are_not_warnings(self):
        assert validate_config(_config(probability_tolerance=0.0, display_horizon=0)) == []
