"""Tests for the hmm-inference command line interface."""

import json

import pytest

from hmm_inference import cli
from hmm_inference.data.presets import WEATHER_UMBRELLA


class TestQueryCommand:
    """Test suite for ``hmm-inference query``."""

    def test_query_preset(self, capsys):
        code = cli.main(["query", "weather", "umbrella", "umbrella", "--horizon", "4"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_OK
        assert "smoothed" in out
        assert "filtered" in out
        assert "predicted" in out
        assert "0.8834" in out
        assert "P(evidence) = 0.3515" in out

    def test_query_range(self, capsys):
        code = cli.main(["query", "weather", "umbrella", "--start", "1", "--stop", "2"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_OK
        assert "filtered" not in out
        assert out.count("predicted") == 2

    def test_query_model_file(self, tmp_path, capsys):
        path = tmp_path / "weather.json"
        path.write_text(json.dumps(WEATHER_UMBRELLA.to_dict()))

        assert cli.main(["query", str(path), "no_umbrella"]) == cli.EXIT_OK
        assert "rain" in capsys.readouterr().out

    def test_settings_file(self, tmp_path, capsys):
        settings = tmp_path / "settings.toml"
        settings.write_text("[session]\ndisplay_horizon = 3\n")

        code = cli.main(["--settings", str(settings), "query", "weather", "umbrella"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_OK
        assert out.count("predicted") == 2


class TestInputErrors:
    """Bad input exits with status 2 and a message on stderr."""

    def test_unknown_label(self, capsys):
        code = cli.main(["query", "weather", "umbrella", "snow"])

        assert code == cli.EXIT_INPUT_ERROR
        assert "Unknown label 'snow'" in capsys.readouterr().err

    def test_no_evidence(self, capsys):
        assert cli.main(["query", "weather"]) == cli.EXIT_INPUT_ERROR
        assert "empty" in capsys.readouterr().err

    def test_inverted_range(self):
        assert cli.main(["query", "weather", "umbrella", "--start", "3", "--stop", "1"]) == cli.EXIT_INPUT_ERROR

    def test_missing_model_file(self, tmp_path):
        assert cli.main(["query", str(tmp_path / "absent.yaml"), "a"]) == cli.EXIT_INPUT_ERROR

    def test_invalid_model_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(dict(WEATHER_UMBRELLA.to_dict(), prior=[1.5])))

        assert cli.main(["query", str(path), "umbrella"]) == cli.EXIT_INPUT_ERROR

    def test_settings_file_with_unknown_key(self, tmp_path, capsys):
        settings = tmp_path / "settings.toml"
        settings.write_text("alphabet_size = 6\n")

        code = cli.main(["--settings", str(settings), "query", "weather", "umbrella"])

        assert code == cli.EXIT_INPUT_ERROR
        assert "Invalid settings file" in capsys.readouterr().err

    def test_settings_file_with_bad_toml(self, tmp_path, capsys):
        settings = tmp_path / "settings.toml"
        settings.write_text("not = [valid\n")

        code = cli.main(["--settings", str(settings), "query", "weather", "umbrella"])

        assert code == cli.EXIT_INPUT_ERROR
        assert "error:" in capsys.readouterr().err

    def test_settings_file_with_unusable_value(self, tmp_path, capsys):
        settings = tmp_path / "settings.toml"
        settings.write_text("[inference]\nprobability_tolerance = -0.5\n")

        code = cli.main(["--settings", str(settings), "query", "weather", "umbrella"])

        assert code == cli.EXIT_INPUT_ERROR
        assert "Probability tolerance" in capsys.readouterr().err

    def test_zero_horizon(self, capsys):
        code = cli.main(["query", "weather", "umbrella", "--horizon", "0"])

        assert code == cli.EXIT_INPUT_ERROR
        assert "display_horizon must be positive" in capsys.readouterr().err

    def test_missing_command(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 2


class TestOtherCommands:
    """Test suite for likelihood, simulate, plot, presets and env."""

    def test_likelihood(self, capsys):
        assert cli.main(["likelihood", "weather", "umbrella", "umbrella"]) == cli.EXIT_OK

        out = capsys.readouterr().out
        assert "P(e_0..t)" in out
        assert "0.3515" in out

    def test_log_likelihood(self, capsys):
        assert cli.main(["likelihood", "casino", "6", "6", "6", "--log"]) == cli.EXIT_OK
        assert "log P(e_0..t)" in capsys.readouterr().out

    def test_simulate_is_reproducible(self, capsys):
        assert cli.main(["simulate", "casino", "--steps", "5", "--seed", "3"]) == cli.EXIT_OK
        first = capsys.readouterr().out
        assert cli.main(["simulate", "casino", "--steps", "5", "--seed", "3"]) == cli.EXIT_OK
        second = capsys.readouterr().out

        assert first == second
        assert "state" in first and "evidence" in first

    @pytest.mark.visual
    @pytest.mark.parametrize("kind", ["heatmap", "lines"])
    def test_plot(self, tmp_path, capsys, kind):
        output = tmp_path / f"{kind}.png"
        code = cli.main(["plot", "weather", "umbrella", "no_umbrella",
                         "--kind", kind, "--output", str(output), "--horizon", "4"])

        assert code == cli.EXIT_OK
        assert output.exists()
        assert str(output) in capsys.readouterr().out

    def test_presets(self, capsys):
        assert cli.main(["presets"]) == cli.EXIT_OK

        out = capsys.readouterr().out
        assert "weather" in out
        assert "casino" in out

    def test_env(self, capsys):
        assert cli.main(["env"]) == cli.EXIT_OK
        assert "numpy" in capsys.readouterr().out

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        assert cli.main(["--log-file", str(log_file), "presets"]) == cli.EXIT_OK
        assert log_file.exists()
