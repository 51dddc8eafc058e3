"""Tests for the command-line interface."""

import json
import logging

import pytest
from typer.testing import CliRunner

from heightfield.cli import app


@pytest.fixture
def cli():
    return CliRunner()


@pytest.fixture(autouse=True)
def small_grid(monkeypatch):
    monkeypatch.setenv("GRID_SIZE_X", "2.0")
    monkeypatch.setenv("GRID_SIZE_Z", "2.0")
    monkeypatch.setenv("GRID_SPACING", "0.2")


class TestCli:
    """Tests for CLI commands."""

    def test_version(self, cli):
        result = cli.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "heightfield v0.1.0" in result.output

    def test_info(self, cli):
        result = cli.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "11 x 11" in result.output

    def test_simulate(self, cli, tmp_path):
        output = tmp_path / "run.json"

        result = cli.invoke(
            app,
            ["simulate", "--steps", "20", "--ball", "--disturb", "0.2", "--output", str(output)],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["n_steps"] == 20
        assert len(data["body_y"]) == 1

    def test_simulate_plot(self, cli, tmp_path):
        plot = tmp_path / "surface.png"

        result = cli.invoke(app, ["simulate", "--steps", "5", "--plot", str(plot)])

        assert result.exit_code == 0, result.output
        assert plot.exists()

    def test_info_shows_clamped_wave_speed(self, cli, monkeypatch):
        """At dt = 1/60 and spacing 0.2 the bound is 0.5 * 0.2 * 60 = 6."""
        monkeypatch.setenv("WAVE_WAVE_SPEED", "100.0")

        result = cli.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "6.000" in result.output

    def test_debug_setting_enables_debug_logging(self, cli, monkeypatch):
        levels = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: levels.append(kwargs["level"]))
        monkeypatch.setenv("DEBUG", "true")

        result = cli.invoke(app, ["simulate", "--steps", "2"])

        assert result.exit_code == 0, result.output
        assert levels == [logging.DEBUG]
