"""
Tests for end-to-end runs, saved outputs, sweeps and the command line.
"""

import json
from pathlib import Path

import numpy as np
import pytest

from skyfleet.cli import main
from skyfleet.simulation.engine import FleetSimulator
from skyfleet.simulation.sweeps import run_parameter_sweep


@pytest.fixture
def short_config(config):
    config.fleet.num_agents = 4
    config.runtime.duration_s = 2.0
    config.runtime.dt_s = 0.05
    config.runtime.record_interval_s = 0.5
    return config


@pytest.fixture
def result(short_config):
    return FleetSimulator(short_config).run()


class TestFleetSimulator:
    """Test a short seeded run."""

    def test_shapes(self, result):
        assert result.num_agents == 4
        assert result.num_samples >= 4
        assert result.positions.shape == (result.num_samples, 4, 3)
        assert result.speeds.shape == (result.num_samples, 4)
        assert result.out_of_bounds.shape == (result.num_samples, 4)

    def test_finite_and_ordered(self, result):
        assert result.all_finite()
        assert np.all(np.diff(result.times_s) > 0.0)
        assert result.times_s[0] == 0.0
        assert result.times_s[-1] == pytest.approx(2.0, abs=0.06)

    def test_final_report(self, result):
        assert result.final_report.num_agents == 4
        assert result.final_report.sim_time_s == pytest.approx(result.times_s[-1], abs=0.06)

    def test_reproducible(self, short_config):
        a = FleetSimulator(short_config).run()
        b = FleetSimulator(short_config).run()
        assert a.positions == pytest.approx(b.positions)

    def test_dt_jitter_stays_finite(self, short_config):
        short_config.runtime.dt_jitter_s = 0.04
        result = FleetSimulator(short_config).run()
        assert result.all_finite()

    def test_invalid_config_rejected(self, short_config):
        short_config.runtime.dt_s = -1.0
        with pytest.raises(ValueError):
            FleetSimulator(short_config)


class TestOutputs:
    """Test JSON and NPZ serialization."""

    def test_json_summary(self, result, tmp_path):
        path = tmp_path / "out" / "summary.json"
        result.save_json_summary(path)
        summary = json.loads(path.read_text())
        assert summary["num_agents"] == 4
        assert summary["all_finite"] is True
        assert summary["world"]["max_x"] == 10_000.0
        assert summary["safe_volume"]["max_x"] == 8_500.0
        assert summary["config"]["fleet"]["seed"] == 1234
        assert "final_report" in summary

    def test_npz(self, result, tmp_path):
        path = tmp_path / "tracks.npz"
        result.save_npz(path)
        with np.load(path) as data:
            assert data["positions"].shape == result.positions.shape
            assert int(data["num_agents"]) == 4
            assert data["world_bounds"].tolist() == [-10_000.0, 10_000.0, -10_000.0, 10_000.0, 400.0, 2_000.0]


class TestParameterSweep:
    def test_manifest(self, short_config, tmp_path):
        variants = [{"fleet": {"num_agents": 2}}, {"boundary": {"margin": 1_500.0}}]
        manifest_path = run_parameter_sweep(short_config, variants, tmp_path / "sweep")
        manifest = json.loads(manifest_path.read_text())
        assert [m["trial"] for m in manifest] == [0, 1]
        assert manifest[0]["num_agents"] == 2
        assert manifest[1]["num_agents"] == 4
        for entry in manifest:
            assert (tmp_path / "sweep" / f"trial_{entry['trial']:03d}" / "simulation_summary.json").exists()
            assert entry["all_finite"] is True
            assert entry["seed"] == 1234

    def test_repeats_share_seeds_across_variants(self, short_config, tmp_path):
        short_config.runtime.duration_s = 0.5
        variants = [{}, {"flight": {"gravity": 10.0}}]
        manifest_path = run_parameter_sweep(short_config, variants, tmp_path / "sweep", repeats=2)
        manifest = json.loads(manifest_path.read_text())
        assert [(m["trial"], m["repeat"]) for m in manifest] == [(0, 0), (0, 1), (1, 0), (1, 1)]
        assert [m["seed"] for m in manifest] == [1234, 1235, 1234, 1235]
        assert (tmp_path / "sweep" / "trial_001" / "repeat_01" / "simulation_tracks.npz").exists()

    def test_repeats_must_be_positive(self, short_config, tmp_path):
        with pytest.raises(ValueError):
            run_parameter_sweep(short_config, [{}], tmp_path, repeats=0)


class TestCommandLine:
    def test_run_without_plots(self, tmp_path, capsys):
        out = tmp_path / "cli"
        main(
            [
                "--output-dir", str(out),
                "--agents", "3",
                "--seed", "5",
                "--duration", "1.0",
                "--dt", "0.05",
                "--skip-matplotlib",
                "--log-level", "WARNING",
            ]
        )
        assert (out / "simulation_summary.json").exists()
        assert (out / "simulation_tracks.npz").exists()
        printed = capsys.readouterr().out
        assert "[done] summary" in printed
        summary = json.loads((out / "simulation_summary.json").read_text())
        assert summary["num_agents"] == 3


class TestMatplotlibBackend:
    def test_bundle(self, result, tmp_path):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        from skyfleet.visualization import render_matplotlib_bundle

        generated = render_matplotlib_bundle(result, tmp_path / "plots", max_tracks=2)
        assert set(generated) == {"tracks_png", "history_png", "distributions_png"}
        for path in generated.values():
            assert Path(path).exists()
