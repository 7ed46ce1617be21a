"""
Tests for configuration loading and validation.
"""

import json

import pytest

from skyfleet.config import ExperimentConfig, load_config


class TestLoadConfig:
    def test_none_gives_defaults(self):
        cfg = load_config(None)
        assert cfg.world.max_x == 10_000.0
        assert cfg.flight.min_velocity == 105.0
        assert cfg.boundary.margin == 1_200.0

    def test_partial_override(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"fleet": {"num_agents": 12, "seed": 4}, "flight": {"gravity": 9.81}}))
        cfg = load_config(path)
        assert cfg.fleet.num_agents == 12
        assert cfg.fleet.seed == 4
        assert cfg.flight.gravity == pytest.approx(9.81)
        assert cfg.flight.max_velocity == 1_560.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")

    def test_non_json_rejected(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("fleet: {}")
        with pytest.raises(ValueError):
            load_config(path)

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            ExperimentConfig.from_dict({"flight": {"warp_drive": True}})

    def test_dict_round_trip(self):
        cfg = ExperimentConfig()
        cfg.fleet.seed = 9
        assert ExperimentConfig.from_dict(cfg.to_dict()) == cfg


class TestValidate:
    """Test rejection of unflyable configurations."""

    def test_defaults_valid(self):
        ExperimentConfig().validate()

    @pytest.mark.parametrize(
        "override",
        [
            {"world": {"min_x": 5.0, "max_x": -5.0}},
            {"planner": {"horizontal_margin": 10_000.0}},
            {"planner": {"vertical_margin": 900.0}},
            {"planner": {"retarget_interval_min_s": 9.0}},
            {"spawn": {"margin": 10_000.0}},
            {"flight": {"min_velocity": 2_000.0}},
            {"steering": {"min_turn_rate": 0.0}},
            {"fleet": {"num_agents": -1}},
            {"fleet": {"max_dt_s": 0.0}},
            {"runtime": {"dt_s": 0.0}},
        ],
    )
    def test_invalid(self, override):
        with pytest.raises(ValueError):
            ExperimentConfig.from_dict(override).validate()
