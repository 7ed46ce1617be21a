"""Configuration model for the skyfleet simulation."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class WorldConfig:
    min_x: float = -10_000.0
    max_x: float = 10_000.0
    min_z: float = -10_000.0
    max_z: float = 10_000.0
    min_y: float = 400.0
    max_y: float = 2_000.0


@dataclass(slots=True)
class FlightConfig:
    thrust_constant: float = 320.0
    min_thrust: float = 120.0
    drag_coefficient: float = 0.0008
    gravity: float = 20.0
    min_velocity: float = 105.0
    max_velocity: float = 1_560.0
    drag_speed_epsilon: float = 1e-3
    min_acceleration: float = 1e-2
    jitter_magnitude: float = 0.5
    cruise_throttle: float = 0.7
    pitch_rate_rad_s: float = 1.0
    yaw_rate_rad_s: float = 1.0
    max_pitch_rad: float = 1.2
    bank_factor: float = 0.6


@dataclass(slots=True)
class BoundaryConfig:
    margin: float = 1_200.0
    hard_inset: float = 100.0
    altitude_inset: float = 50.0
    bounce_damping: float = 0.8
    level1_fraction: float = 0.3
    level2_fraction: float = 0.6
    level2_center_bias: float = 0.8
    level2_turn_rate: float = 1.5
    altitude_target_offset: float = 400.0


@dataclass(slots=True)
class SteeringConfig:
    arrival_epsilon: float = 1e-2
    parallel_epsilon: float = 1e-6
    yaw_gain: float = 0.5
    antiparallel_yaw_sign: float = 1.0
    min_turn_rate: float = 0.75
    max_turn_rate: float = 2.5
    turn_rate_decay_per_s: float = 0.5


@dataclass(slots=True)
class PlannerConfig:
    horizontal_margin: float = 1_500.0
    vertical_margin: float = 300.0
    center_pull_probability: float = 0.2
    center_pull_min: float = 0.3
    center_pull_max: float = 0.6
    excursion_probability: float = 0.2
    excursion_min_distance: float = 2_000.0
    excursion_max_distance: float = 5_000.0
    retarget_interval_min_s: float = 3.0
    retarget_interval_max_s: float = 8.0
    baseline_turn_rate_min: float = 0.75
    baseline_turn_rate_max: float = 1.5
    outside_turn_rate_boost: float = 1.5
    fallback_target_distance: float = 1_000.0


@dataclass(slots=True)
class SpawnConfig:
    margin: float = 3_000.0
    min_radius: float = 1_000.0
    altitude_offset_min: float = 500.0
    altitude_offset_max: float = 1_000.0
    target_distance_min: float = 1_000.0
    target_distance_max: float = 2_000.0
    target_climb: float = 200.0
    safe_altitude_offset: float = 500.0


@dataclass(slots=True)
class FleetConfig:
    num_agents: int = 50
    seed: int | None = None
    max_dt_s: float = 0.1
    report_interval_s: float = 5.0
    speed_histogram_bins: int = 10
    altitude_histogram_bins: int = 8


@dataclass(slots=True)
class RuntimeConfig:
    duration_s: float = 60.0
    dt_s: float = 1.0 / 60.0
    dt_jitter_s: float = 0.0
    record_interval_s: float = 0.5


@dataclass(slots=True)
class VisualizationConfig:
    enable_matplotlib: bool = True
    output_dir: str = "outputs"
    max_tracks: int = 60


@dataclass(slots=True)
class ExperimentConfig:
    world: WorldConfig = field(default_factory=WorldConfig)
    flight: FlightConfig = field(default_factory=FlightConfig)
    boundary: BoundaryConfig = field(default_factory=BoundaryConfig)
    steering: SteeringConfig = field(default_factory=SteeringConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    spawn: SpawnConfig = field(default_factory=SpawnConfig)
    fleet: FleetConfig = field(default_factory=FleetConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExperimentConfig":
        return cls(
            world=WorldConfig(**data.get("world", {})),
            flight=FlightConfig(**data.get("flight", {})),
            boundary=BoundaryConfig(**data.get("boundary", {})),
            steering=SteeringConfig(**data.get("steering", {})),
            planner=PlannerConfig(**data.get("planner", {})),
            spawn=SpawnConfig(**data.get("spawn", {})),
            fleet=FleetConfig(**data.get("fleet", {})),
            runtime=RuntimeConfig(**data.get("runtime", {})),
            visualization=VisualizationConfig(**data.get("visualization", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def validate(self) -> "ExperimentConfig":
        """Raise ``ValueError`` for configurations no agent could fly in."""
        w = self.world
        if w.min_x >= w.max_x or w.min_z >= w.max_z or w.min_y >= w.max_y:
            raise ValueError("World bounds must satisfy min < max on every axis")

        p = self.planner
        if 2.0 * p.horizontal_margin >= min(w.max_x - w.min_x, w.max_z - w.min_z):
            raise ValueError("planner.horizontal_margin leaves no safe horizontal volume")
        if 2.0 * p.vertical_margin >= w.max_y - w.min_y:
            raise ValueError("planner.vertical_margin leaves no safe altitude band")
        if p.retarget_interval_min_s <= 0.0 or p.retarget_interval_min_s > p.retarget_interval_max_s:
            raise ValueError("planner retarget interval must be positive and ordered")

        s = self.spawn
        if 2.0 * s.margin >= min(w.max_x - w.min_x, w.max_z - w.min_z):
            raise ValueError("spawn.margin leaves no safe starting volume")

        f = self.flight
        if f.min_velocity <= 0.0 or f.min_velocity >= f.max_velocity:
            raise ValueError("flight speed limits must satisfy 0 < min_velocity < max_velocity")

        st = self.steering
        if st.min_turn_rate <= 0.0 or st.min_turn_rate > st.max_turn_rate:
            raise ValueError("steering turn-rate limits must be positive and ordered")

        if self.fleet.num_agents < 0:
            raise ValueError("fleet.num_agents must be >= 0")
        if self.fleet.max_dt_s <= 0.0:
            raise ValueError("fleet.max_dt_s must be positive")
        if self.runtime.dt_s <= 0.0:
            raise ValueError("runtime.dt_s must be positive")
        return self


def load_config(path: str | Path | None) -> ExperimentConfig:
    if path is None:
        return ExperimentConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path.suffix.lower() != ".json":
        raise ValueError("Only JSON config files are supported")

    with config_path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON object")
    return ExperimentConfig.from_dict(raw)
