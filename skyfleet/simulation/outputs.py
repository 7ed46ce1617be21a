"""Simulation output containers and serialization helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from ..core.bounds import Box
from .fleet import FleetReport


def _box_dict(box: Box) -> dict[str, float]:
    return {
        "min_x": box.min_x,
        "max_x": box.max_x,
        "min_z": box.min_z,
        "max_z": box.max_z,
        "min_y": box.min_y,
        "max_y": box.max_y,
    }


@dataclass(slots=True)
class SimulationResult:
    """Sampled fleet trajectories.

    Arrays are indexed ``[sample, agent, ...]``; ``times_s`` holds the
    simulated time of each sample.
    """

    times_s: np.ndarray
    positions: np.ndarray
    orientations: np.ndarray
    speeds: np.ndarray
    out_of_bounds: np.ndarray
    repairs: np.ndarray
    world: Box
    safe_volume: Box
    final_report: FleetReport
    config_dict: dict
    reports: list[FleetReport] = field(default_factory=list)

    @property
    def num_samples(self) -> int:
        return int(self.times_s.size)

    @property
    def num_agents(self) -> int:
        return int(self.positions.shape[1]) if self.positions.ndim == 3 else 0

    def all_finite(self) -> bool:
        return bool(
            np.all(np.isfinite(self.positions))
            and np.all(np.isfinite(self.orientations))
            and np.all(np.isfinite(self.speeds))
        )

    def save_json_summary(self, path: str | Path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        summary = {
            "num_samples": self.num_samples,
            "num_agents": self.num_agents,
            "duration_s": float(self.times_s[-1]) if self.num_samples else 0.0,
            "all_finite": self.all_finite(),
            "world": _box_dict(self.world),
            "safe_volume": _box_dict(self.safe_volume),
            "final_report": self.final_report.to_dict(),
            "config": self.config_dict,
        }

        if self.speeds.size:
            summary["speed_min"] = float(np.min(self.speeds))
            summary["speed_max"] = float(np.max(self.speeds))
            summary["speed_mean"] = float(np.mean(self.speeds))
        if self.positions.size:
            altitudes = self.positions[..., 1]
            summary["altitude_min"] = float(np.min(altitudes))
            summary["altitude_max"] = float(np.max(altitudes))
            summary["altitude_mean"] = float(np.mean(altitudes))
        if self.out_of_bounds.size:
            summary["out_of_bounds_sample_fraction"] = float(np.mean(self.out_of_bounds))
        summary["repairs_total"] = int(self.final_report.repairs_total)
        summary["bounces_total"] = int(self.final_report.bounces_total)

        with path.open("w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2)

    def save_npz(self, path: str | Path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        payload = dict(
            times_s=np.asarray(self.times_s, dtype=np.float64),
            positions=np.asarray(self.positions, dtype=np.float32),
            orientations=np.asarray(self.orientations, dtype=np.float32),
            speeds=np.asarray(self.speeds, dtype=np.float32),
            out_of_bounds=np.asarray(self.out_of_bounds, dtype=bool),
            repairs=np.asarray(self.repairs, dtype=np.int64),
            world_bounds=np.array(list(_box_dict(self.world).values()), dtype=np.float64),
            safe_bounds=np.array(list(_box_dict(self.safe_volume).values()), dtype=np.float64),
            num_agents=self.num_agents,
            num_samples=self.num_samples,
        )
        np.savez_compressed(path, **payload)
