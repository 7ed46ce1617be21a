"""Repeated fleet runs over configuration variants."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from ..config import ExperimentConfig
from .engine import FleetSimulator
from .outputs import SimulationResult

logger = logging.getLogger(__name__)


def _deep_update(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_update(base[key], value)
        else:
            base[key] = value
    return base


def _repeat_seed(seed: int | None, repeat: int) -> int | None:
    # Repeat r shares its seed across variants so trials compare pairwise.
    if seed is None:
        return None
    return int(seed) + repeat


def _run_entry(result: SimulationResult) -> dict[str, Any]:
    report = result.final_report
    return {
        "num_agents": report.num_agents,
        "all_finite": result.all_finite(),
        "out_of_bounds_fraction": report.out_of_bounds_fraction,
        "outside_safe_volume": report.outside_safe_volume,
        "min_speed": report.min_speed,
        "max_speed": report.max_speed,
        "repairs_total": report.repairs_total,
        "bounces_total": report.bounces_total,
    }


def run_parameter_sweep(
    base_config: ExperimentConfig,
    variants: list[dict[str, Any]],
    output_root: str | Path,
    repeats: int = 1,
):
    """Run every variant ``repeats`` times and write ``sweep_manifest.json``.

    Variants are nested overrides of ``base_config.to_dict()``. With
    ``repeats > 1`` each run lands in ``trial_NNN/repeat_RR``.
    """
    if repeats < 1:
        raise ValueError("repeats must be >= 1")

    out_root = Path(output_root)
    out_root.mkdir(parents=True, exist_ok=True)

    manifest = []
    for i, variant in enumerate(variants):
        cfg_dict = _deep_update(copy.deepcopy(base_config.to_dict()), variant)
        trial_dir = out_root / f"trial_{i:03d}"

        for repeat in range(repeats):
            cfg = ExperimentConfig.from_dict(copy.deepcopy(cfg_dict))
            cfg.fleet.seed = _repeat_seed(cfg.fleet.seed, repeat)
            run_dir = trial_dir if repeats == 1 else trial_dir / f"repeat_{repeat:02d}"
            cfg.visualization.output_dir = str(run_dir)

            result = FleetSimulator(cfg).run()
            result.save_json_summary(run_dir / "simulation_summary.json")
            result.save_npz(run_dir / "simulation_tracks.npz")

            entry = {
                "trial": i,
                "repeat": repeat,
                "seed": cfg.fleet.seed,
                "overrides": variant,
                "output_dir": str(run_dir),
            }
            entry.update(_run_entry(result))
            manifest.append(entry)

            if not entry["all_finite"]:
                logger.warning("Trial %d repeat %d produced non-finite samples", i, repeat)
            logger.info(
                "Trial %d repeat %d: %.1f%% out of bounds, %d bounces",
                i,
                repeat,
                100.0 * entry["out_of_bounds_fraction"],
                entry["bounces_total"],
            )

    manifest_path = out_root / "sweep_manifest.json"
    with manifest_path.open("w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2)

    return manifest_path
