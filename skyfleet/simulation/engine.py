"""End-to-end fleet run."""

from __future__ import annotations

import logging
import math

import numpy as np

from ..config import ExperimentConfig
from ..core.bounds import Box
from .fleet import Fleet
from .outputs import SimulationResult

logger = logging.getLogger(__name__)


class FleetSimulator:
    def __init__(self, config: ExperimentConfig):
        self.config = config.validate()

    def _frame_deltas(self, rng: np.random.Generator):
        runtime = self.config.runtime
        num_frames = max(1, int(math.ceil(float(runtime.duration_s) / float(runtime.dt_s))))
        jitter = float(runtime.dt_jitter_s)
        for _ in range(num_frames):
            if jitter > 0.0:
                yield float(runtime.dt_s + rng.uniform(-jitter, jitter))
            else:
                yield float(runtime.dt_s)

    def run(self, fleet: Fleet | None = None) -> SimulationResult:
        fleet = fleet if fleet is not None else Fleet(self.config)
        rng = np.random.default_rng(self.config.fleet.seed)
        record_interval = max(0.0, float(self.config.runtime.record_interval_s))

        times = []
        positions = []
        orientations = []
        speeds = []
        out_of_bounds = []
        repairs = []
        reports = []

        def _record(tick_repairs: int):
            times.append(fleet.sim_time_s)
            positions.append([a.state.position for a in fleet.agents])
            orientations.append([a.state.orientation for a in fleet.agents])
            speeds.append([a.state.speed for a in fleet.agents])
            out_of_bounds.append([a.state.out_of_bounds for a in fleet.agents])
            repairs.append(tick_repairs)

        _record(0)
        next_record_s = record_interval
        repairs_since_record = 0
        for dt in self._frame_deltas(rng):
            tick = fleet.tick(dt)
            repairs_since_record += tick.repairs
            if fleet.sim_time_s + 1e-9 >= next_record_s:
                _record(repairs_since_record)
                reports.append(fleet.report())
                repairs_since_record = 0
                next_record_s = fleet.sim_time_s + record_interval

        final_report = fleet.report()
        n = len(fleet)
        logger.info(
            "Run finished: %d agents, %.1fs simulated, %d ticks, %d repairs, %d bounces",
            n,
            fleet.sim_time_s,
            fleet.ticks,
            final_report.repairs_total,
            final_report.bounces_total,
        )

        world = Box.from_config(self.config.world)
        safe = world.shrink(self.config.planner.horizontal_margin, self.config.planner.vertical_margin)

        return SimulationResult(
            times_s=np.asarray(times, dtype=float),
            positions=np.asarray(positions, dtype=float).reshape(len(times), n, 3),
            orientations=np.asarray(orientations, dtype=float).reshape(len(times), n, 3),
            speeds=np.asarray(speeds, dtype=float).reshape(len(times), n),
            out_of_bounds=np.asarray(out_of_bounds, dtype=bool).reshape(len(times), n),
            repairs=np.asarray(repairs, dtype=np.int64),
            world=world,
            safe_volume=safe,
            final_report=final_report,
            config_dict=self.config.to_dict(),
            reports=reports,
        )
