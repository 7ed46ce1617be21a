"""Fleet ownership, tick driving and diagnostics."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

import numpy as np

from ..config import ExperimentConfig
from ..flight.agent import Agent, AgentTick
from ..flight.state import FlightMode, Transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FleetReport:
    """Read-only snapshot of the fleet, rebuilt on every request."""

    sim_time_s: float
    num_agents: int
    in_bounds: int
    out_of_bounds: int
    outside_safe_volume: int
    correcting: int
    mean_speed: float
    min_speed: float
    max_speed: float
    speed_histogram: np.ndarray
    speed_bin_edges: np.ndarray
    altitude_histogram: np.ndarray
    altitude_bin_edges: np.ndarray
    repairs_last_tick: int
    repairs_total: int
    bounces_last_tick: int
    bounces_total: int

    @property
    def out_of_bounds_fraction(self) -> float:
        if self.num_agents == 0:
            return 0.0
        return float(self.out_of_bounds / self.num_agents)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sim_time_s": float(self.sim_time_s),
            "num_agents": int(self.num_agents),
            "in_bounds": int(self.in_bounds),
            "out_of_bounds": int(self.out_of_bounds),
            "outside_safe_volume": int(self.outside_safe_volume),
            "correcting": int(self.correcting),
            "mean_speed": float(self.mean_speed),
            "min_speed": float(self.min_speed),
            "max_speed": float(self.max_speed),
            "speed_histogram": [int(v) for v in self.speed_histogram],
            "speed_bin_edges": [float(v) for v in self.speed_bin_edges],
            "altitude_histogram": [int(v) for v in self.altitude_histogram],
            "altitude_bin_edges": [float(v) for v in self.altitude_bin_edges],
            "repairs_last_tick": int(self.repairs_last_tick),
            "repairs_total": int(self.repairs_total),
            "bounces_last_tick": int(self.bounces_last_tick),
            "bounces_total": int(self.bounces_total),
        }


@dataclass(slots=True)
class FleetTick:
    dt_s: float
    agent_ticks: list[AgentTick] = field(default_factory=list)

    @property
    def repairs(self) -> int:
        return int(sum(t.repairs for t in self.agent_ticks))

    @property
    def bounces(self) -> int:
        return int(sum(1 for t in self.agent_ticks if t.boundary.bounced))


class Fleet:
    """Owns every agent and advances them in a fixed order.

    Agents never read each other's state, so the order only matters for
    reproducibility. Each agent gets its own generator spawned from the fleet
    seed.
    """

    def __init__(self, config: ExperimentConfig, num_agents: int | None = None):
        self.config = config.validate()
        count = int(config.fleet.num_agents if num_agents is None else num_agents)
        if count < 0:
            raise ValueError("num_agents must be >= 0")

        seeds = np.random.SeedSequence(config.fleet.seed).spawn(count)
        self.agents: list[Agent] = [
            Agent(i, config, rng=np.random.default_rng(seed)) for i, seed in enumerate(seeds)
        ]
        self.sim_time_s = 0.0
        self.ticks = 0
        self.repairs_total = 0
        self.bounces_total = 0
        self._last_tick = FleetTick(dt_s=0.0)
        self._next_status_s = float(config.fleet.report_interval_s)

    def __len__(self) -> int:
        return len(self.agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(self.agents)

    def clamp_dt(self, dt: float) -> float | None:
        """Clamp a frame delta into ``(0, max_dt]``; None means skip the frame."""
        try:
            dt = float(dt)
        except (TypeError, ValueError):
            return None
        if not np.isfinite(dt) or dt <= 0.0:
            return None
        return min(dt, float(self.config.fleet.max_dt_s))

    def tick(self, dt: float) -> FleetTick:
        step_dt = self.clamp_dt(dt)
        if step_dt is None:
            logger.debug("Ignoring non-positive or non-finite frame delta %r", dt)
            self._last_tick = FleetTick(dt_s=0.0)
            return self._last_tick

        result = FleetTick(dt_s=step_dt)
        for agent in self.agents:
            result.agent_ticks.append(agent.tick(step_dt))

        self.sim_time_s += step_dt
        self.ticks += 1
        self.repairs_total += result.repairs
        self.bounces_total += result.bounces
        self._last_tick = result

        interval = float(self.config.fleet.report_interval_s)
        if interval > 0.0 and self.sim_time_s >= self._next_status_s:
            self._next_status_s = self.sim_time_s + interval
            self.log_status()
        return result

    def reset_agent(self, agent_id: int):
        """Hook for the collision layer: respawn one agent in place."""
        self.agents[agent_id].reset_to_safe_state()

    def transforms(self) -> list[Transform]:
        return [agent.transform() for agent in self.agents]

    def report(self) -> FleetReport:
        cfg = self.config
        n = len(self.agents)
        positions = np.array([a.state.position for a in self.agents], dtype=float).reshape(n, 3)
        speeds = np.array([a.state.speed for a in self.agents], dtype=float)
        out_of_bounds = int(sum(1 for a in self.agents if a.state.out_of_bounds))
        outside_safe = int(sum(1 for a in self.agents if not a.safe_volume.contains_horizontal(a.state.position)))
        correcting = int(sum(1 for a in self.agents if a.mode is FlightMode.CORRECTING))

        speed_range = (float(cfg.flight.min_velocity), float(cfg.flight.max_velocity))
        # Post-bounce speeds may dip under the floor; count them in the lowest bin.
        speed_hist, speed_edges = np.histogram(
            np.clip(speeds, *speed_range),
            bins=int(cfg.fleet.speed_histogram_bins),
            range=speed_range,
        )
        alt_hist, alt_edges = np.histogram(
            positions[:, 1],
            bins=int(cfg.fleet.altitude_histogram_bins),
            range=(float(cfg.world.min_y), float(cfg.world.max_y)),
        )

        return FleetReport(
            sim_time_s=float(self.sim_time_s),
            num_agents=n,
            in_bounds=n - out_of_bounds,
            out_of_bounds=out_of_bounds,
            outside_safe_volume=outside_safe,
            correcting=correcting,
            mean_speed=float(np.mean(speeds)) if n else 0.0,
            min_speed=float(np.min(speeds)) if n else 0.0,
            max_speed=float(np.max(speeds)) if n else 0.0,
            speed_histogram=speed_hist,
            speed_bin_edges=speed_edges,
            altitude_histogram=alt_hist,
            altitude_bin_edges=alt_edges,
            repairs_last_tick=self._last_tick.repairs,
            repairs_total=int(self.repairs_total),
            bounces_last_tick=self._last_tick.bounces,
            bounces_total=int(self.bounces_total),
        )

    def log_status(self):
        report = self.report()
        logger.info(
            "Fleet status t=%.1fs: %d in bounds, %d out of bounds (%.1f%% out of bounds), %d correcting, %d repairs",
            report.sim_time_s,
            report.in_bounds,
            report.out_of_bounds,
            100.0 * report.out_of_bounds_fraction,
            report.correcting,
            report.repairs_total,
        )
