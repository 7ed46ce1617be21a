"""Simulation orchestration APIs."""

from .engine import FleetSimulator
from .fleet import Fleet, FleetReport, FleetTick
from .outputs import SimulationResult
from .sweeps import run_parameter_sweep

__all__ = [
    "FleetSimulator",
    "Fleet",
    "FleetReport",
    "FleetTick",
    "SimulationResult",
    "run_parameter_sweep",
]
