"""Autonomous aircraft fleet simulation package."""

from .config import ExperimentConfig, load_config
from .flight.agent import Agent
from .simulation.engine import FleetSimulator
from .simulation.fleet import Fleet, FleetReport

__all__ = [
    "ExperimentConfig",
    "load_config",
    "Agent",
    "Fleet",
    "FleetReport",
    "FleetSimulator",
]
