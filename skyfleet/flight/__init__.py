"""Agent flight model, steering and guidance."""

from .agent import Agent, AgentTick
from .boundary import BoundaryGuard, BoundaryReport
from .integrator import FlightIntegrator, FlightStep
from .planner import TargetPlanner
from .state import AgentState, Controls, FlightMode, HealthState, Transform
from .steering import Steerer, SteeringCommand

__all__ = [
    "Agent",
    "AgentTick",
    "AgentState",
    "BoundaryGuard",
    "BoundaryReport",
    "Controls",
    "FlightIntegrator",
    "FlightMode",
    "FlightStep",
    "HealthState",
    "Steerer",
    "SteeringCommand",
    "TargetPlanner",
    "Transform",
]
