"""Shared fixtures for fleet tests."""

import numpy as np
import pytest

from skyfleet.config import ExperimentConfig
from skyfleet.flight.agent import Agent


@pytest.fixture
def config():
    """Default world with a fixed seed and a small fleet."""
    cfg = ExperimentConfig()
    cfg.fleet.seed = 1234
    cfg.fleet.num_agents = 6
    return cfg


@pytest.fixture
def agent(config):
    return Agent(0, config, rng=np.random.default_rng(7))
