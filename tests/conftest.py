"""
Pytest configuration and fixtures for life3d tests.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from life3d.config import Config
from life3d.engine import Engine


@pytest.fixture
def default_config() -> Config:
    """Small lattice with the default B4/S4-5 rule and periodic boundaries."""
    return Config(grid_size=5, birth_rule=4, survival_min=4, survival_max=5, periodic_boundaries=True)


@pytest.fixture
def open_config(default_config: Config) -> Config:
    """Same rule with clipped boundaries."""
    return default_config.merged(periodic_boundaries=False)


@pytest.fixture
def engine(default_config: Config) -> Engine:
    """Seeded engine on a 5³ lattice."""
    return Engine(default_config, rng=1234)


@pytest.fixture
def rng() -> np.random.Generator:
    """Random generator for stochastic tests."""
    return np.random.default_rng(12345)
