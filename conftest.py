import numpy as np
import pytest

from sfm_obstacles.agent import Agent
from sfm_obstacles.config import SFMConfig


@pytest.fixture
def rng():
    """Seeded generator so sampled goals and populations are reproducible."""
    return np.random.default_rng(12345)


@pytest.fixture
def config():
    return SFMConfig()


@pytest.fixture
def make_agent():
    """Factory for agents with planar (x, y) arguments."""
    def _make(id=0, position=(0.0, 0.0), velocity=(0.0, 0.0), goal=(10.0, 0.0),
              preferred_speed=1.2, dodging_right=True):
        return Agent(id=id, position=position, velocity=velocity, goal=goal,
                     preferred_speed=preferred_speed, dodging_right=dodging_right)
    return _make
