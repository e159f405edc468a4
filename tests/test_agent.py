import numpy as np
import pytest

from sfm_obstacles.agent import Agent, create_population
from sfm_obstacles.config import SFMConfig


def test_agent_planar_vectors():
    a = Agent(id=1, position=(1.0, 2.0), velocity=[0.5, -0.5, 9.0], goal=np.array([3.0, 4.0]))
    assert a.position.shape == (3,)
    assert a.position[2] == 0.0 and a.velocity[2] == 0.0 and a.goal[2] == 0.0
    assert a.distance_to_goal() == pytest.approx(np.hypot(2.0, 2.0))


def test_agent_rejects_bad_speed_and_id():
    with pytest.raises(ValueError):
        Agent(preferred_speed=0.0)
    with pytest.raises(ValueError):
        Agent(id=-1)


def test_copy_is_independent():
    a = Agent(id=2, position=(1.0, 1.0))
    b = a.copy()
    b.position[0] = 5.0
    assert a.position[0] == 1.0


def test_create_population(rng):
    cfg = SFMConfig(num_obstacles=50)
    pop = create_population(cfg, rng)
    assert [a.id for a in pop] == list(range(50))
    half = cfg.domain_half_length
    for a in pop:
        assert np.all(np.abs(a.position[:2]) <= half)
        assert np.all(np.abs(a.goal[:2]) <= half)
        assert np.all(np.abs(a.velocity[:2]) <= 1.0)
        assert a.position[2] == a.velocity[2] == a.goal[2] == 0.0
        assert cfg.min_preferred_speed <= a.preferred_speed <= cfg.max_preferred_speed
    # both dodge sides occur in a population this size
    assert {a.dodging_right for a in pop} == {True, False}


def test_create_population_reproducible():
    cfg = SFMConfig(num_obstacles=5)
    p1 = create_population(cfg, np.random.default_rng(7))
    p2 = create_population(cfg, np.random.default_rng(7))
    for a, b in zip(p1, p2):
        assert np.array_equal(a.position, b.position)
        assert a.preferred_speed == b.preferred_speed
