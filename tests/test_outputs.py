import math

import numpy as np
import pytest

from sfm_obstacles.diagnostics import agent_record, format_agent, format_population, population_frame
from sfm_obstacles.transforms import obstacle_transforms


def test_format_agent(make_agent):
    agent = make_agent(id=3, position=(1.0, 2.0), velocity=(3.0, 4.0), preferred_speed=6.0)
    text = format_agent(agent)
    assert text.splitlines()[0] == 'id: 3'
    assert 'pose: 1 2 0' in text
    assert 'current speed: 5' in text
    assert 'last social force: 0 0 0' in text


def test_format_population_separator(make_agent):
    text = format_population([make_agent(id=0), make_agent(id=1)])
    assert text.startswith('===')
    assert text.count('id: ') == 2


def test_population_frame(make_agent):
    df = population_frame([make_agent(id=0), make_agent(id=1, velocity=(0.3, 0.4))], t=1.5)
    assert list(df.columns[:2]) == ['t', 'id']
    assert len(df) == 2
    assert df.loc[1, 'speed'] == pytest.approx(0.5)
    assert agent_record(make_agent(id=4))['goal_x'] == 10.0


def test_obstacle_transforms(make_agent, config):
    agents = [make_agent(id=3, position=(2.0, -1.0), velocity=(0.0, 1.0))]
    (tf,) = obstacle_transforms(agents, config, stamp=12.5)
    assert tf.frame_id == 'map'
    assert tf.child_frame_id == 'obs3'
    assert tf.translation == (2.0, -1.0, 0.0)
    assert tf.stamp == 12.5
    np.testing.assert_allclose(tf.rotation, [0.0, 0.0, math.sin(math.pi / 4), math.cos(math.pi / 4)], atol=1e-12)
    assert tf.yaw == pytest.approx(math.pi / 2)


def test_format_agent_keeps_small_differences(make_agent):
    a = make_agent(id=0, position=(1.0000001, 0.0))
    b = make_agent(id=0, position=(1.0000002, 0.0))
    assert 'pose: 1.0000001 0 0' in format_agent(a)
    assert format_agent(a) != format_agent(b)
