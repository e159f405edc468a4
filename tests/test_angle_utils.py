import math
import numpy as np
from sfm_obstacles import angle_utils as au


def test_wrap_rad_basic():
    assert abs(au.wrap_rad(math.pi - 1e-6) - (math.pi - 1e-6)) < 1e-9
    assert abs(au.wrap_rad(math.pi + 0.1) - (-math.pi + 0.1)) < 1e-9
    assert abs(au.wrap_rad(-3 * math.pi / 2) - math.pi / 2) < 1e-9


def test_heading_of_zero_vector_is_zero():
    assert au.heading_rad(np.zeros(3)) == 0.0


def test_signed_angle_sign():
    assert au.signed_angle([1.0, 0.0], [0.0, 1.0]) > 0
    assert au.signed_angle([0.0, 1.0], [1.0, 0.0]) < 0
    # crossing the -x axis stays small
    d = au.signed_angle([-1.0, 0.01], [-1.0, -0.01])
    assert abs(d) < 0.05


def test_normalized_zero_vector():
    out = au.normalized(np.zeros(3))
    assert np.array_equal(out, np.zeros(3))
    assert not np.any(np.isnan(out))
