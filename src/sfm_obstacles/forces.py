"""Force model: goal attraction and the anisotropic social force.

The social force follows the pedestrian model where each neighbor in the
forward field of view produces two terms built on the *interaction
vector*

    t = lambda_ * (v_self - v_other) + e_other

with e_other the unit vector towards the neighbor.  With
b = gamma * |t| and theta the signed angle from e_other to t:

    f_v = -exp(-d / b - (n' * b * theta)^2) * t_hat
    f_a = -sign(theta) * exp(-d / b - (n * b * theta)^2) * t_hat_perp

`t_hat_perp` is t_hat rotated +90 deg for right-dodging agents and -90 deg
for left-dodging ones.  The force is one-sided: it depends on the acting
agent's heading and dodge preference only.
"""
import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
from scipy.spatial import cKDTree

from sfm_obstacles.agent import Agent
from sfm_obstacles.angle_utils import normalized, signed_angle
from sfm_obstacles.config import SFMConfig

logger = logging.getLogger(__name__)


def desired_force(agent: Agent) -> np.ndarray:
    """Unit vector from the agent's position towards its goal (zero at the goal)."""
    return normalized(agent.goal - agent.position)


def pairwise_social_force(agent: Agent, other: Agent, config: SFMConfig) -> np.ndarray:
    """Force that `other` exerts on `agent`; zero outside range or field of view."""
    force = np.zeros(3, dtype=float)
    diff_vector = other.position - agent.position
    distance = float(np.linalg.norm(diff_vector))
    if distance > config.neighbor_range or distance == 0.0:
        return force
    diff_direction = diff_vector / distance

    bearing = signed_angle(agent.velocity, diff_direction)
    if abs(bearing) > config.fov_half_angle:
        return force

    velocity_diff = agent.velocity - other.velocity
    interaction_vector = config.lambda_ * velocity_diff + diff_direction
    interaction_norm = float(np.linalg.norm(interaction_vector))
    if interaction_norm == 0.0:
        return force
    interaction_direction = interaction_vector / interaction_norm

    theta = signed_angle(interaction_direction, diff_direction)
    sign_of_theta = 0.0 if abs(theta) < config.sign_epsilon else math.copysign(1.0, theta)

    b = config.gamma * interaction_norm
    force_velocity_amount = -math.exp(-distance / b - (config.n_prime * b * theta) ** 2)
    force_angle_amount = -sign_of_theta * math.exp(-distance / b - (config.n * b * theta) ** 2)

    ix, iy = interaction_direction[0], interaction_direction[1]
    if agent.dodging_right:
        interaction_normal = np.array([-iy, ix, 0.0])
    else:
        interaction_normal = np.array([iy, -ix, 0.0])

    force += force_velocity_amount * interaction_direction
    force += force_angle_amount * interaction_normal
    force[2] = 0.0
    return force


def social_force(agent: Agent, population: Iterable[Agent], config: SFMConfig) -> np.ndarray:
    """Sum of pairwise social forces on `agent` from every other member of `population`."""
    force = np.zeros(3, dtype=float)
    for other in population:
        if other.id == agent.id:
            continue
        force += pairwise_social_force(agent, other, config)
    return force


def safe_build_kdtree(points) -> Optional[cKDTree]:
    """Build a cKDTree over planar points; None for empty input."""
    pts = np.asarray(points, dtype=float)
    if pts.size == 0:
        return None
    try:
        return cKDTree(pts)
    except (ValueError, TypeError) as exc:
        logger.warning("KDTree build failed (%s); falling back to full scan", exc)
        return None


def neighbor_candidates(population: Sequence[Agent], config: SFMConfig) -> Dict[int, List[Agent]]:
    """Map agent id -> agents within `neighbor_range` (self excluded).

    A radius query prunes far pairs before the exact per-pair gates in
    `pairwise_social_force`; the summed force is unchanged.
    """
    agents = list(population)
    tree = safe_build_kdtree([a.position[:2] for a in agents])
    if tree is None:
        return {a.id: [o for o in agents if o.id != a.id] for a in agents}
    # small slack so boundary pairs are still decided by the exact test
    radius = config.neighbor_range * (1.0 + 1e-9)
    out = {}
    for agent, idx in zip(agents, tree.query_ball_point([a.position[:2] for a in agents], r=radius)):
        out[agent.id] = [agents[j] for j in sorted(idx) if agents[j].id != agent.id]
    return out
