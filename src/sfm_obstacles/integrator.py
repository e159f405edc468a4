"""Explicit per-tick integration of agent kinematics.

The velocity update keeps the behaviour of the deployed simulator:

    v <- v + (v + F * dt)

i.e. the previous velocity enters twice before the speed clamp, not the
usual explicit-Euler ``v + F * dt``.  Velocities therefore saturate at
`preferred_speed` within a few ticks.

TODO: confirm with the model author whether the doubled velocity term is
intended; the conventional update is v + F * dt.
"""
import numpy as np

from sfm_obstacles.agent import Agent


def clamp_speed(velocity: np.ndarray, max_speed: float) -> np.ndarray:
    """Rescale `velocity` to `max_speed` if it is faster; direction preserved."""
    speed = float(np.linalg.norm(velocity))
    if speed <= max_speed:
        return velocity
    scale = max_speed / speed
    clamped = velocity * scale
    # rounding can leave the norm an ulp above the cap; step the scale down
    for _ in range(64):
        if float(np.linalg.norm(clamped)) <= max_speed:
            break
        scale = np.nextafter(scale, 0.0)
        clamped = velocity * scale
    return clamped


def integrate(agent: Agent, desired_force: np.ndarray, social_force: np.ndarray,
              desired_weight: float, social_weight: float, dt: float) -> None:
    """Blend forces and advance `agent` by `dt` in place.  Negative `dt` is a no-op."""
    if dt < 0.0:
        return
    total_force = desired_weight * np.asarray(desired_force, dtype=float) \
        + social_weight * np.asarray(social_force, dtype=float)
    velocity = agent.velocity + (agent.velocity + total_force * dt)
    velocity = clamp_speed(velocity, agent.preferred_speed)
    velocity[2] = 0.0
    agent.velocity = velocity
    position = agent.position + velocity * dt
    position[2] = 0.0
    agent.position = position
