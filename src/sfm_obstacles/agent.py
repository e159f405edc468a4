"""Agent state containers and population initialization.

An `Agent` is plain data: the force model reads it, the integrator and the
step driver mutate it in place.  `last_desired_force` and
`last_social_force` are written for diagnostics only and never read back
by control logic.
"""
from dataclasses import dataclass, field
from typing import List

import numpy as np

from sfm_obstacles.config import SFMConfig


def _planar(vec) -> np.ndarray:
    """Copy `vec` into a float (3,) array with z forced to 0."""
    v = np.zeros(3, dtype=float)
    a = np.asarray(vec, dtype=float).ravel()
    n = min(2, a.size)
    v[:n] = a[:n]
    return v


@dataclass(eq=False)
class Agent:
    """Kinematic and goal state of one simulated obstacle."""
    id: int = 0
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    goal: np.ndarray = field(default_factory=lambda: np.zeros(3))
    preferred_speed: float = 1.0
    dodging_right: bool = True
    last_desired_force: np.ndarray = field(default_factory=lambda: np.zeros(3))
    last_social_force: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        if int(self.id) < 0:
            raise ValueError(f"agent id must be non-negative, got {self.id}")
        if self.preferred_speed <= 0.0:
            raise ValueError(f"preferred_speed must be positive, got {self.preferred_speed}")
        self.id = int(self.id)
        self.preferred_speed = float(self.preferred_speed)
        self.dodging_right = bool(self.dodging_right)
        self.position = _planar(self.position)
        self.velocity = _planar(self.velocity)
        self.goal = _planar(self.goal)
        self.last_desired_force = _planar(self.last_desired_force)
        self.last_social_force = _planar(self.last_social_force)

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    @property
    def heading(self) -> float:
        """Yaw of the velocity vector (rad)."""
        return float(np.arctan2(self.velocity[1], self.velocity[0]))

    def distance_to_goal(self) -> float:
        return float(np.linalg.norm(self.goal - self.position))

    def copy(self) -> "Agent":
        return Agent(
            id=self.id,
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            goal=self.goal.copy(),
            preferred_speed=self.preferred_speed,
            dodging_right=self.dodging_right,
            last_desired_force=self.last_desired_force.copy(),
            last_social_force=self.last_social_force.copy(),
        )


def create_population(config: SFMConfig, rng: np.random.Generator) -> List[Agent]:
    """Create `config.num_obstacles` agents with randomized initial state.

    Positions and goals are uniform in the square domain, velocity components
    uniform in [-1, 1], preferred speed uniform in
    [min_preferred_speed, max_preferred_speed) and the dodge side a coin flip.
    """
    half = config.domain_half_length
    population = []
    for i in range(int(config.num_obstacles)):
        population.append(Agent(
            id=i,
            position=rng.uniform(-half, half, size=2),
            velocity=rng.uniform(-1.0, 1.0, size=2),
            goal=rng.uniform(-half, half, size=2),
            preferred_speed=rng.uniform(config.min_preferred_speed, config.max_preferred_speed),
            dodging_right=bool(rng.integers(0, 2)),
        ))
    return population
