# -*- coding: utf-8 -*-

"""
sfm_obstacles/config.py

This module centralizes every tunable of the social-force obstacle simulator.
Model constants, force weights, domain size and loop settings live here so the
force model, the integrator and the step driver all read the same values.

Contents:
---------
1. SFM_MODEL:
   - Constants of the anisotropic social-force interaction (neighbor range,
     lambda, gamma, n', n, field-of-view gate).

2. SIMULATION:
   - Frame names, loop rate, population size, force weights, domain size,
     goal handling and the per-tick update mode.

3. SFMConfig:
   - Frozen dataclass combining both dictionaries.  Every force/integration
     call receives one of these explicitly; nothing reads module globals at
     run time.

Usage:
------
    from sfm_obstacles.config import SFMConfig, load_config

    cfg = SFMConfig()                                  # defaults
    cfg = load_config("obstacles.json", hz=10.0)       # file + overrides
    faster = cfg.replace(max_preferred_speed=2.0)      # modified copy

"""
import dataclasses
import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

# ───────────────────────────────────────────────────────────────────────────────
# 1) SOCIAL-FORCE MODEL CONSTANTS
# ───────────────────────────────────────────────────────────────────────────────
SFM_MODEL = {
    # Interaction radius (m).  Neighbors farther than this exert no force.
    "neighbor_range": 3.0,
    # Weight of the relative velocity in the interaction vector
    #   interaction = lambda_ * (v_self - v_other) + direction_to_other
    "lambda_": 2.0,
    # Scales |interaction| into the range parameter b = gamma * |interaction|.
    "gamma": 0.35,
    # Angular falloff of the velocity (deceleration) component.
    "n_prime": 3.0,
    # Angular falloff of the lateral (steering) component.  Smaller than n_prime
    # so steering reaches wider than braking.
    "n": 2.0,
    # Half-angle of the forward field of view (rad).  Neighbors whose bearing
    # relative to the agent's heading exceeds this are ignored.
    "fov_half_angle": math.pi / 6.0,
    # |theta| below this is treated as head-on: no lateral push.
    "sign_epsilon": 1e-2,
}

# ───────────────────────────────────────────────────────────────────────────────
# 2) SIMULATION SETTINGS
# ───────────────────────────────────────────────────────────────────────────────
SIMULATION = {
    # Parent frame for published obstacle poses
    "world_frame": "map",
    # Child frame prefix; agent i is published as f"{obstacle_frame}{i}"
    "obstacle_frame": "obs",
    # Loop rate (Hz).  dt = 1 / hz is handed to step().
    "hz": 20.0,
    # Number of simulated obstacles
    "num_obstacles": 20,
    # Weights of the goal-seeking and social terms in the total force
    "desired_force_factor": 20.0,
    "social_force_factor": 20.0,
    # Side length (m) of the square domain centered on the origin.  Initial
    # positions and goals are drawn inside it; half of it is also the minimum
    # distance between an agent and its next goal.
    "simulation_square_length": 15.0,
    # An agent closer than this to its goal gets a new one (m)
    "goal_reached_distance": 0.5,
    # preferred_speed ~ U[min, max) per agent (m/s)
    "min_preferred_speed": 1.0,
    "max_preferred_speed": 1.5,
    # Rejection-sampling cap for the goal selector
    "max_goal_attempts": 1000,
    # "simultaneous": all forces are evaluated on the pre-tick snapshot.
    # "sequential": agents are advanced one after another and later agents
    # see the already-moved earlier ones.
    "update_mode": "simultaneous",
}

UPDATE_MODES = ("simultaneous", "sequential")


@dataclass(frozen=True)
class SFMConfig:
    """Immutable parameter set passed into every force and integration call.

    Defaults mirror `SFM_MODEL` and `SIMULATION`.
    """
    neighbor_range: float = SFM_MODEL["neighbor_range"]
    lambda_: float = SFM_MODEL["lambda_"]
    gamma: float = SFM_MODEL["gamma"]
    n_prime: float = SFM_MODEL["n_prime"]
    n: float = SFM_MODEL["n"]
    fov_half_angle: float = SFM_MODEL["fov_half_angle"]
    sign_epsilon: float = SFM_MODEL["sign_epsilon"]

    world_frame: str = SIMULATION["world_frame"]
    obstacle_frame: str = SIMULATION["obstacle_frame"]
    hz: float = SIMULATION["hz"]
    num_obstacles: int = SIMULATION["num_obstacles"]
    desired_force_factor: float = SIMULATION["desired_force_factor"]
    social_force_factor: float = SIMULATION["social_force_factor"]
    simulation_square_length: float = SIMULATION["simulation_square_length"]
    goal_reached_distance: float = SIMULATION["goal_reached_distance"]
    min_preferred_speed: float = SIMULATION["min_preferred_speed"]
    max_preferred_speed: float = SIMULATION["max_preferred_speed"]
    max_goal_attempts: int = SIMULATION["max_goal_attempts"]
    update_mode: str = SIMULATION["update_mode"]

    def __post_init__(self):
        if self.hz <= 0.0:
            raise ValueError(f"hz must be positive, got {self.hz}")
        if int(self.num_obstacles) <= 0:
            raise ValueError(f"num_obstacles must be positive, got {self.num_obstacles}")
        if self.simulation_square_length <= 0.0:
            raise ValueError(f"simulation_square_length must be positive, got {self.simulation_square_length}")
        if self.neighbor_range <= 0.0:
            raise ValueError(f"neighbor_range must be positive, got {self.neighbor_range}")
        if self.gamma <= 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
        if not 0.0 < self.min_preferred_speed <= self.max_preferred_speed:
            raise ValueError(
                f"preferred speed bounds must satisfy 0 < min <= max, got "
                f"[{self.min_preferred_speed}, {self.max_preferred_speed}]"
            )
        if int(self.max_goal_attempts) <= 0:
            raise ValueError(f"max_goal_attempts must be positive, got {self.max_goal_attempts}")
        if self.update_mode not in UPDATE_MODES:
            raise ValueError(f"update_mode must be one of {UPDATE_MODES}, got {self.update_mode!r}")

    @property
    def domain_half_length(self) -> float:
        return 0.5 * self.simulation_square_length

    @property
    def dt(self) -> float:
        return 1.0 / self.hz

    def replace(self, **changes) -> "SFMConfig":
        """Return a copy with `changes` applied (validated again)."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Any]) -> "SFMConfig":
        """Build a config from a mapping, skipping keys that are not parameters."""
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            if key not in known:
                logger.warning("Ignoring unknown configuration key %r", key)
                continue
            kwargs[key] = value
        return cls(**kwargs)


def load_config(path: Optional[str] = None, **overrides: Any) -> SFMConfig:
    """Read parameters once at startup.

    Parameters
    ----------
    path : str, optional
        JSON file holding a flat object of parameter names to values.
    **overrides
        Values applied on top of the file (``None`` values are skipped so
        unset CLI flags fall through).
    """
    params = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"configuration file {path} must contain a JSON object")
        params.update(data)
        logger.info("Loaded configuration from %s", path)
    params.update({k: v for k, v in overrides.items() if v is not None})
    return SFMConfig.from_dict(params)
