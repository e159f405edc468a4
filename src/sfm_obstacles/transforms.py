"""Pose records handed to an external transform broadcaster.

Each agent becomes a child frame of the world frame, placed at (x, y, 0)
and yawed along its velocity.
"""
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from scipy.spatial.transform import Rotation

from sfm_obstacles.agent import Agent
from sfm_obstacles.config import SFMConfig


@dataclass(frozen=True)
class ObstacleTransform:
    stamp: float
    frame_id: str
    child_frame_id: str
    translation: Tuple[float, float, float]
    rotation: Tuple[float, float, float, float]  # x, y, z, w

    @property
    def yaw(self) -> float:
        return float(Rotation.from_quat(self.rotation).as_euler('xyz')[2])


def obstacle_transforms(population: Iterable[Agent], config: SFMConfig,
                        stamp: Optional[float] = None) -> List[ObstacleTransform]:
    """Build one transform per agent, all stamped with `stamp` (default: now)."""
    if stamp is None:
        stamp = time.time()
    out = []
    for agent in population:
        quat = Rotation.from_euler('z', agent.heading).as_quat()
        out.append(ObstacleTransform(
            stamp=float(stamp),
            frame_id=config.world_frame,
            child_frame_id=f"{config.obstacle_frame}{agent.id}",
            translation=(float(agent.position[0]), float(agent.position[1]), 0.0),
            rotation=tuple(float(q) for q in quat),
        ))
    return out
