"""Pure formatting of agent state for logs and analysis.

Nothing here feeds back into the simulation.
"""
from typing import Any, Dict, Iterable, Optional

import numpy as np
import pandas as pd

from sfm_obstacles.agent import Agent


def _vec(v) -> str:
    return " ".join(f"{x:.9g}" for x in np.asarray(v, dtype=float))


def agent_record(agent: Agent) -> Dict[str, Any]:
    """Flat dict of one agent's state and last computed forces."""
    return {
        'id': agent.id,
        'x': float(agent.position[0]),
        'y': float(agent.position[1]),
        'vx': float(agent.velocity[0]),
        'vy': float(agent.velocity[1]),
        'speed': agent.speed,
        'goal_x': float(agent.goal[0]),
        'goal_y': float(agent.goal[1]),
        'desired_fx': float(agent.last_desired_force[0]),
        'desired_fy': float(agent.last_desired_force[1]),
        'social_fx': float(agent.last_social_force[0]),
        'social_fy': float(agent.last_social_force[1]),
        'preferred_speed': agent.preferred_speed,
        'dodging_right': agent.dodging_right,
    }


def format_agent(agent: Agent) -> str:
    return (
        f"id: {agent.id}\n"
        f"pose: {_vec(agent.position)}\n"
        f"velocity: {_vec(agent.velocity)}\n"
        f"current speed: {agent.speed:.9g}\n"
        f"current goal: {_vec(agent.goal)}\n"
        f"last desired force: {_vec(agent.last_desired_force)}\n"
        f"last social force: {_vec(agent.last_social_force)}"
    )


def format_population(population: Iterable[Agent]) -> str:
    """Per-tick dump: a '===' separator followed by every agent."""
    return "\n".join(["==="] + [format_agent(a) for a in population])


def population_frame(population: Iterable[Agent], t: Optional[float] = None) -> pd.DataFrame:
    """One row per agent; a leading `t` column is added when `t` is given."""
    df = pd.DataFrame([agent_record(a) for a in population])
    if t is not None:
        df.insert(0, 't', float(t))
    return df
