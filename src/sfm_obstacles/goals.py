"""Goal selection by rejection sampling in the square domain."""
import logging

import numpy as np

from sfm_obstacles.agent import Agent

logger = logging.getLogger(__name__)


class GoalSamplingError(RuntimeError):
    """Raised when no acceptable goal was drawn within the attempt cap.

    Recoverable: the caller may keep the agent's current goal and retry on a
    later tick.
    """

    def __init__(self, agent_id: int, attempts: int, domain_half_length: float):
        self.agent_id = agent_id
        self.attempts = attempts
        self.domain_half_length = domain_half_length
        super().__init__(
            f"no goal farther than {domain_half_length:g} from agent {agent_id} "
            f"after {attempts} attempts"
        )


def select_new_goal(agent: Agent, domain_half_length: float, rng: np.random.Generator,
                    max_attempts: int = 1000) -> np.ndarray:
    """Draw a new goal for `agent`.

    Candidates are uniform in [-L, L] x [-L, L] (z = 0) with
    L = `domain_half_length`.  A candidate is accepted only if it lies
    strictly farther than L from the agent's current position.

    Raises
    ------
    GoalSamplingError
        if `max_attempts` candidates in a row are rejected.
    """
    half = float(domain_half_length)
    assert max_attempts > 0, "max_attempts must be positive"
    for attempt in range(1, int(max_attempts) + 1):
        candidate = np.zeros(3, dtype=float)
        candidate[:2] = rng.uniform(-half, half, size=2)
        if np.linalg.norm(candidate - agent.position) > half:
            if attempt > 1:
                logger.debug("Agent %d: goal accepted after %d draws", agent.id, attempt)
            return candidate
    raise GoalSamplingError(agent.id, int(max_attempts), half)
