"""
simulation.py

Per-tick driver for the social-force obstacle simulator.

Core Responsibilities:
----------------------
1. Goal refresh:
   • An agent closer than `goal_reached_distance` to its goal draws a new
     one through the goal selector.  A failed draw is logged and the old
     goal is kept for this tick.

2. Force evaluation:
   • Desired force towards the goal and the social force from neighbors in
     range, recorded on the agent for diagnostics.

3. Integration:
   • Forces are blended with the configured weights and the agent is
     advanced by dt (speed clamped to `preferred_speed`).

Update modes:
-------------
"simultaneous" (default) evaluates every agent's forces on the pre-tick
snapshot, then integrates everybody.  "sequential" advances agents one at a
time in population order, so later agents react to already-moved ones.

Usage Example:
--------------
    import numpy as np
    from sfm_obstacles.config import SFMConfig
    from sfm_obstacles.simulation import Simulation

    sim = Simulation(SFMConfig(num_obstacles=10), seed=42, record_history=True)
    sim.run(200)
    df = sim.history_frame()

Wall-clock pacing and the actual transform broadcaster live outside this
package; `Simulation` hands transforms to any callable passed as
`broadcaster`.
"""
import argparse
import logging
import sys
from typing import Callable, List, Optional, Sequence

import numpy as np
import pandas as pd

from sfm_obstacles.agent import Agent, create_population
from sfm_obstacles.config import SFMConfig, load_config
from sfm_obstacles.diagnostics import format_population, population_frame
from sfm_obstacles.forces import desired_force, neighbor_candidates, social_force
from sfm_obstacles.goals import GoalSamplingError, select_new_goal
from sfm_obstacles.integrator import integrate
from sfm_obstacles.io.log_writer import TrajectoryLogWriter
from sfm_obstacles.transforms import ObstacleTransform, obstacle_transforms

logger = logging.getLogger(__name__)


def _refresh_goal(agent: Agent, config: SFMConfig, rng: np.random.Generator) -> None:
    if agent.distance_to_goal() >= config.goal_reached_distance:
        return
    try:
        goal = select_new_goal(agent, config.domain_half_length, rng,
                               max_attempts=config.max_goal_attempts)
    except GoalSamplingError as exc:
        logger.warning("Goal resample failed, keeping previous goal: %s", exc)
        return
    goal[2] = 0.0
    agent.goal = goal


def _evaluate_forces(agent: Agent, neighbors: Sequence[Agent], config: SFMConfig):
    f_desired = desired_force(agent)
    f_social = social_force(agent, neighbors, config)
    agent.last_desired_force = f_desired.copy()
    agent.last_social_force = f_social.copy()
    return f_desired, f_social


def step(population: Sequence[Agent], dt: float, config: SFMConfig,
         rng: np.random.Generator) -> None:
    """Advance every agent in `population` by one tick of length `dt`, in place.

    Negative `dt` leaves the population untouched.
    """
    if dt < 0.0:
        logger.debug("Negative dt=%s ignored", dt)
        return

    if config.update_mode == "sequential":
        for agent in population:
            _refresh_goal(agent, config, rng)
            f_desired, f_social = _evaluate_forces(agent, population, config)
            integrate(agent, f_desired, f_social,
                      config.desired_force_factor, config.social_force_factor, dt)
        return

    for agent in population:
        _refresh_goal(agent, config, rng)

    # snapshot: neighbor states are frozen copies so integration order is irrelevant
    snapshot = [a.copy() for a in population]
    candidates = neighbor_candidates(snapshot, config)
    forces = [_evaluate_forces(agent, candidates[agent.id], config) for agent in population]

    for agent, (f_desired, f_social) in zip(population, forces):
        integrate(agent, f_desired, f_social,
                  config.desired_force_factor, config.social_force_factor, dt)


class Simulation:
    """Owns a population, its random generator and the optional output sinks."""

    def __init__(
        self,
        config: Optional[SFMConfig] = None,
        seed: Optional[int] = None,
        broadcaster: Optional[Callable[[List[ObstacleTransform]], None]] = None,
        log_writer: Optional[TrajectoryLogWriter] = None,
        record_history: bool = False,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config if config is not None else SFMConfig()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.population = create_population(self.config, self.rng)
        self.broadcaster = broadcaster
        self.log_writer = log_writer
        self.record_history = bool(record_history)
        self.steps = 0
        self.t = 0.0
        self.history = []
        self._startup_diagnostics()

    def _startup_diagnostics(self):
        cfg = self.config
        logger.info("HZ: %s", cfg.hz)
        logger.info("NUM_OBSTACLE: %s", cfg.num_obstacles)
        logger.info("DESIRED_FORCE_FACTOR: %s", cfg.desired_force_factor)
        logger.info("SOCIAL_FORCE_FACTOR: %s", cfg.social_force_factor)
        logger.info("SIMULATION_SQUARE_LENGTH: %s", cfg.simulation_square_length)
        logger.info("UPDATE_MODE: %s", cfg.update_mode)

    def tick(self) -> List[ObstacleTransform]:
        """Run one step at `config.dt` and feed every output sink."""
        dt = self.config.dt
        step(self.population, dt, self.config, self.rng)
        self.steps += 1
        self.t += dt

        transforms = obstacle_transforms(self.population, self.config)
        if self.broadcaster is not None:
            self.broadcaster(transforms)
        if self.log_writer is not None:
            self.log_writer.append(self.steps, self.population, t=self.t)
        if self.record_history:
            self.history.append(population_frame(self.population, t=self.t))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s", format_population(self.population))
        return transforms

    def run(self, n_steps: int) -> None:
        """Advance `n_steps` ticks back to back (headless, no pacing)."""
        logger.info("[SIM] Starting: %s agents, dt=%s, steps=%s",
                    len(self.population), self.config.dt, n_steps)
        for _ in range(int(n_steps)):
            self.tick()
        logger.info("[SIM] Completed at t=%.2f s", self.t)

    def history_frame(self) -> pd.DataFrame:
        if not self.history:
            return pd.DataFrame()
        return pd.concat(self.history, ignore_index=True)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Run the social-force obstacle simulator headless')
    parser.add_argument('--config', default=None, help='JSON file with parameter overrides')
    parser.add_argument('--steps', type=int, default=200, help='Number of ticks to simulate')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible runs')
    parser.add_argument('--num-obstacles', dest='num_obstacles', type=int, default=None, help='Population size')
    parser.add_argument('--hz', type=float, default=None, help='Tick rate (dt = 1/hz)')
    parser.add_argument('--out-dir', dest='out_dir', default=None, help='Write per-tick .npz trajectories here')
    parser.add_argument('--verbose', dest='verbose', action='store_true', help='Dump every agent each tick')
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    log = logging.getLogger("sfm_obstacles")
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)
    log.setLevel(logging.DEBUG if args.verbose else logging.INFO)

    config = load_config(args.config, num_obstacles=args.num_obstacles, hz=args.hz)
    writer = TrajectoryLogWriter(args.out_dir) if args.out_dir else None
    try:
        sim = Simulation(config, seed=args.seed, log_writer=writer)
        sim.run(args.steps)
    finally:
        if writer is not None:
            writer.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
