import logging
import os

import numpy as np

logger = logging.getLogger(__name__)


class TrajectoryLogWriter:
    """Fast per-tick trajectory logger that writes binary .npz files.

    Usage:
        lw = TrajectoryLogWriter(output_dir)
        lw.append(step_index, population)
        lw.close()

    The writer creates files named `step_{t:06d}.npz` and an index `index.txt`
    with one `step,time,filename` line per tick.
    """

    def __init__(self, out_dir):
        self.out_dir = out_dir
        os.makedirs(self.out_dir, exist_ok=True)
        self.index_path = os.path.join(self.out_dir, 'index.txt')
        # open index file for append (line-buffered)
        self._index_f = open(self.index_path, 'a', buffering=1)

    @staticmethod
    def arrays_for(population):
        agents = list(population)
        return {
            'id': np.array([a.id for a in agents], dtype=np.int64),
            'x': np.array([a.position[0] for a in agents]),
            'y': np.array([a.position[1] for a in agents]),
            'vx': np.array([a.velocity[0] for a in agents]),
            'vy': np.array([a.velocity[1] for a in agents]),
            'goal_x': np.array([a.goal[0] for a in agents]),
            'goal_y': np.array([a.goal[1] for a in agents]),
        }

    def append(self, step, population, t=0.0):
        """Write the population state for tick `step`.

        Failures are logged and swallowed so a full disk never stops the loop.
        """
        fn = os.path.join(self.out_dir, f'step_{step:06d}.npz')
        try:
            np.savez(fn, t=np.float64(t), **self.arrays_for(population))
            self._index_f.write(f'{step},{t:.6f},{os.path.basename(fn)}\n')
        except OSError:
            logger.exception("Failed to write trajectory step %d to %s", step, fn)

    def close(self):
        if not self._index_f.closed:
            self._index_f.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
