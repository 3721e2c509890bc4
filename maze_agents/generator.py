import logging
import random

from .errors import OutOfBounds
from .grid import Grid

logger = logging.getLogger(__name__)


class Generator:
    """Carves a "perfect" maze into a Grid using Randomized Depth-First Search.

    High-level overview:
      - The grid starts fully walled.
      - We start from `start` (default (0, 0)) and perform DFS with
        backtracking. At each step we pick a random uncarved neighbour of the
        cell on top of the stack and knock down the wall between them.
      - When the top cell has no uncarved neighbours, we pop it (backtrack).
      - The stack empties once every cell has been carved exactly once; the
        result is a spanning tree (rows * cols - 1 passages, no loops, every
        cell reachable from every other).
      - The finished grid is frozen so nothing can reopen walls later.

    The random source is injectable: pass `rng` (anything with `choice`) or a
    `seed`. With neither the maze is not reproducible.

    The carving can be run in one go (`run`) or one step at a time (`step`) so
    the build itself can be animated.
    """

    def __init__(self, grid, rng=None, seed=None, start=(0, 0)):
        if not grid.in_bounds(start):
            raise OutOfBounds(f"generation start {start} is outside the grid")
        self.grid = grid
        self.rng = rng if rng is not None else random.Random(seed)
        self.start = start
        # Ordered (from, to) pairs, one per carved passage
        self.history = []

        self.grid.mark_carved(start)
        self.stack = [start]

    @property
    def done(self):
        return not self.stack

    def step(self):
        """Performs one carve or one backtrack. Returns False once finished."""
        if not self.stack:
            return False

        current = self.stack[-1]
        candidates = [n for n in self.grid.neighbors(current) if not self.grid.is_carved(n)]

        if candidates:
            nxt = self.rng.choice(candidates)
            self.grid.open_between(current, nxt)
            self.grid.mark_carved(nxt)
            self.history.append((current, nxt))
            self.stack.append(nxt)
        else:
            self.stack.pop() # Backtrack

        if not self.stack:
            self.grid.freeze()
            logger.debug("carved %d passages in %r", len(self.history), self.grid)
        return True

    def run(self):
        while self.step():
            pass
        return self.grid


def generate(rows, cols, seed=None, rng=None, start=(0, 0)):
    """Builds a rows x cols Grid and carves a maze into it."""
    grid = Grid(rows, cols)
    return Generator(grid, rng=rng, seed=seed, start=start).run()
