import logging
import random
from dataclasses import dataclass
from typing import FrozenSet, Tuple

from .agent import Agent, AgentView, TieBreak
from .errors import InvalidAgentCount, OutOfBounds, SimulationNotReady
from .generator import Generator
from .grid import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time view of the maze and every agent, safe to hand to a renderer."""
    tick: int
    phase: str  # "generating" or "solving"
    rows: int
    cols: int
    walls: Tuple[Tuple[FrozenSet[str], ...], ...]
    carved: FrozenSet[Tuple[int, int]]
    agents: Tuple[AgentView, ...]
    done: bool

    def is_open(self, cell, direction):
        row, col = cell
        return direction in self.walls[row][col]

    def passage_count(self):
        return sum(len(cell) for row in self.walls for cell in row) // 2


class Simulation:
    """
    Owns one maze and the agents solving it.

    Driving loop (owned by the caller, see cli.run_animation):
      1. generate() (or iterate iter_generate() to animate the build)
      2. spawn_agents()
      3. repeat tick() -> snapshot() -> draw until tick() returns True

    Everything is synchronous: tick() advances every live agent by exactly
    one move, so a frame costs time proportional to the number of agents.
    Stopping between ticks leaves every component in a valid state.

    With release_interval > 0 agents join one at a time: the first is live
    from the start and another is released every `release_interval` ticks.
    """

    def __init__(self, tie_break=TieBreak.PRIORITY, release_interval=0):
        self.tie_break = TieBreak(tie_break)
        self.release_interval = max(0, release_interval)
        self.rng = None
        self._grid = None
        self._layout = None
        self._agents = []
        self._active = 0
        self._ticks = 0

    @property
    def grid(self):
        return self._grid

    @property
    def agents(self):
        return tuple(self._agents)

    @property
    def ticks(self):
        return self._ticks

    @property
    def is_done(self):
        return bool(self._agents) and all(a.is_terminal for a in self._agents)

    # --- Generation ---

    def iter_generate(self, rows, cols, seed=None):
        """Builds a new maze, yielding a snapshot after every carving step."""
        grid = Grid(rows, cols)
        self.rng = random.Random(seed)
        self._grid = None
        self._layout = None
        self._agents = []
        self._active = 0
        self._ticks = 0

        generator = Generator(grid, rng=self.rng)
        yield self._generation_snapshot(grid, 0)
        count = 0
        while generator.step():
            count += 1
            yield self._generation_snapshot(grid, count)

        self._grid = grid
        self._layout = grid.layout()
        logger.debug("generated %dx%d maze with seed %r", rows, cols, seed)

    def generate(self, rows, cols, seed=None):
        for _ in self.iter_generate(rows, cols, seed):
            pass
        return self._grid

    def _generation_snapshot(self, grid, count):
        return Snapshot(
            tick=count,
            phase="generating",
            rows=grid.rows,
            cols=grid.cols,
            walls=grid.layout(),
            carved=grid.carved,
            agents=(),
            done=False,
        )

    # --- Agents ---

    def spawn_agents(self, n, start=(0, 0), goal=None):
        if self._grid is None:
            raise SimulationNotReady("generate() must run before spawn_agents()")
        if n < 1:
            raise InvalidAgentCount(f"need at least one agent, got {n}")
        if goal is None:
            goal = (self._grid.rows - 1, self._grid.cols - 1)
        for name, cell in (("start", start), ("goal", goal)):
            if not self._grid.in_bounds(cell):
                raise OutOfBounds(f"{name} {cell} is outside the {self._grid.rows}x{self._grid.cols} grid")

        self._agents = [
            Agent(start, goal, tie_break=self.tie_break,
                  rng=random.Random(self.rng.getrandbits(64)), index=i)
            for i in range(n)
        ]
        self._active = 1 if self.release_interval else n
        self._ticks = 0
        return self.agents

    def tick(self):
        """Steps every live agent once, in index order. Returns True when all are terminal."""
        if self._grid is None or not self._agents:
            raise SimulationNotReady("generate() and spawn_agents() must run before tick()")
        if self.is_done:
            return True

        for agent in self._agents[:self._active]:
            if not agent.is_terminal:
                agent.step(self._grid)

        self._ticks += 1
        if (self.release_interval and self._active < len(self._agents)
                and self._ticks % self.release_interval == 0):
            self._active += 1
            logger.debug("released agent %d at tick %d", self._active - 1, self._ticks)

        return self.is_done

    def snapshot(self):
        if self._grid is None:
            raise SimulationNotReady("no maze has been generated yet")
        return Snapshot(
            tick=self._ticks,
            phase="solving",
            rows=self._grid.rows,
            cols=self._grid.cols,
            walls=self._layout,
            carved=self._grid.carved,
            agents=tuple(a.view(active=i < self._active) for i, a in enumerate(self._agents)),
            done=self.is_done,
        )

    def run(self, max_ticks=None):
        """Ticks until every agent is terminal, yielding the snapshot after each tick."""
        while not self.is_done:
            if max_ticks is not None and self._ticks >= max_ticks:
                logger.warning("stopping after %d ticks with agents still searching", self._ticks)
                return
            self.tick()
            yield self.snapshot()
