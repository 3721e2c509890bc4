import enum
import logging
import random
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from .grid import DIRECTIONS, direction_between, step_cell

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]


class AgentState(enum.Enum):
    EXPLORING = "exploring"
    BACKTRACKING = "backtracking"
    SOLVED = "solved"
    STUCK = "stuck"

    @property
    def is_terminal(self):
        return self in (AgentState.SOLVED, AgentState.STUCK)


class TieBreak(enum.Enum):
    """How an agent picks among several unexplored passages."""
    PRIORITY = "priority"   # fixed N, E, S, W order
    RANDOM = "random"       # rng.choice over the candidates


@dataclass(frozen=True)
class AgentView:
    """Read-only copy of one agent's state, as handed to renderers."""
    index: int
    position: Cell
    start: Cell
    goal: Cell
    state: AgentState
    path: Tuple[Cell, ...]
    visited: FrozenSet[Cell]
    abandoned: FrozenSet[Cell]
    heading: Optional[str]
    active: bool = True


class Agent:
    """
    One maze solver doing its own depth-first search with backtracking.

    State per agent (never shared with other agents or the generator):
      - position: the cell the agent stands on.
      - visited: every cell this agent has entered.
      - path: stack of cells from the start to the current position; this
        is the candidate solution.
      - abandoned: cells popped off the path (dead ends), kept only so
        renderers can tell them apart from the live path.

    Each call to step() moves exactly one cell forward or one cell back,
    which is the unit of animation. The grid is only read, never written.

    Metrics:
      - algorithm_steps: step() calls that did something (moves + backtracks).
      - forward_moves / backtracks: the split of algorithm_steps.
      - unique_explored: size of the visited set.
      - path_length: number of edges on the current path.
      - frontier_max: deepest the path stack ever got.
    """

    def __init__(self, start, goal, tie_break=TieBreak.PRIORITY, rng=None, index=0):
        self.index = index
        self.start = start
        self.goal = goal
        self.tie_break = TieBreak(tie_break)
        self.rng = rng if rng is not None else random.Random()

        self.position = start
        self.visited = {start}
        self.path = [start]
        self.abandoned = set()
        self.heading = None
        self.state = AgentState.EXPLORING

        self.metrics = {
            'algorithm_steps': 0,
            'forward_moves': 0,
            'backtracks': 0,
            'unique_explored': 1,
            'path_length': 0,
            'frontier_max': 1,
        }

        if start == goal:
            self.state = AgentState.SOLVED

    def __repr__(self):
        return f"Agent(#{self.index}, at={self.position}, state={self.state.value})"

    @property
    def is_terminal(self):
        return self.state.is_terminal

    def _candidates(self, grid):
        """Unvisited cells reachable through an open wall, in N, E, S, W order."""
        found = []
        for direction in DIRECTIONS:
            if grid.is_open(self.position, direction):
                nxt = step_cell(self.position, direction)
                if nxt not in self.visited:
                    found.append(nxt)
        return found

    def _choose(self, candidates):
        if self.tie_break is TieBreak.RANDOM:
            return self.rng.choice(candidates)
        return candidates[0]

    def step(self, grid):
        """Advances the search by one move. No-op once solved or stuck."""
        if self.is_terminal:
            return

        if self.position == self.goal:
            self.state = AgentState.SOLVED
            return

        candidates = self._candidates(grid)
        if candidates:
            nxt = self._choose(candidates)
            self.heading = direction_between(self.position, nxt)
            self.visited.add(nxt)
            self.path.append(nxt)
            self.position = nxt
            self.state = AgentState.EXPLORING
            self.metrics['forward_moves'] += 1
            if nxt == self.goal:
                self.state = AgentState.SOLVED
                logger.debug("agent %d solved the maze in %d steps",
                             self.index, self.metrics['algorithm_steps'] + 1)
        else:
            # Dead end: drop the current cell and walk back to the previous one
            self.abandoned.add(self.path.pop())
            self.metrics['backtracks'] += 1
            if not self.path:
                self.state = AgentState.STUCK
                logger.debug("agent %d is stuck at %s", self.index, self.position)
            else:
                prev = self.path[-1]
                self.heading = direction_between(self.position, prev)
                self.position = prev
                self.state = AgentState.BACKTRACKING

        self.metrics['algorithm_steps'] += 1
        self.metrics['unique_explored'] = len(self.visited)
        self.metrics['path_length'] = max(0, len(self.path) - 1)
        self.metrics['frontier_max'] = max(self.metrics['frontier_max'], len(self.path))

    def view(self, active=True):
        return AgentView(
            index=self.index,
            position=self.position,
            start=self.start,
            goal=self.goal,
            state=self.state,
            path=tuple(self.path),
            visited=frozenset(self.visited),
            abandoned=frozenset(self.abandoned),
            heading=self.heading,
            active=active,
        )
