from collections import deque

import pytest

from maze_agents.grid import Grid


class FirstChoice:
    """Stand-in RNG that always picks the first candidate, so mazes can be traced by hand."""

    def choice(self, seq):
        return seq[0]


def _flood_fill(grid, start=(0, 0)):
    seen = {start}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        for nxt in grid.open_neighbors(cell):
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen


def _build_grid(rows, cols, passages):
    grid = Grid(rows, cols)
    for a, b in passages:
        grid.open_between(a, b)
    for cell in grid.cells():
        grid.mark_carved(cell)
    grid.freeze()
    return grid


# 3x3 tree with two dead-end branches hanging off the route from (0,0) to (2,2):
#
#   (0,0)-(0,1)-(0,2)
#     |
#   (1,0)  (1,1)-(1,2)
#     |      |
#   (2,0)-(2,1)-(2,2)
BRANCHY_PASSAGES = [
    ((0, 0), (0, 1)),
    ((0, 1), (0, 2)),
    ((0, 0), (1, 0)),
    ((1, 0), (2, 0)),
    ((2, 0), (2, 1)),
    ((2, 1), (2, 2)),
    ((2, 1), (1, 1)),
    ((1, 1), (1, 2)),
]


@pytest.fixture
def first_choice():
    return FirstChoice()


@pytest.fixture
def flood_fill():
    """Set of cells reachable from `start` through open walls."""
    return _flood_fill


@pytest.fixture
def build_grid():
    """Factory for frozen hand-built grids: build_grid(rows, cols, passages)."""
    return _build_grid


@pytest.fixture
def branchy_grid():
    return _build_grid(3, 3, BRANCHY_PASSAGES)
