from .errors import GridFrozen, InvalidDimensions, NotAdjacent, OutOfBounds

# Directions in the fixed priority order used everywhere: N, E, S, W.
# Cells are (row, col); row 0 is the top of the maze.
DIRECTIONS = ('N', 'E', 'S', 'W')
DELTAS = {'N': (-1, 0), 'E': (0, 1), 'S': (1, 0), 'W': (0, -1)}
OPPOSITE = {'N': 'S', 'E': 'W', 'S': 'N', 'W': 'E'}


def step_cell(cell, direction):
    """Returns the cell one move away from `cell` in `direction` (no bounds check)."""
    dr, dc = DELTAS[direction]
    return (cell[0] + dr, cell[1] + dc)


def direction_between(a, b):
    """Returns the direction leading from a to b, or None if they do not touch."""
    for direction in DIRECTIONS:
        if step_cell(a, direction) == b:
            return direction
    return None


class Grid:
    """
    Rectangular maze of cells with four walls each.

    Maze Representation:
      - self._walls maps every cell (row, col) to the set of directions
        {'N', 'E', 'S', 'W'} whose wall has been knocked down.
      - A new grid has empty sets everywhere (fully walled).
      - Walls are only ever opened in pairs (the cell's side and the
        neighbour's opposite side), so the layout stays symmetric.
      - freeze() locks the layout once generation is over; later calls to
        open_between() or mark_carved() raise GridFrozen.

    The grid has no randomness of its own; generators decide the order in
    which passages are carved.
    """

    def __init__(self, rows, cols):
        if rows <= 0 or cols <= 0:
            raise InvalidDimensions(f"grid must be at least 1x1, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self._walls = {(r, c): set() for r in range(rows) for c in range(cols)}
        # Generation-only marking; solvers keep their own visited sets.
        self._carved = set()
        self._frozen = False

    def __repr__(self):
        return f"Grid({self.rows}x{self.cols}, passages={self.passage_count()})"

    def cells(self):
        return [(r, c) for r in range(self.rows) for c in range(self.cols)]

    def in_bounds(self, cell):
        row, col = cell
        return 0 <= row < self.rows and 0 <= col < self.cols

    def _check(self, cell):
        if not self.in_bounds(cell):
            raise OutOfBounds(f"cell {cell} is outside the {self.rows}x{self.cols} grid")

    def neighbors(self, cell):
        """Grid-adjacent cells in N, E, S, W order, ignoring walls."""
        self._check(cell)
        result = []
        for direction in DIRECTIONS:
            nxt = step_cell(cell, direction)
            if self.in_bounds(nxt):
                result.append(nxt)
        return result

    def is_open(self, cell, direction):
        if direction not in DELTAS:
            raise ValueError(f"unknown direction {direction!r}")
        self._check(cell)
        return direction in self._walls[cell]

    def open_directions(self, cell):
        self._check(cell)
        return frozenset(self._walls[cell])

    def open_neighbors(self, cell):
        """Cells reachable from `cell` through an open wall, in N, E, S, W order."""
        self._check(cell)
        return [step_cell(cell, d) for d in DIRECTIONS if d in self._walls[cell]]

    @property
    def frozen(self):
        return self._frozen

    def freeze(self):
        self._frozen = True

    def _check_writable(self):
        if self._frozen:
            raise GridFrozen(f"{self!r} is frozen; generate a new maze instead")

    def open_between(self, a, b):
        """Knocks down the wall shared by a and b (both sides at once)."""
        self._check_writable()
        self._check(a)
        self._check(b)
        direction = direction_between(a, b)
        if direction is None:
            raise NotAdjacent(f"cells {a} and {b} are not adjacent")
        self._walls[a].add(direction)
        self._walls[b].add(OPPOSITE[direction])

    def mark_carved(self, cell):
        self._check_writable()
        self._check(cell)
        self._carved.add(cell)

    @property
    def carved(self):
        return frozenset(self._carved)

    def is_carved(self, cell):
        return cell in self._carved

    def passages(self):
        """Every open edge once, as sorted (a, b) pairs with a < b."""
        found = []
        for cell in self.cells():
            # Only look S and E so each passage is reported once
            for direction in ('E', 'S'):
                if direction in self._walls[cell]:
                    found.append((cell, step_cell(cell, direction)))
        return sorted(found)

    def passage_count(self):
        return sum(len(open_dirs) for open_dirs in self._walls.values()) // 2

    def layout(self):
        """Immutable wall layout: rows x cols tuple of frozensets of open directions."""
        return tuple(
            tuple(frozenset(self._walls[(r, c)]) for c in range(self.cols))
            for r in range(self.rows)
        )
