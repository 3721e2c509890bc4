"""Exceptions raised by the maze core and its terminal front end."""


class MazeError(Exception):
    """Base class for every error raised by this package."""


class InvalidDimensions(MazeError, ValueError):
    """Grid requested with zero or negative rows/cols."""


class NotAdjacent(MazeError, ValueError):
    """A wall pair was requested between cells that do not touch."""


class InvalidAgentCount(MazeError, ValueError):
    """spawn_agents() asked for fewer than one agent."""


class OutOfBounds(MazeError, ValueError):
    """A cell (start, goal, query) lies outside the grid."""


class SimulationNotReady(MazeError):
    """Agents were spawned or ticked before a maze was generated."""


class TerminalTooSmall(MazeError):
    """The console cannot fit the rendered maze."""

    def __init__(self, needed, available):
        self.needed = needed
        self.available = available
        super().__init__(
            f"terminal is {available[0]}x{available[1]}, maze needs {needed[0]}x{needed[1]}"
        )


class GridFrozen(MazeError):
    """A wall or carve mark was changed after generation finished."""
