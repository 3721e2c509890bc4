from .agent import Agent, AgentState, AgentView, TieBreak
from .errors import (
    GridFrozen,
    InvalidAgentCount,
    InvalidDimensions,
    MazeError,
    NotAdjacent,
    OutOfBounds,
    SimulationNotReady,
    TerminalTooSmall,
)
from .generator import Generator, generate
from .grid import DIRECTIONS, Grid
from .simulation import Simulation, Snapshot

__version__ = "0.1.0"
