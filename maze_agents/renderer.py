import enum
from dataclasses import dataclass

from rich.console import Console
from rich.text import Text

from .agent import AgentState
from .config import PALETTE
from .errors import TerminalTooSmall
from .grid import DELTAS


class WallStyle(enum.Enum):
    SOLID = "solid"
    CURVED = "curved"
    DOUBLE = "double"
    BOLD = "bold"
    BLOCK = "block"
    HEDGE = "hedge"


@dataclass(frozen=True)
class MazeStyle:
    outer: WallStyle
    inner: WallStyle


MAZE_STYLES = (
    MazeStyle(WallStyle.SOLID, WallStyle.SOLID),
    MazeStyle(WallStyle.BOLD, WallStyle.CURVED),
    MazeStyle(WallStyle.DOUBLE, WallStyle.DOUBLE),
    MazeStyle(WallStyle.BLOCK, WallStyle.BLOCK),
    MazeStyle(WallStyle.BLOCK, WallStyle.HEDGE),
    MazeStyle(WallStyle.HEDGE, WallStyle.HEDGE),
)

AGENT_STYLES = ("smiley", "inchworm", "turtle")

# Box-drawing characters indexed by a 4-bit mask of wall neighbours:
# N = 1, E = 2, S = 4, W = 8
BORDERS = {
    WallStyle.SOLID:  " ╵╶└╷│┌├╴┘─┴┐┤┬┼",
    WallStyle.CURVED: " ╵╶╰╷│╭├╴╯─┴╮┤┬┼",
    WallStyle.BOLD:   " ╹╺┗╻┃┏┣╸┛━┻┓┫┳╋",
    WallStyle.DOUBLE: " ║═╚║║╔╠═╝═╩╗╣╦╬",
}

HEDGE_CHARS = (
    "⡟⡪⡯⡳⡵⡵⡷⡹⡺⡻⡼⡽⡾⡿⢏⢕⢗⢜⢝⢞⢟⢮⢯⢷⢻⢽⢾⢿⣎⣏⣕⣗⣝⣞⣟⣣⣧⣪⣫⣮⣯⣳⣵⣷⣹⣺⣻⣼⣽⣾⣿"
)

HEADING_GLYPHS = {'N': '▲', 'E': '▶', 'S': '▼', 'W': '◀', None: '●'}
INCHWORM_LENGTH = 3

UNCARVED = '∎'
TRAIL = '·'
DEAD_END = '×'
GOAL = '◎'
STUCK = '✖'


def to_bitmap(cell):
    """Character position (y, x) of a cell's centre."""
    return (cell[0] * 2 + 1, cell[1] * 2 + 1)


def between(a, b):
    """Character position of the passage between two adjacent cells."""
    return (a[0] + b[0] + 1, a[1] + b[1] + 1)


# Sides tried, in order, when cutting the entrance and exit into the outer wall
ENTRANCE_SIDES = ('W', 'N', 'S', 'E')
EXIT_SIDES = ('E', 'S', 'N', 'W')


def border_gap(cell, rows, cols, sides):
    """Outer-wall position next to `cell` on the first side in `sides` that is
    on the border, or None for an interior cell."""
    row, col = cell
    on_border = {'N': row == 0, 'S': row == rows - 1, 'W': col == 0, 'E': col == cols - 1}
    by, bx = to_bitmap(cell)
    for side in sides:
        if on_border[side]:
            dy, dx = DELTAS[side]
            return (by + dy, bx + dx)
    return None


class TerminalRenderer:
    """
    Draws snapshots as text: each cell takes one character with walls and
    corners in between, so a rows x cols maze needs (2*cols+1) x (2*rows+1)
    characters. Once agents are on the board the outer wall gets an entrance
    beside their start and an exit beside their goal when those cells touch
    the border.

    render() is pure (snapshot in, rich Text out); draw() pushes the text to
    the console or to an active rich screen.
    """

    def __init__(self, console=None, maze_style=MAZE_STYLES[0], color=7, agent_style="smiley", salt=0):
        if agent_style not in AGENT_STYLES:
            raise ValueError(f"unknown agent style {agent_style!r}")
        self.console = console if console is not None else Console()
        self.maze_style = maze_style
        self.color = color
        self.agent_style = agent_style
        self.salt = salt

    @staticmethod
    def size(snapshot):
        return (snapshot.cols * 2 + 1, snapshot.rows * 2 + 1)

    def wall_bitmap(self, snapshot):
        """Set of (y, x) character positions occupied by walls."""
        bitmap = set()
        for (row, col) in snapshot.carved:
            open_dirs = snapshot.walls[row][col]
            by, bx = to_bitmap((row, col))
            for dy in (-1, 1):
                for dx in (-1, 1):
                    bitmap.add((by + dy, bx + dx))
            if 'N' not in open_dirs: bitmap.add((by - 1, bx))
            if 'S' not in open_dirs: bitmap.add((by + 1, bx))
            if 'W' not in open_dirs: bitmap.add((by, bx - 1))
            if 'E' not in open_dirs: bitmap.add((by, bx + 1))

        # Entrance beside each start and exit beside each goal
        for agent in snapshot.agents:
            if not agent.active:
                continue
            for cell, sides in ((agent.start, ENTRANCE_SIDES), (agent.goal, EXIT_SIDES)):
                gap = border_gap(cell, snapshot.rows, snapshot.cols, sides)
                if gap is not None:
                    bitmap.discard(gap)
        return bitmap

    def _wall_char(self, bitmap, y, x, width, height):
        border = y == 0 or x == 0 or y == height - 1 or x == width - 1
        style = self.maze_style.outer if border else self.maze_style.inner
        if style is WallStyle.BLOCK:
            return '█'
        if style is WallStyle.HEDGE:
            return HEDGE_CHARS[((x * 73856093) ^ (y * 19349663) ^ self.salt) % len(HEDGE_CHARS)]
        mask = 0
        if (y - 1, x) in bitmap: mask |= 1
        if (y, x + 1) in bitmap: mask |= 2
        if (y + 1, x) in bitmap: mask |= 4
        if (y, x - 1) in bitmap: mask |= 8
        return BORDERS[style][mask]

    def _agent_overlay(self, snapshot):
        overlay = {}
        agents = [a for a in snapshot.agents if a.active]

        for agent in agents:
            style = f"dim {PALETTE[(agent.index + 1) % len(PALETTE)]}"
            for cell in agent.abandoned:
                overlay[to_bitmap(cell)] = (DEAD_END, style)

        for agent in agents:
            style = PALETTE[(agent.index + 1) % len(PALETTE)]
            for i, cell in enumerate(agent.path):
                overlay[to_bitmap(cell)] = (TRAIL, style)
                if i:
                    overlay[between(agent.path[i - 1], cell)] = (TRAIL, style)

        for agent in agents:
            overlay[to_bitmap(agent.goal)] = (GOAL, f"bold {PALETTE[self.color]}")

        for agent in agents:
            style = f"bold {PALETTE[(agent.index + 1) % len(PALETTE)]}"
            if agent.state is AgentState.STUCK:
                overlay[to_bitmap(agent.position)] = (STUCK, style)
                continue
            if self.agent_style == "inchworm":
                body = agent.path[-(INCHWORM_LENGTH + 1):]
                for i, cell in enumerate(body):
                    overlay[to_bitmap(cell)] = ('o', style)
                    if i:
                        overlay[between(body[i - 1], cell)] = ('o', style)
                glyph = '●'
            elif self.agent_style == "turtle":
                glyph = HEADING_GLYPHS.get(agent.heading, '●')
            else:
                glyph = '☻'
            overlay[to_bitmap(agent.position)] = (glyph, style)
        return overlay

    def render(self, snapshot):
        width, height = self.size(snapshot)
        bitmap = self.wall_bitmap(snapshot)
        overlay = self._agent_overlay(snapshot)
        wall_style = PALETTE[self.color]
        dim_style = f"dim {PALETTE[self.color]}"

        text = Text(no_wrap=True)
        for y in range(height):
            if y:
                text.append("\n")
            for x in range(width):
                if (y, x) in overlay:
                    char, style = overlay[(y, x)]
                    text.append(char, style=style)
                elif (y, x) in bitmap:
                    text.append(self._wall_char(bitmap, y, x, width, height), style=wall_style)
                elif y % 2 and x % 2 and ((y - 1) // 2, (x - 1) // 2) not in snapshot.carved:
                    text.append(UNCARVED, style=dim_style)
                else:
                    text.append(" ")
        return text

    def draw(self, snapshot, screen=None):
        """Renders the snapshot to the terminal. Raises TerminalTooSmall if it won't fit."""
        needed = self.size(snapshot)
        available = (self.console.size.width, self.console.size.height)
        if needed[0] > available[0] or needed[1] > available[1]:
            raise TerminalTooSmall(needed, available)
        text = self.render(snapshot)
        if screen is not None:
            screen.update(text)
        else:
            self.console.print(text)
