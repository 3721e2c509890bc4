from dataclasses import dataclass
from typing import Optional

# --- Configuration ---
DEFAULT_AGENTS = 4
DEFAULT_WAIT_MS = 60           # Delay between frames
DEFAULT_RELEASE_INTERVAL = 63  # Ticks between agent releases in the CLI
DEFAULT_MAX_TICKS = 20000      # Headless runs give up after this many ticks
MIN_ROWS = 1
MIN_COLS = 1

# --- Color Palette ---
# Index 0..7, same order as the classic 8 terminal colors (0 is grey, not black)
PALETTE = ("grey50", "red", "green", "yellow", "blue", "magenta", "cyan", "white")


def validate_color(value):
    """argparse type for palette indices."""
    try:
        color = int(value)
    except ValueError:
        color = -1
    if not 0 <= color < len(PALETTE):
        raise ValueError(f"color must be an integer between 0 and {len(PALETTE) - 1}")
    return color


@dataclass
class RunConfig:
    """Settings for one CLI session, assembled from the parsed arguments."""
    rows: Optional[int] = None
    cols: Optional[int] = None
    agents: int = DEFAULT_AGENTS
    seed: Optional[int] = None
    wait_ms: int = DEFAULT_WAIT_MS
    maze_style: Optional[int] = None
    color: Optional[int] = None
    agent_style: Optional[str] = None
    tie_break: str = "priority"
    release_interval: int = DEFAULT_RELEASE_INTERVAL
    animate_build: bool = True
    repeat: bool = False

    @classmethod
    def from_args(cls, args):
        return cls(
            rows=args.rows,
            cols=args.cols,
            agents=args.agents,
            seed=args.seed,
            wait_ms=args.wait,
            maze_style=args.maze_style,
            color=args.color,
            agent_style=args.agent_style,
            tie_break=args.tie_break,
            release_interval=args.release_interval,
            animate_build=not args.no_build_animation,
            repeat=args.repeat,
        )

    def fit_to_terminal(self, width, height):
        """Fills unset rows/cols from the terminal size (one cell per 2x2 characters)."""
        rows = self.rows if self.rows is not None else max(MIN_ROWS, height // 2 - 1)
        cols = self.cols if self.cols is not None else max(MIN_COLS, width // 2 - 1)
        return rows, cols
