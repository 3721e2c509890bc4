import argparse
import logging
import random
import time

from rich.console import Console
from rich.logging import RichHandler

from .agent import TieBreak
from .config import (
    DEFAULT_AGENTS,
    DEFAULT_RELEASE_INTERVAL,
    DEFAULT_WAIT_MS,
    PALETTE,
    RunConfig,
    validate_color,
)
from .errors import InvalidAgentCount, InvalidDimensions, MazeError
from .renderer import AGENT_STYLES, MAZE_STYLES, TerminalRenderer
from .simulation import Simulation

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="maze-agents",
        description="Generates a maze and animates agents solving it with depth-first search.",
    )
    parser.add_argument("--rows", type=int, default=None, help="Maze rows (default: fit the terminal)")
    parser.add_argument("--cols", type=int, default=None, help="Maze columns (default: fit the terminal)")
    parser.add_argument("-n", "--agents", type=int, default=DEFAULT_AGENTS, help="Number of agents")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    parser.add_argument("-w", "--wait", type=int, default=DEFAULT_WAIT_MS,
                        help="Delay between frames in milliseconds (0 = as fast as possible)")
    parser.add_argument("-m", "--maze-style", type=int, default=None,
                        help=f"Maze render style 0..{len(MAZE_STYLES) - 1} (default: random)")
    parser.add_argument("-c", "--color", type=validate_color, default=None,
                        help=f"Maze wall color 0..{len(PALETTE) - 1} (default: random)")
    parser.add_argument("-a", "--agent-style", choices=AGENT_STYLES, default=None,
                        help="Agent render style (default: random)")
    parser.add_argument("--tie-break", choices=[t.value for t in TieBreak], default=TieBreak.PRIORITY.value,
                        help="How agents choose between unexplored passages")
    parser.add_argument("--release-interval", type=int, default=DEFAULT_RELEASE_INTERVAL,
                        help="Ticks between releasing agents (0 = all at once)")
    parser.add_argument("--no-build-animation", action="store_true", help="Skip animating the maze carving")
    parser.add_argument("--repeat", action="store_true", help="Start a new maze after each one is solved")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def configure_logging(level):
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def pick_renderer(config, console, rng):
    """Resolves unset style options at random, like the original doodle."""
    maze_style = config.maze_style if config.maze_style is not None else rng.randrange(len(MAZE_STYLES))
    color = config.color if config.color is not None else rng.randrange(1, len(PALETTE))
    agent_style = config.agent_style or rng.choice(AGENT_STYLES)
    return TerminalRenderer(
        console=console,
        maze_style=MAZE_STYLES[maze_style % len(MAZE_STYLES)],
        color=color,
        agent_style=agent_style,
        salt=rng.getrandbits(32),
    )


def check_setup(config, rows, cols):
    """Fails fast on bad input so nothing is animated for a run that cannot start."""
    if rows < 1 or cols < 1:
        raise InvalidDimensions(f"maze must be at least 1x1, got {rows}x{cols}")
    if config.agents < 1:
        raise InvalidAgentCount(f"need at least one agent, got {config.agents}")


def run_animation(sim, renderer, screen, config, rows, cols, seed=None, sleep=time.sleep):
    """Drives one maze from carving to solved, drawing every frame."""
    delay = max(0, config.wait_ms) / 1000

    if config.animate_build:
        for snap in sim.iter_generate(rows, cols, seed):
            renderer.draw(snap, screen)
            sleep(delay)
    else:
        sim.generate(rows, cols, seed)

    sim.spawn_agents(config.agents)
    renderer.draw(sim.snapshot(), screen)
    for snap in sim.run():
        renderer.draw(snap, screen)
        sleep(delay)
    logger.info("maze solved after %d ticks", sim.ticks)
    return sim.snapshot()


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    config = RunConfig.from_args(args)

    console = Console()
    rng = random.Random(config.seed)
    rows, cols = config.fit_to_terminal(console.size.width, console.size.height)

    try:
        check_setup(config, rows, cols)
        with console.screen(hide_cursor=True) as screen:
            seed = config.seed
            while True:
                sim = Simulation(tie_break=config.tie_break, release_interval=config.release_interval)
                renderer = pick_renderer(config, console, rng)
                run_animation(sim, renderer, screen, config, rows, cols, seed)
                if not config.repeat:
                    time.sleep(1)
                    break
                seed = rng.getrandbits(32)
    except KeyboardInterrupt:
        logger.info("interrupted")
    except MazeError as exc:
        console.print(f"[bold red]error:[/] {exc}")
        return 1
    return 0
