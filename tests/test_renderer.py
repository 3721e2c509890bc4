import io

import pytest
from rich.console import Console

from maze_agents.agent import Agent, AgentState
from maze_agents.errors import TerminalTooSmall
from maze_agents.renderer import (
    HEDGE_CHARS,
    MAZE_STYLES,
    MazeStyle,
    TerminalRenderer,
    WallStyle,
)
from maze_agents.simulation import Simulation, Snapshot


def make_console(width=80, height=40):
    return Console(file=io.StringIO(), width=width, height=height, color_system=None)


def maze_only(sim):
    snap = sim.snapshot()
    return Snapshot(snap.tick, snap.phase, snap.rows, snap.cols, snap.walls, snap.carved, (), snap.done)


def test_one_by_one_box():
    sim = Simulation()
    sim.generate(1, 1, seed=0)
    renderer = TerminalRenderer(console=make_console())
    assert renderer.render(maze_only(sim)).plain == "┌─┐\n│ │\n└─┘"


def test_two_by_one_passage():
    sim = Simulation()
    sim.generate(1, 2, seed=0)
    renderer = TerminalRenderer(console=make_console())
    assert renderer.render(maze_only(sim)).plain == "┌───┐\n│   │\n└───┘"


def test_size_matches_bitmap():
    sim = Simulation()
    sim.generate(4, 7, seed=1)
    renderer = TerminalRenderer(console=make_console())
    lines = renderer.render(sim.snapshot()).plain.split("\n")
    assert TerminalRenderer.size(sim.snapshot()) == (15, 9)
    assert len(lines) == 9
    assert all(len(line) == 15 for line in lines)


def test_uncarved_cells_are_dimmed_during_generation():
    sim = Simulation()
    first = next(sim.iter_generate(2, 2, seed=0))
    text = TerminalRenderer(console=make_console()).render(first).plain
    assert text.count("∎") == 3


def solving_snapshot(grid, *agents, tick=0):
    return Snapshot(tick, "solving", grid.rows, grid.cols, grid.layout(), grid.carved,
                    tuple(a.view() for a in agents), False)


def test_agents_and_trails(branchy_grid):
    agent = Agent((0, 0), (2, 2))
    for _ in range(5):
        agent.step(branchy_grid)

    snap = solving_snapshot(branchy_grid, agent, tick=5)
    lines = TerminalRenderer(console=make_console()).render(snap).plain.split("\n")
    # agent stands on (1, 0), trail back to (0, 0), dead ends at (0, 1) and (0, 2)
    assert lines[3][1] == "☻"
    assert lines[1][1] == "·"
    assert lines[2][1] == "·"
    assert lines[1][3] == "×"
    assert lines[1][5] == "×"
    assert lines[5][5] == "◎"
    # entrance west of (0, 0), exit east of (2, 2)
    assert lines[1][0] == " "
    assert lines[5][6] == " "
    assert lines[6][6] == "╴"


def test_entrance_and_exit_gaps():
    sim = Simulation()
    sim.generate(1, 2, seed=0)
    sim.spawn_agents(1, start=(0, 0), goal=(0, 1))
    renderer = TerminalRenderer(console=make_console())
    assert renderer.render(sim.snapshot()).plain == "╶───╴\n ☻ ◎ \n╶───╴"


def test_interior_start_and_goal_keep_border_closed():
    sim = Simulation()
    sim.generate(3, 3, seed=0)
    sim.spawn_agents(1, start=(1, 1), goal=(1, 1))
    lines = TerminalRenderer(console=make_console()).render(sim.snapshot()).plain.split("\n")
    assert " " not in lines[0] + lines[-1]
    assert all(line[0] != " " and line[-1] != " " for line in lines)


def test_turtle_shows_heading():
    sim = Simulation()
    sim.generate(5, 5, seed=2)
    sim.spawn_agents(1)
    sim.tick()
    snap = sim.snapshot()
    agent = snap.agents[0]
    lines = TerminalRenderer(console=make_console(), agent_style="turtle").render(snap).plain.split("\n")
    glyph = {"N": "▲", "E": "▶", "S": "▼", "W": "◀"}[agent.heading]
    assert lines[agent.position[0] * 2 + 1][agent.position[1] * 2 + 1] == glyph


def test_stuck_agent_marker():
    sim = Simulation()
    sim.generate(2, 2, seed=0)
    sim.spawn_agents(1)
    snap = sim.snapshot()
    agent = Agent((0, 0), (1, 1))
    agent.path.clear()
    agent.state = AgentState.STUCK
    stuck = Snapshot(snap.tick, snap.phase, snap.rows, snap.cols, snap.walls, snap.carved,
                     (agent.view(),), snap.done)
    lines = TerminalRenderer(console=make_console()).render(stuck).plain.split("\n")
    assert lines[1][1] == "✖"


def test_inactive_agents_are_hidden():
    sim = Simulation(release_interval=10)
    sim.generate(3, 3, seed=0)
    sim.spawn_agents(2, start=(1, 1))
    text = TerminalRenderer(console=make_console()).render(sim.snapshot())
    assert text.plain.count("☻") == 1


@pytest.mark.parametrize("style", MAZE_STYLES)
def test_every_style_renders(style):
    sim = Simulation()
    sim.generate(4, 4, seed=3)
    sim.spawn_agents(2)
    renderer = TerminalRenderer(console=make_console(), maze_style=style, agent_style="inchworm")
    text = renderer.render(sim.snapshot()).plain
    assert len(text.split("\n")) == 9


def test_block_and_hedge_walls():
    sim = Simulation()
    sim.generate(1, 1, seed=0)
    block = TerminalRenderer(console=make_console(), maze_style=MazeStyle(WallStyle.BLOCK, WallStyle.BLOCK))
    assert block.render(maze_only(sim)).plain == "███\n█ █\n███"
    hedge = TerminalRenderer(console=make_console(), maze_style=MazeStyle(WallStyle.HEDGE, WallStyle.HEDGE))
    walls = hedge.render(maze_only(sim)).plain.replace("\n", "").replace(" ", "")
    assert len(walls) == 8
    assert all(ch in HEDGE_CHARS for ch in walls)


def test_unknown_agent_style():
    with pytest.raises(ValueError):
        TerminalRenderer(console=make_console(), agent_style="snail")


def test_draw_prints_to_console():
    console = make_console()
    sim = Simulation()
    sim.generate(2, 2, seed=0)
    TerminalRenderer(console=console).draw(maze_only(sim))
    assert console.file.getvalue().count("\n") >= 5


def test_draw_updates_screen():
    class FakeScreen:
        def __init__(self):
            self.frames = []

        def update(self, renderable):
            self.frames.append(renderable)

    screen = FakeScreen()
    sim = Simulation()
    sim.generate(2, 2, seed=0)
    TerminalRenderer(console=make_console()).draw(sim.snapshot(), screen)
    assert len(screen.frames) == 1


def test_draw_terminal_too_small():
    sim = Simulation()
    sim.generate(10, 10, seed=0)
    renderer = TerminalRenderer(console=make_console(width=15, height=15))
    with pytest.raises(TerminalTooSmall) as exc:
        renderer.draw(sim.snapshot())
    assert exc.value.needed == (21, 21)
