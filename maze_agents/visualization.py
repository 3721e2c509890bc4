from collections import deque

from graphviz import Digraph


def spanning_tree(grid, root=(0, 0)):
    """Returns the maze as a graphviz Digraph rooted at `root`.

    A generated maze is a spanning tree, so a BFS over open passages gives one
    node per cell and one parent -> child edge per passage.
    """
    dot = Digraph(name="maze", comment=f"{grid.rows}x{grid.cols} maze")
    seen = {root}
    queue = deque([root])
    dot.node(str(root))
    while queue:
        parent = queue.popleft()
        for child in grid.open_neighbors(parent):
            if child in seen:
                continue
            seen.add(child)
            queue.append(child)
            dot.node(str(child))
            dot.edge(str(parent), str(child))
    return dot


def render_tree(grid, filename, root=(0, 0), view=False, format="png"):
    """Writes the spanning tree to `filename` (needs the Graphviz `dot` binary)."""
    dot = spanning_tree(grid, root)
    return dot.render(filename, view=view, format=format)
