"""Perfect-maze carving by randomized depth-first search (recursive backtracker).

The walk starts at (0,0), repeatedly steps to a random unvisited neighbour of
the cell on top of the stack, knocking down the wall between them, and
backtracks when the top cell has no unvisited neighbours left. Every cell is
visited exactly once, so the carved passages form a spanning tree:
``width * height - 1`` passages, no loops, every cell reachable.
"""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from crawler.errors import ValidationError

from .cells import DIRECTION_DELTAS, OPPOSITE, Grid, MazeCell

MIN_DIMENSION = 2


def _validate_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Dungeon {name} must be an integer", **{name: value})
    if value < MIN_DIMENSION:
        raise ValidationError(f"Dungeon {name} must be at least {MIN_DIMENSION}", **{name: value})
    return value


def init_grid(width: int, height: int) -> Grid:
    return [[MazeCell(x, y) for y in range(height)] for x in range(width)]


def unvisited_neighbors(grid: Grid, x: int, y: int) -> List[Tuple[str, int, int]]:
    """Return (direction, nx, ny) for in-bounds unvisited neighbours in N, S, E, W order."""
    width, height = len(grid), len(grid[0])
    out = []
    for direction, (dx, dy) in DIRECTION_DELTAS.items():
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height and not grid[nx][ny].visited:
            out.append((direction, nx, ny))
    return out


def remove_wall(grid: Grid, x: int, y: int, direction: str) -> None:
    """Open the wall on ``direction`` of (x,y) and the matching wall of its neighbour."""
    dx, dy = DIRECTION_DELTAS[direction]
    grid[x][y].walls[direction] = False
    grid[x + dx][y + dy].walls[OPPOSITE[direction]] = False


def carve(width: int, height: int, rng: Optional[random.Random] = None) -> Grid:
    """Carve a perfect maze over a ``width`` x ``height`` grid.

    Raises ValidationError when either dimension is not an integer >= 2.
    """
    width = _validate_dimension("width", width)
    height = _validate_dimension("height", height)
    rng = rng or random.Random()
    grid = init_grid(width, height)
    grid[0][0].visited = True
    stack = [(0, 0)]
    while stack:
        cx, cy = stack[-1]
        options = unvisited_neighbors(grid, cx, cy)
        if not options:
            stack.pop()
            continue
        direction, nx, ny = rng.choice(options)
        remove_wall(grid, cx, cy, direction)
        grid[nx][ny].visited = True
        stack.append((nx, ny))
    return grid
