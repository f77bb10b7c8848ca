"""Structural checks over a carved grid: flood fill, passage count, wall symmetry."""
from __future__ import annotations

from collections import deque
from typing import List, Set, Tuple

from .cells import DIRECTION_DELTAS, EAST, OPPOSITE, SOUTH, Coord2D, Grid


def reachable_from(grid: Grid, start: Coord2D = (0, 0)) -> Set[Coord2D]:
    """Flood fill through open walls starting at ``start``."""
    width, height = len(grid), len(grid[0])
    q = deque([start])
    visited = {start}
    while q:
        cx, cy = q.popleft()
        cell = grid[cx][cy]
        for direction, (dx, dy) in DIRECTION_DELTAS.items():
            if cell.walls[direction]:
                continue
            nx, ny = cx + dx, cy + dy
            if 0 <= nx < width and 0 <= ny < height and (nx, ny) not in visited:
                visited.add((nx, ny))
                q.append((nx, ny))
    return visited


def count_passages(grid: Grid) -> int:
    """Number of open walls between adjacent cells (each shared wall counted once)."""
    width, height = len(grid), len(grid[0])
    total = 0
    for x in range(width):
        for y in range(height):
            if x + 1 < width and not grid[x][y].walls[EAST]:
                total += 1
            if y + 1 < height and not grid[x][y].walls[SOUTH]:
                total += 1
    return total


def asymmetric_walls(grid: Grid) -> List[Tuple[Coord2D, str]]:
    """Return (cell, direction) pairs whose neighbour disagrees about the shared wall."""
    width, height = len(grid), len(grid[0])
    bad = []
    for x in range(width):
        for y in range(height):
            for direction, (dx, dy) in DIRECTION_DELTAS.items():
                nx, ny = x + dx, y + dy
                if not (0 <= nx < width and 0 <= ny < height):
                    continue
                if grid[x][y].walls[direction] != grid[nx][ny].walls[OPPOSITE[direction]]:
                    bad.append(((x, y), direction))
    return bad


def is_perfect(grid: Grid) -> bool:
    """True when every cell is reachable from (0,0) and passages form a tree."""
    width, height = len(grid), len(grid[0])
    cells = width * height
    return (
        len(reachable_from(grid)) == cells
        and count_passages(grid) == cells - 1
        and not asymmetric_walls(grid)
    )
