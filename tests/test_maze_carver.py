import random

import pytest

from crawler.errors import ValidationError
from crawler.maze import EAST, NORTH, SOUTH, WEST, carve
from crawler.maze.carver import init_grid, remove_wall, unvisited_neighbors
from tests.maze_test_utils import grid_neighbors, open_edges, reachable, wall_mismatches

SIZES = [(2, 2), (2, 9), (7, 3), (10, 10), (20, 20)]


@pytest.mark.parametrize("width,height", SIZES)
def test_carved_maze_is_perfect(width, height):
    for seed in range(5):
        grid = carve(width, height, random.Random(seed))
        assert len(grid) == width and len(grid[0]) == height
        # connected
        assert len(reachable((0, 0), grid_neighbors(grid))) == width * height
        # acyclic: a spanning tree has exactly cells - 1 edges
        assert open_edges(grid) == width * height - 1
        assert wall_mismatches(grid) == []


def test_outer_boundary_stays_closed():
    grid = carve(6, 4, random.Random(3))
    for x in range(6):
        assert grid[x][0].walls[NORTH]
        assert grid[x][3].walls[SOUTH]
    for y in range(4):
        assert grid[0][y].walls[WEST]
        assert grid[5][y].walls[EAST]


def test_same_seed_same_walls():
    a = carve(12, 8, random.Random(2024))
    b = carve(12, 8, random.Random(2024))
    assert [[c.walls for c in col] for col in a] == [[c.walls for c in col] for col in b]


def test_every_cell_visited():
    grid = carve(5, 5, random.Random(11))
    assert all(cell.visited for column in grid for cell in column)


class FirstChoice(random.Random):
    """Always picks the first candidate so the walk is fully predictable."""

    def choice(self, seq):
        return seq[0]


def test_neighbour_candidates_follow_north_south_east_west_order():
    grid = init_grid(3, 3)
    assert [d for d, _, _ in unvisited_neighbors(grid, 1, 1)] == [NORTH, SOUTH, EAST, WEST]
    # corner: north and west are out of bounds
    assert unvisited_neighbors(grid, 0, 0) == [(SOUTH, 0, 1), (EAST, 1, 0)]


def test_injected_rng_drives_the_walk():
    grid = carve(2, 2, FirstChoice())
    # (0,0) -> south (0,1) -> east (1,1) -> north (1,0)
    assert grid[0][0].walls[SOUTH] is False
    assert grid[0][1].walls[EAST] is False
    assert grid[1][1].walls[NORTH] is False
    assert grid[0][0].walls[EAST] is True
    assert grid[1][0].walls[WEST] is True


def test_remove_wall_updates_both_sides():
    grid = init_grid(2, 2)
    remove_wall(grid, 1, 1, NORTH)
    assert grid[1][1].walls[NORTH] is False
    assert grid[1][0].walls[SOUTH] is False
    assert grid[1][0].walls[NORTH] is True


@pytest.mark.parametrize("width,height", [(1, 5), (5, 1), (0, 0), (-3, 4), (2.5, 3), (True, 3), ("4", 4)])
def test_invalid_dimensions_rejected(width, height):
    with pytest.raises(ValidationError):
        carve(width, height, random.Random(1))
