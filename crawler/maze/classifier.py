"""Room type assignment for a carved maze.

Anchors first: (0,0) is the ENTRANCE and the far corner is the EXIT. Every
other cell gets one fresh uniform draw which is compared against cumulative
thresholds chosen by the cell's structural role:

* dead end (1 opening): TREASURE, MERCHANT, COMBAT, else EMPTY
* junction (3-4 openings): COMBAT, TRAP (+0.2), else EMPTY
* corridor (2 openings): COMBAT (half rate), TRAP (+0.1), TREASURE, else EMPTY

Deeper levels raise the combat rate and thin out treasure and merchants.
"""

from __future__ import annotations

import random
from typing import NamedTuple, Optional

from crawler.errors import ValidationError

from .cells import COMBAT, EMPTY, ENTRANCE, EXIT, MERCHANT, TRAP, TREASURE, Grid

JUNCTION_TRAP_CHANCE = 0.2
CORRIDOR_TRAP_CHANCE = 0.1


class RoomChances(NamedTuple):
    combat: float
    treasure: float
    merchant: float


def room_chances(difficulty: int) -> RoomChances:
    return RoomChances(
        combat=min(0.6, 0.2 + 0.1 * difficulty),
        treasure=max(0.15, 0.3 - 0.03 * difficulty),
        merchant=max(0.05, 0.15 - 0.02 * difficulty),
    )


def pick_room_type(openings: int, roll: float, chances: RoomChances) -> str:
    if openings == 1:
        if roll < chances.treasure:
            return TREASURE
        if roll < chances.treasure + chances.merchant:
            return MERCHANT
        if roll < chances.treasure + chances.merchant + chances.combat:
            return COMBAT
        return EMPTY
    if openings >= 3:
        if roll < chances.combat:
            return COMBAT
        if roll < chances.combat + JUNCTION_TRAP_CHANCE:
            return TRAP
        return EMPTY
    half_combat = chances.combat * 0.5
    if roll < half_combat:
        return COMBAT
    if roll < half_combat + CORRIDOR_TRAP_CHANCE:
        return TRAP
    if roll < half_combat + CORRIDOR_TRAP_CHANCE + chances.treasure:
        return TREASURE
    return EMPTY


def classify(grid: Grid, difficulty: int, rng: Optional[random.Random] = None) -> Grid:
    """Assign ``room_type`` on every cell in place and return the grid. Walls are not touched."""
    if isinstance(difficulty, bool) or not isinstance(difficulty, int) or difficulty < 1:
        raise ValidationError("Difficulty must be a positive integer", difficulty=difficulty)
    rng = rng or random.Random()
    width, height = len(grid), len(grid[0])
    chances = room_chances(difficulty)
    exit_xy = (width - 1, height - 1)
    # Row-major walk so a fixed seed yields the same layout however the grid is stored
    for y in range(height):
        for x in range(width):
            cell = grid[x][y]
            if (x, y) == (0, 0):
                cell.room_type = ENTRANCE
            elif (x, y) == exit_xy:
                cell.room_type = EXIT
            else:
                cell.room_type = pick_room_type(cell.openings, rng.random(), chances)
    return grid
