from typing import Dict, List, Optional, Tuple

# Room types
EMPTY = "EMPTY"
COMBAT = "COMBAT"
TREASURE = "TREASURE"
MERCHANT = "MERCHANT"
BOSS = "BOSS"  # reserved, never assigned by the classifier
ENTRANCE = "ENTRANCE"
EXIT = "EXIT"
TRAP = "TRAP"

ROOM_TYPES = (EMPTY, COMBAT, TREASURE, MERCHANT, BOSS, ENTRANCE, EXIT, TRAP)

NORTH = "north"
SOUTH = "south"
EAST = "east"
WEST = "west"

# North is one row up (y - 1); the grid origin (0,0) is the top-left corner.
DIRECTION_DELTAS: Dict[str, Tuple[int, int]] = {
    NORTH: (0, -1),
    SOUTH: (0, 1),
    EAST: (1, 0),
    WEST: (-1, 0),
}
OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}


class MazeCell:
    """Lightweight container for one carved grid cell."""

    __slots__ = ("x", "y", "room_type", "walls", "visited")

    def __init__(self, x: int, y: int):
        self.x = x
        self.y = y
        self.room_type = EMPTY
        self.walls = {NORTH: True, SOUTH: True, EAST: True, WEST: True}
        self.visited = False

    @property
    def openings(self) -> int:
        return sum(1 for present in self.walls.values() if not present)

    def to_dict(self):
        return {
            "x": self.x,
            "y": self.y,
            "type": self.room_type,
            "has_north_wall": self.walls[NORTH],
            "has_south_wall": self.walls[SOUTH],
            "has_east_wall": self.walls[EAST],
            "has_west_wall": self.walls[WEST],
        }


Grid = List[List[MazeCell]]  # indexed grid[x][y]
Coord2D = Tuple[int, int]


def direction_between(x1: int, y1: int, x2: int, y2: int) -> Optional[str]:
    """Return the direction of travel from (x1,y1) to an orthogonal neighbour, else None."""
    delta = (x2 - x1, y2 - y1)
    for direction, d in DIRECTION_DELTAS.items():
        if d == delta:
            return direction
    return None
