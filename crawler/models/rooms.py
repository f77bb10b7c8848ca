"""Per-cell room rows for a dungeon level."""

from __future__ import annotations

from crawler import db
from crawler.maze.cells import EAST, NORTH, SOUTH, WEST, MazeCell


class RoomCell(db.Model):
    """One grid cell of a DungeonInstance.

    Type and walls are fixed at generation; only ``is_explored`` and
    ``is_visible`` change afterwards. The (dungeon_id, x, y) constraint keeps a
    single row per coordinate.
    """

    __tablename__ = "dungeon_room"

    id = db.Column(db.Integer, primary_key=True)
    dungeon_id = db.Column(db.Integer, db.ForeignKey("dungeon_instance.id"), nullable=False, index=True)
    x = db.Column(db.Integer, nullable=False)
    y = db.Column(db.Integer, nullable=False)
    room_type = db.Column(db.String(16), nullable=False, default="EMPTY")
    has_north_wall = db.Column(db.Boolean, nullable=False, default=True)
    has_south_wall = db.Column(db.Boolean, nullable=False, default=True)
    has_east_wall = db.Column(db.Boolean, nullable=False, default=True)
    has_west_wall = db.Column(db.Boolean, nullable=False, default=True)
    is_explored = db.Column(db.Boolean, nullable=False, default=False)
    is_visible = db.Column(db.Boolean, nullable=False, default=False)
    __table_args__ = (db.UniqueConstraint("dungeon_id", "x", "y", name="uq_dungeon_room_coord"),)

    _WALL_COLUMNS = {
        NORTH: "has_north_wall",
        SOUTH: "has_south_wall",
        EAST: "has_east_wall",
        WEST: "has_west_wall",
    }

    @classmethod
    def from_maze_cell(cls, cell: MazeCell, explored: bool = False) -> "RoomCell":
        return cls(
            x=cell.x,
            y=cell.y,
            room_type=cell.room_type,
            has_north_wall=cell.walls[NORTH],
            has_south_wall=cell.walls[SOUTH],
            has_east_wall=cell.walls[EAST],
            has_west_wall=cell.walls[WEST],
            is_explored=explored,
            is_visible=explored,
        )

    def has_wall(self, direction: str) -> bool:
        return bool(getattr(self, self._WALL_COLUMNS[direction]))

    def mark_visited(self) -> None:
        self.is_explored = True
        self.is_visible = True

    def to_dict(self):
        return {
            "x": self.x,
            "y": self.y,
            "type": self.room_type,
            "has_north_wall": self.has_north_wall,
            "has_south_wall": self.has_south_wall,
            "has_east_wall": self.has_east_wall,
            "has_west_wall": self.has_west_wall,
            "is_explored": self.is_explored,
            "is_visible": self.is_visible,
        }

    def __repr__(self):
        return f"<RoomCell dungeon={self.dungeon_id} ({self.x},{self.y}) {self.room_type}>"


__all__ = ["RoomCell"]
