"""
project: Dungeon Crawler
module: models.py
License: MIT

Character record consumed by the dungeon engine.

Notes:
- Stats, skills, inventory and the village live with external services; the
  engine only needs existence plus the position triple
  (current_dungeon_id, current_room_x, current_room_y).
- ``current_dungeon_id`` is a plain indexed integer rather than a foreign key
  so the character and dungeon tables never reference each other in a cycle.
"""

import datetime

from crawler import db

RACES = ("HUMAN", "DWARF", "ELF", "HALFLING")
CHARACTER_CLASSES = ("WARRIOR", "ROGUE", "MAGE", "CLERIC", "RANGER")


class Character(db.Model):
    """A playable character.

    Attributes:
        name: Display name
        race: One of RACES
        character_class: One of CHARACTER_CLASSES
        current_dungeon_id: DungeonInstance the character stands in, or None on the surface
        current_room_x / current_room_y: Grid coordinate inside that dungeon
    """

    __tablename__ = "character"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), nullable=False)
    race = db.Column(db.String(20), nullable=False, default="HUMAN")
    character_class = db.Column(db.String(20), nullable=False, default="WARRIOR")
    level = db.Column(db.Integer, nullable=False, default=1)
    current_dungeon_id = db.Column(db.Integer, nullable=True, index=True)
    current_room_x = db.Column(db.Integer, nullable=True)
    current_room_y = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)

    @property
    def in_dungeon(self) -> bool:
        return self.current_dungeon_id is not None

    def position(self):
        """Return (x, y) inside the current dungeon; unset coordinates read as 0."""
        return (self.current_room_x or 0, self.current_room_y or 0)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "race": self.race,
            "class": self.character_class,
            "level": self.level,
            "current_dungeon_id": self.current_dungeon_id,
            "current_room_x": self.current_room_x,
            "current_room_y": self.current_room_y,
        }

    def __repr__(self):
        return f"<Character {self.id} {self.name!r}>"
