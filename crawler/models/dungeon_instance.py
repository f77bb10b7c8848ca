import datetime

from crawler import db


class DungeonInstance(db.Model):
    """One generated dungeon level owned by a character.

    Rows are written once at generation time. ``parent_id`` links a level to the
    instance the character descended from so ascending returns to that exact
    level; ``exit_x``/``exit_y`` record where the EXIT was placed.
    """

    __tablename__ = "dungeon_instance"

    id = db.Column(db.Integer, primary_key=True)
    character_id = db.Column(db.Integer, db.ForeignKey("character.id"), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    level = db.Column(db.Integer, nullable=False, default=1, index=True)
    difficulty = db.Column(db.Integer, nullable=False, default=1)
    width = db.Column(db.Integer, nullable=False)
    height = db.Column(db.Integer, nullable=False)
    seed = db.Column(db.BigInteger, nullable=False)
    parent_id = db.Column(db.Integer, db.ForeignKey("dungeon_instance.id"), nullable=True)
    exit_x = db.Column(db.Integer, nullable=False)
    exit_y = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, nullable=False)
    # Structural tallies and phase timings captured by the generation pipeline
    generation_metrics = db.Column(db.JSON, default=dict)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def exit_position(self):
        return (self.exit_x, self.exit_y)

    def to_dict(self):
        return {
            "id": self.id,
            "character_id": self.character_id,
            "name": self.name,
            "level": self.level,
            "difficulty": self.difficulty,
            "width": self.width,
            "height": self.height,
            "seed": self.seed,
            "parent_id": self.parent_id,
            "exit": [self.exit_x, self.exit_y],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<DungeonInstance {self.id} character={self.character_id} level={self.level}>"
