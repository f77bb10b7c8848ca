"""Persistence boundary for generated dungeon levels.

``DungeonLevelStore`` is the only place that reads or writes
``DungeonInstance`` / ``RoomCell`` rows. A level is written as one unit: the
instance row and its full room set share a transaction, so a reader never
observes a dungeon without all of its rooms.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from crawler import db
from crawler.errors import NotFoundError, PersistenceError, ValidationError
from crawler.logging_utils import get_logger
from crawler.models import DungeonInstance, RoomCell

log = get_logger("crawler.level_store")


class DungeonLevelStore:
    def create(self, dungeon: DungeonInstance, cells: Iterable[RoomCell], commit: bool = True) -> DungeonInstance:
        """Persist ``dungeon`` and every cell in a single commit.

        Raises ValidationError when a cell lies outside the declared bounds,
        repeats a coordinate, or the set does not cover the whole grid.
        Any database failure is rolled back and raised as PersistenceError.
        With ``commit=False`` the rows are only flushed and the caller owns the
        transaction (see ``commit``).
        """
        cells = list(cells)
        seen = set()
        for cell in cells:
            if not dungeon.contains(cell.x, cell.y):
                raise ValidationError(
                    "Room lies outside the dungeon bounds",
                    x=cell.x,
                    y=cell.y,
                    width=dungeon.width,
                    height=dungeon.height,
                )
            if (cell.x, cell.y) in seen:
                raise ValidationError("Duplicate room coordinate", x=cell.x, y=cell.y)
            seen.add((cell.x, cell.y))
        expected = dungeon.width * dungeon.height
        if len(seen) != expected:
            raise ValidationError("Incomplete room set", expected=expected, received=len(seen))

        try:
            db.session.add(dungeon)
            db.session.flush()  # assigns dungeon.id for the room rows
            for cell in cells:
                cell.dungeon_id = dungeon.id
            db.session.add_all(cells)
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except SQLAlchemyError as exc:
            db.session.rollback()
            log.error(
                event="level_write_failed",
                character_id=dungeon.character_id,
                depth=dungeon.level,
                error=type(exc).__name__,
            )
            raise PersistenceError(
                "Failed to persist dungeon level",
                character_id=dungeon.character_id,
                depth=dungeon.level,
            ) from exc
        return dungeon

    def get_dungeon(self, dungeon_id: int) -> DungeonInstance:
        dungeon = db.session.get(DungeonInstance, dungeon_id)
        if dungeon is None:
            raise NotFoundError("Dungeon not found", dungeon_id=dungeon_id)
        return dungeon

    def get_cell(self, dungeon_id: int, x: int, y: int) -> RoomCell:
        """Return the room at (x, y); NotFoundError when the dungeon or coordinate is unknown."""
        self.get_dungeon(dungeon_id)
        cell = RoomCell.query.filter_by(dungeon_id=dungeon_id, x=x, y=y).first()
        if cell is None:
            raise NotFoundError("Room not found", dungeon_id=dungeon_id, x=x, y=y)
        return cell

    def list_cells(self, dungeon_id: int) -> List[RoomCell]:
        return (
            RoomCell.query.filter_by(dungeon_id=dungeon_id)
            .order_by(RoomCell.y.asc(), RoomCell.x.asc())
            .all()
        )

    def mark_visited(self, dungeon_id: int, x: int, y: int, commit: bool = True) -> RoomCell:
        """Flag the room explored and visible. Safe to repeat."""
        cell = self.get_cell(dungeon_id, x, y)
        cell.mark_visited()
        if commit:
            self.commit(dungeon_id=dungeon_id, x=x, y=y)
        return cell

    def find_by_character_and_level(self, character_id: int, level: int) -> Optional[DungeonInstance]:
        """Most recently created instance for ``character_id`` at ``level`` (highest id wins ties)."""
        return (
            DungeonInstance.query.filter_by(character_id=character_id, level=level)
            .order_by(DungeonInstance.created_at.desc(), DungeonInstance.id.desc())
            .first()
        )

    def commit(self, **context) -> None:
        """Commit pending position/exploration changes as one unit."""
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            log.error(event="commit_failed", error=type(exc).__name__, **context)
            raise PersistenceError("Failed to save changes", **context) from exc


__all__ = ["DungeonLevelStore"]
