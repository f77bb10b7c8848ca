"""Character navigation through dungeon levels.

Each character is always in one state, ``AT(dungeon_id, x, y)``, or on the
surface when it has no current dungeon. ``Navigator`` owns every transition:

* generate: build a fresh level and drop the character at its ENTRANCE
* move: step to an orthogonally adjacent room through an open wall
* descend: from the EXIT, build level + 1 linked back to this one
* ascend: from the ENTRANCE, return to the parent level at its EXIT

Every operation for one character runs under that character's lock and either
fully applies or raises a ``CrawlerError`` without changing anything.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from flask import current_app

from crawler import db
from crawler.errors import BlockedPathError, NotFoundError, PersistenceError, PreconditionError, ValidationError
from crawler.logging_utils import get_logger
from crawler.maze import ENTRANCE, EXIT, direction_between, generate_maze
from crawler.models import Character, DungeonInstance, RoomCell

from .level_store import DungeonLevelStore
from .locks import character_lock
from .seeds import SQLITE_MAX_INT, SQLITE_MIN_INT

DEFAULT_NAME = "The Dark Depths - Level {level}"
MAX_NAME_LENGTH = 120
MAX_LEVEL = SQLITE_MAX_INT


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class NavigationResult:
    character: Character
    dungeon: DungeonInstance
    room: RoomCell
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "character": self.character.to_dict(),
            "dungeon": self.dungeon.to_dict(),
            "room": self.room.to_dict(),
        }
        if self.message:
            payload["message"] = self.message
        return payload


class Navigator:
    def __init__(self, store: Optional[DungeonLevelStore] = None):
        self.store = store or DungeonLevelStore()
        self.log = get_logger("crawler.navigation")

    # ------------------------------------------------------------------ lookups
    def _character(self, character_id) -> Character:
        if not _is_int(character_id):
            raise ValidationError("Character ID is required", character_id=character_id)
        character = db.session.get(Character, character_id)
        if character is None:
            raise ValidationError("Character not found", character_id=character_id)
        return character

    @contextmanager
    def _expect_present(self, **context):
        """Treat a missing dungeon/room inside a generated level as corruption."""
        try:
            yield
        except NotFoundError as exc:
            if exc.fatal:
                raise
            self.log.error(event="data_integrity", reason=exc.message, **context)
            raise NotFoundError(exc.message, fatal=True, **context) from exc

    def _active_dungeon(self, character: Character, dungeon_id=None) -> DungeonInstance:
        if not character.in_dungeon:
            raise PreconditionError("Character is not in a dungeon", character_id=character.id)
        if dungeon_id is not None and dungeon_id != character.current_dungeon_id:
            raise ValidationError(
                "Character is not in this dungeon",
                character_id=character.id,
                dungeon_id=dungeon_id,
            )
        with self._expect_present(character_id=character.id, dungeon_id=character.current_dungeon_id):
            return self.store.get_dungeon(character.current_dungeon_id)

    def _room_at(self, character: Character, dungeon: DungeonInstance, x: int, y: int) -> RoomCell:
        with self._expect_present(character_id=character.id, dungeon_id=dungeon.id, x=x, y=y):
            return self.store.get_cell(dungeon.id, x, y)

    def _current_room(self, character: Character, dungeon: DungeonInstance) -> RoomCell:
        x, y = character.position()
        return self._room_at(character, dungeon, x, y)

    @staticmethod
    def _set_position(character: Character, dungeon: DungeonInstance, x: int, y: int) -> None:
        character.current_dungeon_id = dungeon.id
        character.current_room_x = x
        character.current_room_y = y

    def _place(self, character: Character, dungeon: DungeonInstance, x: int, y: int) -> RoomCell:
        """Mark (x, y) visited and move the character there; caller commits."""
        with self._expect_present(character_id=character.id, dungeon_id=dungeon.id, x=x, y=y):
            room = self.store.mark_visited(dungeon.id, x, y, commit=False)
        self._set_position(character, dungeon, x, y)
        return room

    # --------------------------------------------------------------- generation
    def _validate_dimension(self, name: str, value) -> int:
        max_size = current_app.config.get("DUNGEON_MAX_SIZE", 100)
        if not _is_int(value) or not 2 <= value <= max_size:
            raise ValidationError(f"Dungeon {name} must be an integer between 2 and {max_size}", **{name: value})
        return value

    def _build_level(
        self,
        character: Character,
        width: int,
        height: int,
        level: int,
        name: Optional[str] = None,
        seed: Optional[int] = None,
        parent_id: Optional[int] = None,
    ) -> Tuple[DungeonInstance, RoomCell]:
        """Generate one level and enter it at the ENTRANCE.

        The level rows and the character's new position are committed together,
        so a failed write leaves neither behind. PersistenceError is retried; a
        caller-supplied seed is reused on every attempt, otherwise each attempt
        draws its own.
        """
        attempts = max(1, int(current_app.config.get("DUNGEON_GENERATION_RETRIES", 3)))
        last_error: Optional[PersistenceError] = None
        for attempt in range(1, attempts + 1):
            maze = generate_maze(width, height, level, seed=seed)
            dungeon = DungeonInstance(
                character_id=character.id,
                name=name or DEFAULT_NAME.format(level=level),
                level=level,
                difficulty=level,
                width=width,
                height=height,
                seed=maze.seed,
                parent_id=parent_id,
                exit_x=maze.exit[0],
                exit_y=maze.exit[1],
                generation_metrics=maze.metrics or None,
            )
            cells = [RoomCell.from_maze_cell(cell, explored=(cell.x, cell.y) == maze.entrance) for cell in maze.cells()]
            try:
                dungeon = self.store.create(dungeon, cells, commit=False)
                room = self._place(character, dungeon, 0, 0)
                self.store.commit(character_id=character.id, dungeon_id=dungeon.id)
            except PersistenceError as exc:
                last_error = exc
                self.log.warn(
                    event="generation_retry",
                    character_id=character.id,
                    depth=level,
                    attempt=attempt,
                    attempts=attempts,
                )
                continue
            self.log.info(
                event="dungeon_generated",
                character_id=character.id,
                dungeon_id=dungeon.id,
                depth=level,
                width=width,
                height=height,
                seed=maze.seed,
                runtime_ms=maze.metrics.get("runtime_ms") if maze.metrics else None,
            )
            return dungeon, room
        raise last_error

    def generate(self, character_id, width=None, height=None, level=1, name=None, seed=None) -> NavigationResult:
        """Create a new level for the character and place it at the ENTRANCE (0,0)."""
        cfg = current_app.config
        width = self._validate_dimension("width", cfg.get("DUNGEON_WIDTH", 20) if width is None else width)
        height = self._validate_dimension("height", cfg.get("DUNGEON_HEIGHT", 20) if height is None else height)
        if level is None:
            level = 1
        if not _is_int(level) or not 1 <= level <= MAX_LEVEL:
            raise ValidationError(f"Level must be an integer between 1 and {MAX_LEVEL}", depth=level)
        if name is not None:
            if not isinstance(name, str) or not name.strip():
                raise ValidationError("Dungeon name must be a non-empty string")
            name = name.strip()[:MAX_NAME_LENGTH]
        if seed is not None and (not _is_int(seed) or not SQLITE_MIN_INT <= seed <= SQLITE_MAX_INT):
            raise ValidationError("Seed must be a 64-bit signed integer", seed=seed)

        with character_lock(character_id):
            character = self._character(character_id)
            dungeon, room = self._build_level(character, width, height, level, name=name, seed=seed)
        return NavigationResult(character, dungeon, room, f"Entered {dungeon.name}")

    # --------------------------------------------------------------- movement
    def move(self, character_id, x, y, dungeon_id=None) -> NavigationResult:
        """Step to an adjacent room when no wall stands in between."""
        if not _is_int(x) or not _is_int(y):
            raise ValidationError("Target coordinates must be integers", x=x, y=y)
        with character_lock(character_id):
            character = self._character(character_id)
            dungeon = self._active_dungeon(character, dungeon_id)
            cx, cy = character.position()
            if abs(x - cx) + abs(y - cy) != 1:
                raise ValidationError("Can only move to adjacent rooms", character_id=character.id, x=x, y=y)
            if not dungeon.contains(x, y):
                raise ValidationError("Target room is outside the dungeon", character_id=character.id, x=x, y=y)
            current = self._current_room(character, dungeon)
            direction = direction_between(cx, cy, x, y)
            if current.has_wall(direction):
                self.log.info(
                    event="move_blocked",
                    character_id=character.id,
                    dungeon_id=dungeon.id,
                    x=cx,
                    y=cy,
                    direction=direction,
                )
                raise BlockedPathError(
                    "There is a wall blocking your path",
                    character_id=character.id,
                    dungeon_id=dungeon.id,
                    x=x,
                    y=y,
                )
            room = self._place(character, dungeon, x, y)
            self.store.commit(character_id=character.id, dungeon_id=dungeon.id, x=x, y=y)
            self.log.info(
                event="move",
                character_id=character.id,
                dungeon_id=dungeon.id,
                from_x=cx,
                from_y=cy,
                x=x,
                y=y,
            )
        return NavigationResult(character, dungeon, room, f"Moved to room ({x}, {y})")

    def current_room(self, character_id, dungeon_id=None) -> NavigationResult:
        with character_lock(character_id):
            character = self._character(character_id)
            dungeon = self._active_dungeon(character, dungeon_id)
            room = self._current_room(character, dungeon)
        return NavigationResult(character, dungeon, room)

    # ------------------------------------------------------------- transitions
    def descend(self, character_id, dungeon_id=None) -> NavigationResult:
        """From the EXIT room, generate the next level down and enter it."""
        with character_lock(character_id):
            character = self._character(character_id)
            dungeon = self._active_dungeon(character, dungeon_id)
            room = self._current_room(character, dungeon)
            if room.room_type != EXIT:
                raise PreconditionError(
                    "Must be at EXIT room to descend",
                    character_id=character.id,
                    dungeon_id=dungeon.id,
                )
            next_level = dungeon.level + 1
            if next_level > MAX_LEVEL:
                raise PreconditionError(
                    "There is no deeper level",
                    character_id=character.id,
                    dungeon_id=dungeon.id,
                )
            deeper, entrance = self._build_level(
                character, dungeon.width, dungeon.height, next_level, parent_id=dungeon.id
            )
            self.log.info(
                event="descend",
                character_id=character.id,
                from_dungeon_id=dungeon.id,
                dungeon_id=deeper.id,
                depth=next_level,
            )
        return NavigationResult(
            character,
            deeper,
            entrance,
            f"Descended to Level {next_level}! The darkness grows deeper...",
        )

    def _parent_level(self, character: Character, dungeon: DungeonInstance) -> Optional[DungeonInstance]:
        if dungeon.parent_id is not None:
            try:
                return self.store.get_dungeon(dungeon.parent_id)
            except NotFoundError:
                self.log.warn(
                    event="parent_missing",
                    character_id=character.id,
                    dungeon_id=dungeon.id,
                    parent_id=dungeon.parent_id,
                )
        # Rows without a parent link fall back to the latest level above
        return self.store.find_by_character_and_level(character.id, dungeon.level - 1)

    def ascend(self, character_id, dungeon_id=None) -> NavigationResult:
        """From the ENTRANCE room, return to the previous level's EXIT."""
        with character_lock(character_id):
            character = self._character(character_id)
            dungeon = self._active_dungeon(character, dungeon_id)
            room = self._current_room(character, dungeon)
            if room.room_type != ENTRANCE:
                raise PreconditionError(
                    "Must be at ENTRANCE room to ascend",
                    character_id=character.id,
                    dungeon_id=dungeon.id,
                )
            if dungeon.level <= 1:
                raise PreconditionError(
                    "Already at surface level - you can leave the dungeon!",
                    character_id=character.id,
                    dungeon_id=dungeon.id,
                )
            previous = self._parent_level(character, dungeon)
            if previous is None:
                raise NotFoundError(
                    "No previous level recorded",
                    character_id=character.id,
                    dungeon_id=dungeon.id,
                    depth=dungeon.level - 1,
                )
            exit_x, exit_y = previous.exit_position()
            # The level above is left as it was; only the character moves
            exit_room = self._room_at(character, previous, exit_x, exit_y)
            self._set_position(character, previous, exit_x, exit_y)
            self.store.commit(character_id=character.id, dungeon_id=previous.id)
            self.log.info(
                event="ascend",
                character_id=character.id,
                from_dungeon_id=dungeon.id,
                dungeon_id=previous.id,
                depth=previous.level,
            )
        return NavigationResult(
            character,
            previous,
            exit_room,
            f"Ascended to Level {previous.level}. The light grows brighter...",
        )


navigator = Navigator()

__all__ = ["Navigator", "NavigationResult", "navigator", "DEFAULT_NAME", "MAX_LEVEL"]
