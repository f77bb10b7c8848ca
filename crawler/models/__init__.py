# Model package init
from .dungeon_instance import DungeonInstance  # noqa: F401 re-export
from .models import CHARACTER_CLASSES, RACES, Character  # noqa: F401 re-export
from .rooms import RoomCell  # noqa: F401 re-export

__all__ = [
    "Character",
    "CHARACTER_CLASSES",
    "DungeonInstance",
    "RACES",
    "RoomCell",
]
