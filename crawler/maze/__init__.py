"""Public maze package interface."""

from .carver import carve
from .cells import (
    BOSS,
    COMBAT,
    EAST,
    EMPTY,
    ENTRANCE,
    EXIT,
    MERCHANT,
    NORTH,
    ROOM_TYPES,
    SOUTH,
    TRAP,
    TREASURE,
    WEST,
    MazeCell,
    direction_between,
)
from .classifier import classify, room_chances
from .pipeline import GeneratedMaze, generate_maze

__all__ = [
    "carve",
    "classify",
    "room_chances",
    "generate_maze",
    "GeneratedMaze",
    "MazeCell",
    "direction_between",
    "ROOM_TYPES",
    "EMPTY",
    "COMBAT",
    "TREASURE",
    "MERCHANT",
    "BOSS",
    "ENTRANCE",
    "EXIT",
    "TRAP",
    "NORTH",
    "SOUTH",
    "EAST",
    "WEST",
]
