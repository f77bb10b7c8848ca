"""Level generation pipeline: carve, classify, measure.

``generate_maze`` is the single entry point used by the navigation service
and the CLI preview. It owns the random generator for one level, so a level
is fully reproducible from ``(width, height, difficulty, seed)``.
"""
from __future__ import annotations

import os
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional

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
    SOUTH,
    TRAP,
    TREASURE,
    WEST,
    Coord2D,
    Grid,
    MazeCell,
)
from .classifier import classify
from .connectivity import count_passages, is_perfect, reachable_from
from .metrics import init_metrics, record_structure

GLYPHS = {
    EMPTY: " ",
    COMBAT: "C",
    TREASURE: "T",
    MERCHANT: "M",
    TRAP: "!",
    BOSS: "B",
    ENTRANCE: "E",
    EXIT: "X",
}


@dataclass
class GeneratedMaze:
    width: int
    height: int
    difficulty: int
    seed: int
    grid: Grid
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def entrance(self) -> Coord2D:
        return (0, 0)

    @property
    def exit(self) -> Coord2D:
        return (self.width - 1, self.height - 1)

    def cell(self, x: int, y: int) -> MazeCell:
        return self.grid[x][y]

    def cells(self) -> Iterator[MazeCell]:
        """Yield cells row by row (y, then x)."""
        for y in range(self.height):
            for x in range(self.width):
                yield self.grid[x][y]

    def render_ascii(self) -> str:
        lines = ["+" + "".join(("---" if self.grid[x][0].walls[NORTH] else "   ") + "+" for x in range(self.width))]
        for y in range(self.height):
            row = "|" if self.grid[0][y].walls[WEST] else " "
            for x in range(self.width):
                cell = self.grid[x][y]
                row += f" {GLYPHS.get(cell.room_type, '?')} " + ("|" if cell.walls[EAST] else " ")
            lines.append(row)
            lines.append(
                "+" + "".join(("---" if self.grid[x][y].walls[SOUTH] else "   ") + "+" for x in range(self.width))
            )
        return "\n".join(lines)


def _metrics_enabled(explicit: Optional[bool]) -> bool:
    if explicit is not None:
        return explicit
    # Flask app config wins over the environment when a request/app context is active
    from flask import current_app, has_app_context

    if has_app_context():
        return bool(current_app.config.get("DUNGEON_ENABLE_GENERATION_METRICS", True))
    return os.getenv("DUNGEON_ENABLE_GENERATION_METRICS", "1").lower() not in {"0", "false", "no", ""}


def generate_maze(
    width: int,
    height: int,
    difficulty: int,
    seed: Optional[int] = None,
    enable_metrics: Optional[bool] = None,
) -> GeneratedMaze:
    """Carve and classify one level.

    ``seed=None`` draws a fresh seed; the chosen value is kept on the result so
    the level can be regenerated for debugging. When metrics are enabled the
    result carries structural tallies plus per-phase timings in milliseconds.
    """
    if seed is None:
        seed = random.randint(1, 1_000_000)
    rng = random.Random(seed)
    with_metrics = _metrics_enabled(enable_metrics)
    phase_ms: Dict[str, float] = {}

    def _phase(label, fn, *a, **k):
        ps = time.perf_counter()
        r = fn(*a, **k)
        phase_ms[label] = round((time.perf_counter() - ps) * 1000, 3)
        return r

    start = time.perf_counter()
    grid = _phase("carve", carve, width, height, rng)
    _phase("classify", classify, grid, difficulty, rng)
    maze = GeneratedMaze(width=width, height=height, difficulty=difficulty, seed=seed, grid=grid)
    if with_metrics:
        metrics = init_metrics()
        record_structure(metrics, grid)
        metrics["passages"] = count_passages(grid)
        metrics["reachable"] = len(reachable_from(grid))
        metrics["perfect"] = is_perfect(grid)
        metrics["phase_ms"] = phase_ms
        metrics["runtime_ms"] = round((time.perf_counter() - start) * 1000, 3)
        maze.metrics = metrics
    return maze
