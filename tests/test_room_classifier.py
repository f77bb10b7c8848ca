import random
from collections import Counter

import pytest

from crawler.errors import ValidationError
from crawler.maze import (
    BOSS,
    COMBAT,
    EMPTY,
    ENTRANCE,
    EXIT,
    MERCHANT,
    TRAP,
    TREASURE,
    carve,
    classify,
    room_chances,
)
from crawler.maze.classifier import pick_room_type
from tests.maze_test_utils import wall_snapshot


class FixedRoll(random.Random):
    """Returns the same roll for every draw and counts the draws."""

    def __init__(self, roll):
        super().__init__(0)
        self.roll = roll
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.roll


def test_room_chances_scale_with_difficulty():
    c1 = room_chances(1)
    assert c1.combat == pytest.approx(0.3)
    assert c1.treasure == pytest.approx(0.27)
    assert c1.merchant == pytest.approx(0.13)
    deep = room_chances(10)
    assert deep.combat == pytest.approx(0.6)
    assert deep.treasure == pytest.approx(0.15)
    assert deep.merchant == pytest.approx(0.05)


@pytest.mark.parametrize(
    "openings,roll,expected",
    [
        # dead end: treasure .27, merchant .13, combat .30
        (1, 0.0, TREASURE),
        (1, 0.26, TREASURE),
        (1, 0.30, MERCHANT),
        (1, 0.50, COMBAT),
        (1, 0.80, EMPTY),
        # junction: combat .30, trap +.20
        (3, 0.10, COMBAT),
        (3, 0.40, TRAP),
        (4, 0.60, EMPTY),
        # corridor: combat .15, trap +.10, treasure +.27
        (2, 0.10, COMBAT),
        (2, 0.20, TRAP),
        (2, 0.40, TREASURE),
        (2, 0.60, EMPTY),
    ],
)
def test_pick_room_type_thresholds(openings, roll, expected):
    assert pick_room_type(openings, roll, room_chances(1)) == expected


def test_anchors_are_fixed():
    for seed in range(5):
        grid = classify(carve(6, 5, random.Random(seed)), 3, random.Random(seed))
        assert grid[0][0].room_type == ENTRANCE
        assert grid[5][4].room_type == EXIT
        others = [c.room_type for col in grid for c in col if (c.x, c.y) not in {(0, 0), (5, 4)}]
        assert ENTRANCE not in others and EXIT not in others and BOSS not in others


def test_anchors_override_rolls():
    grid = classify(carve(3, 3, random.Random(1)), 1, FixedRoll(0.0))
    assert grid[0][0].room_type == ENTRANCE
    assert grid[2][2].room_type == EXIT


def test_walls_untouched():
    grid = carve(8, 8, random.Random(5))
    before = wall_snapshot(grid)
    classify(grid, 4, random.Random(5))
    assert wall_snapshot(grid) == before


def test_one_draw_per_non_anchor_cell():
    rng = FixedRoll(0.5)
    classify(carve(7, 4, random.Random(9)), 2, rng)
    assert rng.calls == 7 * 4 - 2


@pytest.mark.parametrize("difficulty", [1, 10])
def test_high_roll_leaves_rooms_empty(difficulty):
    grid = classify(carve(6, 6, random.Random(2)), difficulty, FixedRoll(0.99))
    types = {c.room_type for col in grid for c in col}
    assert types == {ENTRANCE, EXIT, EMPTY}


def test_zero_roll_picks_first_bucket():
    grid = classify(carve(6, 6, random.Random(4)), 1, FixedRoll(0.0))
    for col in grid:
        for c in col:
            if c.room_type in (ENTRANCE, EXIT):
                continue
            assert c.room_type == (TREASURE if c.openings == 1 else COMBAT)


def _share(difficulty, room_type):
    counts = Counter()
    for seed in range(10):
        grid = classify(carve(20, 20, random.Random(seed)), difficulty, random.Random(seed + 100))
        counts.update(c.room_type for col in grid for c in col)
    return counts[room_type] / sum(counts.values())


def test_deeper_levels_have_more_combat_and_less_treasure():
    assert _share(5, COMBAT) > _share(1, COMBAT)
    assert _share(5, TREASURE) < _share(1, TREASURE)
    assert _share(5, MERCHANT) < _share(1, MERCHANT)


@pytest.mark.parametrize("difficulty", [0, -1, 1.5, True])
def test_invalid_difficulty_rejected(difficulty):
    with pytest.raises(ValidationError):
        classify(carve(3, 3, random.Random(1)), difficulty, random.Random(1))
