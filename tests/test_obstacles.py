"""Tests for obstacle grid synthesis."""

import random

import numpy as np
import pytest

from lightweaver.game.data.level.config import Difficulty, LevelConfig
from lightweaver.game.data.level.obstacles import generate_grid
from lightweaver.game.data.level.utils import BLOCKED, count_blocked

ALL_DIFFICULTIES = list(Difficulty)


@pytest.mark.parametrize("difficulty", ALL_DIFFICULTIES)
@pytest.mark.parametrize("seed", range(30))
def test_protected_corners_never_blocked(difficulty, seed):
    grid = generate_grid(difficulty, random.Random(seed))

    assert grid.shape == (15, 15)
    assert grid.dtype == np.uint8
    assert set(np.unique(grid)) <= {0, 1}

    for y in range(4):
        for x in range(4):
            assert grid[y][x] != BLOCKED
    for y in range(11, 15):
        for x in range(11, 15):
            assert grid[y][x] != BLOCKED


@pytest.mark.parametrize("difficulty", ALL_DIFFICULTIES)
def test_same_seed_same_grid(difficulty):
    first = generate_grid(difficulty, random.Random(1234))
    second = generate_grid(difficulty, random.Random(1234))
    assert np.array_equal(first, second)


def test_harder_levels_are_denser():
    easy = sum(count_blocked(generate_grid(Difficulty.EASY, random.Random(s))) for s in range(30))
    hard = sum(count_blocked(generate_grid(Difficulty.HARD, random.Random(s))) for s in range(30))
    assert hard > easy


def test_obstacle_count_bounded_by_budget():
    config = LevelConfig()
    for seed in range(20):
        grid = generate_grid(Difficulty.MEDIUM, random.Random(seed), config)
        budget = config.obstacle_budget(Difficulty.MEDIUM)
        # Each cluster covers at most a 5x5 square
        max_blocked = (budget // 4) * 25 + budget * 3 // 4
        assert 0 < count_blocked(grid) <= max_blocked


def test_larger_config_respected():
    config = LevelConfig(width=21, height=17)
    grid = generate_grid(Difficulty.HARD, random.Random(5), config)
    assert grid.shape == (17, 21)
    assert not grid[0:4, 0:4].any()
    assert not grid[13:17, 17:21].any()
