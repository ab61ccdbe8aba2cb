"""Tests for exit and collectible placement."""

import itertools
import random

import numpy as np
import pytest

from lightweaver.game.data.level import placement
from lightweaver.game.data.level.config import Difficulty, LevelConfig
from lightweaver.game.data.level.obstacles import generate_grid
from lightweaver.game.data.level.pathfinding import is_reachable
from lightweaver.game.data.level.placement import Collectible, place_collectibles, place_exit
from lightweaver.game.data.level.utils import BLOCKED, OPEN, bfs_path, euclidean
from lightweaver.game.data.level.verifier import verify

START = (1, 1)


def test_collectible_cell_and_center():
    c = Collectible.at_cell((4, 7))
    assert (c.x, c.y) == (4.5, 7.5)
    assert c.cell == (4, 7)
    assert c.center == (4.5, 7.5)
    assert c.active is True


@pytest.mark.parametrize("seed", range(100))
def test_exit_on_open_grid_easy(seed):
    grid = np.zeros((15, 15), dtype=np.uint8)
    exit_pos = place_exit(grid, Difficulty.EASY, random.Random(seed))

    x, y = exit_pos
    assert 7 <= x <= 12 and 7 <= y <= 12
    assert euclidean(exit_pos, START) > 15 / 3
    assert grid[y, x] == OPEN


@pytest.mark.parametrize("difficulty", list(Difficulty))
@pytest.mark.parametrize("seed", range(20))
def test_exit_respects_min_distance(difficulty, seed):
    config = LevelConfig()
    rng = random.Random(seed)
    grid = generate_grid(difficulty, rng, config)
    exit_pos = place_exit(grid, difficulty, rng, config)

    x, y = exit_pos
    assert grid[y, x] == OPEN
    if exit_pos != config.exit_fallback:
        assert euclidean(exit_pos, START) > config.min_exit_distance(difficulty)


def test_exit_fallback_clears_neighborhood():
    grid = np.ones((15, 15), dtype=np.uint8)
    exit_pos = place_exit(grid, Difficulty.HARD, random.Random(0))

    assert exit_pos == (12, 12)
    assert not grid[11:14, 11:14].any()
    # Nothing outside the 3x3 pad was touched
    assert grid.sum() == 15 * 15 - 9


@pytest.mark.parametrize("difficulty", list(Difficulty))
@pytest.mark.parametrize("seed", range(15))
def test_random_phase_spacing_and_reachability(monkeypatch, difficulty, seed):
    monkeypatch.setattr(placement, "_place_along_path", lambda *args, **kwargs: 0)
    config = LevelConfig()
    rng = random.Random(seed)
    grid = generate_grid(difficulty, rng, config)
    exit_pos = place_exit(grid, difficulty, rng, config)

    collectibles = place_collectibles(grid, START, exit_pos, difficulty, rng, config)

    assert len(collectibles) <= config.collectible_target(difficulty)
    for c in collectibles:
        cell = c.cell
        assert grid[cell[1], cell[0]] == OPEN
        assert euclidean(cell, START) > 2
        assert euclidean(cell, exit_pos) > 2
        assert is_reachable(grid, START, cell)
        assert is_reachable(grid, cell, exit_pos)
    for a, b in itertools.combinations(collectibles, 2):
        assert euclidean(a.cell, b.cell) >= 3


def test_open_grid_counts_by_difficulty():
    grid = np.zeros((15, 15), dtype=np.uint8)
    targets = {Difficulty.EASY: 7, Difficulty.MEDIUM: 9, Difficulty.HARD: 10}
    for difficulty, target in targets.items():
        collectibles = place_collectibles(grid, START, (12, 12), difficulty, random.Random(3))
        assert 0 < len(collectibles) <= target


def test_path_fallback_spreads_along_bfs_path():
    # Clearance wider than the grid rejects every random draw
    config = LevelConfig(collectible_attempts=1, collectible_clearance=100)
    grid = np.zeros((15, 15), dtype=np.uint8)
    exit_pos = (12, 12)

    collectibles = place_collectibles(grid, START, exit_pos, Difficulty.EASY, random.Random(8), config)

    path = bfs_path(grid, START, exit_pos)
    assert len(path) == 23
    target = config.collectible_target(Difficulty.EASY)
    interval = max(1, len(path) // (target + 1))
    expected = [path[i * interval] for i in range(1, target + 1) if i * interval < len(path)]

    assert [c.cell for c in collectibles] == expected
    assert len(collectibles) == target
    assert verify(grid, START, exit_pos, collectibles)


def test_path_fallback_skips_short_paths():
    config = LevelConfig(collectible_attempts=1, collectible_clearance=100)
    grid = np.zeros((15, 15), dtype=np.uint8)

    collectibles = place_collectibles(grid, START, (3, 2), Difficulty.EASY, random.Random(8), config)
    assert collectibles == []


def test_unreachable_exit_places_nothing():
    grid = np.zeros((15, 15), dtype=np.uint8)
    grid[:, 7] = BLOCKED

    collectibles = place_collectibles(grid, START, (12, 12), Difficulty.HARD, random.Random(1))
    assert collectibles == []
