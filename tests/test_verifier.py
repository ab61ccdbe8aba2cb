"""Tests for the whole-level connectivity check."""

import random

import numpy as np
import pytest

from lightweaver.game.data.level.config import Difficulty
from lightweaver.game.data.level.levelGen import generate_environment
from lightweaver.game.data.level.placement import Collectible
from lightweaver.game.data.level.utils import BLOCKED
from lightweaver.game.data.level.verifier import verify

START = (1, 1)
EXIT = (12, 12)


def walled_pocket_grid():
    """Open 15x15 grid with (7, 7) sealed off by a ring of obstacles."""
    grid = np.zeros((15, 15), dtype=np.uint8)
    grid[6:9, 6:9] = BLOCKED
    grid[7, 7] = 0
    return grid


def test_reachable_level_passes():
    grid = walled_pocket_grid()
    collectibles = [Collectible.at_cell((4, 10)), Collectible.at_cell((10, 3))]
    assert verify(grid, START, EXIT, collectibles) is True


def test_collectible_in_sealed_pocket_fails():
    grid = walled_pocket_grid()
    collectibles = [Collectible.at_cell((4, 10)), Collectible.at_cell((7, 7))]
    assert verify(grid, START, EXIT, collectibles) is False


def test_inactive_collectibles_are_ignored():
    grid = walled_pocket_grid()
    sealed = Collectible.at_cell((7, 7))
    sealed.active = False
    assert verify(grid, START, EXIT, [sealed]) is True


def test_unreachable_exit_fails_without_collectibles():
    grid = np.zeros((15, 15), dtype=np.uint8)
    grid[10, :] = BLOCKED
    assert verify(grid, START, EXIT, []) is False


def test_verify_does_not_mutate():
    grid = walled_pocket_grid()
    before = grid.copy()
    collectibles = [Collectible.at_cell((4, 10))]
    verify(grid, START, EXIT, collectibles)
    assert np.array_equal(grid, before)
    assert collectibles[0].active is True


@pytest.mark.parametrize("seed", range(20))
def test_moving_one_collectible_onto_an_obstacle_fails(seed):
    result = generate_environment(Difficulty.HARD, rng=random.Random(seed))
    assert verify(result.grid, START, result.exit, result.collectibles) is True

    blocked = np.argwhere(result.grid == BLOCKED)
    if len(blocked) == 0 or not result.collectibles:
        pytest.skip("level has no obstacle or no collectible to move")

    by, bx = blocked[0]
    mutated = list(result.collectibles)
    mutated[0] = Collectible.at_cell((int(bx), int(by)))
    assert verify(result.grid, START, result.exit, mutated) is False
