"""
Obstacle grid synthesis.

Two passes fill a fresh grid: clustered blobs first, then scattered single
cells. Both passes leave the start and exit corners untouched, and the start
corner is re-opened at the end regardless.
"""

import random
import numpy as np

from lightweaver.config import get_logger
from lightweaver.game.data.level.config import Difficulty, LevelConfig
from lightweaver.game.data.level.utils import BLOCKED, OPEN, create_grid, count_blocked

logger = get_logger(__name__)


def generate_grid(difficulty: Difficulty, rng: random.Random, config: LevelConfig = None) -> np.ndarray:
    """
    Build an obstacle grid for the given difficulty.

    Deterministic for a given rng state.

    Args:
        difficulty: Difficulty tier (controls obstacle budget)
        rng: Random source
        config: Level configuration (defaults to LevelConfig())

    Returns:
        uint8 grid of shape (height, width)
    """
    config = config or LevelConfig()
    w, h = config.width, config.height
    grid = create_grid(w, h)

    budget = config.obstacle_budget(difficulty)
    cluster_count = budget // 4
    scatter_count = budget * 3 // 4

    _place_clusters(grid, cluster_count, rng, config)
    _place_scatter(grid, scatter_count, rng, config)

    # Start corner is always open
    zone = config.safe_zone_size
    grid[0:zone, 0:zone] = OPEN

    logger.debug(
        f"Grid {w}x{h} ({difficulty.value}): {cluster_count} clusters, "
        f"{scatter_count} scatter, {count_blocked(grid)} blocked cells"
    )
    return grid


def _place_clusters(grid: np.ndarray, count: int, rng: random.Random, config: LevelConfig):
    """Drop roughly round obstacle blobs at interior centers."""
    w, h = config.width, config.height
    for _ in range(count):
        cx = rng.randint(3, w - 4)
        cy = rng.randint(3, h - 4)
        radius = rng.randint(config.cluster_radius_min, config.cluster_radius_max)

        for y in range(cy - radius, cy + radius + 1):
            for x in range(cx - radius, cx + radius + 1):
                if not (0 <= x < w and 0 <= y < h):
                    continue
                if config.is_protected(x, y):
                    continue
                if rng.random() < config.cluster_block_chance:
                    grid[y, x] = BLOCKED


def _place_scatter(grid: np.ndarray, count: int, rng: random.Random, config: LevelConfig):
    """Block single random cells outside the protected corners."""
    for _ in range(count):
        x = rng.randrange(config.width)
        y = rng.randrange(config.height)
        if not config.is_protected(x, y):
            grid[y, x] = BLOCKED
