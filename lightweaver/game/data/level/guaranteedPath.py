"""
Guaranteed-path level construction.

Builds a level that is valid without verification: a staircase of waypoints
walks from the start to the exit, every waypoint gets a cleared 3x3 pad, and
consecutive pads always overlap, so the corridor stays connected under the
no-corner-cutting movement rule. Obstacles are only sprinkled around the
corridor for looks.
"""

import random
from typing import List, Tuple
import numpy as np

from lightweaver.config import get_logger
from lightweaver.game.data.level.config import LevelConfig
from lightweaver.game.data.level.placement import Collectible
from lightweaver.game.data.level.utils import BLOCKED, OPEN, Position, create_grid, clear_area

logger = get_logger(__name__)


def create_guaranteed_path(rng: random.Random, config: LevelConfig = None
                           ) -> Tuple[np.ndarray, Position, List[Collectible], List[Position]]:
    """
    Construct a corridor level.

    Returns:
        (grid, exit, collectibles, waypoints)
    """
    config = config or LevelConfig()
    grid = create_grid(config.width, config.height)
    exit_pos = config.exit_fallback

    waypoints = _walk_waypoints(grid, exit_pos, rng, config)

    for wx, wy in waypoints:
        clear_area(grid, wx, wy, radius=1)

    zone = config.safe_zone_size
    grid[0:zone, 0:zone] = OPEN

    collectibles = _collectibles_on_waypoints(waypoints, config.max_collectibles)

    logger.debug(
        f"Guaranteed path: {len(waypoints)} waypoints, {len(collectibles)} collectibles, exit {exit_pos}"
    )
    return grid, exit_pos, collectibles, waypoints


def _walk_waypoints(grid: np.ndarray, exit_pos: Position, rng: random.Random,
                    config: LevelConfig) -> List[Position]:
    x, y = config.start
    ex, ey = exit_pos
    max_x, max_y = config.width - 2, config.height - 2
    waypoints = [(x, y)]

    while (x < ex or y < ey) and len(waypoints) < config.max_path_length - 1:
        if rng.randrange(2) == 0:
            if x < ex:
                x += rng.randint(1, 2)
            if y < ey:
                y += rng.randint(1, 2)
        else:
            if y < ey:
                y += rng.randint(1, 2)
            if x < ex:
                x += rng.randint(1, 2)

        x = min(x, max_x)
        y = min(y, max_y)
        waypoints.append((x, y))

        if rng.random() < config.decoration_chance:
            _decorate(grid, x, y, rng, config)

    if waypoints[-1] != exit_pos:
        waypoints.append(exit_pos)
    return waypoints


def _decorate(grid: np.ndarray, cx: int, cy: int, rng: random.Random, config: LevelConfig):
    """Sprinkle obstacles around a waypoint, outside its own 3x3 pad."""
    r = config.decoration_radius
    for y in range(cy - r, cy + r + 1):
        for x in range(cx - r, cx + r + 1):
            if not (0 <= x < config.width and 0 <= y < config.height):
                continue
            if abs(x - cx) <= 1 and abs(y - cy) <= 1:
                continue
            if rng.random() < config.decoration_block_chance:
                grid[y, x] = BLOCKED


def _collectibles_on_waypoints(waypoints: List[Position], capacity: int) -> List[Collectible]:
    """Spread collectibles over the interior waypoints (never start or final exit)."""
    length = len(waypoints)
    count = min(length - 2, capacity)
    collectibles: List[Collectible] = []

    for i in range(max(0, count)):
        index = 1 + i * (length - 2) // count
        index = min(index, length - 2)
        collectibles.append(Collectible.at_cell(waypoints[index]))

    return collectibles
