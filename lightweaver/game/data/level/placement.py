"""
Exit and collectible placement.

Both placers draw candidates from the rng and accept the first one that meets
their constraints, then fall back to a deterministic choice when sampling
runs out.
"""

import random
from dataclasses import dataclass
from typing import List, Tuple
import numpy as np

from lightweaver.config import get_logger
from lightweaver.game.data.level.config import Difficulty, LevelConfig
from lightweaver.game.data.level.pathfinding import Pathfinder
from lightweaver.game.data.level.utils import (
    Position, is_open, clear_area, euclidean, bfs_path
)

logger = get_logger(__name__)


@dataclass
class Collectible:
    """A pickup stored at its cell-center coordinates."""
    x: float
    y: float
    active: bool = True

    @classmethod
    def at_cell(cls, cell: Position) -> 'Collectible':
        return cls(x=cell[0] + 0.5, y=cell[1] + 0.5)

    @property
    def cell(self) -> Position:
        return (int(self.x), int(self.y))

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x, self.y)


# ============================================================================
# EXIT PLACEMENT
# ============================================================================

def place_exit(grid: np.ndarray, difficulty: Difficulty, rng: random.Random,
               config: LevelConfig = None) -> Position:
    """
    Pick an exit cell in the far quadrant, at least a difficulty-scaled
    distance from the start.

    When every attempt fails the exit goes to the fixed fallback cell and its
    3x3 neighborhood is cleared in `grid`.
    """
    config = config or LevelConfig()
    min_distance = config.min_exit_distance(difficulty)

    for attempt in range(config.exit_attempts):
        x = rng.randint(config.width // 2, config.width - 3)
        y = rng.randint(config.height // 2, config.height - 3)
        if is_open(grid, x, y) and euclidean((x, y), config.start) > min_distance:
            logger.debug(f"Exit placed at {(x, y)} after {attempt + 1} attempt(s)")
            return (x, y)

    fallback = config.exit_fallback
    clear_area(grid, fallback[0], fallback[1], radius=1)
    logger.debug(f"Exit attempts exhausted; using fallback {fallback}")
    return fallback


# ============================================================================
# COLLECTIBLE PLACEMENT
# ============================================================================

def place_collectibles(grid: np.ndarray, start: Position, exit_pos: Position,
                       difficulty: Difficulty, rng: random.Random,
                       config: LevelConfig = None) -> List[Collectible]:
    """
    Scatter collectibles that are spaced out and reachable on the way from
    start to exit.

    Random sampling runs first; if it under-fills, the remainder is spread
    along a breadth-first path from start to exit. The returned list may be
    shorter than the difficulty target.
    """
    config = config or LevelConfig()
    target = config.collectible_target(difficulty)
    finder = Pathfinder(grid, capacity=config.search_capacity)
    collectibles: List[Collectible] = []

    for _ in range(config.collectible_attempts):
        if len(collectibles) >= target:
            break
        x = rng.randrange(config.width)
        y = rng.randrange(config.height)
        if _accepts_random_cell(grid, (x, y), start, exit_pos, collectibles, finder, config):
            collectibles.append(Collectible.at_cell((x, y)))

    if len(collectibles) < target:
        placed = _place_along_path(grid, start, exit_pos, collectibles, target,
                                   config.search_capacity)
        logger.debug(
            f"Random placement under-filled ({len(collectibles) - placed}/{target}); "
            f"path fallback added {placed}"
        )

    return collectibles


def _accepts_random_cell(grid, cell, start, exit_pos, placed, finder, config) -> bool:
    if not is_open(grid, *cell):
        return False
    if euclidean(cell, start) <= config.collectible_clearance:
        return False
    if euclidean(cell, exit_pos) <= config.collectible_clearance:
        return False
    for other in placed:
        if other.active and euclidean(cell, other.cell) < config.collectible_min_spacing:
            return False
    return finder.is_reachable(start, cell) and finder.is_reachable(cell, exit_pos)


def _place_along_path(grid, start, exit_pos, collectibles: List[Collectible], target: int,
                      capacity: int = None) -> int:
    """Spread the missing collectibles evenly along a BFS path; return how many were added."""
    path = bfs_path(grid, start, exit_pos, capacity)
    if not path:
        return 0

    remaining = target - len(collectibles)
    if remaining <= 0 or len(path) <= 4:
        return 0

    interval = max(1, len(path) // (remaining + 1))
    occupied = {c.cell for c in collectibles if c.active}
    added = 0

    for i in range(1, remaining + 1):
        if len(collectibles) >= target:
            break
        index = i * interval
        if index >= len(path):
            continue
        cell = path[index]
        if cell in occupied:
            continue
        collectibles.append(Collectible.at_cell(cell))
        occupied.add(cell)
        added += 1

    return added
