"""Whole-level connectivity check."""

from typing import Iterable
import numpy as np

from lightweaver.game.data.level.pathfinding import Pathfinder
from lightweaver.game.data.level.placement import Collectible
from lightweaver.game.data.level.utils import Position


def verify(grid: np.ndarray, start: Position, exit_pos: Position,
           collectibles: Iterable[Collectible]) -> bool:
    """
    True when the exit is reachable from start and every active collectible
    lies on some start -> collectible -> exit route.
    """
    finder = Pathfinder(grid)
    if not finder.is_reachable(start, exit_pos):
        return False

    for collectible in collectibles:
        if not collectible.active:
            continue
        cell = collectible.cell
        if not finder.is_reachable(start, cell) or not finder.is_reachable(cell, exit_pos):
            return False
    return True
